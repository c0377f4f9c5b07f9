"""
Grid export formats.
"""

from .geojson import cell_to_feature, to_feature_collection, dumps, write_feature_collection

__all__ = ['cell_to_feature', 'to_feature_collection', 'dumps', 'write_feature_collection']
