"""
Uniform geodesic grid generation.

Builds a near equal-area hexagonal/pentagonal grid on the sphere from a
subdivided icosahedron.
"""

__version__ = "0.1.0"

from .core.grid_cells import GridCell, GridSummary, generate_grid, summarize_grid
from .core.icosahedron import IcosahedronPlacement, IcosahedronPointSet, build_point_set
from .core.resolution import cell_count, resolve_k
from .export.geojson import to_feature_collection
from .exceptions import (
    GeodesicGridError, InvalidResolutionError, PointSetInvariantError,
    ProjectionError, DiagramError
)

__all__ = ['__version__', 'GridCell', 'GridSummary', 'generate_grid', 'summarize_grid',
           'IcosahedronPlacement', 'IcosahedronPointSet', 'build_point_set',
           'cell_count', 'resolve_k', 'to_feature_collection',
           'GeodesicGridError', 'InvalidResolutionError', 'PointSetInvariantError',
           'ProjectionError', 'DiagramError']
