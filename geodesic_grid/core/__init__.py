"""
Core geodesic grid construction.
"""

from .rasterize import rasterize_triangle, lattice_size
from .projection import FaceProjection, IcosahedralEqualAreaProjection
from .icosahedron import (
    IcosahedronPlacement, IcosahedronPointSet, GridPoint,
    build_point_set, icosahedron_vertices, icosahedron_edges, face_points
)
from .spherical_voronoi import SphericalDiagram, build_spherical_diagram
from .resolution import cell_count, resolve_k, k_from_cell_size, cell_size_from_k
from .grid_cells import GridCell, GridSummary, build_grid_cells, generate_grid, summarize_grid

__all__ = ['rasterize_triangle', 'lattice_size',
           'FaceProjection', 'IcosahedralEqualAreaProjection',
           'IcosahedronPlacement', 'IcosahedronPointSet', 'GridPoint',
           'build_point_set', 'icosahedron_vertices', 'icosahedron_edges', 'face_points',
           'SphericalDiagram', 'build_spherical_diagram',
           'cell_count', 'resolve_k', 'k_from_cell_size', 'cell_size_from_k',
           'GridCell', 'GridSummary', 'build_grid_cells', 'generate_grid', 'summarize_grid']
