"""
Grid cell assembly.

Turns the icosahedron point set and its spherical diagram into grid cells:
id, center, neighbors, icosahedron placement and a closed boundary ring.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np
import structlog

from ..exceptions import DiagramError
from .icosahedron import IcosahedronPlacement, IcosahedronPointSet, build_point_set
from .projection import IcosahedralEqualAreaProjection, ProjectionFactory
from .resolution import validate_k
from .spherical_voronoi import DiagramBuilder, build_spherical_diagram

logger = structlog.get_logger()

Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class GridCell:
    """A single cell of the geodesic grid."""
    gid: int
    lon: float
    lat: float
    neighbors: Tuple[int, ...]
    placement: IcosahedronPlacement
    boundary: Tuple[Coordinate, ...]  # closed ring, counter-clockwise seen from outside

    @property
    def is_degenerate(self) -> bool:
        # Three distinct corners plus the closing repeat
        return len(self.boundary) < 4


@dataclass
class GridSummary:
    """Cell statistics of a generated grid."""
    k: int
    cell_count: int
    placement_counts: Dict[str, int] = field(default_factory=dict)
    neighbor_histogram: Dict[int, int] = field(default_factory=dict)
    degenerate_cells: int = 0

    @property
    def pentagons(self) -> int:
        return self.neighbor_histogram.get(5, 0)


def make_cell_ring(polygon: Sequence[int], centers: np.ndarray) -> Tuple[Coordinate, ...]:
    """
    Build a closed boundary ring from a diagram polygon.

    The polygon's vertex order is reversed to turn the diagram's clockwise
    rings into counter-clockwise exterior rings, and the first coordinate is
    repeated at the end.
    """
    ring = [(float(centers[j][0]), float(centers[j][1])) for j in reversed(list(polygon))]
    if ring:
        ring.append(ring[0])
    return tuple(ring)


def build_grid_cells(point_set: IcosahedronPointSet,
                     diagram_builder: DiagramBuilder = build_spherical_diagram) -> List[GridCell]:
    """
    Build grid cells for every point of the point set.

    Args:
        point_set: Ordered grid generator points
        diagram_builder: Computes the spherical Voronoi/Delaunay diagram

    Returns:
        One GridCell per point, with gid equal to the point index

    Raises:
        DiagramError: if the diagram does not describe every point
    """
    n_points = len(point_set)
    diagram = diagram_builder(point_set.points)

    if len(diagram.neighbors) != n_points or len(diagram.polygons) != n_points:
        raise DiagramError(
            f"Diagram describes {len(diagram.neighbors)} neighbor lists and "
            f"{len(diagram.polygons)} polygons for {n_points} points"
        )

    cells = []
    degenerate = 0
    for i, (lon, lat) in enumerate(point_set.points):
        cell = GridCell(
            gid=i,
            lon=float(lon),
            lat=float(lat),
            neighbors=tuple(int(n) for n in diagram.neighbors[i]),
            placement=point_set.placement(i),
            boundary=make_cell_ring(diagram.polygons[i], diagram.centers),
        )
        if cell.is_degenerate:
            degenerate += 1
        cells.append(cell)

    if degenerate:
        logger.warning("Degenerate cell polygons in diagram", cells=degenerate, k=point_set.k)

    logger.info("Grid cells built", cells=len(cells))
    return cells


def generate_grid(k: int,
                  projection_factory: ProjectionFactory = IcosahedralEqualAreaProjection,
                  diagram_builder: DiagramBuilder = build_spherical_diagram) -> List[GridCell]:
    """
    Generate the geodesic grid for k icosahedron edge subdivisions.

    Args:
        k: Number of edge subdivisions (1..250)
        projection_factory: Equal-area face projection
        diagram_builder: Spherical Voronoi/Delaunay diagram

    Returns:
        10*k^2 + 2 grid cells ordered vertices, edges, faces
    """
    validate_k(k)
    point_set = build_point_set(k, projection_factory=projection_factory)
    return build_grid_cells(point_set, diagram_builder=diagram_builder)


def summarize_grid(cells: Sequence[GridCell], k: int) -> GridSummary:
    """Count placements, neighbor counts and degenerate rings."""
    placements = Counter(cell.placement.value for cell in cells)
    neighbor_counts = Counter(len(cell.neighbors) for cell in cells)

    return GridSummary(
        k=k,
        cell_count=len(cells),
        placement_counts={p.value: placements.get(p.value, 0) for p in IcosahedronPlacement},
        neighbor_histogram=dict(sorted(neighbor_counts.items())),
        degenerate_cells=sum(1 for cell in cells if cell.is_degenerate),
    )
