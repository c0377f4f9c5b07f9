"""Spherical Voronoi/Delaunay diagram of the grid generator points."""

from dataclasses import dataclass
from typing import Callable, List

import numpy as np
import structlog
from scipy.spatial import ConvexHull, SphericalVoronoi

from ..exceptions import DiagramError
from .spherical import cartesian_to_lonlat, lonlat_to_cartesian

logger = structlog.get_logger()


@dataclass(frozen=True)
class SphericalDiagram:
    """
    Voronoi cells and Delaunay adjacency of a point set on the sphere.

    polygons[i] lists indices into centers bounding the cell of point i,
    clockwise as seen from outside the sphere. neighbors[i] lists the
    indices of the points sharing a Delaunay edge with point i, without
    duplicates and in ascending order; grid cells and their GeoJSON
    output carry this order unchanged.
    """
    neighbors: List[List[int]]
    polygons: List[List[int]]
    centers: np.ndarray


DiagramBuilder = Callable[[np.ndarray], SphericalDiagram]


def build_cell_neighbors(simplices: np.ndarray, n_points: int) -> List[List[int]]:
    """
    Build sorted neighbor lists from Delaunay triangles.

    Args:
        simplices: Array of shape (m, 3) of point indices
        n_points: Number of generator points

    Returns:
        List of ascending neighbor index lists, one per point
    """
    simplices = np.asarray(simplices, dtype=np.int64)
    pairs = np.vstack([simplices[:, [0, 1]], simplices[:, [1, 2]], simplices[:, [2, 0]]])
    pairs = np.unique(np.vstack([pairs, pairs[:, ::-1]]), axis=0)

    counts = np.bincount(pairs[:, 0], minlength=n_points)
    groups = np.split(pairs[:, 1], np.cumsum(counts)[:-1])
    return [group.tolist() for group in groups]


def build_cell_polygons(generators: np.ndarray, vertices: np.ndarray, regions: List[List[int]]) -> List[List[int]]:
    """
    Orient every Voronoi region clockwise as seen from outside the sphere.

    Args:
        generators: Array of shape (n, 3) of unit vectors
        vertices: Array of shape (m, 3) of Voronoi vertices
        regions: Cyclically ordered vertex indices per generator

    Returns:
        Region vertex lists in clockwise order
    """
    polygons = []
    for generator, region in zip(generators, regions):
        region = list(region)
        if len(region) >= 2:
            # Positive when the region turns counter-clockwise around its generator
            turn = np.dot(generator, np.cross(vertices[region[0]], vertices[region[1]]))
            if turn > 0:
                region.reverse()
        polygons.append(region)
    return polygons


def build_spherical_diagram(points: np.ndarray) -> SphericalDiagram:
    """
    Compute the spherical Voronoi diagram and Delaunay adjacency.

    Uses scipy's SphericalVoronoi on the unit sphere for the cell polygons and
    the convex hull of the points, which is their spherical Delaunay
    triangulation, for the neighbors.

    Args:
        points: Array of shape (n, 2) of lon/lat generator points

    Returns:
        SphericalDiagram for the points, in input order

    Raises:
        DiagramError: if scipy rejects the point set, e.g. duplicate points
    """
    generators = lonlat_to_cartesian(points)
    logger.info("Building spherical Voronoi diagram", points=len(generators))

    try:
        voronoi = SphericalVoronoi(generators, radius=1.0, center=np.zeros(3))
        voronoi.sort_vertices_of_regions()
        hull = ConvexHull(generators)
    except (ValueError, RuntimeError) as e:
        raise DiagramError(f"Spherical diagram construction failed: {e}") from e

    logger.info("Spherical Voronoi diagram calculated",
                vertices=len(voronoi.vertices), triangles=len(hull.simplices))

    neighbors = build_cell_neighbors(hull.simplices, len(generators))
    polygons = build_cell_polygons(generators, voronoi.vertices, voronoi.regions)

    return SphericalDiagram(
        neighbors=neighbors,
        polygons=polygons,
        centers=cartesian_to_lonlat(voronoi.vertices),
    )
