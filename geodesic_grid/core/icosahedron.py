"""
Icosahedron point set construction.

Builds the ordered, deduplicated set of grid generator points: the 12
icosahedron vertices, the points subdividing its 30 edges and the lattice
points inside its 20 faces. Only one face is rasterized and projected; the
other 19 are rigid rotations and reflections of it. Vertices and edges are
generated separately so that points shared between faces appear once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple

import numpy as np
import structlog

from ..exceptions import PointSetInvariantError
from .projection import IcosahedralEqualAreaProjection, ProjectionFactory
from .rasterize import lattice_size, rasterize_triangle
from .resolution import cell_count, validate_k
from .spherical import SphericalTriangle, geo_distance, geo_interpolate, geo_rotation

logger = structlog.get_logger()

# Latitude of the ten non-polar icosahedron vertices
THETA = float(np.degrees(np.arctan(0.5)))

# Edge length of the icosahedron is ~1.1071 rad; pairs within tolerance are edges
EDGE_LENGTH = 1.1
EDGE_TOLERANCE = 0.01

# Orientation of Buckminster Fuller's AirOcean map, which keeps the
# icosahedron vertices in the oceans
AIROCEAN_ROTATION = (-83.65929, 25.44458, -87.45184)
RECENTER_ROTATION = (36.0, 0.0, 0.0)

# Upward pointing belt face with its apex on the prime meridian
CANONICAL_FACE = SphericalTriangle(np.array([
    [0.0, THETA],
    [36.0, -THETA],
    [-36.0, -THETA],
]))

# Maps the canonical face onto the polar face between longitudes -36 and 36
# touching the south pole
CAP_MIRROR = geo_rotation([0.0, 90.0 - THETA, 180.0])

BELT_FACES = 10
CAP_FACES = 5
FACE_COUNT = BELT_FACES + 2 * CAP_FACES
VERTEX_COUNT = 12
EDGE_COUNT = 30


class IcosahedronPlacement(str, Enum):
    """Where a grid point sits on the icosahedron."""
    VERTEX = "vertex"
    EDGE = "edge"
    FACE = "face"


class GridPoint(NamedTuple):
    """Grid generator point tagged with its icosahedron placement."""
    lon: float
    lat: float
    placement: IcosahedronPlacement


@dataclass(frozen=True)
class IcosahedronPointSet:
    """
    Ordered grid generator points.

    Points are stored vertices first, then edge points, then face points, so
    a point's placement follows from its index alone.
    """
    k: int
    points: np.ndarray
    vertex_count: int
    edge_count: int
    face_count: int

    def __len__(self) -> int:
        return len(self.points)

    def placement(self, index: int) -> IcosahedronPlacement:
        if index < self.vertex_count:
            return IcosahedronPlacement.VERTEX
        if index < self.vertex_count + self.edge_count:
            return IcosahedronPlacement.EDGE
        return IcosahedronPlacement.FACE

    def placements(self) -> List[IcosahedronPlacement]:
        return [self.placement(i) for i in range(len(self))]

    def grid_points(self) -> List[GridPoint]:
        return [
            GridPoint(float(lon), float(lat), self.placement(i))
            for i, (lon, lat) in enumerate(self.points)
        ]


def icosahedron_vertices() -> np.ndarray:
    """
    The 12 icosahedron vertices as lon/lat.

    Poles first, then the belt vertices every 36 degrees of longitude,
    alternating between +THETA and -THETA latitude.
    """
    belt = [
        [((i * 36 + 180) % 360) - 180, -THETA if i % 2 else THETA]
        for i in range(BELT_FACES)
    ]
    return np.array([[0.0, 90.0], [0.0, -90.0]] + belt, dtype=float)


def icosahedron_edges(vertices: np.ndarray, k: int) -> np.ndarray:
    """
    Interior points of every icosahedron edge.

    Vertex pairs are recognised as edges by their angular distance, which
    avoids listing the 30 edges explicitly. Each edge gets k - 1 points at
    great-circle fractions i/k.

    Args:
        vertices: The 12 icosahedron vertices
        k: Number of edge subdivisions

    Returns:
        Array of shape (30 * (k - 1), 2)
    """
    fractions = np.arange(1, k) / k
    edge_points = []
    edges_found = 0

    for i, v0 in enumerate(vertices):
        for v1 in vertices[i + 1:]:
            if abs(float(geo_distance(v0, v1)) - EDGE_LENGTH) >= EDGE_TOLERANCE:
                continue
            edges_found += 1
            edge_points.append(geo_interpolate(v0, v1)(fractions))

    logger.debug("Icosahedron edges detected", edges=edges_found)

    if not edge_points:
        return np.empty((0, 2))
    return np.concatenate(edge_points).reshape(-1, 2)


def replicate_face_points(local: np.ndarray) -> np.ndarray:
    """
    Copy canonical face points onto all 20 faces.

    For each input point, 20 replicas are emitted in face order: the 10 belt
    faces (rotated by 36 degrees, latitude mirrored on odd faces for the
    downward pointing triangles), the 5 faces around the south pole and the
    5 faces around the north pole.

    Args:
        local: Array of shape (n, 2) of points on CANONICAL_FACE

    Returns:
        Array of shape (20 * n, 2); longitudes are not wrapped
    """
    if len(local) == 0:
        return np.empty((0, 2))

    x0, y0 = local[:, 0], local[:, 1]
    mirrored = CAP_MIRROR(local)
    x1, y1 = mirrored[:, 0], mirrored[:, 1]

    belt = [np.column_stack((x0 + i * 36, -y0 if i % 2 else y0)) for i in range(BELT_FACES)]
    south_cap = [np.column_stack((x1 + i * 72, y1)) for i in range(CAP_FACES)]
    north_cap = [np.column_stack((36 - x1 + i * 72, -y1)) for i in range(CAP_FACES)]

    # (n, 20, 2) keeps the 20 replicas of each point together
    return np.stack(belt + south_cap + north_cap, axis=1).reshape(-1, 2)


def face_points(k: int, projection_factory: ProjectionFactory = IcosahedralEqualAreaProjection) -> np.ndarray:
    """
    Interior lattice points of all 20 faces.

    The canonical face is projected to the plane, rasterized without its
    boundary and projected back, then replicated.

    Args:
        k: Number of edge subdivisions
        projection_factory: Builds the equal-area projection for a face

    Returns:
        Array of shape (20 * (k-1)(k-2)/2, 2)
    """
    projection = projection_factory(CANONICAL_FACE)
    planar_face = projection.forward(CANONICAL_FACE.vertices)
    lattice = rasterize_triangle(planar_face, k, include_edges=False)
    if len(lattice) == 0:
        return np.empty((0, 2))
    return replicate_face_points(projection.inverse(lattice))


def align_to_airocean(points: np.ndarray) -> np.ndarray:
    """Rotate the assembled point set so the icosahedron vertices fall in the oceans."""
    points = geo_rotation(RECENTER_ROTATION)(points)
    return geo_rotation(AIROCEAN_ROTATION).invert(points)


def build_point_set(k: int,
                    projection_factory: ProjectionFactory = IcosahedralEqualAreaProjection,
                    align: bool = True) -> IcosahedronPointSet:
    """
    Build the complete grid generator point set for k subdivisions.

    Args:
        k: Number of edge subdivisions (1..250)
        projection_factory: Builds the equal-area projection for a face
        align: Apply the AirOcean orientation; when False points stay in the
            icosahedron frame with a vertex at each pole

    Returns:
        IcosahedronPointSet with exactly 10*k^2 + 2 points
    """
    validate_k(k)
    logger.info("Building icosahedron point set", k=k)

    vertices = icosahedron_vertices()
    edges = icosahedron_edges(vertices, k)
    faces = face_points(k, projection_factory)

    expected_edges = EDGE_COUNT * (k - 1)
    expected_faces = FACE_COUNT * lattice_size(k)
    if len(edges) != expected_edges or len(faces) != expected_faces:
        raise PointSetInvariantError(
            f"Expected {expected_edges} edge and {expected_faces} face points for k={k}, "
            f"got {len(edges)} and {len(faces)}"
        )

    points = np.vstack([vertices, edges, faces])
    if align:
        points = align_to_airocean(points)
    else:
        points[:, 0] = np.mod(points[:, 0] + 180.0, 360.0) - 180.0

    if len(points) != cell_count(k):
        raise PointSetInvariantError(f"Expected {cell_count(k)} points for k={k}, got {len(points)}")

    logger.info("Point set assembled",
                vertices=len(vertices), edges=len(edges), faces=len(faces), total=len(points))

    return IcosahedronPointSet(
        k=k,
        points=points,
        vertex_count=len(vertices),
        edge_count=len(edges),
        face_count=len(faces),
    )
