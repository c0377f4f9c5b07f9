"""
Equal-area projection between a spherical icosahedron face and a planar triangle.

The grid needs a map between one spherical face and a flat equilateral
triangle that preserves area, so a uniform planar lattice becomes a
near-uniform set of points on the sphere. The default implementation is
Snyder's equal-area polyhedral projection (Snyder 1992), the same family as
the Gray-Fuller projection used for the Dymaxion map. It splits the face into
three 120 degree sectors around the face center; within a sector the
azimuth is adjusted so that every wedge keeps its spherical area, and the
radial distance follows a Lambert azimuthal law scaled to hit the face edge.

Any object with ``forward`` and ``inverse`` methods can stand in for it, see
FaceProjection.
"""

from typing import Callable, Protocol

import numpy as np
import structlog

from ..exceptions import ProjectionError
from .spherical import SphericalTriangle, cartesian_to_lonlat, lonlat_to_cartesian

logger = structlog.get_logger()

SECTOR = 2 * np.pi / 3
# Half of the 72 degree spherical angle at an icosahedron vertex
HALF_VERTEX_ANGLE = np.radians(36.0)
# Angle at a planar triangle vertex between the edge and the line to the center
PLANAR_HALF_ANGLE = np.radians(30.0)
COT_PLANAR = 1.0 / np.tan(PLANAR_HALF_ANGLE)

NEWTON_TOLERANCE = 1e-12
NEWTON_MAX_ITERATIONS = 50


class FaceProjection(Protocol):
    """Planar <-> spherical mapping configured for a single face."""

    def forward(self, lonlat: np.ndarray) -> np.ndarray:
        ...

    def inverse(self, xy: np.ndarray) -> np.ndarray:
        ...


ProjectionFactory = Callable[[SphericalTriangle], FaceProjection]


class IcosahedralEqualAreaProjection:
    """
    Snyder equal-area projection of one icosahedron face.

    The face center is the projection origin and the first face vertex lies
    on the positive planar y axis. The planar triangle has the same area as
    the spherical face on the unit sphere (4*pi/20).

    Args:
        face: The spherical face the projection is centered on
    """

    def __init__(self, face: SphericalTriangle):
        self.face = face
        vertices = lonlat_to_cartesian(face.vertices)
        center = lonlat_to_cartesian(face.centroid)

        # Local tangent frame at the face center, north towards the first vertex
        north = vertices[0] - np.dot(vertices[0], center) * center
        north /= np.linalg.norm(north)
        east = np.cross(center, north)

        self._center = center
        self._north = north
        self._east = east

        # Angular distance from the face center to a vertex (37.377 deg for an icosahedron)
        self.vertex_distance = float(np.arccos(np.clip(np.dot(center, vertices[0]), -1.0, 1.0)))
        self._tan_g = np.tan(self.vertex_distance)
        self._cos_g = np.cos(self.vertex_distance)

        # Planar circumradius giving the planar triangle the face's spherical area
        face_area = 4 * np.pi / 20
        self.planar_radius = float(np.sqrt(4 * face_area / (3 * np.sqrt(3))))

    def __repr__(self) -> str:
        return f"IcosahedralEqualAreaProjection(center={cartesian_to_lonlat(self._center).tolist()})"

    def _edge_distance(self, azimuth: np.ndarray) -> np.ndarray:
        """Spherical distance from the face center to the face edge along azimuth."""
        return np.arctan(self._tan_g / (np.cos(azimuth) + np.sin(azimuth) * COT_PLANAR))

    def _edge_angle(self, azimuth: np.ndarray) -> np.ndarray:
        """Spherical angle at the face edge in the center-vertex-edge triangle."""
        cos_h = (np.sin(azimuth) * np.sin(HALF_VERTEX_ANGLE) * self._cos_g
                 - np.cos(azimuth) * np.cos(HALF_VERTEX_ANGLE))
        return np.arccos(np.clip(cos_h, -1.0, 1.0))

    def _planar_edge_distance(self, planar_azimuth: np.ndarray) -> np.ndarray:
        return self.planar_radius / (np.cos(planar_azimuth) + np.sin(planar_azimuth) * COT_PLANAR)

    @staticmethod
    def _split_sectors(azimuth: np.ndarray):
        azimuth = np.mod(azimuth, 2 * np.pi)
        sector = np.minimum(np.floor(azimuth / SECTOR), 2)
        return sector, azimuth - sector * SECTOR

    def forward(self, lonlat) -> np.ndarray:
        """
        Project lon/lat points on the face to planar coordinates.

        Args:
            lonlat: Array of shape (n, 2) or (2,) in degrees

        Returns:
            Planar [x, y] coordinates with the same leading shape
        """
        points = lonlat_to_cartesian(lonlat)
        along_center = points @ self._center
        along_north = points @ self._north
        along_east = points @ self._east

        z = np.arctan2(np.hypot(along_north, along_east), along_center)
        sector, azimuth = self._split_sectors(np.arctan2(along_east, along_north))

        area = azimuth + HALF_VERTEX_ANGLE + self._edge_angle(azimuth) - np.pi
        planar_azimuth = np.arctan2(2 * area, self.planar_radius ** 2 - 2 * area * COT_PLANAR)
        rho = (self._planar_edge_distance(planar_azimuth) * np.sin(z / 2)
               / np.sin(self._edge_distance(azimuth) / 2))

        angle = planar_azimuth + sector * SECTOR
        return np.stack((rho * np.sin(angle), rho * np.cos(angle)), axis=-1)

    def _solve_azimuth(self, area: np.ndarray, initial: np.ndarray) -> np.ndarray:
        """Find the spherical azimuth whose center-vertex-edge triangle has the given area."""
        azimuth = initial.copy()
        sin_half = np.sin(HALF_VERTEX_ANGLE)
        cos_half = np.cos(HALF_VERTEX_ANGLE)

        for _ in range(NEWTON_MAX_ITERATIONS):
            h = self._edge_angle(azimuth)
            residual = azimuth + HALF_VERTEX_ANGLE + h - np.pi - area
            sin_h = np.maximum(np.sin(h), 1e-15)
            slope = 1 - (np.cos(azimuth) * sin_half * self._cos_g + np.sin(azimuth) * cos_half) / sin_h
            step = residual / slope
            azimuth = np.clip(azimuth - step, 0.0, SECTOR)
            if azimuth.size == 0 or np.max(np.abs(step)) < NEWTON_TOLERANCE:
                return azimuth

        raise ProjectionError(
            f"Inverse projection did not converge after {NEWTON_MAX_ITERATIONS} iterations"
        )

    def inverse(self, xy) -> np.ndarray:
        """
        Map planar coordinates back onto the spherical face.

        Args:
            xy: Array of shape (n, 2) or (2,) of planar coordinates

        Returns:
            Lon/lat coordinates in degrees with the same leading shape
        """
        xy = np.asarray(xy, dtype=float)
        x = xy[..., 0]
        y = xy[..., 1]

        rho = np.hypot(x, y)
        sector, planar_azimuth = self._split_sectors(np.arctan2(x, y))

        planar_edge = self._planar_edge_distance(planar_azimuth)
        area = 0.5 * self.planar_radius * planar_edge * np.sin(planar_azimuth)
        azimuth = self._solve_azimuth(np.atleast_1d(area), np.atleast_1d(planar_azimuth)).reshape(area.shape)

        edge_distance = self._edge_distance(azimuth)
        z = 2 * np.arcsin(np.clip(rho * np.sin(edge_distance / 2) / planar_edge, -1.0, 1.0))

        azimuth = azimuth + sector * SECTOR
        direction = (np.cos(azimuth)[..., None] * self._north
                     + np.sin(azimuth)[..., None] * self._east)
        points = np.cos(z)[..., None] * self._center + np.sin(z)[..., None] * direction
        return cartesian_to_lonlat(points)
