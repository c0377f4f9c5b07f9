"""
Spherical primitives on longitude/latitude coordinates.

All public functions take and return degrees, with coordinates ordered
``[lon, lat]`` like GeoJSON. Rotations follow the d3-geo convention: the
yaw (longitude shift) is applied first, then pitch and roll.
"""

from typing import Callable, NamedTuple, Sequence

import numpy as np

TAU = 2 * np.pi


class SphericalTriangle(NamedTuple):
    """Three lon/lat vertices of a spherical triangle."""
    vertices: np.ndarray

    @property
    def centroid(self) -> np.ndarray:
        return geo_centroid(self.vertices)


def lonlat_to_cartesian(lonlat) -> np.ndarray:
    """
    Convert longitude and latitude to 3D Cartesian coordinates on the unit sphere.

    Args:
        lonlat: Array of shape (..., 2) of [lon, lat] in degrees

    Returns:
        Array of shape (..., 3) of unit vectors
    """
    lonlat = np.asarray(lonlat, dtype=float)
    lon = np.radians(lonlat[..., 0])
    lat = np.radians(lonlat[..., 1])
    cos_lat = np.cos(lat)
    return np.stack((cos_lat * np.cos(lon), cos_lat * np.sin(lon), np.sin(lat)), axis=-1)


def cartesian_to_lonlat(vertices) -> np.ndarray:
    """
    Convert 3D Cartesian coordinates to longitude and latitude.

    Vectors do not need to be normalized.

    Args:
        vertices: Array of shape (..., 3)

    Returns:
        Array of shape (..., 2) of [lon, lat] in degrees
    """
    vertices = np.asarray(vertices, dtype=float)
    x = vertices[..., 0]
    y = vertices[..., 1]
    z = vertices[..., 2]
    hyp = np.hypot(x, y)
    return np.stack((np.degrees(np.arctan2(y, x)), np.degrees(np.arctan2(z, hyp))), axis=-1)


def _wrap_longitude(lam: np.ndarray) -> np.ndarray:
    # JavaScript Math.round semantics (half rounds up)
    return np.where(np.abs(lam) > np.pi, lam - np.floor(lam / TAU + 0.5) * TAU, lam)


class Rotation:
    """
    Rotation of the sphere given as [yaw, pitch, roll] Euler angles in degrees.

    Instances are callable on lon/lat arrays of shape (2,) or (n, 2); ``invert``
    applies the inverse rotation.
    """

    def __init__(self, angles: Sequence[float]):
        angles = list(angles) + [0.0] * (3 - len(angles))
        self.angles = tuple(float(a) for a in angles[:3])
        delta_lambda, delta_phi, delta_gamma = np.radians(self.angles)
        self._delta_lambda = float(np.fmod(delta_lambda, TAU))
        self._cos_phi = np.cos(delta_phi)
        self._sin_phi = np.sin(delta_phi)
        self._cos_gamma = np.cos(delta_gamma)
        self._sin_gamma = np.sin(delta_gamma)
        self._has_phi_gamma = bool(delta_phi or delta_gamma)

    def __repr__(self) -> str:
        return f"Rotation({list(self.angles)})"

    def _phi_gamma(self, lam, phi):
        cos_phi = np.cos(phi)
        x = np.cos(lam) * cos_phi
        y = np.sin(lam) * cos_phi
        z = np.sin(phi)
        k = z * self._cos_phi + x * self._sin_phi
        return (
            np.arctan2(y * self._cos_gamma - k * self._sin_gamma, x * self._cos_phi - z * self._sin_phi),
            np.arcsin(np.clip(k * self._cos_gamma + y * self._sin_gamma, -1.0, 1.0)),
        )

    def _phi_gamma_invert(self, lam, phi):
        cos_phi = np.cos(phi)
        x = np.cos(lam) * cos_phi
        y = np.sin(lam) * cos_phi
        z = np.sin(phi)
        k = z * self._cos_gamma - y * self._sin_gamma
        return (
            np.arctan2(y * self._cos_gamma + z * self._sin_gamma, x * self._cos_phi + k * self._sin_phi),
            np.arcsin(np.clip(k * self._cos_phi - x * self._sin_phi, -1.0, 1.0)),
        )

    def _apply(self, lonlat, inverse: bool) -> np.ndarray:
        lonlat = np.asarray(lonlat, dtype=float)
        lam = np.radians(lonlat[..., 0])
        phi = np.radians(lonlat[..., 1])

        if not inverse:
            lam = _wrap_longitude(lam + self._delta_lambda)
            if self._has_phi_gamma:
                lam, phi = self._phi_gamma(lam, phi)
        else:
            if self._has_phi_gamma:
                lam, phi = self._phi_gamma_invert(lam, phi)
            lam = _wrap_longitude(lam - self._delta_lambda)

        return np.stack((np.degrees(lam), np.degrees(phi)), axis=-1)

    def __call__(self, lonlat) -> np.ndarray:
        return self._apply(lonlat, inverse=False)

    def invert(self, lonlat) -> np.ndarray:
        return self._apply(lonlat, inverse=True)


def geo_rotation(angles: Sequence[float]) -> Rotation:
    """Build a sphere rotation from [yaw, pitch, roll] angles in degrees."""
    return Rotation(angles)


def geo_distance(a, b) -> np.ndarray:
    """
    Great-circle distance in radians between lon/lat points.

    Broadcasts over leading dimensions.
    """
    a = np.radians(np.asarray(a, dtype=float))
    b = np.radians(np.asarray(b, dtype=float))
    delta = b[..., 0] - a[..., 0]
    sin_phi0, cos_phi0 = np.sin(a[..., 1]), np.cos(a[..., 1])
    sin_phi, cos_phi = np.sin(b[..., 1]), np.cos(b[..., 1])
    cos_delta = np.cos(delta)
    return np.arctan2(
        np.hypot(cos_phi * np.sin(delta), cos_phi0 * sin_phi - sin_phi0 * cos_phi * cos_delta),
        sin_phi0 * sin_phi + cos_phi0 * cos_phi * cos_delta,
    )


def geo_interpolate(a, b) -> Callable[[np.ndarray], np.ndarray]:
    """
    Great-circle interpolator between two lon/lat points.

    Returns a function of t in [0, 1] (scalar or array) giving lon/lat
    points along the shortest arc from a to b.
    """
    p0 = lonlat_to_cartesian(a)
    p1 = lonlat_to_cartesian(b)
    d = float(geo_distance(a, b))

    def interpolate(t) -> np.ndarray:
        t = np.asarray(t, dtype=float)
        if d == 0:
            return cartesian_to_lonlat(np.broadcast_to(p0, t.shape + (3,)))
        k = np.sin(d)
        weight_a = np.asarray(np.sin(d - t * d) / k)
        weight_b = np.asarray(np.sin(t * d) / k)
        return cartesian_to_lonlat(weight_a[..., None] * p0 + weight_b[..., None] * p1)

    interpolate.distance = d
    return interpolate


def geo_centroid(ring) -> np.ndarray:
    """
    Centroid of a spherical polygon given by its vertices.

    A closing vertex equal to the first one is ignored. The centroid is the
    normalized mean of the vertex unit vectors, which coincides with the
    area centroid for regular polygons such as icosahedron faces.
    """
    ring = np.asarray(ring, dtype=float)
    if len(ring) > 1 and np.array_equal(ring[0], ring[-1]):
        ring = ring[:-1]
    mean = lonlat_to_cartesian(ring).sum(axis=0)
    return cartesian_to_lonlat(mean)
