"""Tests for the icosahedral equal-area face projection."""

import pytest
import numpy as np
from scipy.spatial import Delaunay

from geodesic_grid.core.icosahedron import CANONICAL_FACE
from geodesic_grid.core.projection import IcosahedralEqualAreaProjection
from geodesic_grid.core.rasterize import rasterize_triangle
from geodesic_grid.core.spherical import geo_distance, lonlat_to_cartesian

FACE_AREA = 4 * np.pi / 20


def spherical_triangle_area(a, b, c):
    """Area of geodesic triangles given as unit vectors (Van Oosterom-Strackee)."""
    numerator = np.abs(np.einsum("ij,ij->i", a, np.cross(b, c)))
    denominator = 1 + np.einsum("ij,ij->i", a, b) + np.einsum("ij,ij->i", b, c) + np.einsum("ij,ij->i", c, a)
    return 2 * np.arctan2(numerator, denominator)


@pytest.fixture
def projection():
    return IcosahedralEqualAreaProjection(CANONICAL_FACE)


class TestForward:
    """Test projecting the face onto the plane."""

    def test_face_becomes_equilateral(self, projection):
        """Test that the face vertices form an equilateral triangle around the origin."""
        planar = projection.forward(CANONICAL_FACE.vertices)
        radii = np.hypot(planar[:, 0], planar[:, 1])
        np.testing.assert_allclose(radii, projection.planar_radius)

        sides = [np.linalg.norm(planar[i] - planar[(i + 1) % 3]) for i in range(3)]
        np.testing.assert_allclose(sides, projection.planar_radius * np.sqrt(3))

    def test_first_vertex_on_y_axis(self, projection):
        """Test that the first face vertex is the planar reference direction."""
        planar = projection.forward(CANONICAL_FACE.vertices[0])
        np.testing.assert_allclose(planar, [0.0, projection.planar_radius], atol=1e-12)

    def test_planar_area_matches_face(self, projection):
        """Test that the planar triangle has the spherical face's area."""
        (x1, y1), (x2, y2), (x3, y3) = projection.forward(CANONICAL_FACE.vertices)
        area = abs((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)) / 2
        assert area == pytest.approx(FACE_AREA)

    def test_center_maps_to_origin(self, projection):
        """Test that the face centroid is the projection origin."""
        np.testing.assert_allclose(projection.forward(CANONICAL_FACE.centroid), [0.0, 0.0], atol=1e-12)

    def test_vertex_distance(self, projection):
        """Test the icosahedron center-to-vertex angle."""
        assert np.degrees(projection.vertex_distance) == pytest.approx(37.37736814, abs=1e-6)


class TestInverse:
    """Test mapping planar points back to the sphere."""

    def test_round_trip(self, projection):
        """Test that inverse undoes forward inside the face."""
        points = rasterize_triangle(CANONICAL_FACE.vertices, 6)
        restored = projection.inverse(projection.forward(points))
        distances = geo_distance(points, restored)
        assert np.max(distances) < np.radians(1e-8)

    def test_vertices_round_trip(self, projection):
        """Test that the planar corners return to the face vertices."""
        restored = projection.inverse(projection.forward(CANONICAL_FACE.vertices))
        distances = geo_distance(CANONICAL_FACE.vertices, restored)
        assert np.max(distances) < 1e-9

    def test_origin_maps_to_centroid(self, projection):
        """Test that the planar origin is the face centroid."""
        restored = projection.inverse(np.zeros((1, 2)))
        assert geo_distance(restored[0], CANONICAL_FACE.centroid) < 1e-12

    def test_empty_input(self, projection):
        """Test that an empty array is returned unchanged in shape."""
        assert projection.inverse(np.empty((0, 2))).shape == (0, 2)


class TestEqualArea:
    """Test that the inverse projection preserves area."""

    def test_lattice_tiles_face(self, projection):
        """Test that the mapped lattice triangles tile the spherical face."""
        k = 8
        planar_face = projection.forward(CANONICAL_FACE.vertices)
        lattice = rasterize_triangle(planar_face, k, include_edges=True)
        triangles = Delaunay(lattice).simplices
        assert len(triangles) == k * k

        sphere = lonlat_to_cartesian(projection.inverse(lattice))
        areas = spherical_triangle_area(sphere[triangles[:, 0]], sphere[triangles[:, 1]], sphere[triangles[:, 2]])

        # Face edges are great circles, so the geodesic triangles tile the face exactly
        assert areas.sum() == pytest.approx(FACE_AREA, rel=1e-9)

    def test_unit_area_scale(self, projection):
        """Test that the local area scale of the inverse is 1 everywhere inside the face."""
        planar_face = projection.forward(CANONICAL_FACE.vertices)

        rng = np.random.default_rng(42)
        weights = rng.random((200, 2))
        flip = weights.sum(axis=1) > 1
        weights[flip] = 1 - weights[flip]
        barycentrics = np.column_stack((weights, 1 - weights.sum(axis=1)))
        # Shrink towards the face center so the stencil stays inside the face
        points = 0.9 * (barycentrics @ planar_face)

        h = 1e-6
        dx = np.array([h, 0.0])
        dy = np.array([0.0, h])

        def to_sphere(xy):
            return lonlat_to_cartesian(projection.inverse(xy))

        d_sphere_dx = (to_sphere(points + dx) - to_sphere(points - dx)) / (2 * h)
        d_sphere_dy = (to_sphere(points + dy) - to_sphere(points - dy)) / (2 * h)
        area_scale = np.linalg.norm(np.cross(d_sphere_dx, d_sphere_dy), axis=1)

        np.testing.assert_allclose(area_scale, 1.0, rtol=1e-5)
