"""Tests for barycentric triangle rasterization."""

import pytest
import numpy as np

from geodesic_grid.core.rasterize import lattice_size, rasterize_triangle
from geodesic_grid.exceptions import InvalidResolutionError

UNIT_TRIANGLE = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])


class TestInteriorLattice:
    """Test rasterization without the triangle boundary."""

    @pytest.mark.parametrize("k", [1, 2, 3, 4, 7, 12])
    def test_point_count(self, k):
        """Test that k subdivisions give (k-1)(k-2)/2 interior points."""
        points = rasterize_triangle(UNIT_TRIANGLE, k)
        assert len(points) == (k - 1) * (k - 2) // 2
        assert len(points) == lattice_size(k)

    def test_small_k_is_empty(self):
        """Test that k=1 and k=2 have no interior points but keep the dimension."""
        for k in (1, 2):
            points = rasterize_triangle(UNIT_TRIANGLE, k)
            assert points.shape == (0, 2)

    def test_k3_gives_centroid(self):
        """Test that the single interior point for k=3 is the centroid."""
        points = rasterize_triangle(UNIT_TRIANGLE, 3)
        np.testing.assert_allclose(points, [[1 / 3, 1 / 3]])

    def test_ordering(self):
        """Test that u runs downwards and v upwards."""
        # point = u*A + v*B + w*C = (v/k, w/k) for the unit triangle
        points = rasterize_triangle(UNIT_TRIANGLE, 4)
        np.testing.assert_allclose(points, [[0.25, 0.25], [0.25, 0.5], [0.5, 0.25]])

    def test_points_strictly_inside(self):
        """Test that no interior point touches the boundary."""
        points = rasterize_triangle(UNIT_TRIANGLE, 9)
        assert np.all(points[:, 0] > 0)
        assert np.all(points[:, 1] > 0)
        assert np.all(points.sum(axis=1) < 1 - 1e-12)


class TestLatticeWithEdges:
    """Test rasterization including the triangle boundary."""

    @pytest.mark.parametrize("k", [1, 2, 5])
    def test_point_count(self, k):
        """Test that k subdivisions give (k+1)(k+2)/2 points."""
        points = rasterize_triangle(UNIT_TRIANGLE, k, include_edges=True)
        assert len(points) == (k + 1) * (k + 2) // 2
        assert len(points) == lattice_size(k, include_edges=True)

    def test_contains_vertices(self):
        """Test that the triangle vertices are part of the lattice."""
        points = rasterize_triangle(UNIT_TRIANGLE, 3, include_edges=True)
        np.testing.assert_allclose(points[0], UNIT_TRIANGLE[0])
        for vertex in UNIT_TRIANGLE:
            assert np.any(np.all(np.isclose(points, vertex), axis=1))

    def test_three_dimensional_coordinates(self):
        """Test that coordinates of any dimension are interpolated."""
        triangle = np.eye(3)
        points = rasterize_triangle(triangle, 4, include_edges=True)
        assert points.shape == (15, 3)
        np.testing.assert_allclose(points.sum(axis=1), 1.0)


def test_invalid_subdivisions():
    """Test that k below 1 is rejected."""
    with pytest.raises(InvalidResolutionError):
        rasterize_triangle(UNIT_TRIANGLE, 0)
