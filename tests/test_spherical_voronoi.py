"""Tests for the spherical Voronoi/Delaunay diagram."""

import pytest
import numpy as np

from geodesic_grid.core.icosahedron import icosahedron_vertices
from geodesic_grid.core.spherical import lonlat_to_cartesian
from geodesic_grid.core.spherical_voronoi import (
    build_cell_neighbors, build_cell_polygons, build_spherical_diagram
)
from geodesic_grid.exceptions import DiagramError


class TestCellNeighbors:
    """Test neighbor lists built from Delaunay triangles."""

    def test_tetrahedron(self):
        """Test that every tetrahedron corner neighbors the other three."""
        simplices = np.array([[0, 1, 2], [0, 3, 1], [1, 3, 2], [2, 3, 0]])
        neighbors = build_cell_neighbors(simplices, 4)
        assert neighbors == [[1, 2, 3], [0, 2, 3], [0, 1, 3], [0, 1, 2]]

    def test_isolated_point(self):
        """Test that points outside every triangle get an empty list."""
        neighbors = build_cell_neighbors(np.array([[0, 1, 2]]), 4)
        assert neighbors[3] == []

    def test_ascending_without_duplicates(self):
        """Test that shared edges are listed once, in ascending order."""
        neighbors = build_cell_neighbors(np.array([[3, 1, 0], [2, 0, 1]]), 4)
        assert neighbors == [[1, 2, 3], [0, 2, 3], [0, 1], [0, 1]]


class TestCellPolygons:
    """Test polygon orientation."""

    def test_counter_clockwise_region_is_reversed(self):
        """Test that regions turning counter-clockwise around the generator are flipped."""
        generator = np.array([[0.0, 0.0, 1.0]])
        vertices = np.array([[1.0, 0.0, 0.2], [0.0, 1.0, 0.2], [-1.0, -1.0, 0.2]])
        polygons = build_cell_polygons(generator, vertices, [[0, 1, 2]])
        assert polygons == [[2, 1, 0]]

    def test_clockwise_region_is_kept(self):
        """Test that clockwise regions keep their order."""
        generator = np.array([[0.0, 0.0, 1.0]])
        vertices = np.array([[1.0, 0.0, 0.2], [0.0, 1.0, 0.2], [-1.0, -1.0, 0.2]])
        polygons = build_cell_polygons(generator, vertices, [[2, 1, 0]])
        assert polygons == [[2, 1, 0]]


class TestSphericalDiagram:
    """Test the scipy backed diagram."""

    def test_icosahedron(self):
        """Test that the icosahedron vertices give a dodecahedral diagram."""
        diagram = build_spherical_diagram(icosahedron_vertices())
        assert len(diagram.centers) == 20
        assert all(len(neighbors) == 5 for neighbors in diagram.neighbors)
        assert all(len(polygon) == 5 for polygon in diagram.polygons)

    def test_neighbors_are_symmetric(self):
        """Test that if A neighbors B then B neighbors A."""
        diagram = build_spherical_diagram(icosahedron_vertices())
        for i, neighbors in enumerate(diagram.neighbors):
            for neighbor in neighbors:
                assert i in diagram.neighbors[neighbor]

    def test_neighbors_are_ascending(self):
        """Test that diagram neighbor lists are sorted and unique."""
        diagram = build_spherical_diagram(icosahedron_vertices())
        for neighbors in diagram.neighbors:
            assert neighbors == sorted(set(neighbors))

    def test_polygons_are_clockwise(self):
        """Test that every polygon turns clockwise seen from outside."""
        points = icosahedron_vertices()
        diagram = build_spherical_diagram(points)
        generators = lonlat_to_cartesian(points)
        centers = lonlat_to_cartesian(diagram.centers)
        for generator, polygon in zip(generators, diagram.polygons):
            turn = np.dot(generator, np.cross(centers[polygon[0]], centers[polygon[1]]))
            assert turn < 0

    def test_duplicate_points_fail(self):
        """Test that duplicate generators are a fatal diagram error."""
        points = icosahedron_vertices()
        with pytest.raises(DiagramError):
            build_spherical_diagram(np.vstack([points, points[:1]]))
