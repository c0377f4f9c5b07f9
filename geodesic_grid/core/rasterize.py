"""Barycentric lattice rasterization of a triangle."""

import numpy as np

from ..exceptions import InvalidResolutionError


def lattice_size(k: int, include_edges: bool = False) -> int:
    """Number of lattice points rasterize_triangle produces for k subdivisions."""
    if include_edges:
        return (k + 1) * (k + 2) // 2
    return max(k - 1, 0) * max(k - 2, 0) // 2


def rasterize_triangle(triangle, k: int, include_edges: bool = False) -> np.ndarray:
    """
    Produce equally spaced points inside a triangle.

    Points are generated from barycentric weights (u/k, v/k, (k-u-v)/k)
    with u running from high to low and v from low to high. Boundary
    points are skipped unless include_edges is set, since triangle vertices
    and edges are shared with neighbouring faces.

    Args:
        triangle: Array of shape (3, dim) with the triangle vertices
        k: Number of subdivisions per triangle edge
        include_edges: Whether to include the triangle boundary

    Returns:
        Array of shape (n, dim) of lattice points
    """
    if k < 1:
        raise InvalidResolutionError(f"Number of subdivisions must be positive, got {k}")

    triangle = np.asarray(triangle, dtype=float)
    offset = 0 if include_edges else 1

    weights = []
    for u in range(k - offset, offset - 1, -1):
        for v in range(offset, k - u - offset + 1):
            weights.append((u, v, k - u - v))

    if not weights:
        return np.empty((0, triangle.shape[1]))

    barycentrics = np.array(weights, dtype=float) / k
    return barycentrics @ triangle
