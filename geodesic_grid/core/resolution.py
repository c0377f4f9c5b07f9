"""
Grid resolution: the number of icosahedron edge subdivisions K.

A grid with K subdivisions has 10*K^2 + 2 cells. Spreading the Earth's
surface evenly over them gives the estimate

    K = round(sqrt(1.6 * (R / d)^2 - 0.2))

for a target median cell diameter d.
"""

import math
import numbers
from typing import Optional

from ..exceptions import InvalidResolutionError

EARTH_RADIUS_KM = 6371.01

MIN_K = 1
MAX_K = 250

# Accepted target cell sizes, bounds included
MIN_CELL_SIZE_KM = 40.0
MAX_CELL_SIZE_KM = 7400.0


def cell_count(k: int) -> int:
    """Number of grid cells for k subdivisions."""
    return 10 * k * k + 2


def validate_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidResolutionError(f"Number of subdivisions must be an integer, got {k!r}")
    if k < MIN_K:
        raise InvalidResolutionError(f"Number of subdivisions must be positive, got {k}")
    if k > MAX_K:
        raise InvalidResolutionError(f"Number of subdivisions should not exceed {MAX_K}, got {k}")
    return int(k)


def validate_cell_size(cell_size_km: float) -> float:
    if not math.isfinite(cell_size_km):
        raise InvalidResolutionError(f"Cell size must be a finite number, got {cell_size_km}")
    if cell_size_km < MIN_CELL_SIZE_KM or cell_size_km > MAX_CELL_SIZE_KM:
        raise InvalidResolutionError(
            f"Cell size must be between {MIN_CELL_SIZE_KM:g} and {MAX_CELL_SIZE_KM:g} km, got {cell_size_km:g}"
        )
    return cell_size_km


def k_from_cell_size(cell_size_km: float, earth_radius_km: float = EARTH_RADIUS_KM) -> int:
    """
    Number of subdivisions giving cells of roughly the requested diameter.

    Args:
        cell_size_km: Target median cell diameter in km, within [40, 7400]
        earth_radius_km: Sphere radius

    Returns:
        K, validated to lie in [1, 250]
    """
    validate_cell_size(cell_size_km)
    estimate = math.sqrt(1.6 * (earth_radius_km / cell_size_km) ** 2 - 0.2)
    # Half rounds up
    k = int(math.floor(estimate + 0.5))
    return validate_k(max(k, MIN_K))


def cell_size_from_k(k: int, earth_radius_km: float = EARTH_RADIUS_KM) -> float:
    """Approximate median cell diameter in km for k subdivisions."""
    validate_k(k)
    return earth_radius_km * math.sqrt(1.6 / (k * k + 0.2))


def resolve_k(k: Optional[int] = None,
              cell_size_km: Optional[float] = None,
              default_k: int = 10,
              earth_radius_km: float = EARTH_RADIUS_KM) -> int:
    """
    Pick K from either an explicit value or a target cell size.

    Raises:
        InvalidResolutionError: if both are given or either is out of range
    """
    if k is not None and cell_size_km is not None:
        raise InvalidResolutionError("Subdivisions (k) and cell size are mutually exclusive")
    if cell_size_km is not None:
        return k_from_cell_size(cell_size_km, earth_radius_km)
    if k is not None:
        return validate_k(k)
    return validate_k(default_k)
