"""Exception hierarchy for geodesic grid generation."""


class GeodesicGridError(Exception):
    """Base class for all grid generation errors."""


class InvalidResolutionError(GeodesicGridError, ValueError):
    """Raised when K or the target cell size is outside the supported range."""


class PointSetInvariantError(GeodesicGridError):
    """Raised when the assembled point set does not have 10*K^2 + 2 points."""


class ProjectionError(GeodesicGridError):
    """Raised when the inverse face projection fails to converge."""


class DiagramError(GeodesicGridError):
    """Raised when the spherical Voronoi/Delaunay diagram cannot be built."""
