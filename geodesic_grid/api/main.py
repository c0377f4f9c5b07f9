"""FastAPI main application."""

from typing import Dict, Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.grid_cells import generate_grid, summarize_grid
from ..core.resolution import cell_count, cell_size_from_k, resolve_k
from ..exceptions import GeodesicGridError, InvalidResolutionError
from ..export.geojson import to_feature_collection
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

app = FastAPI(
    title="Geodesic Grid API",
    description="Homogenously spaced hexagonal geodesic grids as GeoJSON",
    version=__version__,
)


class GridSummaryResponse(BaseModel):
    """Statistics of a generated grid."""

    k: int
    cell_count: int
    approx_cell_size_km: float
    placement_counts: Dict[str, int]
    neighbor_histogram: Dict[int, int]
    pentagons: int
    degenerate_cells: int = Field(0, description="Cells whose ring has fewer than 3 distinct corners")


def _resolve_request_k(k: Optional[int], cell_size: Optional[float]) -> int:
    try:
        resolved = resolve_k(k=k, cell_size_km=cell_size,
                             default_k=settings.default_k,
                             earth_radius_km=settings.earth_radius_km)
    except InvalidResolutionError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if resolved > settings.api_max_k:
        raise HTTPException(
            status_code=422,
            detail=f"k={resolved} ({cell_count(resolved)} cells) exceeds the API limit of {settings.api_max_k}",
        )
    return resolved


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Geodesic Grid API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/grid")
def get_grid(
    k: Optional[int] = Query(None, description="Number of triangle edge subdivisions"),
    cell_size: Optional[float] = Query(None, description="Target median cell diameter in km"),
    summary: bool = Query(False, description="Return grid statistics instead of GeoJSON"),
):
    """
    Generate a grid.

    Returns a GeoJSON FeatureCollection, or a GridSummaryResponse when
    summary is set. Either k or cell_size may be given, not both.
    """
    resolved = _resolve_request_k(k, cell_size)
    logger.info("Grid requested", k=resolved, summary=summary)

    try:
        cells = generate_grid(resolved)
    except GeodesicGridError as e:
        logger.error("Grid generation failed", k=resolved, error=str(e))
        raise HTTPException(status_code=500, detail="Grid generation failed")

    if summary:
        stats = summarize_grid(cells, resolved)
        return GridSummaryResponse(
            k=stats.k,
            cell_count=stats.cell_count,
            approx_cell_size_km=cell_size_from_k(resolved, settings.earth_radius_km),
            placement_counts=stats.placement_counts,
            neighbor_histogram=stats.neighbor_histogram,
            pentagons=stats.pentagons,
            degenerate_cells=stats.degenerate_cells,
        )

    return to_feature_collection(cells)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
