"""GeoJSON export of grid cells."""

import json
from typing import Any, Dict, Sequence, TextIO

import structlog

from ..core.grid_cells import GridCell

logger = structlog.get_logger()


def cell_to_feature(cell: GridCell) -> Dict[str, Any]:
    """Convert a grid cell to a GeoJSON Feature with a single-ring Polygon."""
    return {
        "type": "Feature",
        "properties": {
            # grid cell id
            "gid": cell.gid,
            # cell center
            "lon": cell.lon,
            "lat": cell.lat,
            # 0-indexed gids of adjacent cells
            "neighbors": list(cell.neighbors),
            "icosahedron_placement": cell.placement.value,
        },
        "geometry": {
            "type": "Polygon",
            "coordinates": [[list(coordinate) for coordinate in cell.boundary]],
        },
    }


def to_feature_collection(cells: Sequence[GridCell]) -> Dict[str, Any]:
    """Wrap grid cells into a GeoJSON FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": [cell_to_feature(cell) for cell in cells],
    }


def dumps(collection: Dict[str, Any], pretty: bool = False) -> str:
    """Serialize a FeatureCollection, compact or indented by two spaces."""
    if pretty:
        return json.dumps(collection, indent=2)
    return json.dumps(collection, separators=(",", ":"))


def write_feature_collection(cells: Sequence[GridCell], stream: TextIO, pretty: bool = False) -> None:
    """Write the cells as one GeoJSON document followed by a newline."""
    stream.write(dumps(to_feature_collection(cells), pretty=pretty))
    stream.write("\n")
    logger.info("GeoJSON written", features=len(cells), pretty=pretty)
