"""Command line entry point: write a geodesic grid as GeoJSON to stdout."""

import argparse
import sys
from typing import List, Optional

import structlog

from . import __version__
from .config import settings
from .core.grid_cells import generate_grid, summarize_grid
from .core.resolution import cell_size_from_k, resolve_k, validate_cell_size, validate_k
from .exceptions import GeodesicGridError, InvalidResolutionError
from .export.geojson import write_feature_collection
from .utils.logging import configure_logging

logger = structlog.get_logger()


def _cell_size(value: str) -> float:
    try:
        cell_size = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid cell size: {value!r}")
    try:
        return validate_cell_size(cell_size)
    except InvalidResolutionError as e:
        raise argparse.ArgumentTypeError(str(e))


def _subdivisions(value: str) -> int:
    try:
        k = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of subdivisions: {value!r}")
    try:
        return validate_k(k)
    except InvalidResolutionError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geodesic-grid",
        description="Generate a homogenously spaced hexagonal geodesic grid.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    resolution = parser.add_mutually_exclusive_group()
    resolution.add_argument(
        "--cell-size",
        type=_cell_size,
        metavar="KM",
        help="target median cell diameter in km",
    )
    resolution.add_argument(
        "--k",
        type=_subdivisions,
        metavar="SUBDIVISIONS",
        help=f"number of triangle edge subdivisions for grid generation (default: {settings.default_k})",
    )

    parser.add_argument("--pretty", action="store_true", default=False, help="pretty-format the JSON output")
    parser.add_argument("--log-level", default=settings.log_level, help="logging level (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level, settings.log_format)

    try:
        k = resolve_k(k=args.k, cell_size_km=args.cell_size,
                      default_k=settings.default_k,
                      earth_radius_km=settings.earth_radius_km)
    except InvalidResolutionError as e:
        parser.error(str(e))

    logger.info("Generating geodesic grid", k=k,
                approx_cell_size_km=round(cell_size_from_k(k, settings.earth_radius_km), 1))

    try:
        cells = generate_grid(k)
    except GeodesicGridError as e:
        logger.error("Grid generation failed", k=k, error=str(e))
        return 1

    summary = summarize_grid(cells, k)
    logger.info("Grid generated",
                cells=summary.cell_count,
                placements=summary.placement_counts,
                neighbor_histogram=summary.neighbor_histogram,
                degenerate_cells=summary.degenerate_cells)

    write_feature_collection(cells, sys.stdout, pretty=args.pretty)
    return 0


if __name__ == "__main__":
    sys.exit(main())
