"""Command-line entry point: generate a terrain map and optionally route across it."""

import argparse
import json
import sys
from typing import List, Optional

import structlog

from .config import settings
from .core.classifier import TerrainClassifier
from .core.map_generator import generate_terrain
from .core.noise_field import InvalidDimensionsError, NoiseConfig
from .core.terrain import all_terrain_names
from .utils.logging_setup import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-terrain",
        description="Generate procedural terrain and find the cheapest route across it",
    )
    parser.add_argument("--width", type=int, default=settings.default_map_width, help="Map width in cells")
    parser.add_argument("--height", type=int, default=settings.default_map_height, help="Map height in cells")
    parser.add_argument("--seed", help="Seed string (random if not specified)")
    parser.add_argument(
        "--hide",
        action="append",
        default=[],
        choices=all_terrain_names(),
        metavar="TERRAIN",
        help="Disable a terrain category (repeatable): " + ", ".join(all_terrain_names()),
    )
    parser.add_argument("--start", type=int, nargs=2, metavar=("X", "Y"), help="Route start cell")
    parser.add_argument("--end", type=int, nargs=2, metavar=("X", "Y"), help="Route end cell")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument(
        "--log-format", default=settings.log_format, choices=["json", "plain"], help="Logging format"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together")

    configure_logging(args.log_level, args.log_format)

    if args.width > settings.max_map_width or args.height > settings.max_map_height:
        logger.error(
            "Map too large",
            width=args.width,
            height=args.height,
            max_width=settings.max_map_width,
            max_height=settings.max_map_height,
        )
        return 1

    visibility = None
    if args.hide:
        visibility = {name: name not in args.hide for name in all_terrain_names()}

    try:
        data = generate_terrain(
            args.width,
            args.height,
            visibility=visibility,
            seed=args.seed,
            noise_config=NoiseConfig.from_settings(settings),
            classifier=TerrainClassifier(beach_radius=settings.beach_radius),
        )
    except InvalidDimensionsError as e:
        logger.error("Terrain generation failed", error=str(e))
        return 1

    output = {
        "seed": data.seed,
        "width": data.width,
        "height": data.height,
        "terrain_counts": data.terrain.counts(),
    }

    if args.start is not None:
        result = data.find_path(args.start[0], args.start[1], args.end[0], args.end[1])
        output["route"] = {
            "success": result.success,
            "distance": result.distance,
            "path": [list(p) for p in result.path],
            "computation_time_ms": result.computation_time_ms,
        }
        logger.info("Route search finished", success=result.success, distance=result.distance)

    json.dump(output, sys.stdout)
    sys.stdout.write("\n")
    return 0
