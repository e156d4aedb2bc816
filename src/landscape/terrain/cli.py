"""Command-line interface for terrain generation."""

import argparse
import logging
import time
import tomllib
from pathlib import Path

import structlog

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for ``landscape-generate``."""
    parser = argparse.ArgumentParser(
        description="Generate a procedural landscape: elevation, land cover, roads and water"
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="TOML config file (optional)"
    )
    parser.add_argument(
        "--width", type=int, default=None, help="Grid width (default: 500)"
    )
    parser.add_argument(
        "--height", type=int, default=None, help="Grid height (default: 500)"
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed (default: unseeded)"
    )
    parser.add_argument(
        "--points", type=int, default=None, help="Target road point count (default: 50)"
    )
    parser.add_argument(
        "--no-snow", action="store_true", help="Drop the Snow land class"
    )
    parser.add_argument(
        "--no-urban", action="store_true", help="Skip roads, buildings and the Urban class"
    )
    parser.add_argument(
        "--no-water", action="store_true", help="Skip lakes and rivers"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="saves/landscape.npz",
        help="Output path (default: saves/landscape.npz)",
    )
    parser.add_argument(
        "--debug-images",
        type=str,
        default=None,
        help="Directory to save debug images (optional)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def config_from_args(args: argparse.Namespace):
    """Build a TerrainConfig from a config file and command-line overrides."""
    from ..config import apply_overrides, load_config
    from .config import TerrainConfig

    config = load_config(Path(args.config)) if args.config else TerrainConfig()
    config = apply_overrides(
        config,
        width=args.width,
        height=args.height,
        seed=args.seed,
        debug_output_dir=args.debug_images,
    )

    if args.points is not None:
        config = config.model_copy(
            update={"roads": config.roads.model_copy(update={"point_count": args.points})}
        )
    if args.no_snow or args.no_urban:
        classification = config.classification.model_copy(
            update={
                "include_snow": config.classification.include_snow and not args.no_snow,
                "include_urban": config.classification.include_urban and not args.no_urban,
            }
        )
        config = config.model_copy(update={"classification": classification})
    if args.no_water:
        config = config.model_copy(
            update={"hydrology": config.hydrology.model_copy(update={"include_water": False})}
        )
    return config


def configure_logging(verbose: bool) -> None:
    """Route stdlib and structlog output to the console."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for terrain generation."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from ..exceptions import ConfigurationError
    from .generator import generate_terrain
    from .persistence import save_map
    from .validation import validate_terrain

    try:
        config = config_from_args(args)
    except (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.error("invalid_configuration", path=args.config, reason=str(e))
        return 2
    output_path = Path(args.output)

    print(f"Generating {config.width}x{config.height} landscape with seed {config.seed}")
    print(f"Output: {output_path}")
    print()

    start_time = time.time()
    try:
        result = generate_terrain(config)
    except ConfigurationError as e:
        logger.error("invalid_configuration", reason=str(e))
        return 2
    gen_time = time.time() - start_time

    validation = validate_terrain(result)

    print()
    print(f"Generation complete in {gen_time:.1f}s")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path = save_map(output_path, result)

    logger.info(
        "landscape_saved",
        path=str(output_path),
        road_points=len(result.road_network.points),
        road_edges=len(result.road_network.edges),
        buildings=len(result.buildings),
        lake_cells=len(result.lakes),
        rivers=len(result.rivers),
        validation_passed=validation.passed,
    )
    print(f"Saved to {output_path}")
    return 0 if validation.passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
