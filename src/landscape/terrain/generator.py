"""Main terrain generation orchestration."""

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from ..exceptions import ConfigurationError
from ..land_classes import URBAN, LandClass, active_land_classes, class_id_for
from ..types import Building, RiverPath
from .buildings import place_buildings
from .classification import (
    class_histogram,
    classify_terrain,
    resolve_colors,
    validate_land_classes,
)
from .config import TerrainConfig
from .fields import MIN_GRID_SIZE, make_elevation, make_fuel_density
from .hydrology import HydrologyBuilder, check_hydrology_config
from .noise import NoiseField
from .roads import RoadNetwork, RoadNetworkBuilder, rasterize_roads

logger = logging.getLogger(__name__)


class GenerationResult:
    """Everything one generation pass produces.

    Arrays are read-only; a new terrain means a new generation pass.
    """

    def __init__(
        self,
        config: TerrainConfig,
        classes: tuple[LandClass, ...],
        elevation: NDArray[np.float64],
        classification: NDArray[np.uint8],
        fuel_density: NDArray[np.float64],
        road_network: RoadNetwork,
        road_mask: NDArray[np.bool_],
        buildings: list[Building],
        lakes: frozenset[tuple[int, int]],
        rivers: list[RiverPath],
    ):
        self.config = config
        self.classes = classes
        self.elevation = _freeze(elevation)
        self.classification = _freeze(classification)
        self.fuel_density = _freeze(fuel_density)
        self.road_network = road_network
        self.road_mask = _freeze(road_mask)
        self.buildings = tuple(buildings)
        self.lakes = lakes
        self.rivers = tuple(rivers)

    @property
    def width(self) -> int:
        return self.elevation.shape[1]

    @property
    def height(self) -> int:
        return self.elevation.shape[0]


def _freeze(array: NDArray) -> NDArray:
    array.flags.writeable = False
    return array


def validate_config(config: TerrainConfig) -> tuple[LandClass, ...]:
    """Check a config before any generation work starts.

    Args:
        config: Terrain generation configuration.

    Returns:
        The active land-class table.

    Raises:
        ConfigurationError: If the config cannot produce a valid terrain.
    """
    if config.width < MIN_GRID_SIZE or config.height < MIN_GRID_SIZE:
        raise ConfigurationError(
            f"Grid {config.width}x{config.height} too small: "
            f"both sides must be >= {MIN_GRID_SIZE}"
        )
    if config.roads.point_count < 1:
        raise ConfigurationError(
            f"Road point count must be >= 1, got {config.roads.point_count}"
        )
    if config.noise.octaves < 1:
        raise ConfigurationError(f"Octaves must be >= 1, got {config.noise.octaves}")
    if config.buildings.slot_length <= 0:
        raise ConfigurationError(
            f"Building slot length must be > 0, got {config.buildings.slot_length}"
        )
    if config.roads.max_attempts < 1:
        raise ConfigurationError(
            f"Road sampling attempts must be >= 1, got {config.roads.max_attempts}"
        )
    check_hydrology_config(config.hydrology)

    classes = active_land_classes(
        include_snow=config.classification.include_snow,
        include_urban=config.classification.include_urban,
    )
    validate_land_classes(classes)
    return classes


def generate_terrain(
    config: TerrainConfig,
    rng: np.random.Generator | None = None,
) -> GenerationResult:
    """Generate complete terrain from configuration.

    A single random generator drives, in order, the noise table, road point
    sampling, building sizes and river widths, so a seeded config
    reproduces the same terrain.

    Args:
        config: Terrain generation configuration.
        rng: Random generator to use instead of one seeded from config.

    Returns:
        GenerationResult with all layers.

    Raises:
        ConfigurationError: If the config is invalid. Raised before any
            generation work.
    """
    classes = validate_config(config)
    if rng is None:
        rng = np.random.default_rng(config.seed)
    width, height = config.width, config.height

    logger.info(f"Generating terrain {width}x{height} with seed {config.seed}")

    # Stage A: Elevation
    logger.info("Stage A: Generating elevation field...")
    noise_field = NoiseField(rng)
    elevation = make_elevation(width, height, noise_field, config.noise)
    logger.info(
        f"Elevation range: [{elevation.min():.3f}, {elevation.max():.3f}], "
        f"mean {elevation.mean():.3f}"
    )

    # Stage B: Classification
    logger.info("Stage B: Classifying land cover...")
    classification = classify_terrain(elevation, classes)

    # Stage C: Fuel density, from the classification before roads are drawn in
    logger.info("Stage C: Computing fuel density...")
    fuel_density = make_fuel_density(noise_field, elevation, classification, classes)

    # Stage D: Roads and buildings
    urban_id = class_id_for(classes, URBAN)
    if config.classification.include_urban:
        logger.info("Stage D: Building road network...")
        road_network = RoadNetworkBuilder(elevation, rng, config.roads).build()
        road_mask = rasterize_roads(road_network)
        buildings = place_buildings(road_network, rng, config.buildings)
        if urban_id is not None:
            classification = classification.copy()
            classification[road_mask] = urban_id
        logger.info(
            f"Road network: {len(road_network.points)} points, "
            f"{len(road_network.edges)} edges "
            f"({len(road_network.main_roads())} main), {len(buildings)} buildings"
        )
    else:
        road_network = RoadNetwork(
            width=width,
            height=height,
            points=(),
            edges=(),
            main_road_fraction=config.roads.main_road_fraction,
        )
        road_mask = np.zeros((height, width), dtype=bool)
        buildings = []

    # Stage E: Hydrology
    if config.hydrology.include_water:
        logger.info("Stage E: Computing hydrology...")
        hydrology = HydrologyBuilder(elevation, rng, config.hydrology)
        lakes = hydrology.build_lakes()
        rivers = hydrology.build_rivers()
        logger.info(f"Found {len(lakes):,} lake cells, traced {len(rivers)} rivers")
    else:
        lakes = frozenset()
        rivers = []

    _log_terrain_stats(classification, classes)

    if config.debug_output_dir:
        _dump_debug_images(
            Path(config.debug_output_dir),
            elevation=elevation,
            land_cover=resolve_colors(classification, classes),
            fuel_density=fuel_density,
            road_mask=road_mask,
        )

    return GenerationResult(
        config=config,
        classes=classes,
        elevation=elevation,
        classification=classification,
        fuel_density=fuel_density,
        road_network=road_network,
        road_mask=road_mask,
        buildings=buildings,
        lakes=lakes,
        rivers=rivers,
    )


def _log_terrain_stats(
    classification: NDArray[np.uint8], classes: tuple[LandClass, ...]
) -> None:
    """Log land-cover statistics."""
    total = classification.size
    logger.info(f"Land cover ({total:,} cells):")
    for name, count in class_histogram(classification, classes).items():
        if count:
            logger.info(f"  {name}: {count:,} ({count / total * 100:.1f}%)")


def _dump_debug_images(output_dir: Path, **arrays: NDArray) -> None:
    """Save arrays as images for debugging.

    Args:
        output_dir: Directory to save images.
        **arrays: Named arrays to save.
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not available, skipping debug images")
        return

    output_dir.mkdir(parents=True, exist_ok=True)

    for name, image in arrays.items():
        fig, ax = plt.subplots(figsize=(8, 8))
        if image.ndim == 3:
            # RGB land cover
            ax.imshow(image)
        elif image.dtype == bool:
            ax.imshow(image, cmap="gray_r", interpolation="nearest")
        else:
            shown = ax.imshow(image, cmap="terrain")
            fig.colorbar(shown, ax=ax, shrink=0.8)
        ax.set_title(name.replace("_", " "))
        ax.set_axis_off()
        fig.savefig(output_dir / f"{name}.png", dpi=120, bbox_inches="tight")
        plt.close(fig)

    logger.info(f"Debug images saved to {output_dir}")
