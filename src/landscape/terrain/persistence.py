"""Map persistence: save and load generated terrain."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from ..land_classes import LandClass
from ..types import Building, RiverPath, RoadEdge, RoadPoint
from .config import TerrainConfig
from .generator import GenerationResult
from .hydrology import lake_mask
from .roads import RoadNetwork

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _encode(data: object) -> bytes:
    return json.dumps(data).encode("utf-8")


def _decode(array: np.ndarray) -> object:
    return json.loads(array.tobytes().decode("utf-8"))


def save_map(path: Path, result: GenerationResult) -> Path:
    """Save a generation result to disk.

    Uses numpy's compressed .npz format; grids are stored as arrays and
    everything else as JSON blobs. Lakes are stored as a mask.

    Args:
        path: Output path. ``.npz`` is appended if missing.
        result: Generation result to save.

    Returns:
        Path actually written.
    """
    path = Path(path)
    if path.suffix != ".npz":
        # Same name numpy would write
        path = path.with_name(path.name + ".npz")

    network = result.road_network
    roads = {
        "width": network.width,
        "height": network.height,
        "main_road_fraction": network.main_road_fraction,
        "points": [p.model_dump() for p in network.points],
        "edges": [e.model_dump() for e in network.edges],
    }

    metadata = {
        "version": FORMAT_VERSION,
        "seed": result.config.seed,
        "width": result.width,
        "height": result.height,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    lakes = np.zeros(result.elevation.shape, dtype=bool)
    if result.lakes:
        xs, ys = zip(*result.lakes)
        lakes[list(ys), list(xs)] = True

    np.savez_compressed(
        path,
        elevation=result.elevation,
        classification=result.classification,
        fuel_density=result.fuel_density,
        road_mask=result.road_mask,
        lakes=lakes,
        classes=_encode([c.model_dump() for c in result.classes]),
        roads=_encode(roads),
        buildings=_encode([b.model_dump() for b in result.buildings]),
        rivers=_encode([r.model_dump() for r in result.rivers]),
        config=_encode(result.config.model_dump()),
        metadata=_encode(metadata),
    )

    file_size = path.stat().st_size / (1024 * 1024)
    logger.info(f"Saved map to {path} ({file_size:.1f} MB)")
    return path


def load_map(path: Path) -> tuple[GenerationResult, dict]:
    """Load a generation result from disk.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (GenerationResult, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Map file not found: {path}")

    with np.load(path) as data:
        for key in ("elevation", "classification", "classes", "config"):
            if key not in data:
                raise ValueError(f"Invalid map file: missing '{key}' array")

        elevation = data["elevation"]
        height, width = elevation.shape
        config = TerrainConfig.model_validate(_decode(data["config"]))
        classes = tuple(LandClass.model_validate(c) for c in _decode(data["classes"]))

        if "roads" in data:
            roads = _decode(data["roads"])
            road_network = RoadNetwork(
                width=roads["width"],
                height=roads["height"],
                points=tuple(RoadPoint.model_validate(p) for p in roads["points"]),
                edges=tuple(RoadEdge.model_validate(e) for e in roads["edges"]),
                main_road_fraction=roads["main_road_fraction"],
            )
        else:
            road_network = RoadNetwork(width=width, height=height, points=(), edges=())

        buildings = (
            [Building.model_validate(b) for b in _decode(data["buildings"])]
            if "buildings" in data
            else []
        )
        rivers = (
            [RiverPath.model_validate(r) for r in _decode(data["rivers"])]
            if "rivers" in data
            else []
        )

        if "lakes" in data:
            ys, xs = np.nonzero(data["lakes"])
        else:
            ys, xs = np.nonzero(lake_mask(elevation, config.hydrology.lake_threshold))
        lakes = frozenset(zip(xs.tolist(), ys.tolist()))

        fuel_density = (
            data["fuel_density"] if "fuel_density" in data else np.zeros_like(elevation)
        )
        road_mask = (
            data["road_mask"]
            if "road_mask" in data
            else np.zeros(elevation.shape, dtype=bool)
        )

        metadata = _decode(data["metadata"]) if "metadata" in data else {}
        classification = data["classification"]

    result = GenerationResult(
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

    logger.info(f"Loaded map from {path}: {width}x{height}")
    return result, metadata
