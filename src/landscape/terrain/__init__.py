"""Procedural terrain generation package.

This package builds the data layers of a landscape: fractal elevation,
land-cover classification, a terrain-aware road tree with building
footprints, and lakes and rivers.
"""

from .config import TerrainConfig
from .generator import GenerationResult, generate_terrain, validate_config
from .persistence import load_map, save_map
from .validation import ValidationResult, validate_terrain

__all__ = [
    "GenerationResult",
    "TerrainConfig",
    "ValidationResult",
    "generate_terrain",
    "load_map",
    "save_map",
    "validate_config",
    "validate_terrain",
]
