"""Terrain configuration loading from TOML files."""

import tomllib
from pathlib import Path

import structlog

from .terrain.config import TerrainConfig

logger = structlog.get_logger()


def load_config(config_path: Path) -> TerrainConfig:
    """Load terrain configuration from a TOML file.

    Tables map onto the nested config models, e.g. ``[noise]``,
    ``[roads]``, ``[hydrology]``; top-level keys set seed and extent.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values have the wrong types.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    config = TerrainConfig.model_validate(data)
    logger.info(
        "config_loaded",
        path=str(config_path),
        width=config.width,
        height=config.height,
        seed=config.seed,
    )
    return config


def apply_overrides(config: TerrainConfig, **overrides: object) -> TerrainConfig:
    """Return a copy of config with non-None top-level overrides applied.

    Args:
        config: Base configuration.
        **overrides: Top-level field values; None entries are ignored.

    Returns:
        New TerrainConfig.
    """
    update = {key: value for key, value in overrides.items() if value is not None}
    if not update:
        return config
    return config.model_copy(update=update)
