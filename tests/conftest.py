"""Shared test fixtures for landscape tests."""

import tempfile
from pathlib import Path

import numpy as np
import pytest

from landscape.terrain.config import RoadConfig, TerrainConfig


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def flat_elevation() -> np.ndarray:
    """10x10 grid at 0.5 everywhere."""
    return np.full((10, 10), 0.5, dtype=np.float64)


@pytest.fixture
def ramp_elevation() -> np.ndarray:
    """12x12 grid falling from 0.58 at x=0 to 0.03 at x=11."""
    xs = np.arange(12, dtype=np.float64)
    return np.tile(0.58 - 0.05 * xs, (12, 1))


@pytest.fixture
def bowl_elevation() -> np.ndarray:
    """11x11 grid with a single strict minimum of 0.0 at (5, 5).

    Elevation rises with Chebyshev distance from the centre.
    """
    ys, xs = np.mgrid[0:11, 0:11]
    ring = np.maximum(np.abs(xs - 5), np.abs(ys - 5))
    # Euclidean term breaks ties inside a ring so every cell has a lower neighbour
    dist = np.hypot(xs - 5, ys - 5)
    return (0.08 * ring + 0.001 * dist).astype(np.float64)


@pytest.fixture
def small_config() -> TerrainConfig:
    """Small seeded configuration that generates quickly."""
    return TerrainConfig(
        seed=7,
        width=64,
        height=48,
        roads=RoadConfig(point_count=8),
    )


@pytest.fixture
def sample_config_toml() -> str:
    """Sample TOML configuration for testing."""
    return """
seed = 42
width = 40
height = 30

[noise]
octaves = 4
scale = 0.01

[classification]
include_snow = false

[roads]
point_count = 6

[hydrology]
max_rivers = 1
max_river_steps = 50
"""


@pytest.fixture
def config_file(temp_dir, sample_config_toml):
    """Create a temporary config file."""
    config_path = temp_dir / "terrain.toml"
    config_path.write_text(sample_config_toml)
    return config_path
