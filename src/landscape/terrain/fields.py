"""Field generation for terrain: elevation and fuel density."""

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from ..exceptions import ConfigurationError
from ..land_classes import FOREST_CLASSES, OPEN_FUEL_CLASSES, LandClass
from .config import NoiseConfig
from .noise import NoiseField

# 3x3 binomial approximation of a Gaussian; weights sum to 1
GAUSSIAN_KERNEL = np.array(
    [
        [1 / 16, 1 / 8, 1 / 16],
        [1 / 8, 1 / 4, 1 / 8],
        [1 / 16, 1 / 8, 1 / 16],
    ],
    dtype=np.float64,
)

MIN_GRID_SIZE = 3


def synthesize_elevation(
    width: int,
    height: int,
    noise_field: NoiseField,
    octaves: int = 8,
    persistence: float = 0.45,
    lacunarity: float = 2.0,
    scale: float = 0.0015,
    curve_exponent: float = 1.5,
    height_multiplier: float = 1.2,
) -> NDArray[np.float64]:
    """Generate an elevation grid from fractal noise.

    Each cell's fBm value is remapped to [0, 1], raised to
    ``curve_exponent``, clamped, scaled by ``height_multiplier`` and then
    smoothed once with a 3x3 Gaussian on interior cells only. With the
    default multiplier every cell lies in [0, 1.2]: the blur is a convex
    combination so it cannot leave the pre-blur range, but it is not
    re-clamped to [0, 1].

    Args:
        width: Grid width in cells (>= 3).
        height: Grid height in cells (>= 3).
        noise_field: Source noise.
        octaves: Number of fBm octaves.
        persistence: Amplitude multiplier between octaves.
        lacunarity: Frequency multiplier between octaves.
        scale: Base frequency.
        curve_exponent: Power curve exponent.
        height_multiplier: Final scale before blurring.

    Returns:
        2D elevation array of shape (height, width).

    Raises:
        ConfigurationError: If the grid is too small to blur.
    """
    if width < MIN_GRID_SIZE or height < MIN_GRID_SIZE:
        raise ConfigurationError(
            f"Grid {width}x{height} too small: both sides must be >= {MIN_GRID_SIZE}"
        )

    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )

    raw = noise_field.fractal(xs, ys, octaves, persistence, scale, lacunarity)

    # Clip before the power curve so stray values below 0 cannot produce NaN
    unit = np.clip((raw + 1.0) / 2.0, 0.0, 1.0)
    elevation = np.clip(unit**curve_exponent, 0.0, 1.0) * height_multiplier

    return gaussian_blur_interior(elevation)


def make_elevation(
    width: int,
    height: int,
    noise_field: NoiseField,
    config: NoiseConfig,
) -> NDArray[np.float64]:
    """Generate elevation field from a noise config.

    Args:
        width: Grid width in cells.
        height: Grid height in cells.
        noise_field: Source noise.
        config: Noise and shaping parameters.

    Returns:
        2D elevation array.
    """
    return synthesize_elevation(
        width,
        height,
        noise_field,
        octaves=config.octaves,
        persistence=config.persistence,
        lacunarity=config.lacunarity,
        scale=config.scale,
        curve_exponent=config.curve_exponent,
        height_multiplier=config.height_multiplier,
    )


def gaussian_blur_interior(data: NDArray[np.float64]) -> NDArray[np.float64]:
    """Single 3x3 Gaussian pass on interior cells.

    Border rows and columns are copied through unsmoothed. The input is
    not modified.

    Args:
        data: 2D array.

    Returns:
        New smoothed array.
    """
    smoothed = data.copy()
    # Interior cells only read real neighbours
    convolved = ndimage.convolve(data, GAUSSIAN_KERNEL, mode="nearest")
    smoothed[1:-1, 1:-1] = convolved[1:-1, 1:-1]
    return smoothed


def make_fuel_density(
    noise_field: NoiseField,
    elevation: NDArray[np.float64],
    classification: NDArray[np.uint8],
    classes: tuple[LandClass, ...],
) -> NDArray[np.float64]:
    """Generate vegetation fuel density.

    Forest classes carry dense, coarse-grained fuel; shrub and grassland
    carry lighter, finer-grained fuel. Everything else is zero.

    Args:
        noise_field: Noise used for local variation.
        elevation: Elevation grid.
        classification: Class id grid.
        classes: Active class table the ids index into.

    Returns:
        2D fuel density array, same shape as elevation.
    """
    height, width = elevation.shape
    ys, xs = np.meshgrid(
        np.arange(height, dtype=np.float64),
        np.arange(width, dtype=np.float64),
        indexing="ij",
    )

    forest_ids = [i for i, c in enumerate(classes) if c.name in FOREST_CLASSES]
    open_ids = [i for i, c in enumerate(classes) if c.name in OPEN_FUEL_CLASSES]
    forest = np.isin(classification, forest_ids)
    open_land = np.isin(classification, open_ids)

    density = np.zeros((height, width), dtype=np.float64)
    if forest.any():
        density[forest] = (
            np.maximum(0.5, elevation[forest])
            * noise_field.sample_unit(xs[forest] * 0.01, ys[forest] * 0.01)
        )
    if open_land.any():
        density[open_land] = (
            np.maximum(0.3, elevation[open_land])
            * noise_field.sample_unit(xs[open_land] * 0.02, ys[open_land] * 0.02)
        )
    return density

