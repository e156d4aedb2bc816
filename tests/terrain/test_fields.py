"""Tests for elevation and fuel density fields."""

import numpy as np
import pytest

from landscape.exceptions import ConfigurationError
from landscape.land_classes import LAND_CLASSES, UNCLASSIFIED
from landscape.terrain.config import NoiseConfig
from landscape.terrain.fields import (
    GAUSSIAN_KERNEL,
    gaussian_blur_interior,
    make_elevation,
    make_fuel_density,
    synthesize_elevation,
)
from landscape.terrain.noise import NoiseField


class TestSynthesizeElevation:
    """Tests for elevation synthesis."""

    def test_output_shape(self) -> None:
        """Output is (height, width)."""
        field = NoiseField(np.random.default_rng(1))
        result = synthesize_elevation(40, 25, field)
        assert result.shape == (25, 40)

    @pytest.mark.parametrize("seed", [0, 1, 42, 999])
    def test_bounded_and_nan_free(self, seed: int) -> None:
        """Every cell lies in [0, 1.2] and is finite."""
        field = NoiseField(np.random.default_rng(seed))
        result = synthesize_elevation(60, 60, field, scale=0.05)
        assert np.all(np.isfinite(result))
        assert result.min() >= 0.0
        assert result.max() <= 1.2

    def test_deterministic_with_same_seed(self) -> None:
        """Same seed produces identical elevation."""
        a = synthesize_elevation(32, 32, NoiseField(np.random.default_rng(8)))
        b = synthesize_elevation(32, 32, NoiseField(np.random.default_rng(8)))
        np.testing.assert_array_equal(a, b)

    @pytest.mark.parametrize("width,height", [(2, 10), (10, 2), (0, 0), (1, 1)])
    def test_too_small_raises(self, width: int, height: int) -> None:
        """Grids smaller than 3x3 are rejected."""
        field = NoiseField(np.random.default_rng(0))
        with pytest.raises(ConfigurationError):
            synthesize_elevation(width, height, field)

    def test_minimum_grid(self) -> None:
        """A 3x3 grid is accepted."""
        field = NoiseField(np.random.default_rng(0))
        assert synthesize_elevation(3, 3, field).shape == (3, 3)

    def test_multiplier_scales_output(self) -> None:
        """Height multiplier scales the whole grid linearly."""
        field = NoiseField(np.random.default_rng(6))
        one = synthesize_elevation(20, 20, field, scale=0.1, height_multiplier=1.0)
        two = synthesize_elevation(20, 20, field, scale=0.1, height_multiplier=2.0)
        np.testing.assert_allclose(two, 2.0 * one)

    def test_make_elevation_uses_config(self) -> None:
        """Config wrapper matches the explicit call."""
        config = NoiseConfig(octaves=3, persistence=0.6, scale=0.02)
        field = NoiseField(np.random.default_rng(5))
        expected = synthesize_elevation(
            30, 20, field, octaves=3, persistence=0.6, scale=0.02
        )
        np.testing.assert_array_equal(make_elevation(30, 20, field, config), expected)


class TestGaussianBlurInterior:
    """Tests for the interior-only blur."""

    def test_kernel_sums_to_one(self) -> None:
        """Blur weights form a convex combination."""
        assert GAUSSIAN_KERNEL.sum() == pytest.approx(1.0)

    def test_border_untouched(self) -> None:
        """Border rows and columns pass through unchanged."""
        data = np.random.default_rng(0).random((8, 9))
        result = gaussian_blur_interior(data)
        np.testing.assert_array_equal(result[0, :], data[0, :])
        np.testing.assert_array_equal(result[-1, :], data[-1, :])
        np.testing.assert_array_equal(result[:, 0], data[:, 0])
        np.testing.assert_array_equal(result[:, -1], data[:, -1])

    def test_impulse_spreads_kernel(self) -> None:
        """A single spike in the interior spreads into the kernel shape."""
        data = np.zeros((5, 5))
        data[2, 2] = 1.0
        result = gaussian_blur_interior(data)
        np.testing.assert_allclose(result[1:4, 1:4], GAUSSIAN_KERNEL)

    def test_interior_weighted_average(self) -> None:
        """An interior cell is the weighted sum of its 3x3 neighbourhood."""
        data = np.random.default_rng(3).random((6, 6))
        result = gaussian_blur_interior(data)
        expected = float((data[1:4, 2:5] * GAUSSIAN_KERNEL).sum())
        assert result[2, 3] == pytest.approx(expected)

    def test_input_not_modified(self) -> None:
        """Blur returns a new array."""
        data = np.random.default_rng(1).random((5, 5))
        original = data.copy()
        gaussian_blur_interior(data)
        np.testing.assert_array_equal(data, original)

    def test_constant_preserved(self) -> None:
        """Constant input stays constant."""
        data = np.full((6, 7), 0.4)
        np.testing.assert_allclose(gaussian_blur_interior(data), data)


class TestFuelDensity:
    """Tests for fuel density."""

    def test_non_fuel_classes_zero(self) -> None:
        """Water, snow and unclassified cells carry no fuel."""
        field = NoiseField(np.random.default_rng(0))
        elevation = np.full((4, 4), 0.05)
        classification = np.zeros((4, 4), dtype=np.uint8)  # Water
        classification[0, 0] = 2  # Snow
        classification[1, 1] = UNCLASSIFIED
        density = make_fuel_density(field, elevation, classification, LAND_CLASSES)
        np.testing.assert_array_equal(density, np.zeros((4, 4)))

    def test_forest_floor_of_half(self) -> None:
        """Forest fuel scales noise by at least 0.5."""
        field = NoiseField(np.random.default_rng(0))
        elevation = np.full((10, 10), 0.35)
        classification = np.full((10, 10), 3, dtype=np.uint8)  # Conifer forest
        density = make_fuel_density(field, elevation, classification, LAND_CLASSES)

        ys, xs = np.mgrid[0:10, 0:10]
        expected = 0.5 * field.sample_unit(xs * 0.01, ys * 0.01)
        np.testing.assert_allclose(density, expected)

    def test_grassland_uses_elevation(self) -> None:
        """Open fuel uses elevation when it exceeds 0.3."""
        field = NoiseField(np.random.default_rng(0))
        elevation = np.full((6, 6), 0.75)
        classification = np.full((6, 6), 7, dtype=np.uint8)  # Grassland
        density = make_fuel_density(field, elevation, classification, LAND_CLASSES)

        ys, xs = np.mgrid[0:6, 0:6]
        expected = 0.75 * field.sample_unit(xs * 0.02, ys * 0.02)
        np.testing.assert_allclose(density, expected)
