"""Tests for saving and loading generated maps."""

import numpy as np
import pytest

from landscape.terrain.config import TerrainConfig
from landscape.terrain.generator import generate_terrain
from landscape.terrain.persistence import FORMAT_VERSION, load_map, save_map


class TestSaveLoad:
    """Tests for the .npz map format."""

    def test_roundtrip(self, small_config: TerrainConfig, temp_dir) -> None:
        """Loading a saved map restores every layer."""
        result = generate_terrain(small_config)
        path = temp_dir / "map.npz"
        save_map(path, result)
        loaded, metadata = load_map(path)

        np.testing.assert_array_equal(loaded.elevation, result.elevation)
        np.testing.assert_array_equal(loaded.classification, result.classification)
        np.testing.assert_array_equal(loaded.fuel_density, result.fuel_density)
        np.testing.assert_array_equal(loaded.road_mask, result.road_mask)
        assert loaded.classes == result.classes
        assert loaded.config == result.config
        assert loaded.road_network == result.road_network
        assert loaded.buildings == result.buildings
        assert loaded.lakes == result.lakes
        assert loaded.rivers == result.rivers
        assert metadata["version"] == FORMAT_VERSION
        assert metadata["seed"] == 7
        assert (metadata["width"], metadata["height"]) == (64, 48)

    def test_loaded_arrays_read_only(self, small_config: TerrainConfig, temp_dir) -> None:
        """Loaded grids are frozen like generated ones."""
        path = temp_dir / "map.npz"
        save_map(path, generate_terrain(small_config))
        loaded, _ = load_map(path)
        with pytest.raises(ValueError):
            loaded.elevation[0, 0] = 1.0

    def test_missing_file(self, temp_dir) -> None:
        """Loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_map(temp_dir / "nope.npz")

    def test_missing_layer(self, temp_dir) -> None:
        """Files without the required arrays are rejected."""
        path = temp_dir / "bad.npz"
        np.savez_compressed(path, elevation=np.zeros((3, 3)))
        with pytest.raises(ValueError, match="classification"):
            load_map(path)

    def test_suffix_appended(self, small_config: TerrainConfig, temp_dir) -> None:
        """A path without .npz is saved and reported with the suffix added."""
        result = generate_terrain(small_config)
        written = save_map(temp_dir / "map", result)
        assert written == temp_dir / "map.npz"
        assert written.exists()
        loaded, _ = load_map(written)
        np.testing.assert_array_equal(loaded.elevation, result.elevation)

    def test_other_suffix_kept(self, small_config: TerrainConfig, temp_dir) -> None:
        """A foreign suffix is kept and .npz appended after it."""
        written = save_map(temp_dir / "map.v2", generate_terrain(small_config))
        assert written.name == "map.v2.npz"
        assert written.exists()

    def test_load_closes_file(
        self, small_config: TerrainConfig, temp_dir, monkeypatch
    ) -> None:
        """load_map releases the archive handle before returning."""
        path = save_map(temp_dir / "map.npz", generate_terrain(small_config))
        opened = []
        real_load = np.load

        def tracking_load(*args, **kwargs):
            archive = real_load(*args, **kwargs)
            opened.append(archive)
            return archive

        monkeypatch.setattr(np, "load", tracking_load)
        loaded, _ = load_map(path)
        assert len(opened) == 1
        assert opened[0].zip is None
        assert loaded.classification.shape == (48, 64)
