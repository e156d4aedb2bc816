"""Tests for terrain validation."""

import numpy as np

from landscape.terrain.config import TerrainConfig
from landscape.terrain.generator import GenerationResult, generate_terrain
from landscape.terrain.roads import RoadNetwork
from landscape.terrain.validation import UnionFind, is_spanning_tree, validate_terrain
from landscape.types import RiverPath, RiverSample, RoadEdge, RoadPoint


def _edge(a: int, b: int) -> RoadEdge:
    return RoadEdge(from_index=a, to_index=b, cost=1.0)


def _replace(result: GenerationResult, **changes) -> GenerationResult:
    fields = {
        "config": result.config,
        "classes": result.classes,
        "elevation": result.elevation.copy(),
        "classification": result.classification.copy(),
        "fuel_density": result.fuel_density.copy(),
        "road_network": result.road_network,
        "road_mask": result.road_mask.copy(),
        "buildings": list(result.buildings),
        "lakes": result.lakes,
        "rivers": list(result.rivers),
    }
    fields.update(changes)
    return GenerationResult(**fields)


class TestUnionFind:
    """Tests for UnionFind."""

    def test_union_merges(self) -> None:
        """Union joins sets and reports redundant merges."""
        sets = UnionFind(4)
        assert sets.union(0, 1)
        assert sets.union(2, 3)
        assert sets.components == 2
        assert not sets.union(1, 0)
        assert sets.union(1, 3)
        assert sets.find(0) == sets.find(2)
        assert sets.components == 1


class TestIsSpanningTree:
    """Tests for is_spanning_tree."""

    def test_empty(self) -> None:
        """No points and no edges is a (trivial) tree."""
        assert is_spanning_tree(0, [])

    def test_single_point(self) -> None:
        """One point needs no edges."""
        assert is_spanning_tree(1, [])

    def test_path(self) -> None:
        """A simple path spans its points."""
        assert is_spanning_tree(3, [_edge(0, 1), _edge(1, 2)])

    def test_wrong_edge_count(self) -> None:
        """n points need exactly n - 1 edges."""
        assert not is_spanning_tree(3, [_edge(0, 1)])

    def test_cycle(self) -> None:
        """Right count but a cycle leaves a point out."""
        assert not is_spanning_tree(4, [_edge(0, 1), _edge(1, 2), _edge(2, 0)])

    def test_index_out_of_range(self) -> None:
        """Edges must reference existing points."""
        assert not is_spanning_tree(2, [_edge(0, 5)])


class TestValidateTerrain:
    """Tests for validate_terrain."""

    def test_generated_terrain_passes(self, small_config: TerrainConfig) -> None:
        """Freshly generated terrain has no errors."""
        validation = validate_terrain(generate_terrain(small_config))
        assert validation.passed
        assert validation.errors == []

    def test_broken_tree_fails(self, small_config: TerrainConfig) -> None:
        """Dropping an edge breaks the spanning tree."""
        result = generate_terrain(small_config)
        network = result.road_network
        broken = RoadNetwork(
            width=network.width,
            height=network.height,
            points=network.points + (RoadPoint(x=1.0, y=1.0),),
            edges=network.edges,
        )
        validation = validate_terrain(_replace(result, road_network=broken))
        assert not validation.passed
        assert any("spanning tree" in e for e in validation.errors)

    def test_nan_elevation_fails(self, small_config: TerrainConfig) -> None:
        """Non-finite elevation is an error."""
        result = generate_terrain(small_config)
        elevation = result.elevation.copy()
        elevation[0, 0] = np.nan
        validation = validate_terrain(_replace(result, elevation=elevation))
        assert not validation.passed

    def test_rising_river_fails(self, small_config: TerrainConfig) -> None:
        """A river that climbs is an error."""
        result = generate_terrain(small_config)
        elevation = result.elevation.copy()
        elevation[0, 0] = 0.1
        elevation[0, 1] = 0.3
        river = RiverPath(
            samples=(RiverSample(x=0, y=0, width=1.0), RiverSample(x=1, y=0, width=1.0))
        )
        validation = validate_terrain(
            _replace(result, elevation=elevation, rivers=[river], lakes=frozenset())
        )
        assert any("descend" in e for e in validation.errors)

    def test_dissipated_river_warns(self, small_config: TerrainConfig) -> None:
        """A capped river is a warning, not an error."""
        result = generate_terrain(small_config)
        elevation = result.elevation.copy()
        elevation[0, 0] = 0.3
        elevation[0, 1] = 0.25
        river = RiverPath(
            samples=(RiverSample(x=0, y=0, width=1.0), RiverSample(x=1, y=0, width=1.0)),
            dissipated=True,
        )
        validation = validate_terrain(
            _replace(result, elevation=elevation, rivers=[river], lakes=frozenset())
        )
        assert validation.passed
        assert any("dissipated" in w for w in validation.warnings)

    def test_bad_lake_fails(self, small_config: TerrainConfig) -> None:
        """Lake cells above the threshold are errors."""
        result = generate_terrain(small_config)
        elevation = result.elevation.copy()
        elevation[2, 3] = 0.9
        validation = validate_terrain(
            _replace(result, elevation=elevation, lakes=frozenset({(3, 2)}))
        )
        assert not validation.passed

    def test_shape_mismatch_fails(self, small_config: TerrainConfig) -> None:
        """Grids must share the elevation extent."""
        result = generate_terrain(small_config)
        validation = validate_terrain(
            _replace(result, fuel_density=np.zeros((3, 3)))
        )
        assert not validation.passed
