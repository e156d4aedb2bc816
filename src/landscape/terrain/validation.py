"""Post-generation validation of terrain invariants."""

import logging

import numpy as np

from ..land_classes import UNCLASSIFIED
from ..types import RoadEdge
from .generator import GenerationResult

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of terrain validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


class UnionFind:
    """Disjoint sets over 0..n-1 with path halving."""

    def __init__(self, size: int) -> None:
        self.parent = list(range(size))
        self.components = size

    def find(self, item: int) -> int:
        while self.parent[item] != item:
            self.parent[item] = self.parent[self.parent[item]]
            item = self.parent[item]
        return item

    def union(self, a: int, b: int) -> bool:
        """Merge the sets of a and b. Returns False if already merged."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        self.parent[root_b] = root_a
        self.components -= 1
        return True


def is_spanning_tree(point_count: int, edges: tuple[RoadEdge, ...] | list[RoadEdge]) -> bool:
    """Whether edges form a connected acyclic graph over all points."""
    if point_count == 0:
        return not edges
    if len(edges) != point_count - 1:
        return False
    sets = UnionFind(point_count)
    for edge in edges:
        if not (0 <= edge.from_index < point_count and 0 <= edge.to_index < point_count):
            return False
        if not sets.union(edge.from_index, edge.to_index):
            return False
    return sets.components == 1


def validate_terrain(result: GenerationResult) -> ValidationResult:
    """Validate generated terrain against its invariants.

    Args:
        result: Output of a generation pass.

    Returns:
        ValidationResult with any errors/warnings.
    """
    validation = ValidationResult()

    _check_grid_shapes(result, validation)
    _check_elevation(result, validation)
    _check_road_tree(result, validation)
    _check_classification(result, validation)
    _check_lakes(result, validation)
    _check_rivers(result, validation)

    if validation.passed:
        logger.info("Terrain validation passed")
    else:
        logger.warning(f"Terrain validation failed with {len(validation.errors)} errors")
        for error in validation.errors:
            logger.error(f"  - {error}")

    for warning in validation.warnings:
        logger.warning(f"  - {warning}")

    return validation


def _check_grid_shapes(result: GenerationResult, validation: ValidationResult) -> None:
    """Check every grid shares the elevation extent."""
    expected = result.elevation.shape
    grids = {
        "classification": result.classification,
        "fuel_density": result.fuel_density,
        "road_mask": result.road_mask,
    }
    for name, grid in grids.items():
        if grid.shape != expected:
            validation.add_error(f"{name} shape {grid.shape} != elevation shape {expected}")


def _check_elevation(result: GenerationResult, validation: ValidationResult) -> None:
    """Check elevation is finite and within the shaped range."""
    elevation = result.elevation
    if not np.all(np.isfinite(elevation)):
        validation.add_error("Elevation contains NaN or infinite values")
        return
    upper = result.config.noise.height_multiplier
    if elevation.min() < 0.0 or elevation.max() > upper + 1e-9:
        validation.add_error(
            f"Elevation range [{elevation.min():.3f}, {elevation.max():.3f}] "
            f"outside [0, {upper}]"
        )


def _check_road_tree(result: GenerationResult, validation: ValidationResult) -> None:
    """Check the road edges span all points without cycles."""
    network = result.road_network
    if not is_spanning_tree(len(network.points), network.edges):
        validation.add_error(
            f"Road edges ({len(network.edges)}) do not form a spanning tree "
            f"over {len(network.points)} points"
        )
    requested = result.config.roads.point_count
    if result.config.classification.include_urban and len(network.points) < requested:
        validation.add_warning(
            f"Only {len(network.points)} of {requested} road points were placed"
        )


def _check_classification(result: GenerationResult, validation: ValidationResult) -> None:
    """Warn about cells no class covers."""
    unclassified = int(np.sum(result.classification == UNCLASSIFIED))
    if unclassified:
        validation.add_warning(
            f"{unclassified} cells are above every active land-class bound"
        )


def _check_lakes(result: GenerationResult, validation: ValidationResult) -> None:
    """Check lake cells are in bounds and below the threshold."""
    threshold = result.config.hydrology.lake_threshold
    bad = 0
    for x, y in result.lakes:
        if not (0 <= x < result.width and 0 <= y < result.height):
            bad += 1
        elif result.elevation[y, x] > threshold:
            bad += 1
    if bad:
        validation.add_error(f"{bad} lake cells are out of bounds or above threshold")


def _check_rivers(result: GenerationResult, validation: ValidationResult) -> None:
    """Check every river strictly descends."""
    for i, river in enumerate(result.rivers):
        heights = [result.elevation[s.y, s.x] for s in river.samples]
        if any(b >= a for a, b in zip(heights, heights[1:])):
            validation.add_error(f"River {i} does not strictly descend")
        if river.dissipated:
            validation.add_warning(f"River {i} hit the step cap and dissipated")
