"""Road network: settlement sampling and terrain-aware minimum spanning tree.

Points are spread by rejection sampling, then joined with Prim's algorithm
using a cost that adds accumulated elevation change to straight-line length.
"""

import heapq
import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..exceptions import BuildStateError, ConfigurationError
from ..types import RoadEdge, RoadPoint
from .config import RoadConfig

logger = logging.getLogger(__name__)


class BuildState(str, Enum):
    """Lifecycle of a RoadNetworkBuilder."""

    UNBUILT = "unbuilt"
    POINTS_GENERATED = "points_generated"
    TREE_BUILT = "tree_built"


@dataclass(frozen=True)
class RoadNetwork:
    """Spanning tree over settlement points.

    ``edges`` has ``len(points) - 1`` entries (none for zero or one point).
    """

    width: int
    height: int
    points: tuple[RoadPoint, ...]
    edges: tuple[RoadEdge, ...]
    main_road_fraction: float = 0.15

    @property
    def main_road_threshold(self) -> float:
        return min(self.width, self.height) * self.main_road_fraction

    def edge_length(self, edge: RoadEdge) -> float:
        """Straight-line length of an edge."""
        return self.points[edge.from_index].distance_to(self.points[edge.to_index])

    def is_main_road(self, edge: RoadEdge) -> bool:
        """Whether an edge is long enough to count as a main road."""
        return self.edge_length(edge) > self.main_road_threshold

    def main_roads(self) -> list[RoadEdge]:
        return [edge for edge in self.edges if self.is_main_road(edge)]

    def total_cost(self) -> float:
        return sum(edge.cost for edge in self.edges)


def _round_half_up(values: NDArray[np.float64]) -> NDArray[np.int64]:
    # Half-up rounding; np.round would round half to even
    return np.floor(values + 0.5).astype(np.int64)


def line_samples(
    start: RoadPoint, end: RoadPoint
) -> tuple[NDArray[np.int64], NDArray[np.int64]]:
    """Rounded cell coordinates along a straight segment.

    One sample per unit of the longer axis delta, start included. A
    zero-length segment yields just the start cell.

    Args:
        start: Segment start.
        end: Segment end.

    Returns:
        Tuple of (xs, ys) integer arrays, unclamped.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    steps = max(abs(dx), abs(dy))
    if steps == 0:
        return (
            _round_half_up(np.array([start.x])),
            _round_half_up(np.array([start.y])),
        )

    t = np.arange(int(math.floor(steps)) + 1, dtype=np.float64) / steps
    xs = _round_half_up(start.x + dx * t)
    ys = _round_half_up(start.y + dy * t)
    return xs, ys


def rasterize_roads(network: RoadNetwork) -> NDArray[np.bool_]:
    """Mark the cells each road edge passes through.

    Args:
        network: Road network.

    Returns:
        Boolean mask of shape (height, width); out-of-bounds samples are
        dropped.
    """
    mask = np.zeros((network.height, network.width), dtype=bool)
    for edge in network.edges:
        xs, ys = line_samples(network.points[edge.from_index], network.points[edge.to_index])
        valid = (xs >= 0) & (ys >= 0) & (xs < network.width) & (ys < network.height)
        mask[ys[valid], xs[valid]] = True
    return mask


class RoadNetworkBuilder:
    """Builds a RoadNetwork over an elevation grid.

    Goes UNBUILT -> POINTS_GENERATED -> TREE_BUILT. ``build`` runs both
    steps; the individual steps are exposed for inspection and testing.
    """

    def __init__(
        self,
        elevation: NDArray[np.float64],
        rng: np.random.Generator,
        config: RoadConfig | None = None,
    ):
        """Initialize builder.

        Args:
            elevation: Elevation grid of shape (height, width).
            rng: Random number generator used for point sampling.
            config: Road parameters.

        Raises:
            ConfigurationError: If the point count or attempt limit is not
                positive.
        """
        self.config = config or RoadConfig()
        if self.config.point_count < 1:
            raise ConfigurationError(
                f"Road point count must be >= 1, got {self.config.point_count}"
            )
        if self.config.max_attempts < 1:
            raise ConfigurationError(
                f"Road sampling attempts must be >= 1, got {self.config.max_attempts}"
            )
        self.elevation = elevation
        self.height, self.width = elevation.shape
        self.rng = rng
        self.state = BuildState.UNBUILT
        self.points: list[RoadPoint] = []
        self.edges: list[RoadEdge] = []

    def generate_points(self) -> list[RoadPoint]:
        """Sample settlement points with a minimum spacing.

        Spacing is ``width / point_count``. A slot whose candidates all fail
        within ``max_attempts`` is skipped, so fewer points than requested
        may come back.

        Returns:
            Accepted points, in acceptance order.
        """
        if self.state is not BuildState.UNBUILT:
            raise BuildStateError(f"Points already generated (state={self.state.value})")

        min_dist = self.width / self.config.point_count
        points: list[RoadPoint] = []

        for _ in range(self.config.point_count):
            for _ in range(self.config.max_attempts):
                x = self.rng.random() * self.width
                y = self.rng.random() * self.height
                if all(math.hypot(p.x - x, p.y - y) >= min_dist for p in points):
                    points.append(RoadPoint(x=x, y=y))
                    break

        if len(points) < self.config.point_count:
            logger.debug(
                f"Accepted {len(points)} of {self.config.point_count} road points"
            )

        self.points = points
        self.state = BuildState.POINTS_GENERATED
        return points

    def use_points(self, points: list[RoadPoint]) -> None:
        """Supply points directly instead of sampling them."""
        if self.state is not BuildState.UNBUILT:
            raise BuildStateError(f"Points already generated (state={self.state.value})")
        self.points = list(points)
        self.state = BuildState.POINTS_GENERATED

    def _clamped_cell(self, x: float, y: float) -> tuple[int, int]:
        cx = min(max(int(math.floor(x + 0.5)), 0), self.width - 1)
        cy = min(max(int(math.floor(y + 0.5)), 0), self.height - 1)
        return cx, cy

    def terrain_aware_distance(self, a: RoadPoint, b: RoadPoint) -> float:
        """Straight-line length plus penalized elevation change.

        Samples the segment from a to b (clamped to the grid) and sums the
        absolute elevation difference between each sample and the cell at
        a. On flat terrain this equals the Euclidean distance.

        Args:
            a: Start point.
            b: End point.

        Returns:
            Edge cost.
        """
        xs, ys = line_samples(a, b)
        xs = np.clip(xs, 0, self.width - 1)
        ys = np.clip(ys, 0, self.height - 1)
        ax, ay = self._clamped_cell(a.x, a.y)

        change = float(np.abs(self.elevation[ys, xs] - self.elevation[ay, ax]).sum())
        return math.hypot(b.x - a.x, b.y - a.y) + change * self.config.elevation_penalty

    def build_tree(self) -> list[RoadEdge]:
        """Join the points with Prim's minimum spanning tree.

        Starts at point 0 and repeatedly takes the cheapest frontier edge
        to an unvisited point. Equal costs resolve in favour of the edge
        that entered the frontier first.

        Returns:
            Tree edges in insertion order.
        """
        if self.state is BuildState.UNBUILT:
            raise BuildStateError("Road points must be generated before building the tree")
        if self.state is BuildState.TREE_BUILT:
            raise BuildStateError("Road tree already built")

        points = self.points
        edges: list[RoadEdge] = []

        if points:
            visited = {0}
            # Frontier entries: (cost, insertion order, from, to)
            frontier: list[tuple[float, int, int, int]] = []
            counter = 0

            def expand(source: int) -> None:
                nonlocal counter
                for target in range(len(points)):
                    if target not in visited:
                        cost = self.terrain_aware_distance(points[source], points[target])
                        heapq.heappush(frontier, (cost, counter, source, target))
                        counter += 1

            expand(0)
            while len(visited) < len(points) and frontier:
                cost, _, source, target = heapq.heappop(frontier)
                if target in visited:
                    continue
                visited.add(target)
                edges.append(RoadEdge(from_index=source, to_index=target, cost=cost))
                expand(target)

        self.edges = edges
        self.state = BuildState.TREE_BUILT
        return edges

    def network(self) -> RoadNetwork:
        """Freeze the built tree into a RoadNetwork."""
        if self.state is not BuildState.TREE_BUILT:
            raise BuildStateError(f"Road tree not built (state={self.state.value})")
        return RoadNetwork(
            width=self.width,
            height=self.height,
            points=tuple(self.points),
            edges=tuple(self.edges),
            main_road_fraction=self.config.main_road_fraction,
        )

    def build(self) -> RoadNetwork:
        """Sample points, build the tree and return the network."""
        self.generate_points()
        self.build_tree()
        return self.network()


def generate_road_network(
    elevation: NDArray[np.float64],
    rng: np.random.Generator,
    config: RoadConfig | None = None,
) -> RoadNetwork:
    """Build a road network over an elevation grid.

    Args:
        elevation: Elevation grid.
        rng: Random number generator.
        config: Road parameters.

    Returns:
        RoadNetwork whose edges form a spanning tree of its points.
    """
    return RoadNetworkBuilder(elevation, rng, config).build()
