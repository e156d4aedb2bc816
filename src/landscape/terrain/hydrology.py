"""Hydrology: threshold lakes and steepest-descent rivers."""

import logging

import numpy as np
from numpy.typing import NDArray

from ..exceptions import ConfigurationError
from ..types import RiverPath, RiverSample
from .config import HydrologyConfig

logger = logging.getLogger(__name__)

# 8-connected neighbour offsets (dx, dy); on ties the earlier entry wins
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
    (-1, -1),
    (1, 1),
    (-1, 1),
    (1, -1),
)


def lake_mask(
    elevation: NDArray[np.float64],
    threshold: float = 0.2,
) -> NDArray[np.bool_]:
    """Boolean mask of cells at or below the lake threshold."""
    return elevation <= threshold


def check_hydrology_config(config: HydrologyConfig) -> None:
    """Reject river counts and step caps that cannot be honoured.

    Raises:
        ConfigurationError: If a count or cap is negative.
    """
    if config.max_rivers < 0:
        raise ConfigurationError(f"Max rivers must be >= 0, got {config.max_rivers}")
    if config.max_river_steps is not None and config.max_river_steps < 0:
        raise ConfigurationError(
            f"Max river steps must be >= 0, got {config.max_river_steps}"
        )
    if config.source_grid < 1:
        raise ConfigurationError(
            f"River source grid must be >= 1, got {config.source_grid}"
        )


class HydrologyBuilder:
    """Derives lakes and rivers from an elevation grid.

    Lakes are every cell at or below ``lake_threshold``. Rivers start from
    the highest mid-elevation cells of a coarse grid and walk to the lowest
    8-neighbour until no neighbour is strictly lower.
    """

    def __init__(
        self,
        elevation: NDArray[np.float64],
        rng: np.random.Generator,
        config: HydrologyConfig | None = None,
    ):
        """Initialize builder.

        Args:
            elevation: Elevation grid of shape (height, width). Not modified.
            rng: Random number generator for river width jitter.
            config: Hydrology parameters.

        Raises:
            ConfigurationError: If a count or cap is negative.
        """
        self.config = config or HydrologyConfig()
        check_hydrology_config(self.config)
        self.elevation = elevation
        self.height, self.width = elevation.shape
        self.rng = rng

    @property
    def max_steps(self) -> int:
        if self.config.max_river_steps is not None:
            return self.config.max_river_steps
        return self.width + self.height

    def build_lakes(self) -> frozenset[tuple[int, int]]:
        """Cells at or below the lake threshold.

        Returns:
            Set of (x, y) lake cells.
        """
        ys, xs = np.nonzero(lake_mask(self.elevation, self.config.lake_threshold))
        return frozenset(zip(xs.tolist(), ys.tolist()))

    def identify_river_sources(self) -> list[tuple[int, int]]:
        """Candidate river sources, highest first.

        Samples a ``source_grid`` x ``source_grid`` lattice over the grid and
        keeps cells strictly between the lake threshold and
        ``source_max_elevation``.

        Returns:
            List of (x, y) candidates sorted by descending elevation.
        """
        step_y = max(1, self.height // self.config.source_grid)
        step_x = max(1, self.width // self.config.source_grid)
        low = self.config.lake_threshold
        high = self.config.source_max_elevation

        candidates = []
        for y in range(0, self.height, step_y):
            for x in range(0, self.width, step_x):
                value = self.elevation[y, x]
                if low < value < high:
                    candidates.append((x, y))

        # Stable: equal elevations keep scan order
        return sorted(candidates, key=lambda c: -float(self.elevation[c[1], c[0]]))

    def _lowest_neighbor(self, x: int, y: int) -> tuple[int, int]:
        best_x, best_y = x, y
        best = self.elevation[y, x]
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                value = self.elevation[ny, nx]
                # NaN never compares lower
                if value < best:
                    best_x, best_y, best = nx, ny, value
        return best_x, best_y

    def trace_river(self, source: tuple[int, int]) -> RiverPath:
        """Walk downhill from a source.

        Each step moves to the lowest 8-neighbour and stops once no
        neighbour is strictly lower. The walk is capped at ``max_steps``
        moves; a capped river is marked dissipated. River width starts in
        [1, 3) and is multiplied by a factor in [0.9, 1.1] per step, never
        dropping below 1.

        Args:
            source: (x, y) source cell.

        Returns:
            RiverPath from source to terminus.
        """
        x, y = source
        width = self.rng.random() * 2 + 1
        samples = [RiverSample(x=x, y=y, width=width)]
        dissipated = False

        steps = 0
        while True:
            nx, ny = self._lowest_neighbor(x, y)
            if (nx, ny) == (x, y):
                break
            if steps >= self.max_steps:
                dissipated = True
                break
            width = max(1.0, width * (0.9 + self.rng.random() * 0.2))
            x, y = nx, ny
            samples.append(RiverSample(x=x, y=y, width=width))
            steps += 1

        if dissipated:
            logger.debug(f"River from {source} dissipated after {steps} steps")

        return RiverPath(samples=tuple(samples), dissipated=dissipated)

    def build_rivers(self) -> list[RiverPath]:
        """Trace up to ``max_rivers`` rivers from the best sources.

        Returns:
            River paths, most prominent source first.
        """
        sources = self.identify_river_sources()[: self.config.max_rivers]
        return [self.trace_river(source) for source in sources]
