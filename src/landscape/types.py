"""Core value types handed from the generation pipeline to a renderer."""

import math

from pydantic import BaseModel


class RoadPoint(BaseModel, frozen=True):
    """Immutable settlement point in grid coordinates."""

    x: float
    y: float

    def distance_to(self, other: "RoadPoint") -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def __str__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f})"


class RoadEdge(BaseModel, frozen=True):
    """A tree edge between two point indices.

    The cost is the terrain-aware distance at insertion time and is never
    recomputed afterwards.
    """

    from_index: int
    to_index: int
    cost: float


class Building(BaseModel, frozen=True):
    """Rotated rectangular footprint centred on (x, y)."""

    x: float
    y: float
    width: float
    height: float
    angle: float  # radians, aligned with the road


class RiverSample(BaseModel, frozen=True):
    """One step of a river path."""

    x: int
    y: int
    width: float


class RiverPath(BaseModel, frozen=True):
    """Ordered river samples from source to terminus.

    ``dissipated`` is set when the walk hit its step cap before reaching a
    local minimum.
    """

    samples: tuple[RiverSample, ...]
    dissipated: bool = False

    @property
    def source(self) -> RiverSample:
        return self.samples[0]

    @property
    def terminus(self) -> RiverSample:
        return self.samples[-1]

    def cells(self) -> list[tuple[int, int]]:
        """(x, y) cells visited, in order."""
        return [(s.x, s.y) for s in self.samples]

    def __len__(self) -> int:
        return len(self.samples)
