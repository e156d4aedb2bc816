"""Building footprint placement along road edges."""

import math

import numpy as np

from ..types import Building
from .config import BuildingConfig
from .roads import RoadNetwork


def place_buildings(
    network: RoadNetwork,
    rng: np.random.Generator,
    config: BuildingConfig | None = None,
) -> list[Building]:
    """Place candidate building footprints on both sides of every road.

    Each edge is cut into ``slot_length`` slots (at least one). At the
    middle of each slot two footprints sharing a random size are mirrored
    across the road, pushed out by half their width plus ``road_gap``.
    Footprints are independent; neighbouring slots may overlap.

    Args:
        network: Road network to line with buildings. Not modified.
        rng: Random number generator for footprint sizes.
        config: Placement parameters.

    Returns:
        Footprints in edge order, left side before right side per slot.
    """
    config = config or BuildingConfig()
    buildings: list[Building] = []

    for edge in network.edges:
        p1 = network.points[edge.from_index]
        p2 = network.points[edge.to_index]
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        length = math.hypot(dx, dy)

        slots = max(1, int(length // config.slot_length))
        angle = math.atan2(dy, dx)
        # Unit normal to the road
        perp_x = -math.sin(angle)
        perp_y = math.cos(angle)

        for i in range(slots):
            t = (i + 0.5) / slots
            mid_x = p1.x + dx * t
            mid_y = p1.y + dy * t

            b_width = config.slot_length * (
                config.size_min_fraction + rng.random() * config.size_jitter_fraction
            )
            b_height = config.slot_length * (
                config.size_min_fraction + rng.random() * config.size_jitter_fraction
            )
            offset = b_width / 2 + config.road_gap

            for side in (1.0, -1.0):
                buildings.append(
                    Building(
                        x=mid_x + side * perp_x * offset,
                        y=mid_y + side * perp_y * offset,
                        width=b_width,
                        height=b_height,
                        angle=angle,
                    )
                )

    return buildings
