"""Procedural landscape synthesis core."""

from .exceptions import BuildStateError, ConfigurationError, LandscapeError
from .land_classes import (
    LAND_CLASSES,
    UNCLASSIFIED,
    LandClass,
    active_land_classes,
)
from .types import Building, RiverPath, RiverSample, RoadEdge, RoadPoint

__all__ = [
    # Types
    "RoadPoint",
    "RoadEdge",
    "Building",
    "RiverSample",
    "RiverPath",
    # Land classes
    "LandClass",
    "LAND_CLASSES",
    "UNCLASSIFIED",
    "active_land_classes",
    # Exceptions
    "LandscapeError",
    "ConfigurationError",
    "BuildStateError",
]
