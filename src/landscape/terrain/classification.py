"""Land-cover classification from elevation."""

import logging

import numpy as np
from numpy.typing import NDArray

from ..exceptions import ConfigurationError
from ..land_classes import UNCLASSIFIED, UNCLASSIFIED_COLOR, LandClass

logger = logging.getLogger(__name__)


def validate_land_classes(classes: tuple[LandClass, ...]) -> None:
    """Check that a class table can be used for classification.

    Args:
        classes: Active class table.

    Raises:
        ConfigurationError: If the table is empty, too large for uint8 ids,
            or its bounds decrease.
    """
    if not classes:
        raise ConfigurationError("Active land-class table is empty")
    if len(classes) >= UNCLASSIFIED:
        raise ConfigurationError(
            f"Too many land classes ({len(classes)}), ids must stay below {UNCLASSIFIED}"
        )

    bounds = [c.upper_bound for c in classes]
    for prev, curr in zip(bounds, bounds[1:]):
        if curr < prev:
            raise ConfigurationError(
                f"Land-class bounds must be non-decreasing, got {prev} then {curr}"
            )

    if bounds[-1] < 1.0:
        logger.warning(
            f"Highest land-class bound {bounds[-1]} is below 1.0; "
            "cells above it will be unclassified"
        )


def classify_terrain(
    elevation: NDArray[np.float64],
    classes: tuple[LandClass, ...],
) -> NDArray[np.uint8]:
    """Classify each cell into a land class.

    A cell takes the first class whose upper bound is >= its elevation, so
    buckets are (previous bound, bound]. Cells above every bound, and NaN
    cells, get UNCLASSIFIED.

    Args:
        elevation: Elevation grid.
        classes: Active class table with non-decreasing bounds.

    Returns:
        2D array of class ids (positions in ``classes``) as uint8.
    """
    validate_land_classes(classes)

    bounds = np.array([c.upper_bound for c in classes], dtype=np.float64)

    # side="left" gives the first index with bound >= value; NaN sorts last
    ids = np.searchsorted(bounds, elevation, side="left")

    result = ids.astype(np.uint8)
    result[ids >= len(classes)] = UNCLASSIFIED
    return result


def resolve_colors(
    classification: NDArray[np.uint8],
    classes: tuple[LandClass, ...],
) -> NDArray[np.uint8]:
    """Map class ids to RGB colours.

    Args:
        classification: Class id grid.
        classes: Class table the ids index into.

    Returns:
        Array of shape (height, width, 3); unclassified cells are black.
    """
    palette = np.zeros((256, 3), dtype=np.uint8)
    palette[:] = UNCLASSIFIED_COLOR
    for i, land_class in enumerate(classes):
        palette[i] = land_class.color
    return palette[classification]


def class_histogram(
    classification: NDArray[np.uint8],
    classes: tuple[LandClass, ...],
) -> dict[str, int]:
    """Count cells per class name, including unclassified cells."""
    counts = np.bincount(classification.ravel(), minlength=256)
    histogram = {c.name: int(counts[i]) for i, c in enumerate(classes)}
    histogram["unclassified"] = int(counts[UNCLASSIFIED])
    return histogram
