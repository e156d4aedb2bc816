"""Land-cover classes and the canonical classification table."""

from pydantic import BaseModel

# Class id written for cells no active class covers (NaN, above every bound)
UNCLASSIFIED = 255
UNCLASSIFIED_COLOR: tuple[int, int, int] = (0, 0, 0)


class LandClass(BaseModel, frozen=True):
    """Elevation bucket with display colour.

    A cell belongs to the first class (in table order) whose upper bound is
    at least the cell's elevation.
    """

    upper_bound: float
    color: tuple[int, int, int]
    name: str

    @classmethod
    def from_hex(cls, upper_bound: float, color: str, name: str) -> "LandClass":
        """Build a class from a ``#RRGGBB`` colour string."""
        value = color.lstrip("#")
        rgb = (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))
        return cls(upper_bound=upper_bound, color=rgb, name=name)

    @property
    def hex_color(self) -> str:
        r, g, b = self.color
        return f"#{r:02X}{g:02X}{b:02X}"


WATER = "Water"
SNOW = "Snow"
URBAN = "Urban/Road Networks"

# Names used by the fuel density layer
FOREST_CLASSES = frozenset({
    "Conifer Forest (Xeric-Mesic)",
    "Conifer Forest (Mesic-Wet)",
    "Mixed Deciduous/Coniferous Forest",
})
OPEN_FUEL_CLASSES = frozenset({
    "Shrubland",
    "Grassland",
})

LAND_CLASSES: tuple[LandClass, ...] = (
    LandClass.from_hex(0.1, "#00008B", WATER),
    LandClass.from_hex(0.2, "#A9A9A9", "Alpine Sparse and Barren"),
    LandClass.from_hex(0.3, "#FFFFFF", SNOW),
    LandClass.from_hex(0.4, "#228B22", "Conifer Forest (Xeric-Mesic)"),
    LandClass.from_hex(0.5, "#66CDAA", "Conifer Forest (Mesic-Wet)"),
    LandClass.from_hex(0.6, "#006400", "Mixed Deciduous/Coniferous Forest"),
    LandClass.from_hex(0.7, "#D2B48C", "Shrubland"),
    LandClass.from_hex(0.8, "#F5DEB3", "Grassland"),
    LandClass.from_hex(0.9, "#ADD8E6", "Rivers"),
    LandClass.from_hex(1.0, "#FF0000", URBAN),
)


def active_land_classes(
    include_snow: bool = True,
    include_urban: bool = True,
) -> tuple[LandClass, ...]:
    """Filter the canonical table, preserving order.

    Args:
        include_snow: Keep the Snow class.
        include_urban: Keep the Urban/Road Networks class.

    Returns:
        Order-preserving subsequence of LAND_CLASSES.
    """
    excluded = set()
    if not include_snow:
        excluded.add(SNOW)
    if not include_urban:
        excluded.add(URBAN)
    return tuple(c for c in LAND_CLASSES if c.name not in excluded)


def class_id_for(classes: tuple[LandClass, ...], name: str) -> int | None:
    """Position of the named class in an active table, or None."""
    for i, land_class in enumerate(classes):
        if land_class.name == name:
            return i
    return None
