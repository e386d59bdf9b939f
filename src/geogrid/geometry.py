"""Value records for the bounding-box grid.

All records except the walking cursor are frozen dataclasses so that a
box appended to a result list can never be changed through another
reference.  ``TilingState`` is the only mutable record; it is owned by
the tiler and turned into ``BoundingBox`` values with ``snapshot``.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Tuple

from .exceptions import InvalidOffsetError, InvalidStudyAreaError, MalformedNumericInputError

RULE_FORMAT = "bounding_box:[%3.5f %3.5f %3.5f %3.5f]"
"""Rule syntax: west, south, east, north at five decimals."""


def parse_coordinate(value: Any, name: str) -> float:
    """Coerce a raw coordinate or offset value to ``float``.

    Parameters
    ----------
    value : Any
        Raw value from the command line, a config file or a rules file.
    name : str
        Field name used in the error message.

    Returns
    -------
    float
        The parsed, finite value.

    Raises
    ------
    MalformedNumericInputError
        If the value is not numeric or not finite.
    """
    if isinstance(value, bool):
        raise MalformedNumericInputError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedNumericInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise MalformedNumericInputError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class GeoPoint:
    """A longitude/latitude pair in decimal degrees."""
    longitude: float
    latitude: float


@dataclass(frozen=True)
class BoundingBox:
    """An axis-aligned box in longitude/latitude space."""

    west: float
    south: float
    east: float
    north: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return ``(west, south, east, north)``."""
        return (self.west, self.south, self.east, self.north)

    def to_rule_value(self) -> str:
        """Format the box as a ``bounding_box:[w s e n]`` rule."""
        return RULE_FORMAT % self.as_tuple()

    @property
    def south_west(self) -> GeoPoint:
        return GeoPoint(longitude=self.west, latitude=self.south)

    @property
    def south_east(self) -> GeoPoint:
        return GeoPoint(longitude=self.east, latitude=self.south)


@dataclass(frozen=True)
class StudyArea:
    """The outer rectangle that is partitioned into boxes."""

    west: float
    south: float
    east: float
    north: float

    def __post_init__(self):
        if self.west >= self.east:
            raise InvalidStudyAreaError(
                f"west ({self.west}) must be smaller than east ({self.east})"
            )
        if self.south >= self.north:
            raise InvalidStudyAreaError(
                f"south ({self.south}) must be smaller than north ({self.north})"
            )

    @classmethod
    def from_values(cls, west: Any, south: Any, east: Any, north: Any) -> "StudyArea":
        """Build a study area from raw input values.

        Values are coerced to floats and checked against the valid
        longitude ``[-180, 180]`` and latitude ``[-90, 90]`` ranges
        before the ordering checks in ``__post_init__`` run.

        Raises
        ------
        MalformedNumericInputError
            If a bound is missing or not numeric.
        InvalidStudyAreaError
            If a bound is out of range or the bounds are not ordered.
        """
        bounds = {}
        for name, value in (("west", west), ("south", south), ("east", east), ("north", north)):
            if value is None:
                raise MalformedNumericInputError(f"{name} bound is required")
            bounds[name] = parse_coordinate(value, name)

        for name in ("west", "east"):
            if not -180.0 <= bounds[name] <= 180.0:
                raise InvalidStudyAreaError(f"{name} ({bounds[name]}) is outside [-180, 180]")
        for name in ("south", "north"):
            if not -90.0 <= bounds[name] <= 90.0:
                raise InvalidStudyAreaError(f"{name} ({bounds[name]}) is outside [-90, 90]")

        return cls(**bounds)

    def max_abs_latitude(self) -> float:
        return max(abs(self.south), abs(self.north))

    def min_abs_latitude(self) -> float:
        return min(abs(self.south), abs(self.north))


@dataclass(frozen=True)
class Offset:
    """Row height (``lat``) and column width (``long``) in degrees."""

    lat: float
    long: float

    def __post_init__(self):
        if not self.lat > 0:
            raise InvalidOffsetError(f"latitude offset must be positive, got {self.lat}")
        if not self.long > 0:
            raise InvalidOffsetError(f"longitude offset must be positive, got {self.long}")

    def with_long(self, long: float) -> "Offset":
        """Return a copy with a new column width."""
        return replace(self, long=long)


@dataclass
class TilingState:
    """Walking cursor: the box currently being advanced across the area."""

    west: float
    east: float
    south: float
    north: float

    @classmethod
    def at_origin(cls, area: StudyArea, offset: Offset) -> "TilingState":
        """Seed the cursor at the south-west corner of ``area``."""
        return cls(
            west=area.west,
            east=area.west + offset.long,
            south=area.south,
            north=area.south + offset.lat,
        )

    def snapshot(self, area: StudyArea) -> BoundingBox:
        """Copy the cursor into a box, snapping north/east back into ``area``."""
        return BoundingBox(
            west=self.west,
            south=self.south,
            east=min(self.east, area.east),
            north=min(self.north, area.north),
        )
