"""Default row/column offsets for a study area.

The defaults are empirical and were tuned on the continental US: a row
height of 0.35 degrees and a column width of 0.45 degrees.  Near the
equator a degree of longitude is wider, so the column width drops to
0.35; near the poles it is much narrower, so the column width jumps to 3.
The first row's width is only a starting point; every later row is
resized by the tiler.
"""

import math
from typing import Optional, Tuple

from ..geometry import Offset, StudyArea

DEFAULT_LAT_OFFSET = 0.35
DEFAULT_LONG_OFFSET = 0.45
EQUATORIAL_LONG_OFFSET = 0.35
POLAR_LONG_OFFSET = 3.0

EQUATORIAL_LATITUDE = 15.0
POLAR_LATITUDE = 80.0


def default_long_offset(area: StudyArea) -> float:
    """Pick the starting column width from the latitude band of ``area``."""
    long_offset = DEFAULT_LONG_OFFSET
    if abs(area.north) < EQUATORIAL_LATITUDE or abs(area.south) < EQUATORIAL_LATITUDE:
        long_offset = EQUATORIAL_LONG_OFFSET
    # Polar wins when an area spans both bands
    if abs(area.north) > POLAR_LATITUDE or abs(area.south) > POLAR_LATITUDE:
        long_offset = POLAR_LONG_OFFSET
    return long_offset


def default_offset(
    area: StudyArea,
    lat_override: Optional[float] = None,
    long_override: Optional[float] = None,
) -> Offset:
    """Return the initial offset for ``area``, honouring explicit overrides.

    Parameters
    ----------
    area : StudyArea
        Area to tile.
    lat_override, long_override : float, optional
        Explicit row height / column width in degrees.

    Returns
    -------
    Offset
        Initial offset.  ``Offset`` raises ``InvalidOffsetError`` for
        non-positive values.
    """
    lat = DEFAULT_LAT_OFFSET if lat_override is None else lat_override
    long = default_long_offset(area) if long_override is None else long_override
    return Offset(lat=lat, long=long)


def estimate_box_count(area: StudyArea, offset: Offset) -> Tuple[int, int]:
    """Estimate ``(rows, columns)`` for a tiling run.

    Only used for logging and progress reporting; the real count differs
    once the column width is resized per row.
    """
    columns = math.ceil(abs(area.west - area.east) / offset.long)
    rows = math.ceil((area.north - area.south) / offset.lat)
    return rows, columns
