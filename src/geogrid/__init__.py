"""Break a rectangular geographic area into ~25-mile bounding boxes.

The walk starts in the south-west corner, marches east, then moves up a
row and repeats.  Each row's column width is resized so that a box is
about the same number of miles wide at any latitude.

Quick start:
    from geogrid import GridTiler, StudyArea, default_offset

    area = StudyArea(west=-109, south=37, east=-102, north=41)
    boxes = GridTiler().tile(area, default_offset(area))
"""

from .exceptions import (
    GeoGridError,
    InvalidStudyAreaError,
    InvalidOffsetError,
    MalformedNumericInputError,
    ConfigurationError,
    NonConvergenceError,
)
from .geometry import GeoPoint, BoundingBox, StudyArea, Offset
from .utils.geodesy import distance_miles
from .tiling import GridTiler, TilingParameters, default_offset
from .config import RunConfig, build_run_config
from .pipeline import BoxGridPipeline

__version__ = "1.0.0"
__all__ = [
    "GeoGridError",
    "InvalidStudyAreaError",
    "InvalidOffsetError",
    "MalformedNumericInputError",
    "ConfigurationError",
    "NonConvergenceError",
    "GeoPoint",
    "BoundingBox",
    "StudyArea",
    "Offset",
    "distance_miles",
    "GridTiler",
    "TilingParameters",
    "default_offset",
    "RunConfig",
    "build_run_config",
    "BoxGridPipeline",
]
