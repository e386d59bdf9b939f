"""Tiling package.

This package contains the adaptive tiling algorithm: the grid tiler that
walks a study area and resizes the column width per row, and the default
offset policy that seeds it.
"""

from .offsets import default_offset, default_long_offset, estimate_box_count
from .grid_tiler import GridTiler, TilingParameters

__all__ = [
    "default_offset",
    "default_long_offset",
    "estimate_box_count",
    "GridTiler",
    "TilingParameters",
]
