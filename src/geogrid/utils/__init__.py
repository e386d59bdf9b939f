"""Utility functions for the bounding-box grid."""

from .logging import get_logger
from .config import load_config
from .geodesy import haversine_miles, distance_miles

__all__ = ["get_logger", "load_config", "haversine_miles", "distance_miles"]
