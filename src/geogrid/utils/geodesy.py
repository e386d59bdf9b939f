"""Geodesic utilities.

Provides the haversine formula to compute great-circle distances between
latitude/longitude coordinates on a spherical Earth.  Distances are
returned in statute miles because the tiling target (~25 miles per box)
is expressed in miles.
"""

from typing import Union

import numpy as np

from ..geometry import GeoPoint

EARTH_RADIUS_MILES = 3963.19
"""Mean Earth radius used by the spherical approximation."""

ArrayLike = Union[float, np.ndarray]


def haversine_miles(lat1: ArrayLike, lon1: ArrayLike, lat2: ArrayLike, lon2: ArrayLike) -> ArrayLike:
    """Compute the great‑circle distance between two points on Earth.

    Works on scalars and on numpy arrays of equal shape.

    Parameters
    ----------
    lat1, lon1 : float or numpy.ndarray
        Latitude and longitude of point 1 in degrees.
    lat2, lon2 : float or numpy.ndarray
        Latitude and longitude of point 2 in degrees.

    Returns
    -------
    float or numpy.ndarray
        Distance in miles.  A float is returned for scalar input.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = np.radians(np.subtract(lat2, lat1))
    dlambda = np.radians(np.subtract(lon2, lon1))
    a = np.sin(dphi / 2)**2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlambda / 2)**2
    # Rounding can push a just outside [0, 1] for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = EARTH_RADIUS_MILES * c
    if np.ndim(distance) == 0:
        return float(distance)
    return distance


def distance_miles(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance in miles between two points."""
    return haversine_miles(p1.latitude, p1.longitude, p2.latitude, p2.longitude)
