"""Great-circle distance between two WGS84 coordinates."""

from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_M


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two points given in decimal degrees.

    Uses the Haversine formula on a sphere of radius ``EARTH_RADIUS_M``.
    Inputs are not range-checked.

    Example:
        >>> round(haversine_distance(0.0, 0.0, 0.0, 1.0))
        111195
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c
