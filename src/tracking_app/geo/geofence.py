from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from .distance import haversine_distance


class GeofenceSite(Protocol):
    """Anything with a center and a radius (office locations satisfy this)."""

    @property
    def office_id(self) -> int: ...

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...

    @property
    def radius(self) -> float: ...


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeofenceMatch:
    office_id: int
    distance: float
    within_geofence: bool


def find_closest(point: GeoPoint, sites: Sequence[GeofenceSite]) -> Optional[GeofenceMatch]:
    """Nearest site to ``point`` and whether the point lies inside its radius.

    Linear scan in input order; on equal distances the first site wins.
    Returns None only when ``sites`` is empty. Sites are not filtered by
    activity here, callers pass the active ones.
    """
    closest: Optional[GeofenceSite] = None
    min_distance = float("inf")

    for site in sites:
        distance = haversine_distance(point.latitude, point.longitude, site.latitude, site.longitude)
        if distance < min_distance:
            min_distance = distance
            closest = site

    if closest is None:
        return None
    return GeofenceMatch(
        office_id=closest.office_id,
        distance=min_distance,
        within_geofence=min_distance <= float(closest.radius),
    )
