from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class OfficeLocation:
    """Office geofence: a WGS84 center plus a radius in meters."""

    office_id: int
    name: str
    latitude: float
    longitude: float
    radius: float
    is_active: bool = True
    created_at: Optional[datetime] = None
