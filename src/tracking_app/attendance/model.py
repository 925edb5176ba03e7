from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceType, GeofenceStatus
from ..offices.model import OfficeLocation
from ..users.model import UserSummary


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in/out event. Immutable once stored."""

    attendance_id: int
    user_id: int
    office_id: int
    attendance_type: AttendanceType
    latitude: float
    longitude: float
    status: GeofenceStatus
    timestamp: datetime


@dataclass(frozen=True)
class AttendanceEntry:
    """Read-model for listings: the record joined with its office (and owner for reports)."""

    record: AttendanceRecord
    office: Optional[OfficeLocation] = None
    user: Optional[UserSummary] = None


@dataclass(frozen=True)
class CheckInResult:
    """What the recorder hands back: the stored record plus the geofence evaluation."""

    record: AttendanceRecord
    office: OfficeLocation
    within_geofence: bool
    distance: float
