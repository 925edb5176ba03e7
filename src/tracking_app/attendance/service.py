from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local
from ..common.validators import require_float
from ..core.enums import AttendanceType, GeofenceStatus
from ..core.exceptions import ConfigurationError, ValidationError
from ..geo.geofence import GeoPoint, find_closest
from ..offices.repository import OfficeRepository
from .model import AttendanceEntry, CheckInResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: record geofenced check-in/out events and read them back.

    Off-site submissions are stored with status "Outside Geofence" rather than
    refused, so managers can review them.
    """

    def __init__(self, attendance: AttendanceRepository, offices: OfficeRepository):
        self._attendance = attendance
        self._offices = offices

    @staticmethod
    def parse_type(value: Any) -> AttendanceType:
        if isinstance(value, AttendanceType):
            return value
        try:
            return AttendanceType(str(value or "").strip().upper())
        except ValueError:
            allowed = ", ".join(t.value for t in AttendanceType)
            raise ValidationError(f"attendanceType must be one of: {allowed}")

    def record(
        self,
        user_id: int,
        *,
        attendance_type: Any,
        latitude: Any,
        longitude: Any,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        if not attendance_type or latitude is None or longitude is None:
            raise ValidationError("Attendance type and coordinates are required")

        a_type = self.parse_type(attendance_type)
        point = GeoPoint(
            latitude=require_float(latitude, "latitude"),
            longitude=require_float(longitude, "longitude"),
        )

        offices = list(self._offices.list_active())
        if not offices:
            raise ConfigurationError("No office locations configured")

        match = find_closest(point, offices)
        if match is None:
            raise ConfigurationError("Unable to determine closest office location")
        office = next(o for o in offices if o.office_id == match.office_id)

        status = GeofenceStatus.VALIDATED if match.within_geofence else GeofenceStatus.OUTSIDE
        timestamp = now or now_local()

        attendance_id = self._attendance.create(
            user_id=int(user_id),
            office_id=office.office_id,
            attendance_type=a_type,
            latitude=point.latitude,
            longitude=point.longitude,
            status=status,
            timestamp=timestamp,
        )
        record = self._attendance.get_by_id(attendance_id)

        logger.info(
            "Attendance %s user=%s type=%s office=%s status=%s distance=%.1fm",
            attendance_id,
            user_id,
            a_type.value,
            office.office_id,
            status.value,
            match.distance,
        )
        return CheckInResult(
            record=record,
            office=office,
            within_geofence=match.within_geofence,
            distance=match.distance,
        )

    def list_for_user(self, user_id: int, *, day: Optional[date] = None) -> Sequence[AttendanceEntry]:
        time_range = day_bounds(day) if day else None
        return self._attendance.list_for_user(int(user_id), time_range=time_range)
