from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AttendanceType, GeofenceStatus
from .model import AttendanceEntry, AttendanceRecord

DateRange = Tuple[datetime, datetime]


class AttendanceRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        office_id: int,
        attendance_type: AttendanceType,
        latitude: float,
        longitude: float,
        status: GeofenceStatus,
        timestamp: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, time_range: Optional[DateRange] = None) -> Sequence[AttendanceEntry]:
        """Newest first, office attached."""

        raise NotImplementedError

    def list_for_report(self, *, date_range: Optional[DateRange] = None) -> Sequence[AttendanceEntry]:
        """Newest first, office and owner attached."""

        raise NotImplementedError

    def count(self, *, date_range: Optional[DateRange] = None) -> int:
        raise NotImplementedError
