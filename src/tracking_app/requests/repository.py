from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import RequestKind, RequestStatus
from .model import RequestEntry, StaffRequest

DateRange = Tuple[datetime, datetime]


class RequestRepository(Protocol):
    """Leave and mission requests share one lifecycle, so one repository serves both kinds."""

    def create_leave(self, *, user_id: int, start_date: date, end_date: date, reason: str) -> int:
        raise NotImplementedError

    def create_mission(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        start_date: date,
        end_date: date,
    ) -> int:
        raise NotImplementedError

    def get(self, kind: RequestKind, request_id: int) -> Optional[StaffRequest]:
        raise NotImplementedError

    def list_for_user(self, kind: RequestKind, user_id: int) -> Sequence[StaffRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_by_status(self, kind: RequestKind, status: RequestStatus) -> Sequence[RequestEntry]:
        """Newest first, owner attached."""

        raise NotImplementedError

    def list_for_report(self, kind: RequestKind, *, date_range: Optional[DateRange] = None) -> Sequence[RequestEntry]:
        raise NotImplementedError

    def count(self, kind: RequestKind, *, date_range: Optional[DateRange] = None) -> int:
        raise NotImplementedError

    def update_pending(self, kind: RequestKind, request_id: int, fields: dict) -> bool:
        """Partial update guarded by status=PENDING."""

        raise NotImplementedError

    def delete_pending(self, kind: RequestKind, request_id: int) -> bool:
        raise NotImplementedError

    def decide(
        self,
        kind: RequestKind,
        request_id: int,
        *,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        """Conditional PENDING -> status transition. False if missing or already decided."""

        raise NotImplementedError
