from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import RequestKind, RequestStatus
from ..users.model import UserSummary


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    kind = RequestKind.LEAVE


@dataclass(frozen=True)
class MissionRequest:
    request_id: int
    user_id: int
    title: str
    description: str
    start_date: date
    end_date: date
    status: RequestStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    kind = RequestKind.MISSION


StaffRequest = Union[LeaveRequest, MissionRequest]


@dataclass(frozen=True)
class RequestEntry:
    """Read-model for admin queues and reports: the request plus its owner."""

    request: StaffRequest
    user: Optional[UserSummary] = None
