from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_range
from ..core.enums import ReportType, RequestKind, Role
from ..core.exceptions import AuthorizationError
from ..requests.repository import RequestRepository
from ..users.repository import UserRepository
from ..workplans.repository import WorkPlanRepository

logger = logging.getLogger(__name__)

LISTING_TYPES = frozenset({ReportType.ATTENDANCE, ReportType.LEAVE, ReportType.MISSION, ReportType.WORKPLAN})


def parse_report_type(value: Any) -> ReportType:
    """Unknown or missing types fall back to the summary aggregate."""
    if isinstance(value, ReportType):
        return value
    try:
        return ReportType(str(value or "").strip().lower())
    except ValueError:
        return ReportType.SUMMARY


@dataclass(frozen=True)
class Report:
    report_type: ReportType
    date_range: Optional[Tuple[datetime, datetime]] = None
    counts: Optional[Dict[str, int]] = None
    items: Optional[Sequence[Any]] = None

    @property
    def is_listing(self) -> bool:
        return self.items is not None


class ReportService:
    """Read-only dashboards: per-entity listings and count aggregates."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        requests: RequestRepository,
        plans: WorkPlanRepository,
        users: UserRepository,
    ):
        self._attendance = attendance
        self._requests = requests
        self._plans = plans
        self._users = users

    def _counts(self, date_range) -> Dict[str, int]:
        return {
            "attendance": self._attendance.count(date_range=date_range),
            "leaveRequests": self._requests.count(RequestKind.LEAVE, date_range=date_range),
            "missionRequests": self._requests.count(RequestKind.MISSION, date_range=date_range),
            "workPlans": self._plans.count(date_range=date_range),
        }

    def _listing(self, report_type: ReportType, date_range) -> Sequence[Any]:
        if report_type == ReportType.ATTENDANCE:
            return self._attendance.list_for_report(date_range=date_range)
        if report_type == ReportType.LEAVE:
            return self._requests.list_for_report(RequestKind.LEAVE, date_range=date_range)
        if report_type == ReportType.MISSION:
            return self._requests.list_for_report(RequestKind.MISSION, date_range=date_range)
        return self._plans.list_all(date_range=date_range)

    def summarize(
        self,
        report_type: Any = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        *,
        current_role: Role,
    ) -> Report:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")

        kind = parse_report_type(report_type)
        date_range = parse_range(start, end)
        logger.debug("Report %s requested for %s", kind.value, date_range)

        if kind in LISTING_TYPES:
            return Report(report_type=kind, date_range=date_range, items=list(self._listing(kind, date_range)))

        counts = self._counts(date_range)
        if kind != ReportType.DAILY:
            counts["users"] = self._users.count_active()
        return Report(report_type=kind, date_range=date_range, counts=counts)
