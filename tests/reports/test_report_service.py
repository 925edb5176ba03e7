from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import (
    InMemoryAttendance,
    InMemoryOffices,
    InMemoryRequests,
    InMemoryUsers,
    InMemoryWorkPlans,
    make_office,
    make_user,
)
from tracking_app.core.enums import AttendanceType, GeofenceStatus, ReportType, Role, WorkPlanStatus
from tracking_app.core.exceptions import AuthorizationError, ValidationError
from tracking_app.reports.service import ReportService


class Clock:
    def __init__(self):
        self.now = datetime(2026, 3, 1, 9, 0)

    def __call__(self):
        return self.now


@pytest.fixture
def world():
    users = InMemoryUsers()
    users.add(make_user(1, "admin@tracking.com", role=Role.ADMIN))
    users.add(make_user(2, "staff@tracking.com"))
    users.add(make_user(3, "pending@tracking.com", is_active=False))
    offices = InMemoryOffices([make_office(1, 0.0, 0.0)])
    attendance = InMemoryAttendance(offices, users)
    clock = Clock()
    requests = InMemoryRequests(users, clock=clock)
    plans = InMemoryWorkPlans(users)

    for day in (1, 2, 3):
        attendance.create(
            user_id=2,
            office_id=1,
            attendance_type=AttendanceType.CHECK_IN_AM,
            latitude=0.0,
            longitude=0.0,
            status=GeofenceStatus.VALIDATED,
            timestamp=datetime(2026, 3, day, 8, 0),
        )
        clock.now = datetime(2026, 3, day, 10, 0)
        requests.create_leave(user_id=2, start_date=date(2026, 4, day), end_date=date(2026, 4, day), reason="r")
        plans.create(
            user_id=2,
            title="p",
            description="d",
            due_date=date(2026, 4, 30),
            status=WorkPlanStatus.DRAFT,
            created_at=datetime(2026, 3, day, 11, 0),
        )
    clock.now = datetime(2026, 3, 2, 12, 0)
    requests.create_mission(
        user_id=2, title="t", description="d", start_date=date(2026, 4, 1), end_date=date(2026, 4, 2)
    )
    return ReportService(attendance, requests, plans, users)


def test_daily_counts_restricted_to_range(world):
    report = world.summarize("daily", "2026-03-02", "2026-03-03", current_role=Role.ADMIN)

    assert report.report_type == ReportType.DAILY
    assert report.counts == {"attendance": 2, "leaveRequests": 2, "missionRequests": 1, "workPlans": 2}


def test_default_report_adds_active_users(world):
    report = world.summarize(None, current_role=Role.ADMIN)

    assert report.counts == {
        "attendance": 3,
        "leaveRequests": 3,
        "missionRequests": 1,
        "workPlans": 3,
        "users": 2,
    }


def test_unknown_report_type_falls_back_to_summary(world):
    assert world.summarize("payroll", current_role=Role.ADMIN).report_type == ReportType.SUMMARY


def test_inverted_range_is_rejected(world):
    with pytest.raises(ValidationError):
        world.summarize("daily", "2026-03-03", "2026-03-01", current_role=Role.ADMIN)


def test_half_open_range_is_rejected(world):
    with pytest.raises(ValidationError):
        world.summarize("daily", "2026-03-03", None, current_role=Role.ADMIN)


def test_attendance_listing_is_newest_first_with_owner(world):
    report = world.summarize("attendance", "2026-03-01", "2026-03-02", current_role=Role.ADMIN)

    assert report.is_listing
    assert [e.record.timestamp.day for e in report.items] == [2, 1]
    assert report.items[0].user.email == "staff@tracking.com"


@pytest.mark.parametrize("report_type, expected", [("leave", 1), ("mission", 0), ("workplan", 1)])
def test_listings_follow_creation_time(world, report_type, expected):
    report = world.summarize(report_type, "2026-03-03", "2026-03-03", current_role=Role.ADMIN)

    assert len(report.items) == expected


def test_reports_are_admin_only(world):
    with pytest.raises(AuthorizationError):
        world.summarize("daily", current_role=Role.STAFF)
