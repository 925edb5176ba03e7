from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import InMemoryRequests
from tracking_app.core.enums import RequestKind, RequestStatus
from tracking_app.core.exceptions import ConflictError, NotFoundError, ValidationError
from tracking_app.requests.service import RequestService

OWNER = 2


@pytest.fixture
def repo():
    return InMemoryRequests()


@pytest.fixture
def service(repo):
    return RequestService(repo)


@pytest.fixture
def leave(service):
    return service.create_leave(OWNER, start_date="2026-03-10", end_date="2026-03-12", reason="Family event")


def test_create_leave_is_pending(leave):
    assert leave.status == RequestStatus.PENDING
    assert leave.start_date == date(2026, 3, 10)
    assert leave.end_date == date(2026, 3, 12)
    assert leave.approved_by is None


def test_iso_timestamps_from_mobile_client_are_accepted(service):
    leave = service.create_leave(
        OWNER, start_date="2026-03-10T00:00:00.000Z", end_date="2026-03-10T00:00:00.000Z", reason="Clinic"
    )

    assert leave.start_date == leave.end_date


def test_start_after_end_is_rejected(service):
    with pytest.raises(ValidationError):
        service.create_leave(OWNER, start_date="2026-03-12", end_date="2026-03-10", reason="Backwards")


@pytest.mark.parametrize("missing", ["title", "description", "start_date", "end_date"])
def test_mission_requires_all_fields(service, missing):
    fields = {"title": "Audit", "description": "Branch audit", "start_date": "2026-03-04", "end_date": "2026-03-05"}
    fields[missing] = None

    with pytest.raises(ValidationError):
        service.create_mission(OWNER, **fields)


def test_owner_lists_own_requests_newest_first(service, leave):
    later = service.create_leave(OWNER, start_date="2026-04-01", end_date="2026-04-02", reason="Trip")
    service.create_leave(3, start_date="2026-04-01", end_date="2026-04-02", reason="Not mine")

    items = service.list_for_user(RequestKind.LEAVE, OWNER)

    assert [r.request_id for r in items] == [later.request_id, leave.request_id]


def test_update_pending_leave(service, leave):
    updated = service.update(RequestKind.LEAVE, OWNER, leave.request_id, {"reason": "Wedding", "endDate": "2026-03-13"})

    assert updated.reason == "Wedding"
    assert updated.end_date == date(2026, 3, 13)


def test_update_cannot_invert_dates(service, leave):
    with pytest.raises(ValidationError):
        service.update(RequestKind.LEAVE, OWNER, leave.request_id, {"endDate": "2026-03-01"})


def test_decided_request_cannot_be_edited_or_cancelled(service, repo, leave):
    repo.decide(RequestKind.LEAVE, leave.request_id, status=RequestStatus.APPROVED, decided_by=1, decided_at=datetime(2026, 3, 3))

    with pytest.raises(ConflictError):
        service.update(RequestKind.LEAVE, OWNER, leave.request_id, {"reason": "Changed"})
    with pytest.raises(ConflictError):
        service.cancel(RequestKind.LEAVE, OWNER, leave.request_id)


def test_cancel_pending_removes_it(service, repo, leave):
    service.cancel(RequestKind.LEAVE, OWNER, leave.request_id)

    assert repo.get(RequestKind.LEAVE, leave.request_id) is None


def test_other_owner_and_missing_id(service, leave):
    with pytest.raises(NotFoundError):
        service.update(RequestKind.LEAVE, 3, leave.request_id, {"reason": "Hijack"})
    with pytest.raises(NotFoundError):
        service.cancel(RequestKind.LEAVE, OWNER, 999)
    with pytest.raises(ValidationError):
        service.cancel(RequestKind.LEAVE, OWNER, None)


def test_mission_update_keeps_unsent_fields(service):
    mission = service.create_mission(
        OWNER, title="Audit", description="Branch audit", start_date="2026-03-04", end_date="2026-03-05"
    )

    updated = service.update(RequestKind.MISSION, OWNER, mission.request_id, {"title": "Full audit"})

    assert updated.title == "Full audit"
    assert updated.description == "Branch audit"
