from __future__ import annotations

from datetime import date

import pytest

from fakes import InMemoryRequests, InMemoryUsers, make_user
from tracking_app.approvals.service import ApprovalWorkflow
from tracking_app.core.enums import RequestKind, RequestStatus, ResourceKind, Role
from tracking_app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

ADMIN_ID = 1


@pytest.fixture
def users():
    repo = InMemoryUsers()
    repo.add(make_user(ADMIN_ID, "admin@tracking.com", role=Role.ADMIN))
    repo.add(make_user(2, "staff@tracking.com"))
    return repo


@pytest.fixture
def requests_repo(users):
    return InMemoryRequests(users)


@pytest.fixture
def workflow(users, requests_repo, fixed_now):
    return ApprovalWorkflow(users, requests_repo, clock=lambda: fixed_now)


def _leave(requests_repo, user_id=2):
    return requests_repo.create_leave(
        user_id=user_id, start_date=date(2026, 3, 10), end_date=date(2026, 3, 12), reason="Family"
    )


def test_pending_leave_is_listed_with_owner(workflow, requests_repo):
    request_id = _leave(requests_repo)

    items = workflow.list_pending("leave", current_role=Role.ADMIN)

    assert [e.request.request_id for e in items] == [request_id]
    assert items[0].user.email == "staff@tracking.com"


def test_pending_lists_are_newest_first(workflow, requests_repo):
    first = _leave(requests_repo)
    second = _leave(requests_repo)

    items = workflow.list_pending("leave", current_role=Role.ADMIN)

    assert [e.request.request_id for e in items] == [second, first]


def test_approve_leave_records_admin_and_time(workflow, requests_repo, fixed_now):
    request_id = _leave(requests_repo)

    decided = workflow.decide("leave", request_id, "APPROVED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID).item

    assert decided.status == RequestStatus.APPROVED
    assert decided.approved_by == ADMIN_ID
    assert decided.approved_at == fixed_now
    assert workflow.list_pending("leave", current_role=Role.ADMIN) == []


def test_second_decision_on_same_request_is_conflict(workflow, requests_repo):
    request_id = _leave(requests_repo)
    workflow.decide("leave", request_id, "APPROVED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)

    with pytest.raises(ConflictError):
        workflow.decide("leave", request_id, "APPROVED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)
    with pytest.raises(ConflictError):
        workflow.decide("leave", request_id, "REJECTED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)

    assert requests_repo.get(RequestKind.LEAVE, request_id).status == RequestStatus.APPROVED


def test_reject_mission(workflow, requests_repo):
    mission_id = requests_repo.create_mission(
        user_id=2, title="Audit", description="Siem Reap audit", start_date=date(2026, 3, 4), end_date=date(2026, 3, 5)
    )

    decided = workflow.decide("mission", mission_id, "rejected", current_role=Role.ADMIN, admin_user_id=ADMIN_ID).item

    assert decided.status == RequestStatus.REJECTED


def test_outcome_reports_resource_and_verb(workflow, requests_repo, users):
    users.add(make_user(9, "pending@tracking.com", is_active=False))

    leave = workflow.decide("leave", _leave(requests_repo), "approved", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)
    user = workflow.decide("user", 9, "ADMIN", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)

    assert (leave.resource, leave.label, leave.verb) == (ResourceKind.LEAVE, "Leave request", "approved")
    assert (user.resource, user.label, user.verb) == (ResourceKind.USER, "User", "approved")
    assert user.status == RequestStatus.APPROVED


def test_leave_id_is_not_a_mission_id(workflow, requests_repo):
    request_id = _leave(requests_repo)

    with pytest.raises(NotFoundError):
        workflow.decide("mission", request_id, "APPROVED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)


def test_approve_user_activates_with_role(workflow, users):
    user_id = users.create_user(
        email="new@tracking.com",
        password_hash="x",
        first_name="New",
        last_name="Hire",
        role=Role.STAFF,
        position=None,
        department=None,
        is_active=False,
        approval_status=RequestStatus.PENDING,
    )
    assert [u.user_id for u in workflow.list_pending("user", current_role=Role.ADMIN)] == [user_id]

    user = workflow.decide("user", user_id, "ADMIN", current_role=Role.ADMIN, admin_user_id=ADMIN_ID).item

    assert user.is_active is True
    assert user.role == Role.ADMIN
    assert user.approval_status == RequestStatus.APPROVED


def test_approved_decision_for_user_means_staff(workflow, users):
    users.add(make_user(9, "pending@tracking.com", is_active=False))

    user = workflow.decide("user", 9, "APPROVED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID).item

    assert user.is_active is True
    assert user.role == Role.STAFF


def test_rejected_user_stays_inactive_and_leaves_the_queue(workflow, users):
    users.add(make_user(9, "pending@tracking.com", is_active=False))

    user = workflow.decide("user", 9, "REJECTED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID).item

    assert user.is_active is False
    assert user.approval_status == RequestStatus.REJECTED
    assert workflow.list_pending("user", current_role=Role.ADMIN) == []
    with pytest.raises(ConflictError):
        workflow.decide("user", 9, "STAFF", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)


def test_deactivated_user_is_not_pending(workflow, users):
    users.update(2, {"is_active": False})

    assert workflow.list_pending("user", current_role=Role.ADMIN) == []
    with pytest.raises(ConflictError):
        workflow.decide("user", 2, "STAFF", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)


@pytest.mark.parametrize(
    "resource, item_id, decision",
    [
        ("payroll", 1, "APPROVED"),
        (None, 1, "APPROVED"),
        ("leave", None, "APPROVED"),
        ("leave", 1, None),
        ("leave", 1, "MAYBE"),
        ("user", 2, "MANAGER"),
    ],
)
def test_bad_decision_input_is_validation_error(workflow, requests_repo, resource, item_id, decision):
    _leave(requests_repo)

    with pytest.raises(ValidationError):
        workflow.decide(resource, item_id, decision, current_role=Role.ADMIN, admin_user_id=ADMIN_ID)


def test_unknown_ids_are_not_found(workflow):
    with pytest.raises(NotFoundError):
        workflow.decide("leave", 404, "APPROVED", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)
    with pytest.raises(NotFoundError):
        workflow.decide("user", 404, "STAFF", current_role=Role.ADMIN, admin_user_id=ADMIN_ID)


def test_staff_cannot_list_or_decide(workflow, requests_repo):
    request_id = _leave(requests_repo)

    with pytest.raises(AuthorizationError):
        workflow.list_pending("leave", current_role=Role.STAFF)
    with pytest.raises(AuthorizationError):
        workflow.decide("leave", request_id, "APPROVED", current_role=Role.STAFF, admin_user_id=2)
