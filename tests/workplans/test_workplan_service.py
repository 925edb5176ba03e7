from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from fakes import InMemoryUsers, InMemoryWorkPlans, make_user
from tracking_app.core.enums import Role, WorkPlanStatus
from tracking_app.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from tracking_app.workplans.service import WorkPlanService

OWNER = 2
ADMIN = 1


class StepClock:
    """Advances one minute per call so stamps are distinguishable."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def clock(fixed_now):
    return StepClock(fixed_now)


@pytest.fixture
def plans():
    users = InMemoryUsers()
    users.add(make_user(ADMIN, "admin@tracking.com", role=Role.ADMIN))
    users.add(make_user(OWNER, "staff@tracking.com"))
    return InMemoryWorkPlans(users)


@pytest.fixture
def service(plans, clock):
    return WorkPlanService(plans, clock=clock)


@pytest.fixture
def plan(service):
    return service.create(OWNER, title="Q2 outreach", description="Visit partners", due_date="2026-04-30")


def _move(service, plan_id, *statuses):
    for status in statuses:
        service.admin_update(current_role=Role.ADMIN, admin_user_id=ADMIN, plan_id=plan_id, status=status)


def test_create_starts_as_draft(plan):
    assert plan.status == WorkPlanStatus.DRAFT
    assert plan.due_date == date(2026, 4, 30)
    assert plan.progress == 0
    assert plan.submitted_at is None
    assert plan.comments == ()


@pytest.mark.parametrize("missing", ["title", "description", "due_date"])
def test_create_requires_fields(service, missing):
    fields = {"title": "T", "description": "D", "due_date": "2026-04-30"}
    fields[missing] = ""

    with pytest.raises(ValidationError):
        service.create(OWNER, **fields)


def test_submitted_at_is_stamped_once(service, plan):
    first = service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})
    again = service.update(OWNER, plan.plan_id, {"status": "SUBMITTED", "progress": 10})

    assert first.status == WorkPlanStatus.SUBMITTED
    assert first.submitted_at is not None
    assert again.submitted_at == first.submitted_at
    assert again.progress == 10


def test_resubmission_after_rejection_keeps_first_stamp(service, plan):
    submitted = service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})
    _move(service, plan.plan_id, "REJECTED")

    resubmitted = service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})

    assert resubmitted.submitted_at == submitted.submitted_at


def test_owner_cannot_reject(service, plan):
    service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})

    with pytest.raises(AuthorizationError):
        service.update(OWNER, plan.plan_id, {"status": "REJECTED"})


def test_illegal_transition_is_conflict(service, plan):
    with pytest.raises(ConflictError):
        service.update(OWNER, plan.plan_id, {"status": "COMPLETED"})


def test_completed_plan_is_read_only_for_owner(service, plan):
    service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})
    _move(service, plan.plan_id, "IN_PROGRESS", "COMPLETED")

    with pytest.raises(ConflictError):
        service.update(OWNER, plan.plan_id, {"progress": 100})


@pytest.mark.parametrize("progress", [-1, 101, 50.5, "lots", True])
def test_progress_must_be_0_to_100(service, plan, progress):
    with pytest.raises(ValidationError):
        service.update(OWNER, plan.plan_id, {"progress": progress})


def test_progress_accepts_numeric_strings(service, plan):
    assert service.update(OWNER, plan.plan_id, {"progress": "75"}).progress == 75


def test_other_users_plan_is_not_found(service, plan):
    with pytest.raises(NotFoundError):
        service.update(99, plan.plan_id, {"title": "Mine now"})
    with pytest.raises(NotFoundError):
        service.delete(99, plan.plan_id)


def test_delete_draft_succeeds(service, plans, plan):
    service.delete(OWNER, plan.plan_id)

    assert plans.get(plan.plan_id) is None


def test_delete_completed_is_conflict(service, plans, plan):
    service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})
    _move(service, plan.plan_id, "IN_PROGRESS", "COMPLETED")

    with pytest.raises(ConflictError):
        service.delete(OWNER, plan.plan_id)
    assert plans.get(plan.plan_id).status == WorkPlanStatus.COMPLETED


def test_delete_submitted_is_conflict(service, plan):
    service.update(OWNER, plan.plan_id, {"status": "SUBMITTED"})

    with pytest.raises(ConflictError):
        service.delete(OWNER, plan.plan_id)


def test_admin_comments_are_appended(service, plan, fixed_now):
    service.admin_update(current_role=Role.ADMIN, admin_user_id=ADMIN, plan_id=plan.plan_id, comments="Add budget")
    updated = service.admin_update(
        current_role=Role.ADMIN, admin_user_id=ADMIN, plan_id=plan.plan_id, comments="Looks good"
    )

    assert [c.text for c in updated.comments] == ["Add budget", "Looks good"]
    assert all(c.author_role == Role.ADMIN for c in updated.comments)
    day = fixed_now.strftime("%Y-%m-%d")
    assert updated.rendered_comments == (
        f"Admin comment ({day}): Add budget\n" f"Admin comment ({day}): Looks good"
    )


def test_owner_comment_is_logged_as_staff(service, plan):
    updated = service.update(OWNER, plan.plan_id, {"comments": "Started drafting"})

    assert updated.comments[0].author_role == Role.STAFF
    assert updated.comments[0].author_id == OWNER


def test_admin_update_requires_admin(service, plan):
    with pytest.raises(AuthorizationError):
        service.admin_update(current_role=Role.STAFF, admin_user_id=OWNER, plan_id=plan.plan_id, status="SUBMITTED")


def test_admin_follows_transition_table(service, plan):
    with pytest.raises(ConflictError):
        _move(service, plan.plan_id, "COMPLETED")


def test_lists_filter_by_owner_and_status(service, plan):
    other = service.create(OWNER, title="Training", description="Onboarding", due_date="2026-05-15")
    service.update(OWNER, other.plan_id, {"status": "SUBMITTED"})
    service.create(3, title="Elsewhere", description="Other team", due_date="2026-05-01")

    assert [p.plan_id for p in service.list_for_user(OWNER)] == [other.plan_id, plan.plan_id]
    assert [p.plan_id for p in service.list_for_user(OWNER, status="SUBMITTED")] == [other.plan_id]

    tracked = service.list_all(current_role=Role.ADMIN, user_id=str(OWNER), status="DRAFT")
    assert [e.plan.plan_id for e in tracked] == [plan.plan_id]
    assert tracked[0].user.email == "staff@tracking.com"
    assert len(service.list_all(current_role=Role.ADMIN)) == 3

    with pytest.raises(AuthorizationError):
        service.list_all(current_role=Role.STAFF)
