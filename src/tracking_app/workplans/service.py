from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Sequence

from ..common.datetime_utils import now_local, parse_date
from ..common.validators import optional_text, require_int, require_non_empty
from ..core.enums import Role, WorkPlanStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import WorkPlan, WorkPlanEntry
from .repository import WorkPlanRepository

logger = logging.getLogger(__name__)

TRANSITIONS: Dict[WorkPlanStatus, FrozenSet[WorkPlanStatus]] = {
    WorkPlanStatus.DRAFT: frozenset({WorkPlanStatus.SUBMITTED}),
    WorkPlanStatus.SUBMITTED: frozenset({WorkPlanStatus.IN_PROGRESS, WorkPlanStatus.REJECTED, WorkPlanStatus.DRAFT}),
    WorkPlanStatus.IN_PROGRESS: frozenset({WorkPlanStatus.COMPLETED, WorkPlanStatus.REJECTED}),
    WorkPlanStatus.REJECTED: frozenset({WorkPlanStatus.DRAFT, WorkPlanStatus.SUBMITTED}),
    WorkPlanStatus.COMPLETED: frozenset(),
}

ADMIN_ONLY_TARGETS = frozenset({WorkPlanStatus.REJECTED})

UNDELETABLE = frozenset({WorkPlanStatus.SUBMITTED, WorkPlanStatus.COMPLETED})


def parse_status(value: Any) -> WorkPlanStatus:
    if isinstance(value, WorkPlanStatus):
        return value
    try:
        return WorkPlanStatus(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in WorkPlanStatus)
        raise ValidationError(f"status must be one of: {allowed}")


def parse_progress(value: Any) -> int:
    message = "progress must be an integer between 0 and 100"
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(message)
    try:
        progress = int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if not 0 <= progress <= 100:
        raise ValidationError(message)
    return progress


class WorkPlanService:
    """Use case: work plan CRUD for owners and tracking for admins.

    Status changes follow ``TRANSITIONS``. ``submitted_at`` is stamped the first
    time a plan enters SUBMITTED and never rewritten.
    """

    def __init__(self, plans: WorkPlanRepository, *, clock: Callable[[], datetime] = now_local):
        self._plans = plans
        self._clock = clock

    def _get(self, plan_id: Any) -> WorkPlan:
        plan = self._plans.get(require_int(plan_id, "id"))
        if not plan:
            raise NotFoundError("Work plan not found")
        return plan

    def _owned(self, plan_id: Any, user_id: int) -> WorkPlan:
        plan = self._get(plan_id)
        if plan.user_id != int(user_id):
            raise NotFoundError("Work plan not found")
        return plan

    def _status_fields(self, plan: WorkPlan, target: WorkPlanStatus, *, is_admin: bool, now: datetime) -> dict:
        if target == plan.status:
            return {}
        if target in ADMIN_ONLY_TARGETS and not is_admin:
            raise AuthorizationError("Only an admin can reject a work plan")
        if target not in TRANSITIONS[plan.status]:
            raise ConflictError(f"Cannot change work plan status from {plan.status.value} to {target.value}")

        fields: dict = {"status": target}
        if target == WorkPlanStatus.SUBMITTED and plan.submitted_at is None:
            fields["submitted_at"] = now
        return fields

    def _add_comment(self, plan: WorkPlan, text: Any, *, author_id: int, author_role: Role, now: datetime) -> None:
        text = optional_text(text)
        if text:
            self._plans.add_comment(
                plan.plan_id,
                author_id=int(author_id),
                author_role=author_role,
                text=text,
                created_at=now,
            )

    def create(self, user_id: int, *, title: Any, description: Any, due_date: Any) -> WorkPlan:
        if not title or not description or not due_date:
            raise ValidationError("Title, description, and due date are required")

        plan_id = self._plans.create(
            user_id=int(user_id),
            title=require_non_empty(title, "title"),
            description=require_non_empty(description, "description"),
            due_date=parse_date(due_date, "dueDate"),
            status=WorkPlanStatus.DRAFT,
            created_at=self._clock(),
        )
        logger.info("Work plan %s created by user %s", plan_id, user_id)
        return self._plans.get(plan_id)

    def list_for_user(self, user_id: int, *, status: Any = None) -> Sequence[WorkPlan]:
        return self._plans.list_for_user(int(user_id), status=parse_status(status) if status else None)

    def list_all(self, *, current_role: Role, user_id: Any = None, status: Any = None) -> Sequence[WorkPlanEntry]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")
        return self._plans.list_all(
            user_id=require_int(user_id, "userId") if user_id not in (None, "") else None,
            status=parse_status(status) if status else None,
        )

    def update(self, user_id: int, plan_id: Any, changes: dict, *, author_role: Role = Role.STAFF) -> WorkPlan:
        plan = self._owned(plan_id, user_id)
        if plan.status == WorkPlanStatus.COMPLETED:
            raise ConflictError("Cannot modify a completed work plan")
        now = self._clock()

        fields: dict = {}
        if changes.get("title") is not None:
            fields["title"] = require_non_empty(changes["title"], "title")
        if changes.get("description") is not None:
            fields["description"] = require_non_empty(changes["description"], "description")
        if changes.get("dueDate") is not None:
            fields["due_date"] = parse_date(changes["dueDate"], "dueDate")
        if changes.get("progress") is not None:
            fields["progress"] = parse_progress(changes["progress"])
        if "achievement" in changes:
            fields["achievement"] = optional_text(changes["achievement"])
        if "output" in changes:
            fields["output"] = optional_text(changes["output"])
        if changes.get("status") is not None:
            fields.update(
                self._status_fields(
                    plan,
                    parse_status(changes["status"]),
                    is_admin=author_role == Role.ADMIN,
                    now=now,
                )
            )

        if fields:
            fields["updated_at"] = now
            self._plans.update(plan.plan_id, fields)
        self._add_comment(plan, changes.get("comments"), author_id=user_id, author_role=author_role, now=now)

        if "status" in fields:
            logger.info("Work plan %s status %s -> %s by owner", plan.plan_id, plan.status.value, fields["status"].value)
        return self._plans.get(plan.plan_id)

    def admin_update(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        plan_id: Any,
        status: Any = None,
        comments: Any = None,
    ) -> WorkPlan:
        """Change status and/or append a comment. Comments never replace earlier ones."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")
        if plan_id in (None, ""):
            raise ValidationError("Work plan ID is required")
        plan = self._get(plan_id)
        now = self._clock()

        fields = self._status_fields(plan, parse_status(status), is_admin=True, now=now) if status else {}
        if fields:
            fields["updated_at"] = now
            self._plans.update(plan.plan_id, fields)
            logger.info(
                "Work plan %s status %s -> %s by admin %s",
                plan.plan_id,
                plan.status.value,
                fields["status"].value,
                admin_user_id,
            )
        self._add_comment(plan, comments, author_id=admin_user_id, author_role=Role.ADMIN, now=now)
        return self._plans.get(plan.plan_id)

    def delete(self, user_id: int, plan_id: Any) -> None:
        plan = self._owned(plan_id, user_id)
        if plan.status in UNDELETABLE:
            raise ConflictError("Cannot delete a submitted or completed work plan")
        self._plans.delete(plan.plan_id)
        logger.info("Work plan %s deleted by user %s", plan.plan_id, user_id)
