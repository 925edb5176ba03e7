from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import Role, WorkPlanStatus
from .model import WorkPlan, WorkPlanEntry

DateRange = Tuple[datetime, datetime]


class WorkPlanRepository(Protocol):
    """Work plans come back with their comment log attached, oldest comment first."""

    def create(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        due_date: date,
        status: WorkPlanStatus,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, plan_id: int) -> Optional[WorkPlan]:
        raise NotImplementedError

    def update(self, plan_id: int, fields: dict) -> bool:
        """Partial update; keys are model field names."""

        raise NotImplementedError

    def delete(self, plan_id: int) -> bool:
        raise NotImplementedError

    def add_comment(
        self,
        plan_id: int,
        *,
        author_id: int,
        author_role: Role,
        text: str,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, status: Optional[WorkPlanStatus] = None) -> Sequence[WorkPlan]:
        """Newest first."""

        raise NotImplementedError

    def list_all(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[WorkPlanStatus] = None,
        date_range: Optional[DateRange] = None,
    ) -> Sequence[WorkPlanEntry]:
        """Newest first, owner attached. ``date_range`` filters on creation time."""

        raise NotImplementedError

    def count(self, *, date_range: Optional[DateRange] = None) -> int:
        raise NotImplementedError
