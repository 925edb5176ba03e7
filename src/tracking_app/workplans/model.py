from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from ..core.enums import Role, WorkPlanStatus
from ..users.model import UserSummary


@dataclass(frozen=True)
class WorkPlanComment:
    """One entry of a work plan's append-only comment log."""

    comment_id: int
    plan_id: int
    author_id: int
    author_role: Role
    text: str
    created_at: datetime

    def render(self) -> str:
        return f"{self.author_role.value.title()} comment ({self.created_at:%Y-%m-%d}): {self.text}"


@dataclass(frozen=True)
class WorkPlan:
    plan_id: int
    user_id: int
    title: str
    description: str
    due_date: date
    status: WorkPlanStatus
    progress: int = 0
    achievement: Optional[str] = None
    output: Optional[str] = None
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    comments: Tuple[WorkPlanComment, ...] = ()

    @property
    def rendered_comments(self) -> Optional[str]:
        return render_comments(self.comments)


@dataclass(frozen=True)
class WorkPlanEntry:
    """Admin tracking/report row: the plan plus its owner."""

    plan: WorkPlan
    user: Optional[UserSummary] = None


def render_comments(comments: Iterable[WorkPlanComment]) -> Optional[str]:
    """Flatten the log into the newline separated text older clients display."""
    lines = [c.render() for c in comments]
    return "\n".join(lines) if lines else None
