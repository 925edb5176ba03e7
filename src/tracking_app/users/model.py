from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus, Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no DB access code here.
    ``approval_status`` tracks the registration review; ``is_active`` is the
    login switch admins can also flip later.
    """

    user_id: int
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role
    position: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = False
    approval_status: RequestStatus = RequestStatus.PENDING
    registered_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class UserSummary:
    """Owner fields attached to listings and reports."""

    user_id: int
    email: str
    first_name: str
    last_name: str
