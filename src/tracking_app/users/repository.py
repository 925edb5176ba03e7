from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role,
        position: Optional[str],
        department: Optional[str],
        is_active: bool,
        approval_status: RequestStatus,
    ) -> int:
        raise NotImplementedError

    def update(self, user_id: int, fields: dict) -> bool:
        """Partial update; keys are model field names."""

        raise NotImplementedError

    def decide_registration(
        self,
        user_id: int,
        *,
        approval_status: RequestStatus,
        role: Role,
        is_active: bool,
    ) -> bool:
        """Apply a decision only while the registration is still PENDING.

        Returns False when the user is gone or was already decided.
        """

        raise NotImplementedError

    def list_pending(self) -> Sequence[User]:
        """Inactive users awaiting review, newest registration first."""

        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None, is_active: Optional[bool] = None) -> Sequence[User]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
