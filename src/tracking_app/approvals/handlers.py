"""One handler per approval resource kind.

``HANDLERS`` maps each ``ResourceKind`` to the factory of its handler, so the
workflow dispatches through a table instead of branching on strings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Sequence

from ..core.enums import RequestKind, RequestStatus, ResourceKind, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..requests.repository import RequestRepository
from ..users.repository import UserRepository


@dataclass(frozen=True)
class ApprovalOutcome:
    """What a decision did: the resulting status and the updated item."""

    resource: ResourceKind
    label: str
    status: RequestStatus
    item: Any

    @property
    def verb(self) -> str:
        return self.status.value.lower()


class ApprovalHandler(ABC):
    resource: ResourceKind
    label: str = "Item"

    @abstractmethod
    def list_pending(self) -> Sequence[Any]:
        raise NotImplementedError

    @abstractmethod
    def decide(self, item_id: int, decision: str, *, admin_user_id: int, now: datetime) -> ApprovalOutcome:
        raise NotImplementedError


class UserApprovalHandler(ApprovalHandler):
    """Registration review.

    ``REJECTED`` closes the registration and keeps the account inactive. Any
    other decision is a role (``APPROVED`` meaning STAFF) and activates it.
    """

    resource = ResourceKind.USER
    label = "User"

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def parse_decision(decision: str):
        value = decision.strip().upper()
        if value == RequestStatus.REJECTED.value:
            return RequestStatus.REJECTED, Role.STAFF
        if value == RequestStatus.APPROVED.value:
            return RequestStatus.APPROVED, Role.STAFF
        try:
            return RequestStatus.APPROVED, Role(value)
        except ValueError:
            raise ValidationError("status must be STAFF, ADMIN, APPROVED or REJECTED for user approvals")

    def list_pending(self) -> Sequence[Any]:
        return self._users.list_pending()

    def decide(self, item_id: int, decision: str, *, admin_user_id: int, now: datetime) -> ApprovalOutcome:
        approval_status, role = self.parse_decision(decision)

        user = self._users.get_by_id(item_id)
        if not user:
            raise NotFoundError("User not found")
        if user.approval_status != RequestStatus.PENDING or user.is_active:
            raise ConflictError("User registration has already been processed")

        approved = approval_status == RequestStatus.APPROVED
        if not self._users.decide_registration(
            item_id,
            approval_status=approval_status,
            role=role if approved else user.role,
            is_active=approved,
        ):
            raise ConflictError("User registration has already been processed")
        return ApprovalOutcome(self.resource, self.label, approval_status, self._users.get_by_id(item_id))


class RequestApprovalHandler(ApprovalHandler):
    """Leave or mission review: PENDING -> APPROVED | REJECTED, once."""

    def __init__(self, requests: RequestRepository, kind: RequestKind):
        self._requests = requests
        self._kind = kind
        self.resource = ResourceKind(kind.value)
        self.label = "Leave request" if kind == RequestKind.LEAVE else "Mission request"

    @staticmethod
    def parse_decision(decision: str) -> RequestStatus:
        value = decision.strip().upper()
        if value not in (RequestStatus.APPROVED.value, RequestStatus.REJECTED.value):
            raise ValidationError("status must be APPROVED or REJECTED")
        return RequestStatus(value)

    def list_pending(self) -> Sequence[Any]:
        return self._requests.list_by_status(self._kind, RequestStatus.PENDING)

    def decide(self, item_id: int, decision: str, *, admin_user_id: int, now: datetime) -> ApprovalOutcome:
        status = self.parse_decision(decision)

        if not self._requests.get(self._kind, item_id):
            raise NotFoundError(f"{self.label} not found")
        if not self._requests.decide(
            self._kind,
            item_id,
            status=status,
            decided_by=int(admin_user_id),
            decided_at=now,
        ):
            raise ConflictError(f"{self.label} has already been processed")
        return ApprovalOutcome(self.resource, self.label, status, self._requests.get(self._kind, item_id))


HandlerFactory = Callable[[UserRepository, RequestRepository], ApprovalHandler]

HANDLERS: Dict[ResourceKind, HandlerFactory] = {
    ResourceKind.USER: lambda users, requests: UserApprovalHandler(users),
    ResourceKind.LEAVE: lambda users, requests: RequestApprovalHandler(requests, RequestKind.LEAVE),
    ResourceKind.MISSION: lambda users, requests: RequestApprovalHandler(requests, RequestKind.MISSION),
}
