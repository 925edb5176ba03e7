from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_int
from ..core.enums import ResourceKind, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..requests.repository import RequestRepository
from ..users.repository import UserRepository
from .handlers import HANDLERS, ApprovalHandler, ApprovalOutcome

logger = logging.getLogger(__name__)


def parse_resource(value: Any) -> ResourceKind:
    if isinstance(value, ResourceKind):
        return value
    try:
        return ResourceKind(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Invalid resource type. Use 'user', 'leave', or 'mission'")


class ApprovalWorkflow:
    """Use case: the admin approval queue for users, leave and mission requests.

    Decisions apply only to PENDING items. A second decision on the same item,
    including one racing the first, raises ConflictError.
    """

    def __init__(
        self,
        users: UserRepository,
        requests: RequestRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._clock = clock
        self._handlers: Dict[ResourceKind, ApprovalHandler] = {
            kind: factory(users, requests) for kind, factory in HANDLERS.items()
        }

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Access denied. Insufficient permissions.")

    def handler(self, resource: Any) -> ApprovalHandler:
        return self._handlers[parse_resource(resource)]

    def list_pending(self, resource: Any, *, current_role: Role) -> Sequence[Any]:
        self._require_admin(current_role)
        return self.handler(resource).list_pending()

    def decide(
        self,
        resource: Any,
        item_id: Any,
        decision: Any,
        *,
        current_role: Role,
        admin_user_id: int,
    ) -> ApprovalOutcome:
        self._require_admin(current_role)
        handler = self.handler(resource)
        if item_id in (None, "") or not decision:
            raise ValidationError("ID and status are required")

        outcome = handler.decide(
            require_int(item_id, "id"),
            str(decision),
            admin_user_id=int(admin_user_id),
            now=self._clock(),
        )
        logger.info("%s %s %s by admin %s", handler.label, item_id, outcome.verb, admin_user_id)
        return outcome
