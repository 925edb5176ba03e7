from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from ..common.datetime_utils import parse_date
from ..common.validators import require_int, require_non_empty
from ..core.enums import RequestKind, RequestStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import StaffRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)

_LABELS = {
    RequestKind.LEAVE: "Leave request",
    RequestKind.MISSION: "Mission request",
}


def _check_dates(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("startDate must not be after endDate")


class RequestService:
    """Use case: staff self-service for leave and mission requests.

    A request can be edited or cancelled by its owner only while it is PENDING.
    Decisions are made through the approval workflow.
    """

    def __init__(self, requests: RequestRepository):
        self._requests = requests

    def _owned(self, kind: RequestKind, request_id: Any, user_id: int) -> StaffRequest:
        request = self._requests.get(kind, require_int(request_id, "id"))
        if not request or request.user_id != int(user_id):
            raise NotFoundError(f"{_LABELS[kind]} not found")
        return request

    @staticmethod
    def _require_pending(request: StaffRequest) -> None:
        if request.status != RequestStatus.PENDING:
            raise ConflictError("Cannot modify a processed request")

    def create_leave(self, user_id: int, *, start_date: Any, end_date: Any, reason: Any) -> StaffRequest:
        if not start_date or not end_date or not reason:
            raise ValidationError("Start date, end date, and reason are required")

        start = parse_date(start_date, "startDate")
        end = parse_date(end_date, "endDate")
        _check_dates(start, end)

        request_id = self._requests.create_leave(
            user_id=int(user_id),
            start_date=start,
            end_date=end,
            reason=require_non_empty(reason, "reason"),
        )
        logger.info("Leave request %s submitted by user %s (%s..%s)", request_id, user_id, start, end)
        return self._requests.get(RequestKind.LEAVE, request_id)

    def create_mission(
        self,
        user_id: int,
        *,
        title: Any,
        description: Any,
        start_date: Any,
        end_date: Any,
    ) -> StaffRequest:
        if not title or not description or not start_date or not end_date:
            raise ValidationError("Title, description, start date, and end date are required")

        start = parse_date(start_date, "startDate")
        end = parse_date(end_date, "endDate")
        _check_dates(start, end)

        request_id = self._requests.create_mission(
            user_id=int(user_id),
            title=require_non_empty(title, "title"),
            description=require_non_empty(description, "description"),
            start_date=start,
            end_date=end,
        )
        logger.info("Mission request %s submitted by user %s (%s..%s)", request_id, user_id, start, end)
        return self._requests.get(RequestKind.MISSION, request_id)

    def list_for_user(self, kind: RequestKind, user_id: int) -> Sequence[StaffRequest]:
        return self._requests.list_for_user(kind, int(user_id))

    def update(self, kind: RequestKind, user_id: int, request_id: Any, changes: dict) -> StaffRequest:
        request = self._owned(kind, request_id, user_id)
        self._require_pending(request)

        fields: dict = {}
        if changes.get("startDate"):
            fields["start_date"] = parse_date(changes["startDate"], "startDate")
        if changes.get("endDate"):
            fields["end_date"] = parse_date(changes["endDate"], "endDate")
        text_fields = ("reason",) if kind == RequestKind.LEAVE else ("title", "description")
        for name in text_fields:
            if changes.get(name) is not None:
                fields[name] = require_non_empty(changes[name], name)

        _check_dates(fields.get("start_date", request.start_date), fields.get("end_date", request.end_date))

        # The status guard lives in the UPDATE itself; a concurrent decision wins.
        if not self._requests.update_pending(kind, request.request_id, fields):
            raise ConflictError("Cannot modify a processed request")
        logger.info("%s %s updated by owner: %s", _LABELS[kind], request.request_id, sorted(fields))
        return self._requests.get(kind, request.request_id)

    def cancel(self, kind: RequestKind, user_id: int, request_id: Any) -> None:
        request = self._owned(kind, request_id, user_id)
        if request.status != RequestStatus.PENDING or not self._requests.delete_pending(kind, request.request_id):
            raise ConflictError("Cannot cancel a processed request")
        logger.info("%s %s cancelled by owner", _LABELS[kind], request.request_id)
