from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional, Tuple

from ..core.exceptions import ValidationError


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_datetime(value: Any, field_name: str) -> datetime:
    """Parse a client timestamp into a naive local datetime.

    Accepts ``YYYY-MM-DD`` and full ISO-8601 strings (``...Z`` included, as sent
    by ``Date.toISOString()``). Aware values are converted to local time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value or "").strip()
        if not text:
            raise ValidationError(f"{field_name} is required")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO-8601 date")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date(value: Any, field_name: str) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_datetime(value, field_name).date()


def is_date_only(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) == 10


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[00:00:00.000, 23:59:59.999] of a calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time(23, 59, 59, 999000))


def parse_range(start: Optional[str], end: Optional[str]) -> Optional[Tuple[datetime, datetime]]:
    """Build an inclusive datetime range from two optional query values.

    A date-only ``end`` covers the whole day. Both bounds must be given together.
    """
    if not start and not end:
        return None
    if not start or not end:
        raise ValidationError("startDate and endDate must be provided together")

    range_start = parse_datetime(start, "startDate")
    range_end = parse_datetime(end, "endDate")
    if is_date_only(end):
        range_end = day_bounds(range_end.date())[1]

    if range_start > range_end:
        raise ValidationError("startDate must not be after endDate")
    return range_start, range_end
