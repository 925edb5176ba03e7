from __future__ import annotations

from datetime import date, datetime

import pytest

from tracking_app.common.datetime_utils import day_bounds, parse_date, parse_range
from tracking_app.core.exceptions import ValidationError


def test_day_bounds_cover_the_whole_day():
    start, end = day_bounds(date(2026, 3, 2))

    assert start == datetime(2026, 3, 2, 0, 0, 0)
    assert end == datetime(2026, 3, 2, 23, 59, 59, 999000)


def test_range_with_date_only_end_covers_that_day():
    start, end = parse_range("2026-03-01", "2026-03-02")

    assert start == datetime(2026, 3, 1)
    assert end == datetime(2026, 3, 2, 23, 59, 59, 999000)


def test_range_keeps_explicit_end_time():
    _, end = parse_range("2026-03-01T08:00:00", "2026-03-01T17:00:00")

    assert end == datetime(2026, 3, 1, 17, 0)


def test_no_range():
    assert parse_range(None, None) is None
    assert parse_range("", "") is None


@pytest.mark.parametrize("start, end", [("2026-03-02", "2026-03-01"), ("2026-03-01", None), ("yesterday", "2026-03-01")])
def test_bad_ranges(start, end):
    with pytest.raises(ValidationError):
        parse_range(start, end)


def test_same_day_range_is_allowed():
    start, end = parse_range("2026-03-01", "2026-03-01")

    assert start < end


def test_parse_date_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_date("31/02/2026", "dueDate")
