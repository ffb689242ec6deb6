from datetime import UTC, date, datetime

import pytest

from asken_sync.config import parse_date_arg
from asken_sync.services.dates import date_range, effective_today


def test_effective_today_before_boundary_is_previous_day() -> None:
    # 04:59 JST on Feb 14.
    now = datetime(2026, 2, 13, 19, 59, tzinfo=UTC)

    assert effective_today(now) == date(2026, 2, 13)


def test_effective_today_after_boundary() -> None:
    # 05:00 JST on Feb 14.
    now = datetime(2026, 2, 13, 20, 0, tzinfo=UTC)

    assert effective_today(now) == date(2026, 2, 14)


def test_effective_today_custom_boundary() -> None:
    now = datetime(2026, 2, 13, 16, 30, tzinfo=UTC)

    assert effective_today(now, boundary_hour=0) == date(2026, 2, 14)


def test_date_range_is_inclusive() -> None:
    assert date_range(date(2026, 1, 30), date(2026, 2, 2)) == [
        date(2026, 1, 30),
        date(2026, 1, 31),
        date(2026, 2, 1),
        date(2026, 2, 2),
    ]
    assert date_range(date(2026, 2, 2), date(2026, 2, 2)) == [date(2026, 2, 2)]


def test_date_range_rejects_reversed_bounds() -> None:
    with pytest.raises(ValueError):
        date_range(date(2026, 2, 2), date(2026, 2, 1))


def test_parse_date_arg() -> None:
    assert parse_date_arg(" 2026-02-13 ") == date(2026, 2, 13)
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        parse_date_arg("13/02/2026")
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        parse_date_arg("20260213")
