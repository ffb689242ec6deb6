"""Date helpers with a day boundary later than midnight."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo


def effective_today(
    now: datetime | None = None,
    boundary_hour: int = 5,
    timezone: str = "Asia/Tokyo",
) -> date:
    """Return the local date, treating hours before ``boundary_hour`` as yesterday."""
    current = now or datetime.now(tz=UTC)
    local = current.astimezone(ZoneInfo(timezone))
    if local.hour < boundary_hour:
        return local.date() - timedelta(days=1)
    return local.date()


def date_range(start: date, end: date) -> list[date]:
    """Inclusive list of dates from ``start`` to ``end``."""
    if end < start:
        raise ValueError("end must not be before start")
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
