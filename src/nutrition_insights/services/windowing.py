"""Local-day and week boundaries."""

from collections.abc import Iterable, Iterator
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from nutrition_insights.domain.errors import InvalidDateRangeError
from nutrition_insights.domain.progress import DailyNutrientTotals

ISO_SUNDAY = 7


def week_start(day: date) -> date:
    """Return the Monday of the ISO week containing ``day``."""
    weekday = day.isoweekday()
    if weekday == ISO_SUNDAY:
        return day - timedelta(days=6)
    return day - timedelta(days=weekday - 1)


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``day``."""
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


def validate_range(start: date, end: date) -> None:
    """Reject ranges whose end is before their start."""
    if end < start:
        raise InvalidDateRangeError(
            f"`to` ({end.isoformat()}) must be on or after `from` "
            f"({start.isoformat()})"
        )


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive."""
    validate_range(start, end)
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def local_day_bounds(day: date, timezone_name: str) -> tuple[datetime, datetime]:
    """Return the UTC start and exclusive end of a local calendar day."""
    tz = ZoneInfo(timezone_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def local_range_bounds(
    start: date, end: date, timezone_name: str
) -> tuple[datetime, datetime]:
    """Return UTC bounds covering local days start through end."""
    validate_range(start, end)
    range_start, _ = local_day_bounds(start, timezone_name)
    _, range_end = local_day_bounds(end, timezone_name)
    return range_start, range_end


def local_today(timezone_name: str, now: datetime | None = None) -> date:
    """Return today's date in the given timezone."""
    tz = ZoneInfo(timezone_name)
    current = now or datetime.now(tz=UTC)
    return current.astimezone(tz).date()


def local_day_of(moment: datetime, timezone_name: str) -> date:
    """Return the local calendar day of an aware datetime."""
    return moment.astimezone(ZoneInfo(timezone_name)).date()


def index_by_day(
    daily_totals: Iterable[DailyNutrientTotals],
) -> dict[date, DailyNutrientTotals]:
    """Index totals by day; a later entry for the same day wins."""
    return {totals.day: totals for totals in daily_totals}


def fill_missing_days(
    daily_totals: Iterable[DailyNutrientTotals], start: date, end: date
) -> list[DailyNutrientTotals]:
    """Return one entry per day in range, zero-filled where none was recorded."""
    indexed = index_by_day(daily_totals)
    return [
        indexed.get(day) or DailyNutrientTotals(day=day)
        for day in iter_days(start, end)
    ]
