"""
Business Day Calculator for Fibre Tracker.

Handles holiday-aware business day arithmetic for phase deadlines.
Every phase deadline is "N business days after the previous deadline",
so these primitives drive the whole recalculation engine.

Key Rules:
- The start date itself is never counted: counting begins the next day
- A business day is not Saturday, not Sunday, not a holiday
- Counting between two dates excludes the start and includes the end
- Dates compare by calendar day in the configured time zone
"""
from datetime import date, timedelta
from typing import Any, Optional

from fibretrack.core.exceptions import CalendarError, ValidationError
from fibretrack.services.holidays import (
    get_calendar,
    is_weekend,
    local_today,
    to_local_date,
)


def _max_iterations(num_days: int) -> int:
    # Generous bound: weekends plus every holiday a calendar could plausibly hold
    return num_days * 3 + 30


def _walk(start: date, num_days: int, step: int, country_code: Optional[str]) -> date:
    calendar = get_calendar(country_code)
    result_date = start
    days_counted = 0
    max_iterations = _max_iterations(num_days)
    iterations = 0

    while days_counted < num_days:
        if iterations >= max_iterations:
            raise CalendarError(
                f"Could not find {num_days} business days from {start.isoformat()} "
                f"within {max_iterations} calendar days",
                country_code=calendar.country_code
            )

        result_date = result_date + timedelta(days=step)

        if calendar.is_business_day(result_date):
            days_counted += 1

        iterations += 1

    return result_date


def _require_int(num_days: Any) -> int:
    if isinstance(num_days, bool) or not isinstance(num_days, int):
        raise ValidationError("Number of business days must be an integer", field="num_days", value=num_days)
    return num_days


def add_business_days(
    start_date: Any,
    num_days: int,
    country_code: Optional[str] = None
) -> date:
    """
    Calculate N business days after a start date.

    Example:
        start_date = Friday Jan 5
        num_days = 1
        result = Monday Jan 8 (skips weekend)

    Args:
        start_date: The starting date (never counted itself)
        num_days: Number of business days to add
        country_code: Country for holiday lookup

    Returns:
        Date of the N-th business day after start; start itself if num_days <= 0
    """
    start = to_local_date(start_date)
    num_days = _require_int(num_days)

    if num_days <= 0:
        return start

    return _walk(start, num_days, 1, country_code)


def subtract_business_days(
    start_date: Any,
    num_days: int,
    country_code: Optional[str] = None
) -> date:
    """
    Calculate N business days before a date.

    Example:
        start_date = Monday Jan 8
        num_days = 1
        result = Friday Jan 5 (skips weekend)
    """
    start = to_local_date(start_date)
    num_days = _require_int(num_days)

    if num_days <= 0:
        return start

    return _walk(start, num_days, -1, country_code)


def get_business_days_between(
    start_date: Any,
    end_date: Any,
    country_code: Optional[str] = None
) -> int:
    """
    Count business days between two dates (excluding start, including end).

    If end is before start, the count is taken the other way round and
    negated, so between(a, b) == -between(b, a).

    Args:
        start_date: Start date
        end_date: End date
        country_code: Country for holiday lookup

    Returns:
        Signed number of business days
    """
    start = to_local_date(start_date)
    end = to_local_date(end_date)

    if start == end:
        return 0

    is_negative = end < start
    earlier, later = (end, start) if is_negative else (start, end)

    calendar = get_calendar(country_code)
    count = 0
    current = earlier + timedelta(days=1)

    while current <= later:
        if calendar.is_business_day(current):
            count += 1
        current += timedelta(days=1)

    return -count if is_negative else count


def get_business_days_until(
    deadline: Any,
    today: Optional[Any] = None,
    country_code: Optional[str] = None
) -> int:
    """
    Business days remaining until a deadline.

    Positive = days remaining, negative = days overdue, 0 = due today.
    Pass `today` to evaluate several deadlines against one captured day.
    """
    reference = to_local_date(today) if today is not None else local_today()
    return get_business_days_between(reference, deadline, country_code)


__all__ = [
    "add_business_days",
    "subtract_business_days",
    "get_business_days_between",
    "get_business_days_until",
    "is_weekend",
    "local_today",
    "to_local_date",
]
