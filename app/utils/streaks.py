"""Calendar helpers and streak counting for recurring actions.

All values are local calendar dates: completion timestamps are normalized to
local midnight before they are compared.
"""
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

STREAK_FREQUENCIES = ("daily", "weekly", "monthly")


def today_midnight() -> datetime:
    """Return today's local midnight as a naive datetime."""
    return datetime.combine(date.today(), time.min)


def to_local_date(value: datetime) -> date:
    """Return the local calendar date of a timestamp."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.date()


def start_of_week(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def previous_month(day: date) -> date:
    """Return the first day of the month before ``day``'s month."""
    return (start_of_month(day) - timedelta(days=1)).replace(day=1)


def is_completed_today(completion_dates: Iterable[datetime], today: date) -> bool:
    return any(to_local_date(value) == today for value in completion_dates)


def daily_streak(completion_dates: Iterable[datetime], today: date) -> int:
    """Count consecutive days, ending today, that have a completion."""
    days = {to_local_date(value) for value in completion_dates}
    streak = 0
    cursor = today
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def weekly_streak(completion_dates: Iterable[datetime], today: date) -> int:
    """Count consecutive Sunday-aligned weeks, ending this week, with a completion."""
    weeks = {start_of_week(to_local_date(value)) for value in completion_dates}
    streak = 0
    cursor = start_of_week(today)
    while cursor in weeks:
        streak += 1
        cursor -= timedelta(days=7)
    return streak


def monthly_streak(completion_dates: Iterable[datetime], today: date) -> int:
    """Count consecutive months, ending this month, with a completion."""
    months = {start_of_month(to_local_date(value)) for value in completion_dates}
    streak = 0
    cursor = start_of_month(today)
    while cursor in months:
        streak += 1
        cursor = previous_month(cursor)
    return streak


def calculate_streak(
    frequency: str,
    completion_dates: Iterable[datetime],
    today: Optional[date] = None,
) -> int:
    """
    Compute the current streak for an action's cadence.

    Unknown frequencies count as daily.
    """
    today = today or date.today()
    dates = list(completion_dates)

    if frequency == "weekly":
        return weekly_streak(dates, today)
    if frequency == "monthly":
        return monthly_streak(dates, today)
    return daily_streak(dates, today)
