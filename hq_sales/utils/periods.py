"""
Calendar expansion for target periods. Weeks start on Monday.
"""
from datetime import date, timedelta
from enum import Enum


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def start_of_week(d: date) -> date:
    return d - timedelta(days=d.weekday())


def end_of_week(d: date) -> date:
    return start_of_week(d) + timedelta(days=6)


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    # Day before the first of next month
    first_next = (d.replace(day=28) + timedelta(days=4)).replace(day=1)
    return first_next - timedelta(days=1)


def expand_period(period: Period | str, anchor: date) -> tuple[date, date]:
    """Return the inclusive (start, end) of the period containing anchor."""
    period = Period(period)
    if period == Period.WEEKLY:
        return start_of_week(anchor), end_of_week(anchor)
    if period == Period.MONTHLY:
        return start_of_month(anchor), end_of_month(anchor)
    return anchor, anchor


def each_day(start: date, end: date) -> list[date]:
    out = []
    d = start
    while d <= end:
        out.append(d)
        d += timedelta(days=1)
    return out
