"""Date manipulation utilities"""

from datetime import date
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Advance by calendar months, clamping to the last day of shorter months"""
    return from_date + relativedelta(months=months)


def days_between(start: date, end: date) -> int:
    """Number of calendar days from start to end (negative if end precedes start)"""
    return (end - start).days


def whole_months_elapsed(since: date, as_of: date) -> int:
    """Elapsed membership months, counted as 30-day blocks"""
    return max(0, days_between(since, as_of) // 30)
