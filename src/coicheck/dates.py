"""
coicheck Date Utilities

Calendar-date math for expiration checks.

Certificate dates are calendar days ("2025-03-01"), not instants. They are
parsed straight into datetime.date so no UTC offset can shift the day, and
"days until" is the difference between two local calendar days.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[str, date, datetime, None]

_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def today_local() -> date:
    """The current local calendar day."""
    return date.today()


def parse_local_date(value: DateLike) -> Optional[date]:
    """
    Parse a YYYY-MM-DD value into a calendar date.

    Accepts date/datetime objects (datetimes keep their own calendar day)
    and strings starting with YYYY-MM-DD. Anything else, including
    impossible days such as 2025-02-30, returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    match = _DATE_PREFIX.match(value.strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def days_until(target: DateLike, today: Optional[date] = None) -> Optional[int]:
    """
    Whole days from today until target.

    Returns None when target is absent or unparseable. Negative values mean
    the date has already passed; 0 means it is today.
    """
    target_date = parse_local_date(target)
    if target_date is None:
        return None
    reference = today if today is not None else today_local()
    return (target_date - reference).days


def format_date(value: DateLike) -> str:
    """Format a date for display, e.g. "Jan 15, 2024". Returns "N/A" if absent."""
    parsed = parse_local_date(value)
    if parsed is None:
        return "N/A"
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_relative_date(value: DateLike, now: Optional[date] = None) -> str:
    """Describe how long ago a date was ("today", "3 weeks ago", ...)."""
    parsed = parse_local_date(value)
    if parsed is None:
        return ""
    reference = now if now is not None else today_local()
    diff_days = (reference - parsed).days

    if diff_days == 0:
        return "today"
    if diff_days == 1:
        return "yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        return f"{diff_days // 7} weeks ago"
    if diff_days < 365:
        return f"{diff_days // 30} months ago"
    return f"{diff_days // 365} years ago"
