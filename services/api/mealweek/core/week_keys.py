"""Week keys: canonical ``YYYY-WW`` identifiers for plan weeks.

The week number is the ISO week and is always zero-padded, so sorting keys
as strings sorts them chronologically.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from ..errors import ValidationFailed

WEEK_KEY_RE = re.compile(r"([0-9]{4})-([0-9]{2})")

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


@dataclass(frozen=True)
class WeekInfo:
    week_key: str
    year: int
    week_number: int
    date_range: str


def weeks_in_year(year: int) -> int:
    # Dec 28 always falls in the last ISO week of its year
    return date(year, 12, 28).isocalendar()[1]


def get_plan_key(year: int, week: int) -> str:
    return f"{year:04d}-{week:02d}"


def parse_week_key(week_key: str) -> tuple[int, int]:
    match = WEEK_KEY_RE.fullmatch(week_key or "")
    if not match:
        raise ValidationFailed(
            "Invalid week key",
            details=[{"field": "weekKey", "message": f"expected YYYY-WW, got {week_key!r}"}],
        )
    year, week = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= week <= weeks_in_year(year):
        raise ValidationFailed(
            "Invalid week key",
            details=[{"field": "weekKey", "message": f"week {week} does not exist in {year}"}],
        )
    return year, week


def week_key_for_date(d: date) -> str:
    iso = d.isocalendar()
    return get_plan_key(iso[0], iso[1])


def week_start(week_key: str) -> date:
    """Monday of the given week."""
    year, week = parse_week_key(week_key)
    return date.fromisocalendar(year, week, 1)


def get_next_week_key(week_key: str) -> str:
    return week_key_for_date(week_start(week_key) + timedelta(days=7))


def get_previous_week_key(week_key: str) -> str:
    return week_key_for_date(week_start(week_key) - timedelta(days=7))


def format_date_range(week_key: str) -> str:
    """Human readable Monday-Sunday range, e.g. ``Jan 6-12`` or ``Jan 27 - Feb 2``."""
    start = week_start(week_key)
    end = start + timedelta(days=6)
    if start.month == end.month:
        return f"{_MONTHS[start.month - 1]} {start.day}-{end.day}"
    return f"{_MONTHS[start.month - 1]} {start.day} - {_MONTHS[end.month - 1]} {end.day}"


def get_week_info_by_key(week_key: str) -> WeekInfo:
    year, week = parse_week_key(week_key)
    return WeekInfo(
        week_key=get_plan_key(year, week),
        year=year,
        week_number=week,
        date_range=format_date_range(week_key),
    )


def get_current_week_info(today: Optional[date] = None) -> WeekInfo:
    return get_week_info_by_key(week_key_for_date(today or date.today()))
