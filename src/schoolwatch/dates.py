"""Date and period-time helpers for the school week.

Two week notions are in play:
  - the school week, Monday..Friday, indexed 0..4 (timetable days)
  - the calendar week, Sunday..Saturday, used for labels and date ranges

Functions that depend on "now" take an optional ``today`` so callers and
tests can pin the date. Nothing here performs I/O.
"""

import re
from datetime import date, datetime, timedelta

PERIOD_MINUTES = 45
SCHOOL_DAYS = 5

INVALID_FORMAT = "Invalid format"
INVALID_TIME_FORMAT = "Invalid time format"

_DATE_STRING = re.compile(r"^\d{8}$")
_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})$")


def _today(today: date | None) -> date:
    return today if today is not None else date.today()


def _short_label(day: date) -> str:
    # "Sep 30 (Mon)"; day of month without zero padding
    return f"{day:%b} {day.day} ({day:%a})"


def current_school_weekday_index(today: date | None = None) -> int | None:
    """Return today's index in the school week (Mon=0..Fri=4).

    Returns None on Saturday and Sunday, when there is no timetable day.
    """
    weekday = _today(today).weekday()
    return weekday if weekday < SCHOOL_DAYS else None


def is_school_day(today: date | None = None) -> bool:
    return current_school_weekday_index(today) is not None


def week_start(today: date | None = None) -> date:
    """Return the Sunday that starts the calendar week containing ``today``."""
    day = _today(today)
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def current_week_day_labels(today: date | None = None) -> list[str]:
    """Labels for Sunday..Saturday of the current week, e.g. "Sep 30 (Mon)"."""
    start = week_start(today)
    return [_short_label(start + timedelta(days=offset)) for offset in range(7)]


def date_string_for_weekday_offset(offset: int, today: date | None = None) -> str:
    """Return the YYYYMMDD date ``offset`` days after the week's Sunday.

    Raises:
        ValueError: If offset is outside 0..6.
    """
    if not 0 <= offset <= 6:
        raise ValueError(f"Weekday offset must be within 0..6, got {offset!r}")
    return (week_start(today) + timedelta(days=offset)).strftime("%Y%m%d")


def to_date_string(value: date | str) -> str:
    """Normalise a date or a YYYYMMDD string to a validated YYYYMMDD string.

    Raises:
        ValueError: If the value is not a real calendar date.
    """
    if isinstance(value, date):
        return value.strftime("%Y%m%d")
    if not isinstance(value, str) or not _DATE_STRING.match(value):
        raise ValueError(f"Expected a date or YYYYMMDD string, got {value!r}")
    # Rejects 20240231 and friends
    datetime.strptime(value, "%Y%m%d")
    return value


def _split_period_label(label: str) -> str | None:
    """Return the text inside the parentheses of "N(HH:MM)", or None."""
    parts = label.split("(")
    if (
        len(parts) != 2
        or not parts[0].strip().isdigit()
        or not parts[1].endswith(")")
    ):
        return None
    return parts[1].replace(")", "")


def period_start_time(label: str) -> str:
    """Extract "08:50" from "1(08:50)"; labels without parentheses pass through."""
    inner = _split_period_label(label)
    return inner if inner is not None else label


def period_time_range(label: str) -> str:
    """Turn a period label like "3(10:40)" into "10:40~11:25".

    Every period lasts 45 minutes. End times past midnight wrap around the
    clock ("23:30" -> "23:30~00:15"). Malformed labels return INVALID_FORMAT
    and unreadable times return INVALID_TIME_FORMAT; this never raises.
    """
    inner = _split_period_label(label)
    if inner is None:
        return INVALID_FORMAT

    match = _CLOCK.match(inner.strip())
    if match is None:
        return INVALID_TIME_FORMAT
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return INVALID_TIME_FORMAT

    start = hour * 60 + minute
    end = (start + PERIOD_MINUTES) % (24 * 60)
    return f"{start // 60:02d}:{start % 60:02d}~{end // 60:02d}:{end % 60:02d}"


def format_meal_date(value: str) -> str:
    """Format a YYYYMMDD meal date as "Sep 30 (Mon)"; bad input is returned as-is."""
    try:
        return _short_label(datetime.strptime(value, "%Y%m%d").date())
    except (TypeError, ValueError):
        return value


def format_update_date(value: str) -> str:
    """Format "2024-09-25 12:00:00" as "Sep 25, 2024 12:00"; bad input is returned as-is."""
    try:
        stamp = datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError):
        return value
    return f"{stamp:%b} {stamp.day}, {stamp:%Y %H:%M}"


def title_date(today: date | None = None) -> str:
    """Screen title for today, e.g. "Sep 30 (Mon)"."""
    return _short_label(_today(today))
