"""SchoolWatch - client for a school's meal, timetable and calendar API.

Fetches and decodes the remote JSON data, keeps the last good timetable in a
local cache for offline fallback, and resolves today and this week against
the Monday-Friday school week.
"""

from schoolwatch.cache import FileTimetableCache, InMemoryTimetableCache, TimetableCache
from schoolwatch.client import ScheduleDataSource, build_data_source
from schoolwatch.errors import (
    DecodeError,
    EmptyBody,
    FetchError,
    InvalidRequestParameters,
    NetworkError,
    NoCacheAvailable,
)
from schoolwatch.models import (
    ClassPeriod,
    DaySchedule,
    MealRecord,
    SchoolEvent,
    TimetableResult,
    TimetableSnapshot,
)
from schoolwatch.today import TodaySummary, load_today

__all__ = [
    "ScheduleDataSource",
    "build_data_source",
    "TimetableCache",
    "InMemoryTimetableCache",
    "FileTimetableCache",
    "FetchError",
    "InvalidRequestParameters",
    "NetworkError",
    "EmptyBody",
    "DecodeError",
    "NoCacheAvailable",
    "MealRecord",
    "ClassPeriod",
    "DaySchedule",
    "TimetableSnapshot",
    "SchoolEvent",
    "TimetableResult",
    "TodaySummary",
    "load_today",
]
