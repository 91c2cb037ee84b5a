"""Today's classes and lunch in one call."""

from datetime import date

from pydantic import BaseModel, ConfigDict

from schoolwatch.client import ScheduleDataSource
from schoolwatch.dates import current_school_weekday_index
from schoolwatch.logging import get_logger
from schoolwatch.models import DaySchedule, MealRecord, TimetableResult

log = get_logger(__name__)


class TodaySummary(BaseModel):
    """What the today screen shows.

    ``no_school`` is set only for Saturday and Sunday. A failed meal fetch is
    an error for the caller, never a reason to report no school.
    """

    model_config = ConfigDict(frozen=True)

    day: date
    no_school: bool = False
    schedule: DaySchedule | None = None
    meal: MealRecord | None = None
    timetable: TimetableResult | None = None


async def load_today(
    source: ScheduleDataSource,
    grade: int,
    classno: int,
    today: date | None = None,
) -> TodaySummary:
    """Fetch today's timetable day and lunch.

    The timetable keeps its cache fallback; the meal fetch does not.

    Raises:
        FetchError: If the timetable is unavailable or the meal fetch fails.
    """
    today = today if today is not None else date.today()
    weekday_index = current_school_weekday_index(today)
    if weekday_index is None:
        log.info("today_no_school", day=today.isoformat())
        return TodaySummary(day=today, no_school=True)

    timetable = await source.fetch_timetable(grade, classno)
    meal = await source.fetch_meal_for_day(today)

    return TodaySummary(
        day=today,
        schedule=timetable.snapshot.day(weekday_index),
        meal=meal,
        timetable=timetable,
    )
