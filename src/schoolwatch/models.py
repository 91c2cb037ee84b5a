"""Pydantic models for school API payloads.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Field aliases are the API's wire names; models are frozen once parsed.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schoolwatch.dates import period_time_range

_PAYLOAD_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


class MealRecord(BaseModel):
    """One day's lunch from GET /lunch (NEIS meal service fields)."""

    model_config = _PAYLOAD_CONFIG

    date: str = Field(alias="MLSV_YMD")  # "20240930"
    dishes: str = Field(alias="DDISH_NM")  # newline-delimited dish names
    calorie_info: str = Field(alias="CAL_INFO")  # "812.4 Kcal"
    nutrition_info: str = Field(alias="NTR_INFO")
    origin_info: str = Field(alias="ORPLC_INFO")

    @property
    def dish_list(self) -> list[str]:
        return [dish.strip() for dish in self.dishes.split("\n") if dish.strip()]

    @property
    def dishes_inline(self) -> str:
        """Dishes on one line, as the menu rows show them."""
        return ", ".join(self.dish_list)


class OriginalClass(BaseModel):
    """The class a substituted period replaced."""

    model_config = _PAYLOAD_CONFIG

    period: int
    subject: str
    teacher: str


class ClassPeriod(BaseModel):
    """A single period of a day's timetable."""

    model_config = _PAYLOAD_CONFIG

    period: int = Field(ge=1)  # 1-based, indexes period_time_labels
    subject: str
    teacher: str
    is_replaced: bool = Field(default=False, alias="replaced")
    original: OriginalClass | None = None  # only set when is_replaced

    @property
    def replacement_note(self) -> str | None:
        if not self.is_replaced or self.original is None:
            return None
        return f"Replaced {self.original.subject} ({self.original.teacher})"


class DaySchedule(BaseModel):
    """Ordered periods of one school day (weekday_index Mon=0..Fri=4)."""

    model_config = ConfigDict(frozen=True)

    weekday_index: int
    classes: tuple[ClassPeriod, ...] = ()


class TimetableSnapshot(BaseModel):
    """A complete timetable as served by GET /timetable.

    Fetched and cached as one unit; never merged field-by-field.
    """

    model_config = _PAYLOAD_CONFIG

    period_time_labels: tuple[str, ...] = Field(alias="day_time")  # "1(08:50)", ...
    days: tuple[tuple[ClassPeriod, ...], ...] = Field(alias="timetable")  # Mon..Fri
    last_updated: str = Field(alias="update_date")  # "2024-09-25 12:00:00"

    def day(self, weekday_index: int) -> DaySchedule | None:
        """Return the schedule for a school-week index, or None if there is none."""
        if not 0 <= weekday_index < len(self.days):
            return None
        return DaySchedule(weekday_index=weekday_index, classes=self.days[weekday_index])

    def day_schedules(self) -> list[DaySchedule]:
        return [
            DaySchedule(weekday_index=index, classes=classes)
            for index, classes in enumerate(self.days)
        ]

    def period_label(self, period: int) -> str:
        """Label for a 1-based period number; "" when the period has no label."""
        if not 1 <= period <= len(self.period_time_labels):
            return ""
        return self.period_time_labels[period - 1]

    def time_range_for(self, period: int) -> str:
        """"HH:MM~HH:MM" for a period number; "" when the period has no label."""
        label = self.period_label(period)
        return period_time_range(label) if label else ""

    def to_wire_json(self) -> str:
        """Serialise with the API's field names so the cache decodes like a payload."""
        return self.model_dump_json(by_alias=True)


class SchoolEvent(BaseModel):
    """A calendar entry from GET /schedule (NEIS school schedule fields)."""

    model_config = _PAYLOAD_CONFIG

    date: str = Field(alias="AA_YMD")  # "20241003"
    name: str = Field(alias="EVENT_NM")
    sub_label: str = Field(default="", alias="SBTR_DD_SC_NM")  # e.g. "휴업일"
    applies_to_grade1: bool = Field(default=False, alias="ONE_GRADE_EVENT_YN")
    applies_to_grade2: bool = Field(default=False, alias="TW_GRADE_EVENT_YN")
    applies_to_grade3: bool = Field(default=False, alias="THREE_GRADE_EVENT_YN")

    @field_validator(
        "applies_to_grade1", "applies_to_grade2", "applies_to_grade3", mode="before"
    )
    @classmethod
    def _yes_no(cls, value: object) -> object:
        # The API sends "Y" / "N" (sometimes "*" or "" for not applicable)
        if isinstance(value, str):
            return value.strip().upper() == "Y"
        return value

    @field_validator("sub_label", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    def applies_to_grade(self, grade: int) -> bool:
        return {
            1: self.applies_to_grade1,
            2: self.applies_to_grade2,
            3: self.applies_to_grade3,
        }.get(grade, False)


class TimetableResult(BaseModel):
    """Outcome of a timetable fetch: the snapshot and where it came from."""

    model_config = ConfigDict(frozen=True)

    snapshot: TimetableSnapshot
    source: Literal["network", "cache"]
    fallback_reason: str | None = None  # why the network result was not used

    @property
    def is_fallback(self) -> bool:
        return self.source == "cache"
