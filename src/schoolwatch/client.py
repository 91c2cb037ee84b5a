"""ScheduleDataSource - fetches timetable, meal and event data from the school API.

Endpoints (plain HTTPS GET, JSON, no auth):
  /timetable?grade=&classno=                      -> TimetableSnapshot
  /lunch?[grade=&classno=&]startdate=&enddate=    -> [MealRecord]
  /schedule?startdate=&enddate=&schoolname=       -> [SchoolEvent]

Only the timetable has a local fallback: every good timetable overwrites the
cache slot, and a network, empty-body or decode failure is answered with the
cached snapshot when there is one. Meals and events report every failure.

Each fetch is a coroutine; the blocking requests call runs in a worker
thread, so awaiting a fetch yields exactly one result or one FetchError.
"""

import asyncio
from datetime import date, timedelta
from typing import Any, TypeVar

import requests
from pydantic import TypeAdapter, ValidationError

from schoolwatch.cache import FileTimetableCache, TimetableCache
from schoolwatch.config import SchoolWatchConfig, get_config
from schoolwatch.dates import date_string_for_weekday_offset, to_date_string
from schoolwatch.errors import (
    DecodeError,
    EmptyBody,
    InvalidRequestParameters,
    NetworkError,
    NoCacheAvailable,
    RecoverableFetchError,
)
from schoolwatch.logging import get_logger
from schoolwatch.models import (
    MealRecord,
    SchoolEvent,
    TimetableResult,
    TimetableSnapshot,
)

log = get_logger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "https://school-api-1i8w.onrender.com"

_SNAPSHOT = TypeAdapter(TimetableSnapshot)
_MEALS = TypeAdapter(list[MealRecord])
_EVENTS = TypeAdapter(list[SchoolEvent])


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidRequestParameters(
            f"Invalid URL: {name} must be a positive integer, got {value!r}"
        )
    return value


def _date_param(name: str, value: date | str) -> str:
    try:
        return to_date_string(value)
    except ValueError as e:
        raise InvalidRequestParameters(f"Invalid URL: {name}: {e}") from e


def _date_range(start: date | str, end: date | str) -> dict[str, str]:
    startdate = _date_param("startdate", start)
    enddate = _date_param("enddate", end)
    # YYYYMMDD strings order like the dates they name
    if startdate > enddate:
        raise InvalidRequestParameters(
            f"Invalid URL: startdate {startdate} is after enddate {enddate}"
        )
    return {"startdate": startdate, "enddate": enddate}


class ScheduleDataSource:
    """Client for the school data API with a timetable cache fallback.

    At most one fetch per data kind is expected to be in flight. Two
    concurrent timetable fetches both write the cache; the last one wins.
    """

    def __init__(
        self,
        cache: TimetableCache,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize ScheduleDataSource.

        Args:
            cache: Slot that holds the last good timetable.
            base_url: API root, without a trailing slash.
            session: HTTP session to use; a new one is created if omitted.
            timeout: Per-request timeout in seconds; None keeps the transport default.
        """
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _build_url(self, path: str, params: dict[str, Any]) -> str:
        try:
            prepared = requests.Request(
                "GET", f"{self.base_url}{path}", params=params
            ).prepare()
        except (requests.RequestException, ValueError) as e:
            raise InvalidRequestParameters(f"Invalid URL: {e}") from e
        return prepared.url

    def _get(self, url: str) -> bytes:
        """Blocking GET returning the raw body.

        Raises:
            NetworkError: Transport failure or non-2xx status.
            EmptyBody: The response carried no data.
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            log.warning("fetch_failed", url=url, error=str(e), type=type(e).__name__)
            raise NetworkError(f"Failed to fetch data: {e}") from e

        body = response.content
        if not body or not body.strip():
            log.warning("fetch_empty_body", url=url)
            raise EmptyBody("No data received")
        return body

    async def _fetch(self, path: str, params: dict[str, Any], adapter: TypeAdapter[T]) -> T:
        url = self._build_url(path, params)
        log.debug("fetch_started", url=url)
        body = await asyncio.to_thread(self._get, url)
        try:
            return adapter.validate_json(body)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "body"
            log.warning("fetch_decode_failed", url=url, errors=e.error_count())
            raise DecodeError(
                f"Failed to decode data: {location}: {first['msg']}"
            ) from e

    # ------------------------------------------------------------------
    # Timetable
    # ------------------------------------------------------------------
    async def fetch_timetable(self, grade: int, classno: int) -> TimetableResult:
        """Fetch a class's timetable, falling back to the cached snapshot.

        A fresh snapshot is written to the cache before it is returned; a
        failed cache write is logged and the fresh snapshot is still returned.
        A fallback result never writes the cache.

        Raises:
            InvalidRequestParameters: grade or classno is not a positive integer.
            NoCacheAvailable: The fetch failed and nothing is cached.
        """
        params = {
            "grade": _positive_int("grade", grade),
            "classno": _positive_int("classno", classno),
        }
        try:
            snapshot = await self._fetch("/timetable", params, _SNAPSHOT)
        except RecoverableFetchError as e:
            cached = await asyncio.to_thread(self.cache.load)
            if cached is None:
                log.error(
                    "timetable_unavailable", grade=grade, classno=classno, error=str(e)
                )
                raise NoCacheAvailable(f"No cached data available. ({e})") from e
            log.warning(
                "timetable_cache_fallback",
                grade=grade,
                classno=classno,
                reason=str(e),
                update_date=cached.last_updated,
            )
            return TimetableResult(snapshot=cached, source="cache", fallback_reason=str(e))

        try:
            await asyncio.to_thread(self.cache.save, snapshot)
        except OSError as e:
            # The fresh snapshot is still good; only the offline copy is stale
            log.warning(
                "timetable_cache_save_failed",
                grade=grade,
                classno=classno,
                error=str(e),
            )
        log.info(
            "timetable_fetched",
            grade=grade,
            classno=classno,
            days=len(snapshot.days),
            update_date=snapshot.last_updated,
        )
        return TimetableResult(snapshot=snapshot, source="network")

    # ------------------------------------------------------------------
    # Meals
    # ------------------------------------------------------------------
    async def fetch_meals(
        self,
        start: date | str,
        end: date | str,
        *,
        grade: int | None = None,
        classno: int | None = None,
    ) -> list[MealRecord]:
        """Fetch lunch menus for an inclusive date range.

        An empty array means no meals are served in the range and returns [].

        Raises:
            FetchError: Any failure; there is no cached fallback for meals.
        """
        params: dict[str, Any] = {}
        if grade is not None:
            params["grade"] = _positive_int("grade", grade)
        if classno is not None:
            params["classno"] = _positive_int("classno", classno)
        dates = _date_range(start, end)
        params.update(dates)

        meals = await self._fetch("/lunch", params, _MEALS)
        log.info("meals_fetched", count=len(meals), **dates)
        return meals

    async def fetch_meal_for_day(self, day: date | str | None = None) -> MealRecord | None:
        """Fetch one day's lunch (default today); None when nothing is served."""
        day = day if day is not None else date.today()
        meals = await self.fetch_meals(day, day)
        return meals[0] if meals else None

    async def fetch_upcoming_meals(
        self,
        days: int = 15,
        *,
        grade: int | None = None,
        classno: int | None = None,
        today: date | None = None,
    ) -> list[MealRecord]:
        """Fetch meals from today through ``days`` days ahead."""
        start = today if today is not None else date.today()
        return await self.fetch_meals(
            start, start + timedelta(days=days), grade=grade, classno=classno
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    async def fetch_events(
        self, start: date | str, end: date | str, school_name: str
    ) -> list[SchoolEvent]:
        """Fetch the school calendar for an inclusive date range.

        Raises:
            FetchError: Any failure; there is no cached fallback for events.
        """
        if not isinstance(school_name, str) or not school_name.strip():
            raise InvalidRequestParameters("Invalid URL: school name is required")
        params: dict[str, Any] = _date_range(start, end)
        params["schoolname"] = school_name.strip()

        events = await self._fetch("/schedule", params, _EVENTS)
        log.info("events_fetched", count=len(events), school=params["schoolname"])
        return events

    async def fetch_week_events(
        self, school_name: str, today: date | None = None
    ) -> list[SchoolEvent]:
        """Fetch events for the current Sunday..Saturday week."""
        return await self.fetch_events(
            date_string_for_weekday_offset(0, today),
            date_string_for_weekday_offset(6, today),
            school_name,
        )


def build_data_source(config: SchoolWatchConfig | None = None) -> ScheduleDataSource:
    """Create a ScheduleDataSource backed by the on-disk timetable cache."""
    config = config or get_config()
    cache = FileTimetableCache(state_dir=config.state_dir, key=config.cache_key)
    return ScheduleDataSource(
        cache, base_url=config.api_base_url, timeout=config.request_timeout
    )
