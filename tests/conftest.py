"""Shared fixtures: canned API payloads and a fake HTTP session."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from schoolwatch.cache import InMemoryTimetableCache
from schoolwatch.client import ScheduleDataSource
from schoolwatch.models import TimetableSnapshot

BASE_URL = "https://api.test"


def _period(period: int, subject: str, teacher: str, original: dict | None = None) -> dict:
    return {
        "period": period,
        "subject": subject,
        "teacher": teacher,
        "replaced": original is not None,
        "original": original,
    }


def timetable_payload(update_date: str = "2024-09-25 12:00:00") -> dict:
    return {
        "day_time": [
            "1(08:50)",
            "2(09:45)",
            "3(10:40)",
            "4(11:35)",
            "5(13:20)",
            "6(14:15)",
            "7(15:10)",
        ],
        "timetable": [
            [_period(1, "Math", "Kim"), _period(2, "English", "Lee"), _period(3, "Physics", "Park")],
            [
                _period(1, "Korean", "Choi"),
                _period(
                    2,
                    "History",
                    "Jung",
                    original={"period": 2, "subject": "Chemistry", "teacher": "Han"},
                ),
            ],
            [_period(1, "PE", "Yoon"), _period(2, "Math", "Kim")],
            [_period(1, "Music", "Lim")],
            [_period(1, "English", "Lee"), _period(7, "Club", "Seo")],
        ],
        "update_date": update_date,
    }


def meal_payload(day: str = "20241001") -> dict:
    return {
        "MLSV_YMD": day,
        "DDISH_NM": "Rice\nKimchi stew\nBulgogi\n",
        "CAL_INFO": "812.4 Kcal",
        "NTR_INFO": "Carbohydrate(g) : 120.1",
        "ORPLC_INFO": "Rice : Korea",
    }


def event_payload() -> dict:
    return {
        "AA_YMD": "20241003",
        "EVENT_NM": "National Foundation Day",
        "SBTR_DD_SC_NM": "Holiday",
        "ONE_GRADE_EVENT_YN": "Y",
        "TW_GRADE_EVENT_YN": "Y",
        "THREE_GRADE_EVENT_YN": "N",
    }


def make_response(status: int = 200, body: bytes | str | dict | list = b"", url: str = BASE_URL) -> requests.Response:
    """Build a real requests.Response carrying ``body``."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.url = url
    response.reason = "OK" if status < 400 else "Internal Server Error"
    return response


@pytest.fixture
def snapshot() -> TimetableSnapshot:
    return TimetableSnapshot.model_validate(timetable_payload())


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def cache() -> InMemoryTimetableCache:
    return InMemoryTimetableCache()


@pytest.fixture
def source(cache, session) -> ScheduleDataSource:
    return ScheduleDataSource(cache, base_url=BASE_URL, session=session)
