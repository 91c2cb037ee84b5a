import pytest
from pydantic import ValidationError

from schoolwatch.models import ClassPeriod, MealRecord, SchoolEvent, TimetableSnapshot
from tests.conftest import event_payload, meal_payload, timetable_payload


def test_snapshot_decodes_wire_names(snapshot):
    assert snapshot.last_updated == "2024-09-25 12:00:00"
    assert len(snapshot.days) == 5
    assert snapshot.period_time_labels[2] == "3(10:40)"
    assert snapshot.days[0][0].subject == "Math"


def test_snapshot_is_frozen(snapshot):
    with pytest.raises(ValidationError):
        snapshot.last_updated = "later"


def test_replaced_period_keeps_original(snapshot):
    history = snapshot.days[1][1]
    assert history.is_replaced is True
    assert history.original is not None
    assert history.original.subject == "Chemistry"
    assert history.replacement_note == "Replaced Chemistry (Han)"


def test_regular_period_has_no_replacement_note(snapshot):
    assert snapshot.days[0][0].replacement_note is None


def test_period_must_be_positive():
    with pytest.raises(ValidationError):
        ClassPeriod.model_validate({"period": 0, "subject": "Math", "teacher": "Kim", "replaced": False})


def test_day_lookup(snapshot):
    tuesday = snapshot.day(1)
    assert tuesday is not None
    assert tuesday.weekday_index == 1
    assert [c.subject for c in tuesday.classes] == ["Korean", "History"]
    assert snapshot.day(5) is None
    assert snapshot.day(-1) is None


def test_day_schedules_cover_every_day(snapshot):
    schedules = snapshot.day_schedules()
    assert [d.weekday_index for d in schedules] == [0, 1, 2, 3, 4]


def test_period_label_and_time_range(snapshot):
    assert snapshot.period_label(3) == "3(10:40)"
    assert snapshot.time_range_for(3) == "10:40~11:25"


def test_period_beyond_labels_is_empty(snapshot):
    assert snapshot.period_label(8) == ""
    assert snapshot.period_label(0) == ""
    assert snapshot.time_range_for(8) == ""


def test_wire_json_round_trips(snapshot):
    assert '"day_time"' in snapshot.to_wire_json()
    assert TimetableSnapshot.model_validate_json(snapshot.to_wire_json()) == snapshot


def test_missing_field_is_rejected():
    payload = timetable_payload()
    del payload["update_date"]
    with pytest.raises(ValidationError):
        TimetableSnapshot.model_validate(payload)


def test_meal_dishes():
    meal = MealRecord.model_validate(meal_payload())
    assert meal.date == "20241001"
    assert meal.dish_list == ["Rice", "Kimchi stew", "Bulgogi"]
    assert meal.dishes_inline == "Rice, Kimchi stew, Bulgogi"
    assert meal.calorie_info == "812.4 Kcal"


def test_event_grade_flags():
    event = SchoolEvent.model_validate(event_payload())
    assert event.name == "National Foundation Day"
    assert event.sub_label == "Holiday"
    assert event.applies_to_grade(1) is True
    assert event.applies_to_grade(2) is True
    assert event.applies_to_grade(3) is False
    assert event.applies_to_grade(4) is False


def test_event_optional_fields():
    event = SchoolEvent.model_validate(
        {"AA_YMD": "20241009", "EVENT_NM": "Hangul Day", "SBTR_DD_SC_NM": None, "ONE_GRADE_EVENT_YN": "*"}
    )
    assert event.sub_label == ""
    assert event.applies_to_grade1 is False
    assert event.applies_to_grade2 is False
