"""Show today's classes, the week's timetable, meals or events as JSON or a table.

Run with: python scripts/show_schedule.py              # today (JSON)
Table:    python scripts/show_schedule.py --table
Week:     python scripts/show_schedule.py --timetable --table
Meals:    python scripts/show_schedule.py --meals
Events:   python scripts/show_schedule.py --events --school-name "Example High School"
Class:    python scripts/show_schedule.py --grade 1 --classno 3 --save-preferences

Grade and class default to the saved preferences, then to the configured
defaults (grade 2, class 6).

Exit codes:
  0 = success (JSON or table on stdout)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import json
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Allow running from a checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from schoolwatch.client import ScheduleDataSource, build_data_source  # noqa: E402
from schoolwatch.config import get_config  # noqa: E402
from schoolwatch.dates import (  # noqa: E402
    current_week_day_labels,
    format_meal_date,
    format_update_date,
    title_date,
)
from schoolwatch.errors import FetchError  # noqa: E402
from schoolwatch.logging import setup_logging  # noqa: E402
from schoolwatch.models import TimetableSnapshot  # noqa: E402
from schoolwatch.preferences import (  # noqa: E402
    CLASS_NUMBERS,
    GRADES,
    PreferencesStore,
    StudentPreferences,
)
from schoolwatch.today import TodaySummary, load_today  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show school timetable, meals and events.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--today", action="store_true", help="Today's classes and lunch (default)."
    )
    mode_group.add_argument(
        "--timetable", action="store_true", help="This week's timetable (Mon-Fri)."
    )
    mode_group.add_argument(
        "--meals", action="store_true", help="Lunch menus for the coming days."
    )
    mode_group.add_argument(
        "--events", action="store_true", help="School calendar for this week."
    )

    parser.add_argument("--table", action="store_true", help="Human-readable table output.")
    parser.add_argument("--grade", type=int, choices=GRADES, default=None)
    parser.add_argument("--classno", type=int, choices=CLASS_NUMBERS, default=None)
    parser.add_argument(
        "--save-preferences",
        action="store_true",
        help="Remember --grade/--classno for later runs.",
    )
    parser.add_argument(
        "--school-name",
        type=str,
        default=None,
        help="School name for --events (default: SCHOOLWATCH_SCHOOL_NAME).",
    )
    return parser.parse_args()


def _format_table(headers: list[str], rows: list[list[str]], empty: str) -> str:
    """Format rows as a plain-text table with a header and separator."""
    if not rows:
        return empty

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows
    ]
    return "\n".join([header_line, separator, *row_lines])


def _class_rows(snapshot: TimetableSnapshot, classes) -> list[list[str]]:
    return [
        [
            str(c.period),
            snapshot.time_range_for(c.period) or "-",
            c.subject + (" (!)" if c.is_replaced else ""),
            c.teacher,
            c.replacement_note or "",
        ]
        for c in classes
    ]


_CLASS_HEADERS = ["#", "Time", "Subject", "Teacher", "Note"]


def _dump_json(items) -> str:
    return json.dumps(
        [item.model_dump(mode="json") for item in items], indent=2, ensure_ascii=False
    )


def _render_today(summary: TodaySummary, table: bool) -> str:
    if not table:
        return summary.model_dump_json(indent=2)
    if summary.no_school:
        return "NO SCHOOL TODAY!"

    lines = [title_date(summary.day), ""]
    if summary.timetable is not None and summary.schedule is not None:
        lines.append(
            _format_table(
                _CLASS_HEADERS,
                _class_rows(summary.timetable.snapshot, summary.schedule.classes),
                "(no classes scheduled)",
            )
        )
    lines.append("")
    if summary.meal is not None:
        lines.append(f"Menu: {summary.meal.dishes_inline}")
        lines.append(f"      {summary.meal.calorie_info}")
    else:
        lines.append("No menu to display")
    return "\n".join(lines)


def _render_timetable(snapshot: TimetableSnapshot, table: bool) -> str:
    if not table:
        return snapshot.model_dump_json(indent=2)

    # Labels run Sunday..Saturday; timetable days start on Monday
    labels = current_week_day_labels()
    sections = []
    for day in snapshot.day_schedules():
        index = day.weekday_index + 1
        sections.append(labels[index] if index < len(labels) else "")
        rows = _class_rows(snapshot, day.classes)
        sections.append(_format_table(_CLASS_HEADERS, rows, "(no classes)"))
        sections.append("")
    sections.append(f"Last updated: {format_update_date(snapshot.last_updated)}")
    return "\n".join(sections)


async def main(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    store = PreferencesStore(config.state_dir)
    saved = store.load()
    preferences = StudentPreferences(
        grade=args.grade if args.grade is not None else saved.grade,
        classno=args.classno if args.classno is not None else saved.classno,
    )
    if args.save_preferences:
        store.save(preferences)
    grade, classno = preferences.resolved(config.default_grade, config.default_classno)

    source: ScheduleDataSource = build_data_source(config)
    try:
        if args.timetable:
            result = await source.fetch_timetable(grade, classno)
            if result.is_fallback:
                _log(f"  Showing cached timetable: {result.fallback_reason}")
            print(_render_timetable(result.snapshot, args.table))

        elif args.meals:
            meals = await source.fetch_upcoming_meals(
                config.meal_lookahead_days, grade=grade, classno=classno
            )
            if args.table:
                rows = [
                    [format_meal_date(m.date), m.dishes_inline, m.calorie_info]
                    for m in meals
                ]
                print(_format_table(["Date", "Menu", "Calories"], rows, "(no meals)"))
            else:
                print(_dump_json(meals))

        elif args.events:
            school_name = args.school_name or config.school_name
            events = await source.fetch_week_events(school_name)
            if args.table:
                headers = ["Date", "Event", "Type", f"Grade {grade}"]
                rows = [
                    [
                        format_meal_date(e.date),
                        e.name,
                        e.sub_label,
                        "Y" if e.applies_to_grade(grade) else "-",
                    ]
                    for e in events
                ]
                print(_format_table(headers, rows, "(no events)"))
            else:
                print(_dump_json(events))

        else:
            summary = await load_today(source, grade, classno)
            if summary.timetable is not None and summary.timetable.is_fallback:
                _log(f"  Showing cached timetable: {summary.timetable.fallback_reason}")
            print(_render_today(summary, args.table))
    finally:
        source.close()


if __name__ == "__main__":
    args = _parse_args()
    try:
        asyncio.run(main(args))
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
