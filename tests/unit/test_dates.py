"""Unit tests for relative date resolution."""

from __future__ import annotations

from datetime import date

import pytest

from smartspend.parsing.dates import WEEKDAY_NAMES, resolve_relative_date, weekday_offset

WEDNESDAY = date(2026, 10, 14)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("coffee today", date(2026, 10, 14)),
        ("Yesterday I took a cab", date(2026, 10, 13)),
        ("dinner last week", date(2026, 10, 7)),
        ("lastweek groceries", date(2026, 10, 7)),
        ("5 days ago", date(2026, 10, 9)),
        ("1 day ago", date(2026, 10, 13)),
        ("on Friday", date(2026, 10, 9)),
        ("tuesday", date(2026, 10, 13)),
        ("THURSDAY", date(2026, 10, 8)),
    ],
)
def test_resolve_relative_date_phrases(text: str, expected: date) -> None:
    assert resolve_relative_date(text, WEDNESDAY) == expected


def test_resolve_relative_date_returns_none_without_phrase() -> None:
    assert resolve_relative_date("this morning", WEDNESDAY) is None


def test_days_ago_overrides_fixed_phrases() -> None:
    assert resolve_relative_date("yesterday, no wait, 3 days ago", WEDNESDAY) == date(
        2026, 10, 11
    )
    assert resolve_relative_date("today or 2 days ago", WEDNESDAY) == date(2026, 10, 12)


def test_weekday_matching_today_resolves_to_previous_week() -> None:
    assert resolve_relative_date("wednesday lunch", WEDNESDAY) == date(2026, 10, 7)


@pytest.mark.parametrize("weekday", range(7))
def test_weekday_offset_is_strictly_in_the_past(weekday: int) -> None:
    offset = weekday_offset(WEDNESDAY, weekday)

    assert -7 <= offset <= -1
    assert date.fromordinal(WEDNESDAY.toordinal() + offset).weekday() == weekday


def test_weekday_names_follow_python_weekday_numbers() -> None:
    assert WEEKDAY_NAMES[WEDNESDAY.weekday()] == "wednesday"


def test_out_of_range_offset_is_treated_as_unrecognized() -> None:
    assert resolve_relative_date("99999999999 days ago", WEDNESDAY) is None
    assert resolve_relative_date("yesterday", date.min) is None
