"""Relative date phrase resolution ("yesterday", "3 days ago", "friday")."""

from __future__ import annotations

import re
from datetime import date, timedelta

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_DAYS_AGO_PATTERN = re.compile(r"(\d+)\s*days?\s*ago", re.IGNORECASE)
_FIXED_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"today", re.IGNORECASE), 0),
    (re.compile(r"yesterday", re.IGNORECASE), -1),
    (re.compile(r"last\s*week", re.IGNORECASE), -7),
)
_WEEKDAY_PATTERNS = tuple(
    (re.compile(name, re.IGNORECASE), weekday) for weekday, name in enumerate(WEEKDAY_NAMES)
)


def weekday_offset(today: date, weekday: int) -> int:
    """Return the negative offset to the most recent prior ``weekday`` (Monday=0).

    The result is always in ``[-7, -1]``: naming today's weekday means the same
    day last week.
    """

    diff = (today.weekday() - weekday) % 7
    return -(diff or 7)


def resolve_relative_date(text: str, today: date) -> date | None:
    """Resolve the first recognized relative date phrase in ``text``.

    An "N days ago" phrase anywhere in the text wins over fixed phrases. Returns
    ``None`` when nothing is recognized; defaulting to today is the caller's job.
    """

    days_ago = _DAYS_AGO_PATTERN.search(text)
    if days_ago:
        try:
            return _shift(today, -int(days_ago.group(1)))
        except ValueError:
            return None

    for pattern, offset in _FIXED_PATTERNS:
        if pattern.search(text):
            return _shift(today, offset)
    for pattern, weekday in _WEEKDAY_PATTERNS:
        if pattern.search(text):
            return _shift(today, weekday_offset(today, weekday))
    return None


def _shift(today: date, days: int) -> date | None:
    try:
        return today + timedelta(days=days)
    except OverflowError:
        # Outside the representable calendar; treated as unrecognized.
        return None


__all__ = ["WEEKDAY_NAMES", "resolve_relative_date", "weekday_offset"]
