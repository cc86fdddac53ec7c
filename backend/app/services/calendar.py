"""Date and time-of-day normalization for uploaded timetable sheets.

Exam dates in the department's sheets are written ``D/M/Y`` with a Buddhist-era
year (Gregorian + 543). Class and exam times come in as ``H:MM``, ``HH:MM``,
``HH:MM:SS`` or the dotted ``HH.MM`` form.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time

LOCAL_ERA_OFFSET = 543

TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2})[:.](\d{2})(?::(\d{2}))?$")
LOOSE_ISO_DATE_PATTERN = re.compile(r"^(-?\d{1,4})-(\d{1,2})-(\d{1,2})$")


def to_iso_date(value: str | None, era_offset: int = LOCAL_ERA_OFFSET) -> str | None:
    """Convert ``D/M/Y`` (local-era year) to ``YYYY-M-D``.

    Day and month are copied verbatim, so ``"15/3/2566"`` becomes
    ``"2023-3-15"``. Blank input means the date is absent and yields ``None``.
    Raises ``ValueError`` when the text is not three slash-separated parts or
    the year is not an integer.
    """
    if value is None or not value.strip():
        return None

    parts = [part.strip() for part in value.split("/")]
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Expected D/M/Y date, got {value!r}")
    day, month, year = parts
    gregorian_year = int(year) - era_offset
    return f"{gregorian_year}-{month}-{day}"


def to_local_era_text(value: date, era_offset: int = LOCAL_ERA_OFFSET) -> str:
    """Render a date the way the sheets write it, e.g. ``15/3/2566``."""
    return f"{value.day}/{value.month}/{value.year + era_offset}"


def parse_loose_date(value: str | date | None) -> date | None:
    """Parse ``YYYY-M-D`` (zero padding optional) into a date; blank is ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    match = LOOSE_ISO_DATE_PATTERN.match(text)
    if not match:
        raise ValueError("Date must be in YYYY-MM-DD format")
    year, month, day = (int(group) for group in match.groups())
    return date(year, month, day)


def parse_time_of_day(value: str | time | None) -> time | None:
    if value is None or isinstance(value, time):
        return value
    text = value.strip()
    if not text:
        return None
    match = TIME_OF_DAY_PATTERN.match(text)
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


def format_time_of_day(value: time) -> str:
    if value.second:
        return value.strftime("%H:%M:%S")
    return value.strftime("%H:%M")
