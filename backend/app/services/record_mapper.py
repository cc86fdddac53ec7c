from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from app.schemas.schedule import CandidateRecord
from app.services.calendar import (
    LOCAL_ERA_OFFSET,
    format_time_of_day,
    parse_time_of_day,
    to_iso_date,
)

logger = logging.getLogger(__name__)

INVALID_TIME_RANGE = "invalid time range"


@dataclass(frozen=True)
class ColumnLayout:
    """Zero-based positions of the fields in the registrar's timetable export."""

    column_count: int = 29
    course_id: int = 0
    program_name: int = 3
    type: int = 5
    group: int = 6
    pair_group: int = 7
    student_count: int = 8
    lecturer: int = 9
    day: int = 10
    start_time: int = 11
    end_time: int = 12
    room_building: int = 13
    room_number: int = 15
    mid_day: int = 17
    mid_start_time: int = 18
    mid_end_time: int = 19
    final_day: int = 21
    final_start_time: int = 22
    final_end_time: int = 23


COLUMN_LAYOUT = ColumnLayout()


def build_program_lookup(programs: Iterable[tuple[int, str]]) -> dict[str, int]:
    """Map program name to id; the first program with a given name wins."""
    lookup: dict[str, int] = {}
    for program_id, name in programs:
        lookup.setdefault(name, program_id)
    return lookup


def parse_count(text: str) -> int:
    text = text.strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return 0
    if value.is_integer():
        return int(value)
    return 0


def _normalize_time_text(text: str) -> str:
    try:
        parsed = parse_time_of_day(text)
    except ValueError:
        return text
    return format_time_of_day(parsed) if parsed is not None else text


class RecordMapper:
    def __init__(
        self,
        program_lookup: Mapping[str, int],
        layout: ColumnLayout = COLUMN_LAYOUT,
        era_offset: int = LOCAL_ERA_OFFSET,
    ) -> None:
        self.program_lookup = program_lookup
        self.layout = layout
        self.era_offset = era_offset

    def _cell(self, row: Mapping[int, str], index: int) -> str:
        value = row.get(index)
        return value.strip() if value else ""

    def _exam_window(
        self,
        row: Mapping[int, str],
        label: str,
        day_index: int,
        start_index: int,
        end_index: int,
        problems: list[str],
    ) -> tuple[str | None, str | None, str | None]:
        raw_day = self._cell(row, day_index)
        try:
            iso_day = to_iso_date(raw_day, self.era_offset)
        except ValueError:
            problems.append(f"invalid {label}: {raw_day}")
            iso_day = None
        if iso_day is None:
            return None, None, None
        start = _normalize_time_text(self._cell(row, start_index)) or None
        end = _normalize_time_text(self._cell(row, end_index)) or None
        return iso_day, start, end

    def map_row(self, row: Mapping[int, str]) -> CandidateRecord | None:
        """Map one decoded row; rows without a course code are skipped."""
        layout = self.layout
        course_id = self._cell(row, layout.course_id)
        if not course_id:
            return None

        problems: list[str] = []
        program_name = self._cell(row, layout.program_name)
        start_text = self._cell(row, layout.start_time)
        end_text = self._cell(row, layout.end_time)

        try:
            start = parse_time_of_day(start_text)
            end = parse_time_of_day(end_text)
        except ValueError:
            start = end = None
        if start is None or end is None or start >= end:
            problems.append(INVALID_TIME_RANGE)

        mid_day, mid_start, mid_end = self._exam_window(
            row, "mid_day", layout.mid_day, layout.mid_start_time, layout.mid_end_time, problems
        )
        final_day, final_start, final_end = self._exam_window(
            row, "final_day", layout.final_day, layout.final_start_time, layout.final_end_time, problems
        )

        program_id = self.program_lookup.get(program_name, 0)
        if not program_id:
            logger.debug("Unknown program %r for course %s", program_name, course_id)

        return CandidateRecord(
            course_id=course_id,
            program_id=program_id,
            type=self._cell(row, layout.type),
            group=parse_count(self._cell(row, layout.group)),
            pair_group=parse_count(self._cell(row, layout.pair_group)),
            student_count=parse_count(self._cell(row, layout.student_count)),
            lecturer=self._cell(row, layout.lecturer),
            day=self._cell(row, layout.day),
            start_time=format_time_of_day(start) if start is not None else start_text,
            end_time=format_time_of_day(end) if end is not None else end_text,
            room_id=self._cell(row, layout.room_building) + self._cell(row, layout.room_number),
            mid_day=mid_day,
            mid_start_time=mid_start,
            mid_end_time=mid_end,
            final_day=final_day,
            final_start_time=final_start,
            final_end_time=final_end,
            problem=problems,
        )

    def map_rows(self, rows: Iterable[Mapping[int, str]]) -> list[CandidateRecord]:
        records = []
        for row in rows:
            record = self.map_row(row)
            if record is not None:
                records.append(record)
        return records
