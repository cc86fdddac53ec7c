from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from app.schemas.schedule import CandidateRecord
from app.services.calendar import LOCAL_ERA_OFFSET
from app.services.conflict_service import ConflictService
from app.services.record_mapper import COLUMN_LAYOUT, ColumnLayout, RecordMapper
from app.services.room_time_index import ScheduleInterval
from app.services.spreadsheet import decode_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedTable:
    filename: str
    content: bytes


def import_schedules(
    tables: Sequence[UploadedTable],
    program_lookup: Mapping[str, int],
    committed: Iterable[ScheduleInterval],
    *,
    layout: ColumnLayout = COLUMN_LAYOUT,
    era_offset: int = LOCAL_ERA_OFFSET,
) -> list[CandidateRecord]:
    """Parse uploaded timetable sheets and flag room/time clashes row by row.

    Every file is decoded before any row is mapped, so a malformed file fails
    the whole call without partial output. Files share one conflict index and
    are processed in upload order, rows top to bottom.
    """
    decoded = []
    for table in tables:
        rows = decode_table(
            table.filename,
            table.content,
            expected_columns=layout.column_count,
            era_offset=era_offset,
        )
        decoded.append((table.filename, rows))

    mapper = RecordMapper(program_lookup, layout=layout, era_offset=era_offset)
    service = ConflictService(committed)
    records: list[CandidateRecord] = []
    for filename, rows in decoded:
        mapped = mapper.map_rows(rows)
        records.extend(service.annotate(mapped))
        logger.info(
            "Read %s: %d data rows, %d skipped without course code",
            filename,
            len(rows),
            len(rows) - len(mapped),
        )

    flagged = sum(1 for record in records if record.problem)
    logger.info(
        "Imported %d schedule rows from %d file(s), %d with problems, %d intervals indexed",
        len(records),
        len(decoded),
        flagged,
        len(service.index),
    )
    return records
