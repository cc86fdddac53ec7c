from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from app.schemas.schedule import CandidateRecord, ScheduleConflictDetail, ScheduleIn
from app.services.room_time_index import IN_BATCH_ID, RoomTimeIndex, ScheduleInterval

logger = logging.getLogger(__name__)

IN_BATCH_CONFLICT = "duplicate time with some row in excel"


def describe_conflict(other: ScheduleInterval) -> str:
    if other.is_committed:
        return f"duplicate time with id:{other.id}"
    return IN_BATCH_CONFLICT


class ConflictService:
    """Room/time overlap checks against a committed snapshot plus the current batch.

    The index is seeded once from ``committed`` and then grows with every
    record checked, so a record only ever sees committed schedules and records
    checked before it.
    """

    def __init__(self, committed: Iterable[ScheduleInterval]):
        self.index = RoomTimeIndex.build(committed)
        self._checked = 0

    def check(self, record, position: int | None = None) -> ScheduleInterval | None:
        """Return the first interval ``record`` overlaps, then index the record.

        Records without a usable time range are neither checked nor indexed.
        """
        if position is None:
            position = self._checked
        self._checked += 1

        interval = ScheduleInterval.from_record(record, interval_id=IN_BATCH_ID, position=position)
        if interval is None:
            return None
        clash = self.index.first_overlap(interval)
        self.index.insert(interval)
        return clash

    def annotate(self, records: Iterable[CandidateRecord]) -> list[CandidateRecord]:
        """Import path: record each first clash as a row problem and keep going."""
        annotated = []
        for record in records:
            clash = self.check(record)
            if clash is not None:
                logger.debug(
                    "Row %s (%s %s %s-%s) clashes with %s",
                    record.course_id,
                    record.room_id,
                    record.day,
                    record.start_time,
                    record.end_time,
                    clash.id if clash.is_committed else f"row {clash.position}",
                )
                record.problem.append(describe_conflict(clash))
            annotated.append(record)
        return annotated

    def validate_batch(self, records: Sequence[ScheduleIn]) -> list[ScheduleConflictDetail]:
        """Direct-submission path: list every record that clashes with anything."""
        conflicts: list[ScheduleConflictDetail] = []
        for position, record in enumerate(records):
            clash = self.check(record, position)
            if clash is None:
                continue
            conflicts.append(
                ScheduleConflictDetail(
                    data=record,
                    conflict_with=clash.id if clash.is_committed else None,
                    conflict_with_index=None if clash.is_committed else clash.position,
                )
            )
        return conflicts
