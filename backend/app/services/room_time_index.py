from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import time
from typing import Any

from app.services.calendar import parse_time_of_day

# Intervals that are not committed yet carry this id.
IN_BATCH_ID = -1


@dataclass(frozen=True)
class ScheduleInterval:
    """One occupancy of a room on a weekday, ``[start_time, end_time)``."""

    id: int
    room_key: str
    day: str
    start_time: time
    end_time: time
    # Row order inside the current batch; not part of interval identity.
    position: int | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.start_time >= self.end_time:
            raise ValueError(f"start_time {self.start_time} must be before end_time {self.end_time}")

    @property
    def is_committed(self) -> bool:
        return self.id >= 0

    @classmethod
    def from_record(
        cls,
        record: Any,
        *,
        interval_id: int | None = None,
        position: int | None = None,
    ) -> ScheduleInterval | None:
        """Build an interval from any object with room/day/time attributes.

        Works for ORM rows, ``ScheduleIn`` and ``CandidateRecord`` alike.
        Returns ``None`` when the times are missing, unparsable or out of order.
        """
        if interval_id is None:
            interval_id = getattr(record, "id", IN_BATCH_ID)
        try:
            start = parse_time_of_day(record.start_time)
            end = parse_time_of_day(record.end_time)
        except ValueError:
            return None
        if start is None or end is None or start >= end:
            return None
        return cls(
            id=interval_id,
            room_key=record.room_id,
            day=record.day,
            start_time=start,
            end_time=end,
            position=position,
        )


def overlaps(a: ScheduleInterval, b: ScheduleInterval) -> bool:
    """Half-open overlap on the same room and weekday; touching ends do not clash."""
    return (
        a.room_key == b.room_key
        and a.day == b.day
        and a.start_time < b.end_time
        and a.end_time > b.start_time
    )


class RoomTimeIndex:
    """Room key -> intervals known to occupy that room, in insertion order.

    Append-only and owned by a single import or validation call.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, list[ScheduleInterval]] = defaultdict(list)

    @classmethod
    def build(cls, existing: Iterable[ScheduleInterval]) -> RoomTimeIndex:
        index = cls()
        for interval in existing:
            index.insert(interval)
        return index

    def lookup(self, room_key: str) -> list[ScheduleInterval]:
        return list(self._buckets.get(room_key, ()))

    def insert(self, interval: ScheduleInterval) -> None:
        self._buckets[interval.room_key].append(interval)

    def first_overlap(self, interval: ScheduleInterval) -> ScheduleInterval | None:
        for existing in self._buckets.get(interval.room_key, ()):
            if overlaps(existing, interval):
                return existing
        return None

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())
