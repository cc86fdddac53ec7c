from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.program import Program
from app.models.schedule import Schedule
from app.schemas.schedule import ScheduleIn
from app.services.record_mapper import build_program_lookup
from app.services.room_time_index import ScheduleInterval

logger = logging.getLogger(__name__)


def load_committed_intervals(db: Session, exclude_id: int | None = None) -> list[ScheduleInterval]:
    stmt = select(Schedule.id, Schedule.room_id, Schedule.day, Schedule.start_time, Schedule.end_time).order_by(
        Schedule.id
    )
    if exclude_id is not None:
        stmt = stmt.where(Schedule.id != exclude_id)

    intervals = []
    for row in db.execute(stmt):
        interval = ScheduleInterval.from_record(row, interval_id=row.id)
        if interval is None:
            logger.warning("Committed schedule %s has no valid time range; ignored for conflict checks", row.id)
            continue
        intervals.append(interval)
    return intervals


def load_program_lookup(db: Session) -> dict[str, int]:
    rows = db.execute(select(Program.id, Program.name_th).order_by(Program.id))
    return build_program_lookup((row.id, row.name_th) for row in rows)


def commit_schedules(db: Session, records: Sequence[ScheduleIn], status: str) -> list[Schedule]:
    schedules = [Schedule(**record.model_dump(), status=status) for record in records]
    db.add_all(schedules)
    db.commit()
    logger.info("Committed %d schedules", len(schedules))
    return schedules
