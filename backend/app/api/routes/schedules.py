import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import get_settings
from app.core.exceptions import ResourceNotFoundError, ScheduleConflict
from app.models.schedule import Schedule
from app.schemas.schedule import ImportResponse, ScheduleBatchIn, ScheduleIn, ScheduleOut
from app.services.conflict_service import ConflictService, describe_conflict
from app.services.schedule_import import UploadedTable, import_schedules
from app.services.schedule_store import commit_schedules, load_committed_intervals, load_program_lookup

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()


def _get_schedule_or_404(db: Session, schedule_id: int) -> Schedule:
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        raise ResourceNotFoundError("Schedule", str(schedule_id))
    return schedule


@router.get("/", response_model=list[ScheduleOut])
def list_schedules(db: Session = Depends(get_db)) -> list[ScheduleOut]:
    stmt = select(Schedule).order_by(Schedule.created_at.desc(), Schedule.id.desc())
    return list(db.execute(stmt).scalars())


@router.get("/{schedule_id}", response_model=ScheduleOut)
def get_schedule(schedule_id: int, db: Session = Depends(get_db)) -> ScheduleOut:
    return _get_schedule_or_404(db, schedule_id)


@router.post("/readTable", response_model=ImportResponse)
def read_table(
    file: list[UploadFile] = File(...),
    db: Session = Depends(get_db),
) -> ImportResponse:
    tables = [UploadedTable(filename=upload.filename or "", content=upload.file.read()) for upload in file]
    records = import_schedules(
        tables,
        load_program_lookup(db),
        load_committed_intervals(db),
        era_offset=settings.local_era_offset,
    )
    return ImportResponse(success=True, data=records)


@router.post("/", status_code=status.HTTP_201_CREATED)
def add_schedules(payload: ScheduleBatchIn, db: Session = Depends(get_db)) -> dict:
    service = ConflictService(load_committed_intervals(db))
    conflicts = service.validate_batch(payload.data)
    if conflicts:
        logger.info("Rejected %d schedules: %d conflicting", len(payload.data), len(conflicts))
        raise ScheduleConflict(
            "have conflict",
            details={
                "conflict": True,
                "details": [conflict.model_dump(mode="json") for conflict in conflicts],
            },
        )

    try:
        commit_schedules(db, payload.data, settings.pending_status)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc.orig)) from exc
    return {"message": "added successfully"}


@router.put("/{schedule_id}", response_model=ScheduleOut)
def update_schedule(schedule_id: int, payload: ScheduleIn, db: Session = Depends(get_db)) -> ScheduleOut:
    schedule = _get_schedule_or_404(db, schedule_id)

    service = ConflictService(load_committed_intervals(db, exclude_id=schedule_id))
    clash = service.check(payload)
    if clash is not None:
        raise ScheduleConflict(describe_conflict(clash), details={"conflict_with": clash.id})

    for key, value in payload.model_dump().items():
        setattr(schedule, key, value)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc.orig)) from exc
    db.refresh(schedule)
    return schedule


@router.delete("/{schedule_id}")
def delete_schedule(schedule_id: int, db: Session = Depends(get_db)) -> dict:
    schedule = _get_schedule_or_404(db, schedule_id)
    db.delete(schedule)
    db.commit()
    return {"message": "Deleted successfully"}
