from __future__ import annotations

from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_validator, model_validator

from app.services.calendar import parse_loose_date, parse_time_of_day


class CandidateRecord(BaseModel):
    """One parsed spreadsheet row, annotated with row-level problems."""

    course_id: str
    program_id: int = 0
    type: str = ""
    group: int = 0
    pair_group: int = 0
    student_count: int = 0
    lecturer: str = ""
    day: str = ""
    start_time: str = ""
    end_time: str = ""
    room_id: str = ""
    mid_day: str | None = None
    mid_start_time: str | None = None
    mid_end_time: str | None = None
    final_day: str | None = None
    final_start_time: str | None = None
    final_end_time: str | None = None
    problem: list[str] = Field(default_factory=list)


class ImportResponse(BaseModel):
    success: bool = True
    data: list[CandidateRecord]


class ScheduleIn(BaseModel):
    course_id: str = Field(min_length=1, max_length=50)
    program_id: int
    type: str = Field(max_length=50)
    group: int = 0
    pair_group: int = 0
    student_count: int = Field(default=0, ge=0)
    lecturer: str = Field(default="", max_length=200)
    day: str = Field(min_length=1, max_length=20)
    start_time: time
    end_time: time
    room_id: str = Field(min_length=1, max_length=50)
    mid_day: date | None = None
    mid_start_time: time | None = None
    mid_end_time: time | None = None
    final_day: date | None = None
    final_start_time: time | None = None
    final_end_time: time | None = None

    @field_validator("course_id", "type", "lecturer", "day", "room_id", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator(
        "start_time",
        "end_time",
        "mid_start_time",
        "mid_end_time",
        "final_start_time",
        "final_end_time",
        mode="before",
    )
    @classmethod
    def parse_time(cls, value):
        if isinstance(value, str):
            return parse_time_of_day(value)
        return value

    @field_validator("mid_day", "final_day", mode="before")
    @classmethod
    def parse_date(cls, value):
        # Imported rows carry unpadded dates such as "2023-3-15".
        if isinstance(value, str):
            return parse_loose_date(value)
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "ScheduleIn":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        # Exam times are meaningless without their date.
        if self.mid_day is None:
            self.mid_start_time = None
            self.mid_end_time = None
        if self.final_day is None:
            self.final_start_time = None
            self.final_end_time = None
        return self


class ScheduleBatchIn(BaseModel):
    data: list[ScheduleIn] = Field(min_length=1)


class ScheduleOut(BaseModel):
    # Stored rows are echoed as they are; ordering is only enforced on input.
    id: int
    course_id: str
    program_id: int
    type: str
    group: int
    pair_group: int
    student_count: int
    lecturer: str
    day: str
    start_time: time
    end_time: time
    room_id: str
    mid_day: date | None = None
    mid_start_time: time | None = None
    mid_end_time: time | None = None
    final_day: date | None = None
    final_start_time: time | None = None
    final_end_time: time | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ScheduleConflictDetail(BaseModel):
    data: ScheduleIn
    conflict_with: int | None = None
    conflict_with_index: int | None = None
