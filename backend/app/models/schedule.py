from datetime import date, datetime, time

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class Schedule(Base):
    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
    course_id: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    program_id: Mapped[int] = mapped_column(ForeignKey("programs.id"), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    group: Mapped[int] = mapped_column(Integer, nullable=False)
    pair_group: Mapped[int] = mapped_column(Integer, nullable=False)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False)
    lecturer: Mapped[str] = mapped_column(String(200), nullable=False)
    day: Mapped[str] = mapped_column(String(20), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    room_id: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    mid_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    mid_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    mid_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    final_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    final_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    final_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
