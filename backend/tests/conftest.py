import csv
import io

import pytest
from fastapi.testclient import TestClient #gives you a fake http client that can call your FastAPI routes without running a real server.
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
from app.main import app
from app.models import Program, Schedule  # noqa: F401  registers tables on Base.metadata

COLUMN_COUNT = 29
HEADER = [f"column {index}" for index in range(COLUMN_COUNT)]


@pytest.fixture()
def session_factory():
    engine = create_engine( #isolated in-memory DB shared by every session of one test
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _timetable_row(
    course_id="SC101",
    program="วิทยาการคอมพิวเตอร์",
    type="lecture",
    group="1",
    pair_group="0",
    student_count="40",
    lecturer="Dr. Somchai",
    day="Monday",
    start="09:00",
    end="10:00",
    building="SC1",
    room="101",
    mid_day="",
    mid_start="",
    mid_end="",
    final_day="",
    final_start="",
    final_end="",
):
    row = [""] * COLUMN_COUNT
    row[0] = course_id
    row[3] = program
    row[5] = type
    row[6] = group
    row[7] = pair_group
    row[8] = student_count
    row[9] = lecturer
    row[10] = day
    row[11] = start
    row[12] = end
    row[13] = building
    row[15] = room
    row[17] = mid_day
    row[18] = mid_start
    row[19] = mid_end
    row[21] = final_day
    row[22] = final_start
    row[23] = final_end
    return row


@pytest.fixture()
def timetable_row():
    """Build one 29-cell row laid out like the registrar's export."""
    return _timetable_row


@pytest.fixture()
def xlsx_bytes():
    def build(rows, header=None):
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Timetable"
        sheet.append(HEADER if header is None else header)
        for row in rows:
            sheet.append(row)
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return build


@pytest.fixture()
def csv_bytes():
    def build(rows, header=None, bom=False):
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(HEADER if header is None else header)
        writer.writerows(rows)
        text = buffer.getvalue()
        return (("\ufeff" + text) if bom else text).encode("utf-8")

    return build
