"""Decode an uploaded timetable sheet into rows of text cells.

Workbooks are flattened to CSV text from their first sheet, the same shape a
direct ``.csv`` export has, and both are then read by one CSV parser.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime, time, timedelta
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from app.core.exceptions import MalformedInput
from app.services.calendar import LOCAL_ERA_OFFSET, to_local_era_text

logger = logging.getLogger(__name__)

XLSX_EXTENSION = ".xlsx"
CSV_EXTENSION = ".csv"

Row = dict[int, str]


def _cell_text(value, era_offset: int) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        # Date cells feed the exam-day columns, which take D/M/Y only.
        return to_local_era_text(value.date(), era_offset)
    if isinstance(value, date):
        return to_local_era_text(value, era_offset)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, timedelta):
        # "[h]:mm" formatted cells come back as durations.
        minutes = int(value.total_seconds()) // 60
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
    return str(value)


def workbook_to_csv(content: bytes, era_offset: int = LOCAL_ERA_OFFSET) -> str:
    """Render the first sheet of an ``.xlsx`` workbook as CSV text.

    Every row is written at the sheet's full width, starting from column A,
    so the header counts as many columns as the sheet's used range.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    try:
        workbook = load_workbook(io.BytesIO(content), data_only=True)
        try:
            sheet = workbook.worksheets[0]
            for row in sheet.iter_rows(min_row=1, min_col=1, max_col=sheet.max_column, values_only=True):
                writer.writerow([_cell_text(value, era_offset) for value in row])
        finally:
            workbook.close()
    # SyntaxError covers broken part XML from both ElementTree and lxml.
    except (BadZipFile, InvalidFileException, KeyError, OSError, SyntaxError, ValueError, TypeError) as exc:
        raise MalformedInput("file is not a readable xlsx workbook") from exc
    return buffer.getvalue()


def parse_csv_rows(text: str, expected_columns: int) -> list[Row]:
    """Parse CSV text, check the header width and return the data rows."""
    text = text.lstrip("\ufeff")
    rows = list(csv.reader(io.StringIO(text)))
    if not rows:
        raise MalformedInput("spreadsheet is empty")

    header = rows[0]
    if len(header) != expected_columns:
        raise MalformedInput(
            "wrong column layout",
            details={"expected_columns": expected_columns, "found_columns": len(header)},
        )

    return [dict(enumerate(row)) for row in rows[1:]]


def decode_table(
    filename: str,
    content: bytes,
    *,
    expected_columns: int,
    era_offset: int = LOCAL_ERA_OFFSET,
) -> list[Row]:
    name = (filename or "").lower()
    if name.endswith(XLSX_EXTENSION):
        text = workbook_to_csv(content, era_offset)
    elif name.endswith(CSV_EXTENSION):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedInput("csv file must be UTF-8 encoded") from exc
    else:
        raise MalformedInput("Only xlsx or csv allowed", details={"filename": filename})

    rows = parse_csv_rows(text, expected_columns)
    logger.debug("Decoded %d data rows from %s", len(rows), filename)
    return rows
