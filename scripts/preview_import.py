"""Preview a timetable sheet import against the committed schedules.

Nothing is written to the database; rows with problems are printed.

Run:
  PYTHONPATH=backend python scripts/preview_import.py path/to/timetable.xlsx [more.xlsx ...]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from app.core.config import get_settings
from app.core.exceptions import MalformedInput
from app.core.logging_config import setup_logging
from app.db.session import SessionLocal
from app.services.schedule_import import UploadedTable, import_schedules
from app.services.schedule_store import load_committed_intervals, load_program_lookup


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("files", nargs="+", type=Path, help="xlsx or csv timetable exports, in import order")
    parser.add_argument("--all", action="store_true", help="print every row, not only rows with problems")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings)

    tables = [UploadedTable(filename=path.name, content=path.read_bytes()) for path in args.files]

    db = SessionLocal()
    try:
        try:
            records = import_schedules(
                tables,
                load_program_lookup(db),
                load_committed_intervals(db),
                era_offset=settings.local_era_offset,
            )
        except MalformedInput as exc:
            print(f"Rejected: {exc.message} {exc.details or ''}".rstrip(), file=sys.stderr)
            return 2
    finally:
        db.close()

    flagged = 0
    for number, record in enumerate(records, start=1):
        if record.problem:
            flagged += 1
        elif not args.all:
            continue
        problems = "; ".join(record.problem) or "ok"
        unresolved = " [unknown program]" if record.program_id == 0 else ""
        print(
            f"{number:4d}. {record.course_id} g{record.group} {record.day} "
            f"{record.start_time}-{record.end_time} {record.room_id}{unresolved}: {problems}"
        )

    print(f"{len(records)} rows, {flagged} with problems")
    return 1 if flagged else 0


if __name__ == "__main__":
    raise SystemExit(main())
