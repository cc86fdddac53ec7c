from datetime import time

import pytest

from app.schemas.schedule import CandidateRecord, ScheduleIn
from app.services.conflict_service import IN_BATCH_CONFLICT, ConflictService, describe_conflict
from app.services.room_time_index import IN_BATCH_ID, ScheduleInterval


def committed(interval_id, start, end, room="SC1101", day="Monday"):
    return ScheduleInterval(id=interval_id, room_key=room, day=day, start_time=time(*start), end_time=time(*end))


def candidate(start="09:00", end="10:00", room="SC1101", day="Monday", course_id="SC101"):
    return CandidateRecord(course_id=course_id, day=day, start_time=start, end_time=end, room_id=room)


def submission(start="09:00", end="10:00", room="SC1101", day="Monday", course_id="SC101"):
    return ScheduleIn(
        course_id=course_id,
        program_id=1,
        type="lecture",
        day=day,
        start_time=start,
        end_time=end,
        room_id=room,
    )


def test_describe_conflict():
    assert describe_conflict(committed(42, (9, 0), (10, 0))) == "duplicate time with id:42"
    assert describe_conflict(committed(0, (9, 0), (10, 0))) == "duplicate time with id:0"
    assert describe_conflict(committed(IN_BATCH_ID, (9, 0), (10, 0))) == IN_BATCH_CONFLICT


def test_overlap_with_committed_schedule_is_annotated():
    service = ConflictService([committed(42, (9, 30), (11, 0))])

    [record] = service.annotate([candidate("09:00", "10:00")])

    assert record.problem == ["duplicate time with id:42"]


def test_second_overlapping_row_in_batch_is_annotated():
    service = ConflictService([])

    first, second = service.annotate([candidate("09:00", "11:00"), candidate("10:00", "12:00", course_id="SC102")])

    assert first.problem == []
    assert second.problem == [IN_BATCH_CONFLICT]


def test_only_first_clash_is_reported():
    service = ConflictService([committed(1, (9, 0), (10, 0)), committed(2, (9, 30), (10, 30))])

    first, second = service.annotate([candidate("09:00", "11:00"), candidate("09:00", "11:00")])

    assert first.problem == ["duplicate time with id:1"]
    # The committed schedule still comes first in the room's bucket.
    assert second.problem == ["duplicate time with id:1"]


def test_conflicting_rows_are_still_indexed():
    service = ConflictService([committed(7, (9, 0), (10, 0))])

    records = service.annotate(
        [
            candidate("09:00", "10:00"),
            candidate("13:00", "14:00"),
            candidate("13:30", "14:30"),
        ]
    )

    assert [record.problem for record in records] == [
        ["duplicate time with id:7"],
        [],
        [IN_BATCH_CONFLICT],
    ]
    assert len(service.index) == 4


def test_touching_rows_do_not_conflict():
    service = ConflictService([committed(1, (8, 0), (9, 0))])

    records = service.annotate([candidate("09:00", "10:00"), candidate("10:00", "11:00")])

    assert all(record.problem == [] for record in records)


def test_other_room_or_day_is_independent():
    service = ConflictService([committed(1, (9, 0), (10, 0))])

    records = service.annotate([candidate(room="SC1102"), candidate(day="Tuesday")])

    assert all(record.problem == [] for record in records)


def test_later_row_does_not_flag_earlier_row():
    service = ConflictService([])

    first, second = service.annotate([candidate("10:00", "11:00"), candidate("09:00", "12:00")])

    assert first.problem == []
    assert second.problem == [IN_BATCH_CONFLICT]


def test_row_without_valid_times_is_not_indexed():
    service = ConflictService([])

    records = service.annotate([candidate("11:00", "09:00"), candidate("09:00", "11:00")])

    assert [record.problem for record in records] == [[], []]
    assert len(service.index) == 1


def test_annotation_keeps_existing_problems():
    service = ConflictService([committed(3, (9, 0), (10, 0))])
    record = candidate()
    record.problem.append("invalid mid_day: TBA")

    service.annotate([record])

    assert record.problem == ["invalid mid_day: TBA", "duplicate time with id:3"]


def test_validate_batch_reports_committed_and_sibling_conflicts():
    service = ConflictService([committed(42, (9, 0), (10, 0))])
    batch = [
        submission("09:30", "10:30"),
        submission("13:00", "15:00", course_id="SC102"),
        submission("14:00", "16:00", course_id="SC103"),
        submission("16:00", "17:00", course_id="SC104"),
    ]

    conflicts = service.validate_batch(batch)

    assert [(item.data.course_id, item.conflict_with, item.conflict_with_index) for item in conflicts] == [
        ("SC101", 42, None),
        ("SC103", None, 1),
    ]


def test_validate_batch_without_conflicts():
    service = ConflictService([committed(1, (9, 0), (10, 0))])

    assert service.validate_batch([submission("10:00", "11:00"), submission("11:00", "12:00")]) == []


@pytest.mark.parametrize("start,end", [("10:00", "09:00"), ("10:00", "10:00")])
def test_submission_requires_ordered_times(start, end):
    with pytest.raises(ValueError):
        submission(start, end)
