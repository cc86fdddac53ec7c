import pytest

from app.services.record_mapper import (
    COLUMN_LAYOUT,
    INVALID_TIME_RANGE,
    RecordMapper,
    build_program_lookup,
    parse_count,
)

PROGRAMS = {"วิทยาการคอมพิวเตอร์": 7, "คณิตศาสตร์": 3}


def as_row(cells):
    return dict(enumerate(cells))


@pytest.fixture
def mapper():
    return RecordMapper(PROGRAMS)


def test_maps_positional_layout(mapper, timetable_row):
    row = timetable_row(
        course_id="SC101",
        type="lab",
        group="2",
        pair_group="1",
        student_count="35",
        lecturer="Dr. Somchai",
        day="Tuesday",
        start="13:00",
        end="16:00",
        building="SC2",
        room="305",
    )

    record = mapper.map_row(as_row(row))

    assert record.course_id == "SC101"
    assert record.program_id == 7
    assert record.type == "lab"
    assert (record.group, record.pair_group, record.student_count) == (2, 1, 35)
    assert record.lecturer == "Dr. Somchai"
    assert record.day == "Tuesday"
    assert (record.start_time, record.end_time) == ("13:00", "16:00")
    assert record.room_id == "SC2305"
    assert record.problem == []


def test_empty_course_code_is_skipped(mapper, timetable_row):
    assert mapper.map_row(as_row(timetable_row(course_id=""))) is None
    assert mapper.map_row(as_row(timetable_row(course_id="   "))) is None
    assert mapper.map_row({}) is None


def test_map_rows_drops_separator_rows(mapper, timetable_row):
    rows = [as_row(timetable_row(course_id="A")), as_row(timetable_row(course_id="")), as_row(timetable_row(course_id="B"))]

    assert [record.course_id for record in mapper.map_rows(rows)] == ["A", "B"]


def test_unknown_program_keeps_row_with_zero_id(mapper, timetable_row):
    record = mapper.map_row(as_row(timetable_row(program="ฟิสิกส์")))

    assert record.program_id == 0
    assert record.problem == []


def test_program_lookup_is_exact(mapper, timetable_row):
    record = mapper.map_row(as_row(timetable_row(program="วิทยาการคอมพิวเตอร์ (ภาคพิเศษ)")))

    assert record.program_id == 0


def test_build_program_lookup_first_match_wins():
    lookup = build_program_lookup([(4, "เคมี"), (9, "เคมี"), (5, "ชีววิทยา")])

    assert lookup == {"เคมี": 4, "ชีววิทยา": 5}


@pytest.mark.parametrize(
    "raw,expected",
    [("3", 3), (" 12 ", 12), ("2.0", 2), ("", 0), ("abc", 0), ("2.5", 0), ("-", 0)],
)
def test_parse_count_falls_back_to_zero(raw, expected):
    assert parse_count(raw) == expected


def test_unparsable_numbers_do_not_fail_row(mapper, timetable_row):
    record = mapper.map_row(as_row(timetable_row(group="A", pair_group="", student_count="n/a")))

    assert (record.group, record.pair_group, record.student_count) == (0, 0, 0)
    assert record.problem == []


def test_exam_dates_are_converted(mapper, timetable_row):
    row = timetable_row(
        mid_day="15/3/2566",
        mid_start="9.00",
        mid_end="12:00",
        final_day="10/5/2566",
        final_start="13:00",
        final_end="16:00",
    )

    record = mapper.map_row(as_row(row))

    assert (record.mid_day, record.mid_start_time, record.mid_end_time) == ("2023-3-15", "09:00", "12:00")
    assert (record.final_day, record.final_start_time, record.final_end_time) == ("2023-5-10", "13:00", "16:00")


def test_blank_exam_date_is_absent_with_its_times(mapper, timetable_row):
    record = mapper.map_row(as_row(timetable_row(mid_day="", mid_start="09:00", mid_end="12:00")))

    assert record.mid_day is None
    assert record.mid_start_time is None
    assert record.mid_end_time is None
    assert record.final_day is None
    assert record.problem == []


def test_malformed_exam_date_is_reported(mapper, timetable_row):
    record = mapper.map_row(as_row(timetable_row(final_day="TBA")))

    assert record.final_day is None
    assert record.problem == ["invalid final_day: TBA"]


@pytest.mark.parametrize("start,end", [("10:00", "09:00"), ("10:00", "10:00"), ("", "10:00"), ("morning", "10:00")])
def test_invalid_class_time_is_reported(mapper, timetable_row, start, end):
    record = mapper.map_row(as_row(timetable_row(start=start, end=end)))

    assert record is not None
    assert INVALID_TIME_RANGE in record.problem


def test_times_are_normalized(mapper, timetable_row):
    record = mapper.map_row(as_row(timetable_row(start="9:00", end="10.30")))

    assert (record.start_time, record.end_time) == ("09:00", "10:30")


def test_layout_is_single_table():
    assert COLUMN_LAYOUT.column_count == 29
    assert (COLUMN_LAYOUT.room_building, COLUMN_LAYOUT.room_number) == (13, 15)
