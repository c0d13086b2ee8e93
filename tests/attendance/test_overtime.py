from datetime import date, datetime

import pytest

from src.attendance_guard.attendance_guard.attendance.model import AttendanceRecord
from src.attendance_guard.attendance_guard.attendance.overtime import (
    display_out_time,
    overtime_hours,
    overtime_phase,
    start_overtime,
    stop_overtime,
)
from src.attendance_guard.attendance_guard.core.enums import AttendanceStatus, OvertimePhase
from src.attendance_guard.attendance_guard.core.exceptions import ValidationError
from src.attendance_guard.attendance_guard.shifts.model import Shift

DAY = date(2026, 3, 2)


def _record() -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=7,
        user_id="u1",
        user_name="Ana",
        work_date=DAY,
        in_time=datetime(2026, 3, 2, 10, 5),
        status=AttendanceStatus.PRESENT,
    )


def test_overtime_hours_two_decimals():
    assert overtime_hours(datetime(2026, 3, 2, 18, 30), datetime(2026, 3, 2, 20, 30)) == (2.0, False)
    assert overtime_hours(datetime(2026, 3, 2, 18, 0), datetime(2026, 3, 2, 18, 20)) == (0.33, False)


def test_non_positive_duration_clamps_to_zero_and_is_flagged():
    assert overtime_hours(datetime(2026, 3, 2, 20, 0), datetime(2026, 3, 2, 19, 0)) == (0.0, True)
    assert overtime_hours(datetime(2026, 3, 2, 20, 0), datetime(2026, 3, 2, 20, 0)) == (0.0, True)


def test_start_then_stop_moves_through_phases():
    rec = _record()
    assert overtime_phase(rec) == OvertimePhase.NOT_STARTED

    started = start_overtime(rec, now=datetime(2026, 3, 2, 18, 30), shift=Shift())
    assert overtime_phase(started) == OvertimePhase.ACTIVE
    assert started.out_time == datetime(2026, 3, 2, 18, 0)

    done = stop_overtime(started, now=datetime(2026, 3, 2, 20, 30))
    assert overtime_phase(done) == OvertimePhase.COMPLETED
    assert done.overtime.hours == 2.0
    assert done.overtime.needs_review is False


def test_completed_is_terminal():
    started = start_overtime(_record(), now=datetime(2026, 3, 2, 18, 30), shift=Shift())
    done = stop_overtime(started, now=datetime(2026, 3, 2, 19, 30))

    with pytest.raises(ValidationError):
        start_overtime(done, now=datetime(2026, 3, 2, 20, 0), shift=Shift())
    with pytest.raises(ValidationError):
        stop_overtime(done, now=datetime(2026, 3, 2, 20, 0))


def test_cannot_start_before_shift_end_or_stop_before_start():
    with pytest.raises(ValidationError):
        start_overtime(_record(), now=datetime(2026, 3, 2, 17, 59), shift=Shift())
    with pytest.raises(ValidationError):
        stop_overtime(_record(), now=datetime(2026, 3, 2, 19, 0))


def test_display_out_time_uses_shift_end_once_overtime_started():
    rec = _record()
    assert display_out_time(rec, Shift()) is None

    started = start_overtime(rec, now=datetime(2026, 3, 2, 18, 45), shift=Shift())
    assert display_out_time(started, Shift()) == datetime(2026, 3, 2, 18, 0)
