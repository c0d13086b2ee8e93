from datetime import date, datetime

import pytest

from src.attendance_guard.attendance_guard.attendance.documents import from_document, to_document
from src.attendance_guard.attendance_guard.attendance.model import AttendanceRecord, OvertimeRecord
from src.attendance_guard.attendance_guard.core.enums import AttendanceStatus
from src.attendance_guard.attendance_guard.core.exceptions import InputError
from src.attendance_guard.attendance_guard.geofence.model import Coordinate


def test_document_uses_stored_formats():
    rec = AttendanceRecord(
        attendance_id=3,
        user_id="u1",
        user_name="Ana",
        work_date=date(2026, 3, 2),
        in_time=datetime(2026, 3, 2, 10, 5),
        status=AttendanceStatus.PRESENT,
        coordinate=Coordinate(10.5, 106.25),
        out_time=datetime(2026, 3, 2, 18, 0),
        overtime=OvertimeRecord(
            start_time=datetime(2026, 3, 2, 18, 30),
            end_time=datetime(2026, 3, 2, 20, 30),
            hours=2.0,
        ),
        fun_reaction="Rocket Start!",
        challenge_text="Do a quick stretch!",
        challenge_completed=True,
    )

    doc = to_document(rec)

    assert doc["date"] == "2026-03-02"
    assert doc["inTime"] == "10:05 AM"
    assert doc["outTime"] == "06:00 PM"
    assert doc["overtimeHours"] == "2.00"
    assert doc["status"] == "Present"
    assert from_document(doc) == rec


def test_malformed_document_is_an_input_error():
    with pytest.raises(InputError):
        from_document({"userId": "u1", "date": "2026-03-02", "inTime": "25:99", "status": "Present"})
    with pytest.raises(InputError):
        from_document({"userId": "u1", "date": "2026-03-02", "inTime": "10:05 AM", "status": "Late"})
    with pytest.raises(InputError):
        from_document({"userId": "u1", "date": "2026-03-02", "inTime": "", "status": "Present"})


def test_malformed_overtime_hours_or_coordinates_are_input_errors():
    base = {"userId": "u1", "date": "2026-03-02", "inTime": "10:05 AM", "status": "Present"}

    with pytest.raises(InputError):
        from_document({**base, "overtimeHours": "2h"})
    with pytest.raises(InputError):
        from_document({**base, "latitude": "north", "longitude": 106.7})
