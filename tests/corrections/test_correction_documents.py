import time
from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_guard.attendance_guard.core.enums import CorrectionField, CorrectionStatus
from src.attendance_guard.attendance_guard.core.exceptions import InputError
from src.attendance_guard.attendance_guard.corrections.documents import from_document, to_document
from src.attendance_guard.attendance_guard.corrections.model import CorrectionRequest
from src.attendance_guard.attendance_guard.corrections.window import CorrectionWindowManager


def test_phone_field_keeps_the_number_tag():
    req = CorrectionRequest(
        request_id=4,
        user_id="u1",
        user_name="Ana",
        field=CorrectionField.PHONE,
        old_value="0901",
        new_value="0912",
        status=CorrectionStatus.APPROVED,
        request_date=datetime(2026, 3, 2, 8, 55),
        approved_at=datetime(2026, 3, 2, 9, 0),
    )

    doc = to_document(req)

    assert doc["field"] == "Number"
    assert doc["approvedAt"] == "2026-03-02T09:00:00"
    assert from_document(doc) == req


def test_browser_timestamps_with_z_suffix_are_accepted():
    req = from_document(
        {
            "id": "9",
            "userId": "u1",
            "field": "Photo",
            "status": "pending",
            "requestDate": "2026-03-02T01:55:00.000Z",
            "oldValue": "Current Photo",
            "newValue": "New Photo Request",
        }
    )

    assert req.request_date == datetime(2026, 3, 2, 1, 55, tzinfo=timezone.utc)
    assert req.approved_at is None


def test_unknown_field_is_an_input_error():
    with pytest.raises(InputError):
        from_document({"userId": "u1", "field": "Email", "status": "pending", "requestDate": "2026-03-02T01:55:00"})


@pytest.fixture
def kolkata_time(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Asia/Kolkata")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_utc_approval_is_timed_against_the_local_clock(kolkata_time):
    local_now = datetime.now().replace(microsecond=0)
    approved = (local_now - timedelta(seconds=60)).astimezone(timezone.utc)

    req = from_document(
        {
            "id": "12",
            "userId": "u1",
            "field": "Name",
            "status": "approved",
            "requestDate": "2026-03-02T01:55:00Z",
            "approvedAt": approved.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "oldValue": "Ana",
            "newValue": "Anna",
        }
    )
    grant = CorrectionWindowManager().grant_status(req, local_now)

    assert grant.active is True
    assert grant.remaining_seconds == 240
