from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np
import pytest

from src.attendance_guard.attendance_guard.core.enums import CorrectionField, CorrectionStatus, Role
from src.attendance_guard.attendance_guard.core.exceptions import (
    AuthorizationError,
    DomainError,
    InputError,
    PreconditionFailedError,
    ValidationError,
)
from src.attendance_guard.attendance_guard.corrections.memory_correction_repository import InMemoryCorrectionRepository
from src.attendance_guard.attendance_guard.corrections.model import NameUpdate, PhoneUpdate, PhotoUpdate
from src.attendance_guard.attendance_guard.corrections.service import CorrectionService
from src.attendance_guard.attendance_guard.devices.capture import FrameSample, encode_jpeg_data_url
from src.attendance_guard.attendance_guard.users.memory_user_repository import InMemoryUserRepository
from src.attendance_guard.attendance_guard.users.model import UserProfile

T0 = datetime(2026, 3, 2, 9, 0, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


class RefusingUsers(InMemoryUserRepository):
    """Refuses the first ``failures`` profile writes."""

    def __init__(self, failures: int = 1):
        super().__init__()
        self.failures = failures

    def save_profile(self, profile: UserProfile) -> bool:
        if self.failures > 0:
            self.failures -= 1
            return False
        return super().save_profile(profile)


def _setup(users: InMemoryUserRepository | None = None):
    clock = FakeClock(T0)
    users = users or InMemoryUserRepository()
    users.add(UserProfile(user_id="u1", name="Ana", phone="0901", address="1 Main St"))
    repo = InMemoryCorrectionRepository()
    return CorrectionService(repo, users, clock=clock), repo, users, clock


def _approved_name_request(svc: CorrectionService, clock: FakeClock) -> int:
    rid = svc.submit(current_role=Role.USER, user_id="u1", field="Name", new_value="Anna")
    clock.advance(60)
    svc.approve(current_role=Role.ADMIN, request_id=rid)
    return rid


def test_submit_records_current_value_as_old_value():
    svc, repo, _, _ = _setup()

    rid = svc.submit(current_role=Role.USER, user_id="u1", field="Number", new_value="0912")

    req = repo.get(request_id=rid)
    assert req.field == CorrectionField.PHONE
    assert req.old_value == "0901"
    assert req.new_value == "0912"
    assert req.status == CorrectionStatus.PENDING


def test_photo_request_uses_placeholders():
    svc, repo, _, _ = _setup()

    rid = svc.submit(current_role=Role.USER, user_id="u1", field=CorrectionField.PHOTO)

    req = repo.get(request_id=rid)
    assert req.old_value == "Current Photo"
    assert req.new_value == "New Photo Request"


def test_only_staff_submit_and_only_admins_decide():
    svc, _, _, _ = _setup()

    with pytest.raises(AuthorizationError):
        svc.submit(current_role=Role.ADMIN, user_id="u1", field="Name", new_value="X")

    rid = svc.submit(current_role=Role.USER, user_id="u1", field="Name", new_value="X")
    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.USER, request_id=rid)
    with pytest.raises(AuthorizationError):
        svc.reject(current_role=Role.USER, request_id=rid)


def test_second_pending_request_is_refused():
    svc, _, _, _ = _setup()
    svc.submit(current_role=Role.USER, user_id="u1", field="Name", new_value="Anna")

    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.USER, user_id="u1", field="Address", new_value="2 Side St")


def test_unknown_field_or_blank_value_is_refused():
    svc, _, _, _ = _setup()

    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.USER, user_id="u1", field="Email", new_value="a@b.c")
    with pytest.raises(ValidationError):
        svc.submit(current_role=Role.USER, user_id="u1", field="Name", new_value="   ")


def test_approval_opens_a_five_minute_window():
    svc, _, _, clock = _setup()
    rid = _approved_name_request(svc, clock)

    clock.advance(299)
    grant = svc.grant_status(rid)
    assert grant.active is True
    assert grant.remaining_seconds == 1
    assert svc.active_grant("u1").request.request_id == rid

    clock.advance(2)
    assert svc.grant_status(rid).active is False
    assert svc.active_grant("u1") is None


def test_apply_updates_profile_once():
    svc, repo, users, clock = _setup()
    rid = _approved_name_request(svc, clock)
    clock.advance(30)

    updated = svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Anna"))

    assert updated.name == "Anna"
    assert users.get_by_id("u1").name == "Anna"
    assert repo.get(request_id=rid).status == CorrectionStatus.COMPLETED
    with pytest.raises(PreconditionFailedError):
        svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Annabel"))
    assert users.get_by_id("u1").name == "Anna"


def test_apply_changes_only_the_approved_field():
    svc, _, users, clock = _setup()
    rid = _approved_name_request(svc, clock)

    with pytest.raises(ValidationError):
        svc.apply(user_id="u1", request_id=rid, update=PhoneUpdate("0999"))
    assert users.get_by_id("u1").phone == "0901"


def test_apply_after_window_expires_the_request():
    svc, repo, users, clock = _setup()
    rid = _approved_name_request(svc, clock)
    clock.advance(301)

    with pytest.raises(ValidationError):
        svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Anna"))

    assert repo.get(request_id=rid).status == CorrectionStatus.EXPIRED
    assert users.get_by_id("u1").name == "Ana"


def test_apply_by_another_user_is_refused():
    svc, _, users, clock = _setup()
    users.add(UserProfile(user_id="u2", name="Bo"))
    rid = _approved_name_request(svc, clock)

    with pytest.raises(AuthorizationError):
        svc.apply(user_id="u2", request_id=rid, update=NameUpdate("Bob"))


def test_rejected_request_cannot_be_applied_or_approved():
    svc, _, _, _ = _setup()
    rid = svc.submit(current_role=Role.USER, user_id="u1", field="Name", new_value="Anna")
    svc.reject(current_role=Role.ADMIN, request_id=rid)

    with pytest.raises(ValidationError):
        svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Anna"))
    with pytest.raises(PreconditionFailedError):
        svc.approve(current_role=Role.ADMIN, request_id=rid)


def _jpeg() -> str:
    frame = FrameSample(pixels=np.full((48, 64, 3), 127, dtype=np.uint8), captured_at=T0)
    return encode_jpeg_data_url(frame)


def test_photo_update_replaces_photo_reference():
    svc, _, users, clock = _setup()
    rid = svc.submit(current_role=Role.USER, user_id="u1", field="Photo")
    svc.approve(current_role=Role.ADMIN, request_id=rid)
    photo = _jpeg()

    svc.apply(user_id="u1", request_id=rid, update=PhotoUpdate(photo))

    assert users.get_by_id("u1").photo_ref == photo


def test_undecodable_photo_keeps_the_grant_open():
    svc, repo, users, clock = _setup()
    rid = svc.submit(current_role=Role.USER, user_id="u1", field="Photo")
    svc.approve(current_role=Role.ADMIN, request_id=rid)

    with pytest.raises(InputError):
        svc.apply(user_id="u1", request_id=rid, update=PhotoUpdate("data:image/jpeg;base64,BBBB"))

    assert repo.get(request_id=rid).status == CorrectionStatus.APPROVED
    assert users.get_by_id("u1").photo_ref is None


def test_expire_lapsed_moves_only_stale_grants():
    svc, repo, users, clock = _setup()
    users.add(UserProfile(user_id="u2", name="Bo"))
    stale = _approved_name_request(svc, clock)
    clock.advance(200)
    fresh = svc.submit(current_role=Role.USER, user_id="u2", field="Name", new_value="Bob")
    svc.approve(current_role=Role.ADMIN, request_id=fresh)
    clock.advance(150)

    assert svc.expire_lapsed() == 1
    assert repo.get(request_id=stale).status == CorrectionStatus.EXPIRED
    assert repo.get(request_id=fresh).status == CorrectionStatus.APPROVED
    assert svc.expire_lapsed() == 0


def test_new_request_allowed_after_previous_one_completes():
    svc, _, _, clock = _setup()
    rid = _approved_name_request(svc, clock)
    svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Anna"))

    second = svc.submit(current_role=Role.USER, user_id="u1", field="Address", new_value="2 Side St")

    assert [r.request_id for r in svc.list_my_requests(user_id="u1")] == [second, rid]
    assert [r.request_id for r in svc.list_admin(status=CorrectionStatus.PENDING)] == [second]


def test_failed_profile_write_reopens_the_grant_for_a_retry():
    svc, repo, users, clock = _setup(RefusingUsers(failures=1))
    rid = _approved_name_request(svc, clock)

    with pytest.raises(DomainError):
        svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Anna"))
    assert repo.get(request_id=rid).status == CorrectionStatus.APPROVED
    assert svc.grant_status(rid).active is True
    assert users.get_by_id("u1").name == "Ana"

    svc.apply(user_id="u1", request_id=rid, update=NameUpdate("Anna"))

    assert repo.get(request_id=rid).status == CorrectionStatus.COMPLETED
    assert users.get_by_id("u1").name == "Anna"
