from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.clock import Clock, SystemClock, read_clock
from ..core.enums import CorrectionField, CorrectionStatus, Role
from ..core.exceptions import AuthorizationError, DomainError, PreconditionFailedError, ValidationError
from ..devices.capture import decode_data_url
from ..users.model import UserProfile
from ..users.profile import apply_update, current_value
from ..users.repository import UserRepository
from .model import CorrectionRequest, EditGrant, PhotoUpdate, ProfileUpdate, field_of
from .repository import CorrectionRepository
from .window import CorrectionWindowManager

logger = logging.getLogger(__name__)

NEW_PHOTO_PLACEHOLDER = "New Photo Request"


class CorrectionService:
    """Submit -> approve/reject -> single-use, time-boxed apply."""

    def __init__(
        self,
        requests: CorrectionRepository,
        users: UserRepository,
        *,
        window: CorrectionWindowManager | None = None,
        clock: Clock | None = None,
    ):
        self._requests = requests
        self._users = users
        self._window = window or CorrectionWindowManager()
        self._clock = clock or SystemClock()

    @staticmethod
    def _parse_field(value) -> CorrectionField:
        if isinstance(value, CorrectionField):
            return value
        v = (value or "").strip()
        # Accept the enum name too (e.g. "Phone" for the stored tag "Number").
        for f in CorrectionField:
            if v == f.value or v.upper() == f.name:
                return f
        raise ValidationError(f"Unknown profile field: {value!r}")

    def submit(
        self,
        *,
        current_role: Role,
        user_id: str,
        field,
        new_value: str = "",
    ) -> int:
        if current_role != Role.USER:
            raise AuthorizationError("Only staff can request profile corrections")

        profile = self._users.get_by_id(user_id)
        if not profile:
            raise ValidationError("User does not exist")

        target = self._parse_field(field)
        if target == CorrectionField.PHOTO:
            proposed = NEW_PHOTO_PLACEHOLDER
        else:
            proposed = (new_value or "").strip()
            if not proposed:
                raise ValidationError("Please enter the corrected value")

        now = read_clock(self._clock)
        for existing in self._requests.list_for_user(user_id=user_id):
            if existing.status == CorrectionStatus.PENDING:
                raise ValidationError("A correction request is already pending")
            if self._window.grant_status(existing, now).active:
                raise ValidationError("An approved correction is waiting to be applied")

        rid = self._requests.create(
            user_id=user_id,
            user_name=profile.name,
            field=target,
            old_value=current_value(profile, target),
            new_value=proposed,
            request_date=now,
        )
        logger.info("Correction %s submitted by %s for %s", rid, user_id, target.value)
        return rid

    def approve(self, *, current_role: Role, request_id: int) -> CorrectionRequest:
        """pending -> approved; stamps approved_at, which opens the edit window."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        now = read_clock(self._clock)
        self._decide(request_id, CorrectionStatus.APPROVED, approved_at=now)
        logger.info("Correction %s approved; edit window open for %ss", request_id, self._window.window_seconds)
        return self._require(request_id)

    def reject(self, *, current_role: Role, request_id: int) -> CorrectionRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        self._decide(request_id, CorrectionStatus.REJECTED)
        logger.info("Correction %s rejected", request_id)
        return self._require(request_id)

    def grant_status(self, request_id: int) -> EditGrant:
        return self._window.grant_status(self._require(request_id), read_clock(self._clock))

    def active_grant(self, user_id: str) -> Optional[EditGrant]:
        now = read_clock(self._clock)
        for req in self._requests.list_for_user(user_id=user_id):
            grant = self._window.grant_status(req, now)
            if grant.active:
                return grant
        return None

    def apply(self, *, user_id: str, request_id: int, update: ProfileUpdate) -> UserProfile:
        """Write the approved field and close the grant. Single use."""
        req = self._require(request_id)
        if req.user_id != user_id:
            raise AuthorizationError("This correction belongs to another user")
        if field_of(update) != req.field:
            raise ValidationError(f"This correction only allows changing {req.field.value}")

        now = read_clock(self._clock)
        grant = self._window.grant_status(req, now)
        if not grant.active:
            if self._window.is_lapsed(req, now):
                self._expire(req)
                raise ValidationError("The edit window has expired")
            if req.status == CorrectionStatus.COMPLETED:
                raise PreconditionFailedError("This correction was already applied")
            raise ValidationError(f"Correction is {req.status.value}, not open for editing")

        profile = self._users.get_by_id(user_id)
        if not profile:
            raise ValidationError("User does not exist")
        if isinstance(update, PhotoUpdate):
            # Raises InputError unless the new photo is a decodable image.
            decode_data_url(update.image_ref)
        updated = apply_update(profile, update)

        # Grant closes before the profile write; only one apply wins the conditional update.
        closed = self._requests.conditional_update(
            request_id=req.request_id,
            expected_status=CorrectionStatus.APPROVED,
            status=CorrectionStatus.COMPLETED,
        )
        if not closed:
            raise PreconditionFailedError("This correction was already applied")

        if not self._users.save_profile(updated):
            # Only a saved profile completes the request; reopen the grant for a retry.
            reopened = self._requests.conditional_update(
                request_id=req.request_id,
                expected_status=CorrectionStatus.COMPLETED,
                status=CorrectionStatus.APPROVED,
            )
            if not reopened:
                logger.error("Correction %s could not be reopened after profile %s was not saved",
                             req.request_id, user_id)
            else:
                logger.warning("Profile %s was not saved; correction %s reopened", user_id, req.request_id)
            raise DomainError("Profile update failed; please try again")

        logger.info("Correction %s applied to %s (%s)", req.request_id, user_id, req.field.value)
        return updated

    def expire_lapsed(self) -> int:
        """approved -> expired for every grant whose window ran out. Returns how many moved."""
        now = read_clock(self._clock)
        count = 0
        for req in self._requests.list_all(status=CorrectionStatus.APPROVED):
            if self._window.is_lapsed(req, now) and self._expire(req):
                count += 1
        return count

    def list_my_requests(self, *, user_id: str) -> Sequence[CorrectionRequest]:
        return self._requests.list_for_user(user_id=user_id)

    def list_admin(self, *, status: Optional[CorrectionStatus] = None) -> Sequence[CorrectionRequest]:
        return self._requests.list_all(status=status)

    def _expire(self, req: CorrectionRequest) -> bool:
        moved = self._requests.conditional_update(
            request_id=req.request_id,
            expected_status=CorrectionStatus.APPROVED,
            status=CorrectionStatus.EXPIRED,
        )
        if moved:
            logger.info("Correction %s expired unused", req.request_id)
        return moved

    def _decide(self, request_id: int, status: CorrectionStatus, *, approved_at=None) -> None:
        req = self._require(request_id)
        if req.status != CorrectionStatus.PENDING:
            raise PreconditionFailedError("Request was already processed")
        ok = self._requests.conditional_update(
            request_id=req.request_id,
            expected_status=CorrectionStatus.PENDING,
            status=status,
            approved_at=approved_at,
        )
        if not ok:
            raise PreconditionFailedError("Request was already processed")

    def _require(self, request_id: int) -> CorrectionRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise ValidationError("Request does not exist")
        return req
