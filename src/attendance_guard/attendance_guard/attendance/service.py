from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import format_clock_time
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CheckInAction, OvertimePhase
from ..core.exceptions import AlreadyExistsError, PreconditionFailedError, ValidationError
from ..geofence.model import Coordinate
from ..shifts.model import Shift
from ..users.repository import UserRepository
from .model import AttendanceRecord, CheckInDecision
from .overtime import display_out_time, overtime_phase, start_overtime, stop_overtime
from .reactions import ReactionPicker
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        shift: Shift | None = None,
        reactions: ReactionPicker | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._shift = shift or Shift()
        self._reactions = reactions or ReactionPicker()

    @property
    def shift(self) -> Shift:
        return self._shift

    def daily_challenge(self) -> str:
        """Optional prompt shown before the camera opens."""
        return self._reactions.daily_challenge()

    def get_today_record(self, user_id: str, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, today)

    def record_check_in(
        self,
        *,
        user_id: str,
        now: datetime,
        decision: CheckInDecision,
        coordinate: Optional[Coordinate],
        captured_image_ref: Optional[str],
        challenge_text: Optional[str] = None,
        challenge_completed: bool = False,
    ) -> AttendanceRecord:
        """Persist an allowed check-in. Raises AlreadyExistsError if another attempt won the race."""
        if decision.action != CheckInAction.CHECKED_IN or decision.status is None:
            raise ValidationError(f"Check-in not allowed: {decision.action.value}")

        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User does not exist")
        if not user.is_active:
            raise ValidationError("User account is suspended")

        record = AttendanceRecord(
            attendance_id=None,
            user_id=user_id,
            user_name=user.name,
            work_date=now.date(),
            in_time=now,
            status=decision.status,
            coordinate=coordinate,
            captured_image_ref=captured_image_ref,
            fun_reaction=self._reactions.reaction_for(decision.status),
            challenge_text=challenge_text,
            challenge_completed=bool(challenge_text) and bool(challenge_completed),
        )

        new_id = self._attendance.create_if_absent(record)
        if new_id is None:
            logger.info("Duplicate check-in for %s on %s rejected", user_id, record.work_date)
            raise AlreadyExistsError("Attendance for today was already recorded")

        logger.info(
            "Check-in recorded: user=%s date=%s at %s status=%s",
            user_id, record.work_date, format_clock_time(now), record.status.value,
        )
        return replace(record, attendance_id=new_id)

    def start_overtime(self, user_id: str, *, now: datetime) -> AttendanceRecord:
        record = self._require_today(user_id, now)
        updated = start_overtime(record, now=now, shift=self._shift)

        ok = self._attendance.start_overtime(
            attendance_id=int(record.attendance_id),
            start_time=updated.overtime.start_time,
            out_time=updated.out_time,
        )
        if not ok:
            raise PreconditionFailedError("Overtime was already started")
        logger.info("Overtime started: user=%s at %s", user_id, format_clock_time(now))
        return updated

    def stop_overtime(self, user_id: str, *, now: datetime) -> AttendanceRecord:
        record = self._find_running_overtime(user_id, now)
        updated = stop_overtime(record, now=now)

        ot = updated.overtime
        ok = self._attendance.stop_overtime(
            attendance_id=int(record.attendance_id),
            end_time=ot.end_time,
            hours=float(ot.hours),
            needs_review=ot.needs_review,
        )
        if not ok:
            raise PreconditionFailedError("Overtime was already stopped")
        logger.info("Overtime stopped: user=%s hours=%.2f", user_id, ot.hours)
        return updated

    def get_history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, limit)

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_date(work_date)

    def out_time_for(self, record: AttendanceRecord) -> Optional[datetime]:
        return display_out_time(record, self._shift)

    def _require_today(self, user_id: str, now: datetime) -> AttendanceRecord:
        record = self._attendance.get_for_user_and_date(user_id, now.date())
        if record is None:
            raise ValidationError("No attendance recorded for today")
        return record

    def _find_running_overtime(self, user_id: str, now: datetime) -> AttendanceRecord:
        # Overtime may run past midnight: an open session from yesterday is still stoppable.
        today = self._attendance.get_for_user_and_date(user_id, now.date())
        if today is not None and overtime_phase(today) == OvertimePhase.ACTIVE:
            return today
        yesterday = self._attendance.get_for_user_and_date(user_id, now.date() - timedelta(days=1))
        if yesterday is not None and overtime_phase(yesterday) == OvertimePhase.ACTIVE:
            return yesterday
        if today is None:
            raise ValidationError("No attendance recorded for today")
        return today
