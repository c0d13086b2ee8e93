from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_clock_time
from ...core.enums import AttendanceStatus, CheckInAction
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in: recorded, but as an absence."""

    def decide_checkin(self, *, now: datetime, shift: Shift) -> StatusDecision:
        return StatusDecision(
            action=CheckInAction.CHECKED_IN,
            status=AttendanceStatus.ABSENT,
            note=f"Checked in after the {format_clock_time(shift.late_cutoff)} cutoff",
        )
