from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_clock_time
from ...core.enums import CheckInAction
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class TooEarlyStrategy(AttendanceStrategy):
    """Before the shift opens: refused, nothing recorded."""

    def decide_checkin(self, *, now: datetime, shift: Shift) -> StatusDecision:
        return StatusDecision(
            action=CheckInAction.TOO_EARLY,
            note=f"Check-in opens at {format_clock_time(shift.start_time)}",
        )
