from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus, CheckInAction
from ...shifts.model import Shift
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in."""

    def decide_checkin(self, *, now: datetime, shift: Shift) -> StatusDecision:
        return StatusDecision(action=CheckInAction.CHECKED_IN, status=AttendanceStatus.PRESENT)
