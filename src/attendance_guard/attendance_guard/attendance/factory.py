from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..shifts.model import Shift, minute_of
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import TooEarlyStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, shift: Shift) -> AttendanceStrategy:
        t = minute_of(now)
        if t < shift.start_time:
            return TooEarlyStrategy()
        if t <= shift.late_cutoff:
            return NormalStrategy()
        return LateStrategy()
