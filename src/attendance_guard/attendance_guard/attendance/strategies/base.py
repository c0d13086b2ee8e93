from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus, CheckInAction
from ...shifts.model import Shift


@dataclass(frozen=True)
class StatusDecision:
    action: CheckInAction
    status: Optional[AttendanceStatus] = None
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we classify a check-in time."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, shift: Shift) -> StatusDecision:
        raise NotImplementedError
