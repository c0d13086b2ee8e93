from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, BlockReason, CheckInAction
from ..geofence.model import Coordinate


@dataclass(frozen=True)
class OvertimeRecord:
    """Overtime for one day: NotStarted -> Active -> Completed."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    hours: Optional[float] = None
    needs_review: bool = False


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in per user per calendar day."""

    attendance_id: Optional[int]
    user_id: str
    user_name: str
    work_date: date
    in_time: datetime
    status: AttendanceStatus
    coordinate: Optional[Coordinate] = None
    captured_image_ref: Optional[str] = field(default=None, repr=False)
    out_time: Optional[datetime] = None
    overtime: OvertimeRecord = field(default_factory=OvertimeRecord)
    fun_reaction: Optional[str] = None
    challenge_text: Optional[str] = None
    challenge_completed: bool = False


@dataclass(frozen=True)
class CheckInDecision:
    action: CheckInAction
    status: Optional[AttendanceStatus] = None
    reason: Optional[BlockReason] = None
    note: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.action == CheckInAction.CHECKED_IN
