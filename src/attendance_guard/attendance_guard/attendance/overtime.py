from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_clock_time, seconds_between
from ..core.enums import OvertimePhase
from ..core.exceptions import ValidationError
from ..shifts.model import Shift
from .model import AttendanceRecord, OvertimeRecord

logger = logging.getLogger(__name__)


def overtime_phase(record: AttendanceRecord) -> OvertimePhase:
    ot = record.overtime
    if ot.start_time is None:
        return OvertimePhase.NOT_STARTED
    if ot.end_time is None:
        return OvertimePhase.ACTIVE
    return OvertimePhase.COMPLETED


def overtime_hours(start: datetime, end: datetime) -> tuple[float, bool]:
    """Hours between start and end rounded to 2 decimals, and whether it needs review.

    Non-positive durations clamp to 0.0 and are flagged.
    """
    hours = round(seconds_between(start, end) / 3600.0, 2)
    if hours <= 0:
        return 0.0, True
    return hours, False


def start_overtime(record: AttendanceRecord, *, now: datetime, shift: Shift) -> AttendanceRecord:
    """NotStarted -> Active. Freezes the out time at the shift end."""
    phase = overtime_phase(record)
    if phase != OvertimePhase.NOT_STARTED:
        raise ValidationError(f"Overtime already {phase.value.lower()} for {record.work_date}")
    if now.date() != record.work_date:
        raise ValidationError("Overtime can only start on the day of the check-in")

    shift_end = shift.end_on(record.work_date)
    if now < shift_end:
        raise ValidationError(f"Overtime starts after {format_clock_time(shift.end_time)}")

    return replace(
        record,
        out_time=shift_end,
        overtime=OvertimeRecord(start_time=now),
    )


def stop_overtime(record: AttendanceRecord, *, now: datetime) -> AttendanceRecord:
    """Active -> Completed."""
    phase = overtime_phase(record)
    if phase != OvertimePhase.ACTIVE:
        raise ValidationError("Overtime is not running" if phase == OvertimePhase.NOT_STARTED
                              else "Overtime already completed for today")

    start = record.overtime.start_time
    hours, needs_review = overtime_hours(start, now)
    if needs_review:
        logger.warning(
            "Overtime for %s on %s has non-positive duration (%s -> %s); flagged for review",
            record.user_id, record.work_date, start, now,
        )
    return replace(
        record,
        overtime=OvertimeRecord(start_time=start, end_time=now, hours=hours, needs_review=needs_review),
    )


def display_out_time(record: AttendanceRecord, shift: Shift) -> Optional[datetime]:
    """Out time for reports: the stored one, or the shift end once overtime started."""
    if record.out_time is not None:
        return record.out_time
    if record.overtime.start_time is not None:
        return shift.end_on(record.work_date)
    return None
