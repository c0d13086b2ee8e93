from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from ..core.constants import DEFAULT_LATE_CUTOFF, DEFAULT_SHIFT_END, DEFAULT_SHIFT_START
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Shift:
    """Daily shift window on the local clock.

    Check-ins are compared at minute resolution: 10:30:59 is still on time
    for a 10:30 cutoff.
    """

    shift_name: str = "General"
    start_time: time = DEFAULT_SHIFT_START
    late_cutoff: time = DEFAULT_LATE_CUTOFF
    end_time: time = DEFAULT_SHIFT_END

    def __post_init__(self):
        if not (self.start_time <= self.late_cutoff <= self.end_time):
            raise ValidationError("Shift times must satisfy start <= late cutoff <= end")

    def end_on(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.end_time)


def minute_of(now: datetime) -> time:
    return now.time().replace(second=0, microsecond=0)
