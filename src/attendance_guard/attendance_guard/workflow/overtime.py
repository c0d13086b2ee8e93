from __future__ import annotations

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.clock import Clock, read_clock


class OvertimeWorkflow:
    def __init__(self, *, clock: Clock, attendance: AttendanceService):
        self._clock = clock
        self._attendance = attendance

    def start(self, user_id: str) -> AttendanceRecord:
        return self._attendance.start_overtime(user_id, now=read_clock(self._clock))

    def stop(self, user_id: str) -> AttendanceRecord:
        return self._attendance.stop_overtime(user_id, now=read_clock(self._clock))
