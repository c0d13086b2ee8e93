from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        """Insert ``record`` unless (user_id, work_date) exists.

        Atomic. Returns the new id, or None when a record already exists.
        """
        raise NotImplementedError

    def start_overtime(self, *, attendance_id: int, start_time: datetime, out_time: datetime) -> bool:
        """Conditional: only succeeds while overtime has not started."""
        raise NotImplementedError

    def stop_overtime(
        self,
        *,
        attendance_id: int,
        end_time: datetime,
        hours: float,
        needs_review: bool,
    ) -> bool:
        """Conditional: only succeeds while overtime is running."""
        raise NotImplementedError
