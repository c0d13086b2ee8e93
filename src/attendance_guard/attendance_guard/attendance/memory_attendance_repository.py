from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from .model import AttendanceRecord, OvertimeRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store; one lock makes every write a check-and-set."""

    def __init__(self):
        self._by_user_date: dict[tuple[str, date], AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_user_date.get((user_id, work_date))

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[: int(limit)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._by_user_date.values() if r.work_date == work_date]
        items.sort(key=lambda r: r.in_time)
        return items

    def create_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        key = (record.user_id, record.work_date)
        with self._lock:
            if key in self._by_user_date:
                return None
            self._id += 1
            self._by_user_date[key] = replace(record, attendance_id=self._id)
            return self._id

    def start_overtime(self, *, attendance_id: int, start_time: datetime, out_time: datetime) -> bool:
        with self._lock:
            key = self._key_for(attendance_id)
            if key is None:
                return False
            rec = self._by_user_date[key]
            if rec.overtime.start_time is not None:
                return False
            self._by_user_date[key] = replace(rec, out_time=out_time, overtime=OvertimeRecord(start_time=start_time))
            return True

    def stop_overtime(self, *, attendance_id: int, end_time: datetime, hours: float, needs_review: bool) -> bool:
        with self._lock:
            key = self._key_for(attendance_id)
            if key is None:
                return False
            rec = self._by_user_date[key]
            if rec.overtime.start_time is None or rec.overtime.end_time is not None:
                return False
            self._by_user_date[key] = replace(
                rec,
                overtime=OvertimeRecord(
                    start_time=rec.overtime.start_time,
                    end_time=end_time,
                    hours=hours,
                    needs_review=needs_review,
                ),
            )
            return True

    def _key_for(self, attendance_id: int) -> Optional[tuple[str, date]]:
        for k, v in self._by_user_date.items():
            if v.attendance_id == attendance_id:
                return k
        return None
