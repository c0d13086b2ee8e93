from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from ..geofence.model import Coordinate
from .model import AttendanceRecord, OvertimeRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, user_name, work_date, in_time, out_time, status,
    latitude, longitude, captured_image_ref,
    overtime_start, overtime_end, overtime_hours, overtime_needs_review,
    fun_reaction, challenge_text, challenge_completed
"""


def _to_record(r: dict) -> AttendanceRecord:
    coordinate = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        coordinate = Coordinate(float(r["latitude"]), float(r["longitude"]))
    hours = r.get("overtime_hours")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=str(r["user_id"]),
        user_name=str(r.get("user_name") or ""),
        work_date=r["work_date"],
        in_time=r["in_time"],
        status=AttendanceStatus(r["status"]),
        coordinate=coordinate,
        captured_image_ref=r.get("captured_image_ref"),
        out_time=r.get("out_time"),
        overtime=OvertimeRecord(
            start_time=r.get("overtime_start"),
            end_time=r.get("overtime_end"),
            hours=float(hours) if hours is not None else None,
            needs_review=bool(r.get("overtime_needs_review")),
        ),
        fun_reaction=r.get("fun_reaction"),
        challenge_text=r.get("challenge_text"),
        challenge_completed=bool(r.get("challenge_completed")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_user(self, user_id: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s ORDER BY in_time",
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_if_absent(self, record: AttendanceRecord) -> Optional[int]:
        # uq_attendance_user_day makes the insert itself the existence check.
        lat = record.coordinate.latitude if record.coordinate else None
        lng = record.coordinate.longitude if record.coordinate else None
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, user_name, work_date, in_time, status, latitude, longitude,
                        captured_image_ref, fun_reaction, challenge_text, challenge_completed
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.user_id,
                        record.user_name,
                        record.work_date,
                        record.in_time,
                        record.status.value,
                        lat,
                        lng,
                        record.captured_image_ref,
                        record.fun_reaction,
                        record.challenge_text,
                        int(record.challenge_completed),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

    def start_overtime(self, *, attendance_id: int, start_time: datetime, out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET overtime_start=%s, out_time=%s
                WHERE attendance_id=%s AND overtime_start IS NULL
                """,
                (start_time, out_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def stop_overtime(self, *, attendance_id: int, end_time: datetime, hours: float, needs_review: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET overtime_end=%s, overtime_hours=%s, overtime_needs_review=%s
                WHERE attendance_id=%s AND overtime_start IS NOT NULL AND overtime_end IS NULL
                """,
                (end_time, hours, int(needs_review), int(attendance_id)),
            )
            return cur.rowcount > 0
