from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import CorrectionField, CorrectionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CorrectionRequest
from .repository import CorrectionRepository

_COLUMNS = "request_id, user_id, user_name, field, old_value, new_value, status, request_date, approved_at"


def _to_request(r: dict) -> CorrectionRequest:
    return CorrectionRequest(
        request_id=int(r["request_id"]),
        user_id=str(r["user_id"]),
        user_name=str(r.get("user_name") or ""),
        field=CorrectionField(r["field"]),
        old_value=str(r.get("old_value") or ""),
        new_value=str(r.get("new_value") or ""),
        status=CorrectionStatus(r["status"]),
        request_date=r["request_date"],
        approved_at=r.get("approved_at"),
    )


class MySQLCorrectionRepository(CorrectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        user_name: str,
        field: CorrectionField,
        old_value: str,
        new_value: str,
        request_date: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO correction_requests(user_id, user_name, field, old_value, new_value, status, request_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (user_id, user_name, field.value, old_value, new_value, CorrectionStatus.PENDING.value, request_date),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[CorrectionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM correction_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(self, *, user_id: str) -> Sequence[CorrectionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM correction_requests
                WHERE user_id=%s
                ORDER BY request_date DESC, request_id DESC
                """,
                (user_id,),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_all(self, *, status: Optional[CorrectionStatus] = None, limit: int = 500) -> Sequence[CorrectionRequest]:
        clauses = []
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM correction_requests
                {where}
                ORDER BY request_date DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def conditional_update(
        self,
        *,
        request_id: int,
        expected_status: CorrectionStatus,
        status: CorrectionStatus,
        approved_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE correction_requests
                SET status=%s, approved_at=COALESCE(%s, approved_at)
                WHERE request_id=%s AND status=%s
                """,
                (status.value, approved_at, int(request_id), expected_status.value),
            )
            return cur.rowcount > 0
