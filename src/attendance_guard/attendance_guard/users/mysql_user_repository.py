from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserProfile
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, name, phone, address, photo_ref, profile_completed, status
                FROM users
                WHERE user_id=%s
                """,
                (user_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return UserProfile(
                user_id=str(r["user_id"]),
                name=str(r["name"]),
                phone=str(r.get("phone") or ""),
                address=str(r.get("address") or ""),
                photo_ref=r.get("photo_ref"),
                profile_completed=bool(r.get("profile_completed")),
                is_active=(r.get("status") or "active") == "active",
            )

    def save_profile(self, profile: UserProfile) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, phone=%s, address=%s, photo_ref=%s
                WHERE user_id=%s
                """,
                (profile.name, profile.phone, profile.address, profile.photo_ref, profile.user_id),
            )
            return cur.rowcount > 0
