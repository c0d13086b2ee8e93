from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Coordinate, GeoFenceConfig
from .repository import SettingsRepository

GEOFENCE_KEY = "attendance_config"


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_geofence(self) -> Optional[GeoFenceConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT office_lat, office_lng, allowed_radius, enable_geofencing
                FROM settings
                WHERE setting_key=%s
                """,
                (GEOFENCE_KEY,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return GeoFenceConfig(
                office_coordinate=Coordinate(float(r["office_lat"]), float(r["office_lng"])),
                allowed_radius_meters=float(r["allowed_radius"]),
                enabled=bool(r["enable_geofencing"]),
            )

    def save_geofence(self, config: GeoFenceConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(setting_key, office_lat, office_lng, allowed_radius, enable_geofencing)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    office_lat=VALUES(office_lat),
                    office_lng=VALUES(office_lng),
                    allowed_radius=VALUES(allowed_radius),
                    enable_geofencing=VALUES(enable_geofencing)
                """,
                (
                    GEOFENCE_KEY,
                    config.office_coordinate.latitude,
                    config.office_coordinate.longitude,
                    config.allowed_radius_meters,
                    int(config.enabled),
                ),
            )
