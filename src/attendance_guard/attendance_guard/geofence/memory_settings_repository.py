from __future__ import annotations

import threading
from typing import Optional

from .model import GeoFenceConfig
from .repository import SettingsRepository


class InMemorySettingsRepository(SettingsRepository):
    def __init__(self, geofence: Optional[GeoFenceConfig] = None):
        self._geofence = geofence
        self._lock = threading.Lock()

    def get_geofence(self) -> Optional[GeoFenceConfig]:
        with self._lock:
            return self._geofence

    def save_geofence(self, config: GeoFenceConfig) -> None:
        with self._lock:
            self._geofence = config
