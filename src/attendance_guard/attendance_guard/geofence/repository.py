from __future__ import annotations

from typing import Optional, Protocol

from .model import GeoFenceConfig


class SettingsRepository(Protocol):
    def get_geofence(self) -> Optional[GeoFenceConfig]:
        raise NotImplementedError

    def save_geofence(self, config: GeoFenceConfig) -> None:
        raise NotImplementedError
