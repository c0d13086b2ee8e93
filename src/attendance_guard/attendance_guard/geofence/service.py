from __future__ import annotations

import logging

from ..common.validators import require_in_range, require_positive
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import DEFAULT_GEOFENCE, Coordinate, GeoFenceConfig
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class GeoFenceSettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def current(self) -> GeoFenceConfig:
        return self._settings.get_geofence() or DEFAULT_GEOFENCE

    def update(
        self,
        *,
        current_role: Role,
        office_latitude: float,
        office_longitude: float,
        allowed_radius_meters: float,
        enabled: bool,
    ) -> GeoFenceConfig:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change geofence settings")

        lat = require_in_range(office_latitude, "Office latitude", -90.0, 90.0)
        lng = require_in_range(office_longitude, "Office longitude", -180.0, 180.0)
        radius = require_positive(allowed_radius_meters, "Allowed radius")

        config = GeoFenceConfig(
            office_coordinate=Coordinate(latitude=lat, longitude=lng),
            allowed_radius_meters=radius,
            enabled=bool(enabled),
        )
        if config.enabled and not config.office_configured:
            raise ValidationError("Set the office location before enabling geofencing")

        self._settings.save_geofence(config)
        logger.info(
            "Geofence updated: enabled=%s office=(%.6f, %.6f) radius=%.1fm",
            config.enabled, lat, lng, radius,
        )
        return config
