from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_ALLOWED_RADIUS_METERS


@dataclass(frozen=True)
class Coordinate:
    """WGS-84 position in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoFenceConfig:
    """Office geofence, edited only from the admin settings screen."""

    office_coordinate: Coordinate
    allowed_radius_meters: float = DEFAULT_ALLOWED_RADIUS_METERS
    enabled: bool = False

    @property
    def office_configured(self) -> bool:
        c = self.office_coordinate
        return not (c.latitude == 0 and c.longitude == 0)


@dataclass(frozen=True)
class FenceEvaluation:
    inside_fence: bool
    distance_meters: float


DEFAULT_GEOFENCE = GeoFenceConfig(office_coordinate=Coordinate(0.0, 0.0))
