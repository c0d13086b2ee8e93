from __future__ import annotations

import math
from typing import Protocol

from ..core.exceptions import InputError, LocationUnavailable
from ..geofence.model import Coordinate


class LocationProvider(Protocol):
    def get_current_coordinate(self) -> Coordinate:
        """Return the device position.

        Raises LocationPermissionDenied, LocationUnavailable or LocationTimeout.
        """
        raise NotImplementedError


class StaticLocationProvider:
    """Fixed position, for kiosks bolted to the office wall."""

    def __init__(self, coordinate: Coordinate):
        self._coordinate = coordinate

    def get_current_coordinate(self) -> Coordinate:
        return self._coordinate


class UnconfiguredLocationProvider:
    """Stand-in until a real positioning source is wired; every read fails."""

    def get_current_coordinate(self) -> Coordinate:
        raise LocationUnavailable("No location source is configured for this device")


def check_coordinate(coordinate: Coordinate) -> Coordinate:
    """Reject coordinates that are not a usable WGS-84 position."""
    lat, lng = coordinate.latitude, coordinate.longitude
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InputError(f"Malformed coordinate: ({lat}, {lng})")
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        raise InputError(f"Coordinate out of range: ({lat}, {lng})")
    return coordinate
