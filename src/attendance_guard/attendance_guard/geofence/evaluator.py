from __future__ import annotations

import math

from ..core.constants import EARTH_RADIUS_METERS
from .model import Coordinate, FenceEvaluation, GeoFenceConfig


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    if h > 1.0:  # rounding near antipodes; NaN falls through untouched
        h = 1.0
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def evaluate(point: Coordinate, fence: GeoFenceConfig) -> FenceEvaluation:
    """Decide whether ``point`` lies inside ``fence``.

    A disabled fence admits everyone at distance 0. A NaN coordinate yields
    ``inside_fence=False`` with a NaN distance (NaN never compares ``<=``).
    """
    if not fence.enabled:
        return FenceEvaluation(inside_fence=True, distance_meters=0.0)

    distance = haversine_meters(point, fence.office_coordinate)
    return FenceEvaluation(
        inside_fence=distance <= fence.allowed_radius_meters,
        distance_meters=distance,
    )


def meters_outside(evaluation: FenceEvaluation, fence: GeoFenceConfig) -> float:
    """How far past the allowed radius the point is (0 when inside)."""
    if evaluation.inside_fence:
        return 0.0
    return max(0.0, evaluation.distance_meters - fence.allowed_radius_meters)
