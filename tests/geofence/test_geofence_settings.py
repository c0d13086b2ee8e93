import pytest

from src.attendance_guard.attendance_guard.core.enums import Role
from src.attendance_guard.attendance_guard.core.exceptions import AuthorizationError, ValidationError
from src.attendance_guard.attendance_guard.geofence.memory_settings_repository import InMemorySettingsRepository
from src.attendance_guard.attendance_guard.geofence.model import DEFAULT_GEOFENCE, Coordinate
from src.attendance_guard.attendance_guard.geofence.service import GeoFenceSettingsService


def _update(svc: GeoFenceSettingsService, **overrides):
    params = dict(
        current_role=Role.ADMIN,
        office_latitude=10.7769,
        office_longitude=106.7009,
        allowed_radius_meters=50,
        enabled=True,
    )
    params.update(overrides)
    return svc.update(**params)


def test_defaults_when_nothing_is_stored():
    svc = GeoFenceSettingsService(InMemorySettingsRepository())

    cfg = svc.current()

    assert cfg == DEFAULT_GEOFENCE
    assert cfg.enabled is False
    assert cfg.allowed_radius_meters == 50


def test_admin_update_is_persisted():
    svc = GeoFenceSettingsService(InMemorySettingsRepository())

    _update(svc, allowed_radius_meters=80)

    cfg = svc.current()
    assert cfg.office_coordinate == Coordinate(10.7769, 106.7009)
    assert cfg.allowed_radius_meters == 80
    assert cfg.enabled is True


def test_only_admins_may_change_the_fence():
    svc = GeoFenceSettingsService(InMemorySettingsRepository())

    with pytest.raises(AuthorizationError):
        _update(svc, current_role=Role.USER)


@pytest.mark.parametrize(
    "overrides",
    [
        {"office_latitude": 91.0},
        {"office_longitude": -181.0},
        {"allowed_radius_meters": 0},
        {"allowed_radius_meters": float("nan")},
        {"office_latitude": 0.0, "office_longitude": 0.0},
    ],
)
def test_invalid_settings_are_rejected(overrides):
    svc = GeoFenceSettingsService(InMemorySettingsRepository())

    with pytest.raises(ValidationError):
        _update(svc, **overrides)
    assert svc.current() == DEFAULT_GEOFENCE
