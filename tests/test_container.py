import importlib

import pytest

from config import get_settings_module
from src.attendance_guard.attendance_guard.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.attendance_guard.attendance_guard.container import build_container
from src.attendance_guard.attendance_guard.core.exceptions import ValidationError


def test_settings_module_follows_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    assert get_settings_module() == "config.testing"
    monkeypatch.setenv("APP_ENV", "prod")
    assert get_settings_module() == "config.production"
    monkeypatch.delenv("APP_ENV")
    assert get_settings_module() == "config.development"


def test_testing_settings_build_an_in_memory_container():
    settings = importlib.import_module("config.testing")

    c = build_container(settings)

    assert c.conn is None
    assert isinstance(c.attendance_repo, InMemoryAttendanceRepository)
    assert c.attendance_service.shift.late_cutoff == settings.LATE_CUTOFF
    assert c.geofence_service.current().enabled is False


def test_unknown_backend_is_rejected():
    class Settings:
        STORE_BACKEND = "redis"

    with pytest.raises(ValidationError):
        build_container(Settings)
