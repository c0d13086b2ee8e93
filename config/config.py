"""Settings shared by every environment; each environment module overrides a few."""

import os
from datetime import time


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_time(name: str, default: time) -> time:
    value = (os.getenv(name) or "").strip()
    if not value:
        return default
    hh, _, mm = value.partition(":")
    return time(int(hh), int(mm or 0))


def env_float(name: str) -> float | None:
    value = (os.getenv(name) or "").strip()
    return float(value) if value else None


def env_camera(name: str, default: int = 0):
    value = (os.getenv(name) or "").strip()
    if not value:
        return default
    return int(value) if value.isdigit() else value


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_guard"),
}

# "memory" keeps everything in-process; "mysql" uses DB_CONFIG.
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql").strip().lower()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SHIFT_START = env_time("SHIFT_START", time(10, 0))
LATE_CUTOFF = env_time("LATE_CUTOFF", time(10, 30))
SHIFT_END = env_time("SHIFT_END", time(18, 0))

CORRECTION_WINDOW_SECONDS = int(os.getenv("CORRECTION_WINDOW_SECONDS", "300"))

LIVENESS_WARMUP_SECONDS = float(os.getenv("LIVENESS_WARMUP_SECONDS", "2"))
LIVENESS_FRAME_WIDTH = int(os.getenv("LIVENESS_FRAME_WIDTH", "320"))
LIVENESS_FRAME_HEIGHT = int(os.getenv("LIVENESS_FRAME_HEIGHT", "240"))
LIVENESS_PIXEL_DELTA = int(os.getenv("LIVENESS_PIXEL_DELTA", "100"))
LIVENESS_MIN_MOTION_PERCENT = float(os.getenv("LIVENESS_MIN_MOTION_PERCENT", "2"))
LIVENESS_MAX_MOTION_PERCENT = float(os.getenv("LIVENESS_MAX_MOTION_PERCENT", "30"))

CAMERA_SOURCE = env_camera("CAMERA_SOURCE", 0)

# Fixed kiosk position; leave unset on devices that report their own location.
KIOSK_LATITUDE = env_float("KIOSK_LATITUDE")
KIOSK_LONGITUDE = env_float("KIOSK_LONGITUDE")
