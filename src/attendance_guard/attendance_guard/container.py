from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.decision import AttendanceDecisionEngine
from .attendance.factory import AttendanceStrategyFactory
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .core.exceptions import ValidationError
from .corrections.memory_correction_repository import InMemoryCorrectionRepository
from .corrections.mysql_correction_repository import MySQLCorrectionRepository
from .corrections.repository import CorrectionRepository
from .corrections.service import CorrectionService
from .corrections.window import CorrectionWindowManager
from .database.connection import DBConfig, DatabaseConnection
from .devices.capture import CaptureProvider, OpenCVCaptureProvider
from .devices.location import LocationProvider, StaticLocationProvider, UnconfiguredLocationProvider
from .geofence.memory_settings_repository import InMemorySettingsRepository
from .geofence.model import Coordinate
from .geofence.mysql_settings_repository import MySQLSettingsRepository
from .geofence.repository import SettingsRepository
from .geofence.service import GeoFenceSettingsService
from .liveness.detector import LivenessDetector
from .liveness.motion import MotionThresholds
from .shifts.model import Shift
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .workflow.check_in import CheckInWorkflow
from .workflow.overtime import OvertimeWorkflow


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    corrections_repo: CorrectionRepository
    settings_repo: SettingsRepository

    geofence_service: GeoFenceSettingsService
    attendance_service: AttendanceService
    correction_service: CorrectionService

    check_in_workflow: CheckInWorkflow
    overtime_workflow: OvertimeWorkflow


def _default_location(settings) -> LocationProvider:
    lat = getattr(settings, "KIOSK_LATITUDE", None)
    lng = getattr(settings, "KIOSK_LONGITUDE", None)
    if lat is None or lng is None:
        return UnconfiguredLocationProvider()
    return StaticLocationProvider(Coordinate(latitude=float(lat), longitude=float(lng)))


def build_container(
    settings,
    *,
    location: LocationProvider | None = None,
    capture: CaptureProvider | None = None,
    clock: Clock | None = None,
) -> Container:
    """Wire repositories, services and workflows from a settings module.

    ``location``, ``capture`` and ``clock`` replace the device-backed defaults,
    which is how tests and demos run without hardware.
    """
    clock = clock or SystemClock()
    backend = str(getattr(settings, "STORE_BACKEND", "mysql")).lower()

    conn: Optional[DatabaseConnection] = None
    if backend == "memory":
        users_repo = InMemoryUserRepository()
        attendance_repo = InMemoryAttendanceRepository()
        corrections_repo = InMemoryCorrectionRepository()
        settings_repo = InMemorySettingsRepository()
    elif backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        users_repo = MySQLUserRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
        corrections_repo = MySQLCorrectionRepository(conn)
        settings_repo = MySQLSettingsRepository(conn)
    else:
        raise ValidationError(f"Unknown STORE_BACKEND: {backend!r}")

    shift = Shift(
        start_time=getattr(settings, "SHIFT_START", Shift.start_time),
        late_cutoff=getattr(settings, "LATE_CUTOFF", Shift.late_cutoff),
        end_time=getattr(settings, "SHIFT_END", Shift.end_time),
    )
    thresholds = MotionThresholds(
        frame_width=int(getattr(settings, "LIVENESS_FRAME_WIDTH", MotionThresholds.frame_width)),
        frame_height=int(getattr(settings, "LIVENESS_FRAME_HEIGHT", MotionThresholds.frame_height)),
        pixel_delta=int(getattr(settings, "LIVENESS_PIXEL_DELTA", MotionThresholds.pixel_delta)),
        min_percent=float(getattr(settings, "LIVENESS_MIN_MOTION_PERCENT", MotionThresholds.min_percent)),
        max_percent=float(getattr(settings, "LIVENESS_MAX_MOTION_PERCENT", MotionThresholds.max_percent)),
    )
    warmup = float(getattr(settings, "LIVENESS_WARMUP_SECONDS", 2.0))
    window = CorrectionWindowManager(int(getattr(settings, "CORRECTION_WINDOW_SECONDS", 300)))

    geofence_service = GeoFenceSettingsService(settings_repo)
    attendance_service = AttendanceService(attendance_repo, users_repo, shift=shift)
    correction_service = CorrectionService(corrections_repo, users_repo, window=window, clock=clock)

    engine = AttendanceDecisionEngine(shift, strategy_factory=AttendanceStrategyFactory())
    detector = LivenessDetector(
        capture or OpenCVCaptureProvider(getattr(settings, "CAMERA_SOURCE", 0), clock=clock),
        thresholds=thresholds,
        warmup_seconds=warmup,
        clock=clock,
    )
    check_in_workflow = CheckInWorkflow(
        location=location or _default_location(settings),
        liveness=detector,
        clock=clock,
        geofence=geofence_service,
        engine=engine,
        attendance=attendance_service,
    )
    overtime_workflow = OvertimeWorkflow(clock=clock, attendance=attendance_service)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        corrections_repo=corrections_repo,
        settings_repo=settings_repo,
        geofence_service=geofence_service,
        attendance_service=attendance_service,
        correction_service=correction_service,
        check_in_workflow=check_in_workflow,
        overtime_workflow=overtime_workflow,
    )
