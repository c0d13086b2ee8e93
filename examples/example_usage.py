"""Example: drive the service layer without a camera or database.

A synthetic capture stream (still frames, then a small "blink") stands in for
the webcam, and a fixed clock puts the check-in at 10:05.
"""

from datetime import datetime
from types import SimpleNamespace

import numpy as np

from src.attendance_guard.attendance_guard.container import build_container
from src.attendance_guard.attendance_guard.core.enums import Role
from src.attendance_guard.attendance_guard.devices.capture import FrameSample
from src.attendance_guard.attendance_guard.devices.location import StaticLocationProvider
from src.attendance_guard.attendance_guard.geofence.model import Coordinate
from src.attendance_guard.attendance_guard.users.model import UserProfile

OFFICE = Coordinate(10.7769, 106.7009)


class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current


class SyntheticStream:
    def __init__(self, clock: FixedClock):
        self._clock = clock
        self._frames = [np.zeros((480, 640, 3), dtype=np.uint8) for _ in range(4)]
        self._frames[3][100:260, 200:392] = 200

    def next(self):
        if not self._frames:
            return None
        return FrameSample(pixels=self._frames.pop(0), captured_at=self._clock.now())

    def close(self):
        pass


class SyntheticCamera:
    def __init__(self, clock: FixedClock):
        self._clock = clock

    def open_stream(self):
        return SyntheticStream(self._clock)


def main():
    clock = FixedClock(datetime.now().replace(hour=10, minute=5, second=0, microsecond=0))
    settings = SimpleNamespace(STORE_BACKEND="memory", LIVENESS_WARMUP_SECONDS=0.0)
    container = build_container(
        settings,
        location=StaticLocationProvider(OFFICE),
        capture=SyntheticCamera(clock),
        clock=clock,
    )
    container.users_repo.add(UserProfile(user_id="demo", name="Demo User"))
    container.geofence_service.update(
        current_role=Role.ADMIN,
        office_latitude=OFFICE.latitude,
        office_longitude=OFFICE.longitude,
        allowed_radius_meters=50,
        enabled=True,
    )

    outcome = container.check_in_workflow.check_in("demo")
    print(outcome.decision.action.value, outcome.record.status.value, outcome.record.fun_reaction)

    clock.current = clock.current.replace(hour=18, minute=30)
    container.overtime_workflow.start("demo")
    clock.current = clock.current.replace(hour=20, minute=30)
    record = container.overtime_workflow.stop("demo")
    print(f"Overtime: {record.overtime.hours:.2f} hours")


if __name__ == "__main__":
    main()
