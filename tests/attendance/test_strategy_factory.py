from datetime import datetime

from src.attendance_guard.attendance_guard.attendance.factory import AttendanceStrategyFactory
from src.attendance_guard.attendance_guard.attendance.strategies.early_strategy import TooEarlyStrategy
from src.attendance_guard.attendance_guard.attendance.strategies.late_strategy import LateStrategy
from src.attendance_guard.attendance_guard.attendance.strategies.normal_strategy import NormalStrategy
from src.attendance_guard.attendance_guard.core.enums import AttendanceStatus, CheckInAction
from src.attendance_guard.attendance_guard.shifts.model import Shift


def test_factory_checkin_on_time_at_shift_start():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 10, 0, 0), shift=Shift())

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_still_on_time_within_cutoff_minute():
    # 10:30:59 belongs to the 10:30 minute.
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 10, 30, 59), shift=Shift())

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_after_cutoff():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 10, 31, 0), shift=Shift())

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_checkin(now=datetime(2025, 1, 1, 10, 31, 0), shift=Shift())
    assert decision.action == CheckInAction.CHECKED_IN
    assert decision.status == AttendanceStatus.ABSENT
    assert "10:30 AM" in decision.note


def test_factory_checkin_too_early_before_start():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 9, 59, 59), shift=Shift())

    assert isinstance(strategy, TooEarlyStrategy)
    assert strategy.decide_checkin(now=datetime(2025, 1, 1, 9, 59), shift=Shift()).status is None
