from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Optional

import numpy as np
import pytest

from src.attendance_guard.attendance_guard.core.enums import LivenessState
from src.attendance_guard.attendance_guard.core.exceptions import DeviceUnavailableError, ValidationError
from src.attendance_guard.attendance_guard.devices.capture import FrameSample
from src.attendance_guard.attendance_guard.liveness.detector import LivenessDetector, LivenessSession
from src.attendance_guard.attendance_guard.liveness.motion import MotionThresholds, motion_percent

T0 = datetime(2026, 3, 2, 10, 5, 0)


def _black(w: int = 320, h: int = 240) -> np.ndarray:
    return np.zeros((h, w, 3), dtype=np.uint8)


def _with_block(block_w: int, block_h: int, w: int = 320, h: int = 240) -> np.ndarray:
    img = _black(w, h)
    img[0:block_h, 0:block_w] = 255
    return img


class FakeClock:
    def __init__(self, current: datetime = T0):
        self.current = current

    def now(self) -> datetime:
        return self.current


class ListFrameSource:
    """Replays frames; when given a clock, moves it to each frame's capture time."""

    def __init__(
        self,
        frames: list[FrameSample],
        *,
        fail_after: Optional[int] = None,
        clock: Optional[FakeClock] = None,
    ):
        self._frames = list(frames)
        self._fail_after = fail_after
        self._clock = clock
        self.reads = 0
        self.closed = False

    def next(self) -> Optional[FrameSample]:
        if self._fail_after is not None and self.reads >= self._fail_after:
            raise DeviceUnavailableError("camera unplugged")
        if not self._frames:
            return None
        self.reads += 1
        frame = self._frames.pop(0)
        if self._clock is not None:
            self._clock.current = frame.captured_at
        return frame

    def close(self) -> None:
        self.closed = True


class ListCapture:
    def __init__(self, source: ListFrameSource):
        self.source = source

    def open_stream(self) -> ListFrameSource:
        return self.source


def _frames(*pixels: np.ndarray, step: float = 1.0) -> list[FrameSample]:
    return [FrameSample(pixels=p, captured_at=T0 + timedelta(seconds=i * step)) for i, p in enumerate(pixels)]


def test_identical_frames_have_no_motion():
    assert motion_percent(_black(), _black(), 100) == 0.0


def test_ten_percent_block_is_ten_percent_motion():
    # 96x80 of 320x240 = 10%
    assert motion_percent(_with_block(96, 80), _black(), 100) == pytest.approx(10.0)


def test_small_channel_changes_below_threshold_do_not_count():
    img = _black()
    img[:, :, :] = 33  # 33 * 3 = 99
    assert motion_percent(img, _black(), 100) == 0.0


def test_thresholds_are_exclusive():
    t = MotionThresholds()

    assert not t.qualifies(2.0)
    assert t.qualifies(2.01)
    assert t.qualifies(29.99)
    assert not t.qualifies(30.0)


def test_still_photo_never_captures():
    clock = FakeClock()
    source = ListFrameSource(_frames(*[_black() for _ in range(8)]), clock=clock)

    result = LivenessDetector(ListCapture(source), warmup_seconds=2.0, clock=clock).run()

    assert result.captured is False
    assert result.state == LivenessState.DETECTING
    assert result.motion_score == 0.0
    assert source.closed


def test_blink_sized_motion_captures_after_warmup():
    moving = _with_block(96, 80)
    clock = FakeClock()
    source = ListFrameSource(_frames(_black(), _black(), _black(), _black(), moving, _black()), clock=clock)

    result = LivenessDetector(ListCapture(source), warmup_seconds=2.0, clock=clock).run()

    assert result.captured is True
    assert result.motion_score == pytest.approx(10.0)
    assert result.frame.pixels is moving
    assert result.frames_seen == 5
    assert source.closed


def test_motion_during_warmup_is_ignored():
    moving = _with_block(96, 80)
    # Frames at 0s and 1s are still in the warm-up; the first compared pair is 2s/3s.
    clock = FakeClock()
    source = ListFrameSource(_frames(_black(), moving, _black(), _black()), clock=clock)

    result = LivenessDetector(ListCapture(source), warmup_seconds=2.0, clock=clock).run()

    assert result.captured is False


class TickingClock:
    def __init__(self, start: datetime = T0, step: float = 1.0):
        self.current = start
        self._step = timedelta(seconds=step)

    def now(self) -> datetime:
        value = self.current
        self.current += self._step
        return value


def test_warmup_follows_the_clock_when_frame_times_stand_still():
    moving = _with_block(96, 80)
    source = ListFrameSource(_frames(_black(), _black(), _black(), _black(), moving, _black(), step=0.0))

    result = LivenessDetector(ListCapture(source), warmup_seconds=2.0, clock=TickingClock()).run()

    assert result.captured is True
    assert result.frames_seen == 5


def test_warmup_does_not_finish_on_frame_times_alone():
    moving = _with_block(96, 80)
    source = ListFrameSource(_frames(_black(), _black(), _black(), moving, _black(), moving))

    result = LivenessDetector(ListCapture(source), warmup_seconds=2.0, clock=FakeClock()).run()

    assert result.captured is False
    assert result.state == LivenessState.INITIALIZING
    assert result.frames_seen == 6

def test_camera_shake_does_not_capture():
    source = ListFrameSource(_frames(_black(), _with_block(320, 120), _black(), step=0.0))

    result = LivenessDetector(ListCapture(source), warmup_seconds=0.0).run()

    assert result.captured is False
    assert result.motion_score == pytest.approx(50.0)


def test_full_resolution_frame_is_returned_after_downsampling():
    full = _with_block(192, 160, w=640, h=480)
    source = ListFrameSource(_frames(_black(640, 480), full, step=0.0))

    result = LivenessDetector(ListCapture(source), warmup_seconds=0.0).run()

    assert result.captured is True
    assert result.frame.width == 640
    assert result.frame.height == 480
    assert result.motion_score == pytest.approx(10.0)


def test_cancel_stops_before_reading_and_closes_the_stream():
    source = ListFrameSource(_frames(_black(), _with_block(96, 80)))
    cancel = threading.Event()
    cancel.set()

    result = LivenessDetector(ListCapture(source), warmup_seconds=0.0).run(cancel=cancel)

    assert result.cancelled is True
    assert result.captured is False
    assert source.reads == 0
    assert source.closed


def test_device_failure_propagates_and_closes_the_stream():
    source = ListFrameSource(_frames(*[_black() for _ in range(5)]), fail_after=2)

    with pytest.raises(DeviceUnavailableError):
        LivenessDetector(ListCapture(source), warmup_seconds=0.0).run()
    assert source.closed


def test_session_refuses_frames_outside_detecting_and_after_capture():
    session = LivenessSession(warmup_seconds=2.0)
    frame = FrameSample(pixels=_black(), captured_at=T0)

    with pytest.raises(ValidationError):
        session.process(frame)

    assert session.tick_warmup(T0) == LivenessState.INITIALIZING
    assert session.tick_warmup(T0 + timedelta(seconds=2)) == LivenessState.READY
    session.start_detecting()
    assert session.process(frame) is False
    assert session.has_previous_frame
    assert session.process(FrameSample(pixels=_with_block(96, 80), captured_at=T0)) is True
    assert not session.has_previous_frame

    with pytest.raises(ValidationError):
        session.process(frame)
