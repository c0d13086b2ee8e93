"""Motion-based liveness check.

A static photo held up to the camera produces almost no frame-to-frame
change; a person blinking or nodding changes a small part of the frame;
waving the phone changes most of it. Only the middle band counts as live.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import numpy as np

from ..common.clock import Clock, SystemClock, read_clock
from ..common.datetime_utils import seconds_between
from ..core.constants import LIVENESS_WARMUP_SECONDS
from ..core.enums import LivenessState
from ..core.exceptions import ValidationError
from ..devices.capture import CaptureProvider, FrameSample
from .motion import MotionThresholds, downsample, motion_percent

logger = logging.getLogger(__name__)


class LivenessSession:
    """State of one capture attempt.

    Holds exactly one previous (downsampled) frame, replaced on every tick.
    """

    def __init__(
        self,
        *,
        thresholds: MotionThresholds | None = None,
        warmup_seconds: float = LIVENESS_WARMUP_SECONDS,
    ):
        self.thresholds = thresholds or MotionThresholds()
        self.warmup_seconds = float(warmup_seconds)
        self.state = LivenessState.INITIALIZING
        self.motion_score = 0.0
        self.captured: Optional[FrameSample] = None
        self.cancelled = False
        self._previous: Optional[np.ndarray] = None
        self._warmup_started: Optional[datetime] = None

    @property
    def has_previous_frame(self) -> bool:
        return self._previous is not None

    def tick_warmup(self, now: datetime) -> LivenessState:
        """Initializing -> Ready once the warm-up delay has elapsed since the first tick."""
        self._require_open()
        if self.state != LivenessState.INITIALIZING:
            return self.state
        if self._warmup_started is None:
            self._warmup_started = now
        if seconds_between(self._warmup_started, now) >= self.warmup_seconds:
            self.state = LivenessState.READY
        return self.state

    def start_detecting(self) -> None:
        self._require_open()
        if self.state != LivenessState.READY:
            raise ValidationError(f"Cannot start detecting from state {self.state.value}")
        self.state = LivenessState.DETECTING

    def process(self, frame: FrameSample) -> bool:
        """Feed one frame; True when it was accepted as the live capture."""
        self._require_open()
        if self.state != LivenessState.DETECTING:
            raise ValidationError(f"Frames are only processed while detecting (state={self.state.value})")

        t = self.thresholds
        small = downsample(frame.pixels, t.frame_width, t.frame_height)
        if self._previous is None:
            self._previous = small
            return False

        score = motion_percent(small, self._previous, t.pixel_delta)
        self._previous = small
        self.motion_score = score

        if t.qualifies(score):
            self.state = LivenessState.CAPTURED
            self.captured = frame
            self._previous = None
            return True
        return False

    def cancel(self) -> None:
        self.cancelled = True
        self._previous = None

    def _require_open(self) -> None:
        if self.cancelled:
            raise ValidationError("Liveness session was cancelled")
        if self.state == LivenessState.CAPTURED:
            raise ValidationError("Liveness session already captured a frame")


@dataclass(frozen=True)
class LivenessResult:
    state: LivenessState
    frame: Optional[FrameSample]
    motion_score: float
    frames_seen: int
    cancelled: bool = False

    @property
    def captured(self) -> bool:
        return self.state == LivenessState.CAPTURED and self.frame is not None


class LivenessDetector:
    """Drives a LivenessSession from a capture stream until capture, cancel or end of stream.

    Warm-up is timed on the injected clock, not on frame timestamps.
    The stream is closed on every exit path. No timeout: only the caller's
    cancel event or the end of the stream stops a session that never qualifies.
    """

    def __init__(
        self,
        capture: CaptureProvider,
        *,
        thresholds: MotionThresholds | None = None,
        warmup_seconds: float = LIVENESS_WARMUP_SECONDS,
        clock: Clock | None = None,
    ):
        self._capture = capture
        self._clock = clock or SystemClock()
        self._thresholds = thresholds or MotionThresholds()
        self._warmup_seconds = float(warmup_seconds)

    def new_session(self) -> LivenessSession:
        return LivenessSession(thresholds=self._thresholds, warmup_seconds=self._warmup_seconds)

    def run(self, *, cancel: threading.Event | None = None) -> LivenessResult:
        session = self.new_session()
        source = self._capture.open_stream()
        frames = 0
        try:
            while True:
                if cancel is not None and cancel.is_set():
                    session.cancel()
                    logger.info("Liveness cancelled after %d frames", frames)
                    break

                frame = source.next()
                if frame is None:
                    break
                frames += 1

                if session.state == LivenessState.INITIALIZING:
                    if session.tick_warmup(read_clock(self._clock)) != LivenessState.READY:
                        continue
                if session.state == LivenessState.READY:
                    session.start_detecting()

                if session.process(frame):
                    logger.info(
                        "Liveness confirmed on frame %d (motion=%.2f%%)", frames, session.motion_score
                    )
                    break
        finally:
            source.close()

        return LivenessResult(
            state=session.state,
            frame=session.captured,
            motion_score=session.motion_score,
            frames_seen=frames,
            cancelled=session.cancelled,
        )
