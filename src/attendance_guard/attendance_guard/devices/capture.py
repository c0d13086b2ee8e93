from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol, Union

import cv2
import numpy as np

from ..common.clock import Clock, SystemClock
from ..core.constants import CAPTURE_JPEG_QUALITY
from ..core.exceptions import DeviceUnavailableError, InputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSample:
    """One decoded video frame: an H×W×3 uint8 array plus its capture time."""

    pixels: np.ndarray = field(repr=False)
    captured_at: datetime

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


class FrameSource(Protocol):
    def next(self) -> Optional[FrameSample]:
        """Next frame, or None at end of stream. Raises DeviceUnavailableError if the device is lost."""
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class CaptureProvider(Protocol):
    def open_stream(self) -> FrameSource:
        """Raises DeviceUnavailableError or CameraPermissionDenied."""
        raise NotImplementedError


class OpenCVFrameSource:
    def __init__(self, cap: "cv2.VideoCapture", clock: Clock, *, live: bool):
        self._cap = cap
        self._clock = clock
        self._live = live
        self._closed = False

    def next(self) -> Optional[FrameSample]:
        if self._closed:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            if self._live:
                raise DeviceUnavailableError("Camera stopped delivering frames")
            return None
        return FrameSample(pixels=to_bgr(frame), captured_at=self._clock.now())

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._cap.release()


class OpenCVCaptureProvider:
    """Opens a camera index (live) or a video file path (recorded) with OpenCV."""

    def __init__(
        self,
        source: Union[int, str] = 0,
        *,
        clock: Clock | None = None,
        width: int = 640,
        height: int = 480,
    ):
        self._source = source
        self._clock = clock or SystemClock()
        self._width = int(width)
        self._height = int(height)

    def open_stream(self) -> OpenCVFrameSource:
        cap = cv2.VideoCapture(self._source)
        if not cap.isOpened():
            cap.release()
            raise DeviceUnavailableError(f"Cannot open capture source {self._source!r}")

        live = isinstance(self._source, int)
        if live:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._height)
        logger.debug("Opened capture source %r (live=%s)", self._source, live)
        return OpenCVFrameSource(cap, self._clock, live=live)


def to_bgr(img: np.ndarray) -> np.ndarray:
    """Normalize grayscale / BGRA frames to 3-channel uint8 BGR."""
    if img.ndim == 2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    elif img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    return np.ascontiguousarray(img, dtype=np.uint8)


def encode_jpeg_data_url(frame: FrameSample, *, quality: int = CAPTURE_JPEG_QUALITY) -> str:
    """Encode the accepted capture as ``data:image/jpeg;base64,...``."""
    ok, buf = cv2.imencode(".jpg", frame.pixels, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise InputError("Could not encode captured frame")
    return "data:image/jpeg;base64," + base64.b64encode(buf.tobytes()).decode("ascii")


def decode_data_url(data_url: str) -> np.ndarray:
    """Decode a base64 image (optionally a data URL) to a BGR array."""
    payload = data_url.split(",", 1)[1] if "," in data_url else data_url
    try:
        raw = base64.b64decode(payload, validate=True)
    except ValueError:
        raise InputError("Image is not valid base64")
    if not raw:
        raise InputError("Image is empty")
    nparr = np.frombuffer(raw, np.uint8)
    img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise InputError("Image could not be decoded")
    return to_bgr(img)
