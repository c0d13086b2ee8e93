from __future__ import annotations

from dataclasses import dataclass

import cv2
import numpy as np

from ..core.constants import (
    LIVENESS_FRAME_HEIGHT,
    LIVENESS_FRAME_WIDTH,
    LIVENESS_MAX_MOTION_PERCENT,
    LIVENESS_MIN_MOTION_PERCENT,
    LIVENESS_PIXEL_DELTA_THRESHOLD,
)


@dataclass(frozen=True)
class MotionThresholds:
    frame_width: int = LIVENESS_FRAME_WIDTH
    frame_height: int = LIVENESS_FRAME_HEIGHT
    pixel_delta: int = LIVENESS_PIXEL_DELTA_THRESHOLD
    min_percent: float = LIVENESS_MIN_MOTION_PERCENT
    max_percent: float = LIVENESS_MAX_MOTION_PERCENT

    def qualifies(self, motion_percent: float) -> bool:
        """Blink/nod-scale motion: above still-photo level, below camera-shake level."""
        return self.min_percent < motion_percent < self.max_percent


def downsample(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    if pixels.shape[1] == width and pixels.shape[0] == height:
        return pixels
    return cv2.resize(pixels, (width, height), interpolation=cv2.INTER_AREA)


def motion_percent(current: np.ndarray, previous: np.ndarray, pixel_delta: int) -> float:
    """Share of pixels (0-100) whose summed |dB|+|dG|+|dR| exceeds ``pixel_delta``."""
    if current.shape != previous.shape:
        raise ValueError(f"Frame shapes differ: {current.shape} vs {previous.shape}")
    delta = np.abs(current.astype(np.int16) - previous.astype(np.int16)).sum(axis=2)
    differing = int(np.count_nonzero(delta > pixel_delta))
    total = delta.shape[0] * delta.shape[1]
    return differing / total * 100.0
