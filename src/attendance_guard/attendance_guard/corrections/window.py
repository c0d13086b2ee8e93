"""Edit window for approved profile corrections.

The window is never scheduled. It is recomputed from ``approved_at`` and the
current time on every read, so any observer (user device, admin screen, a
restarted process) reaches the same answer without a running timer.
"""

from __future__ import annotations

import math
from datetime import datetime

from ..common.datetime_utils import seconds_between
from ..core.constants import DEFAULT_CORRECTION_WINDOW_SECONDS
from ..core.enums import CorrectionStatus
from .model import CorrectionRequest, EditGrant


class CorrectionWindowManager:
    def __init__(self, window_seconds: int = DEFAULT_CORRECTION_WINDOW_SECONDS):
        if int(window_seconds) <= 0:
            raise ValueError("window_seconds must be positive")
        self._window = int(window_seconds)

    @property
    def window_seconds(self) -> int:
        return self._window

    def elapsed_seconds(self, request: CorrectionRequest, now: datetime) -> float:
        if request.approved_at is None:
            return math.inf
        return seconds_between(request.approved_at, now)

    def grant_status(self, request: CorrectionRequest, now: datetime) -> EditGrant:
        elapsed = self.elapsed_seconds(request, now)
        active = request.status == CorrectionStatus.APPROVED and elapsed < self._window
        if math.isinf(elapsed):
            remaining = 0
        else:
            remaining = max(0, math.ceil(self._window - elapsed))
        return EditGrant(request=request, active=active, remaining_seconds=remaining if active else 0)

    def is_lapsed(self, request: CorrectionRequest, now: datetime) -> bool:
        """Approved, but the window has run out without an update."""
        return request.status == CorrectionStatus.APPROVED and self.elapsed_seconds(request, now) >= self._window
