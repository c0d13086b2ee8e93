from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import BlockReason, CheckInAction, LivenessState
from ..geofence.model import FenceEvaluation
from ..shifts.model import Shift
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, CheckInDecision


class AttendanceDecisionEngine:
    """Classifies a check-in attempt. Pure: no clock, no store.

    Order of checks: existing record, shift open, geofence, liveness, then
    on-time vs late.
    """

    def __init__(self, shift: Shift | None = None, *, strategy_factory: AttendanceStrategyFactory | None = None):
        self._shift = shift or Shift()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def shift(self) -> Shift:
        return self._shift

    def decide(
        self,
        *,
        now: datetime,
        existing: Optional[AttendanceRecord],
        fence: Optional[FenceEvaluation],
        liveness: Optional[LivenessState],
    ) -> CheckInDecision:
        if existing is not None:
            return CheckInDecision(action=CheckInAction.ALREADY_MARKED, status=existing.status)

        strategy = self._factory.for_checkin(now=now, shift=self._shift)
        decision = strategy.decide_checkin(now=now, shift=self._shift)
        if decision.action == CheckInAction.TOO_EARLY:
            return CheckInDecision(action=decision.action, note=decision.note)

        if fence is None or not fence.inside_fence:
            return CheckInDecision(action=CheckInAction.BLOCKED, reason=BlockReason.OUTSIDE_FENCE)
        if liveness != LivenessState.CAPTURED:
            return CheckInDecision(action=CheckInAction.BLOCKED, reason=BlockReason.LIVENESS_NOT_CONFIRMED)

        return CheckInDecision(action=decision.action, status=decision.status, note=decision.note)
