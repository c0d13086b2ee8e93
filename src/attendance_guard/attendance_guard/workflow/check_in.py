from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from ..attendance.decision import AttendanceDecisionEngine
from ..attendance.model import AttendanceRecord, CheckInDecision
from ..attendance.service import AttendanceService
from ..common.clock import Clock, read_clock
from ..core.enums import BlockReason, CheckInAction, LivenessState
from ..devices.capture import encode_jpeg_data_url
from ..devices.location import LocationProvider, check_coordinate
from ..geofence.evaluator import evaluate, meters_outside
from ..geofence.model import Coordinate, FenceEvaluation
from ..geofence.service import GeoFenceSettingsService
from ..liveness.detector import LivenessDetector, LivenessResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckInOutcome:
    decision: CheckInDecision
    coordinate: Coordinate
    fence: FenceEvaluation
    liveness: Optional[LivenessResult] = None
    record: Optional[AttendanceRecord] = None
    meters_outside: float = 0.0

    @property
    def checked_in(self) -> bool:
        return self.record is not None


class CheckInWorkflow:
    """location -> geofence -> liveness -> clock -> decision -> create-if-absent.

    Holds no state between calls. Location and device errors propagate as
    their typed exceptions; a failed location read is never treated as inside.
    """

    def __init__(
        self,
        *,
        location: LocationProvider,
        liveness: LivenessDetector,
        clock: Clock,
        geofence: GeoFenceSettingsService,
        engine: AttendanceDecisionEngine,
        attendance: AttendanceService,
    ):
        self._location = location
        self._liveness = liveness
        self._clock = clock
        self._geofence = geofence
        self._engine = engine
        self._attendance = attendance

    def check_in(
        self,
        user_id: str,
        *,
        cancel: threading.Event | None = None,
        challenge_text: Optional[str] = None,
        challenge_completed: bool = False,
    ) -> CheckInOutcome:
        coordinate = check_coordinate(self._location.get_current_coordinate())
        fence_config = self._geofence.current()
        fence = evaluate(coordinate, fence_config)

        if not fence.inside_fence:
            outside = meters_outside(fence, fence_config)
            logger.info("Check-in blocked for %s: %.0fm outside the office zone", user_id, outside)
            return CheckInOutcome(
                decision=CheckInDecision(action=CheckInAction.BLOCKED, reason=BlockReason.OUTSIDE_FENCE),
                coordinate=coordinate,
                fence=fence,
                meters_outside=outside,
            )

        # Skip the camera when the answer cannot depend on it.
        now = read_clock(self._clock)
        existing = self._attendance.get_today_record(user_id, now.date())
        early = self._engine.decide(now=now, existing=existing, fence=fence, liveness=LivenessState.CAPTURED)
        if early.action in (CheckInAction.ALREADY_MARKED, CheckInAction.TOO_EARLY):
            logger.info("Check-in for %s not recorded: %s", user_id, early.action.value)
            return CheckInOutcome(decision=early, coordinate=coordinate, fence=fence)

        result = self._liveness.run(cancel=cancel)

        now = read_clock(self._clock)
        existing = self._attendance.get_today_record(user_id, now.date())
        decision = self._engine.decide(now=now, existing=existing, fence=fence, liveness=result.state)
        if not decision.allowed:
            logger.info(
                "Check-in for %s not recorded: %s%s",
                user_id, decision.action.value, f" ({decision.reason.value})" if decision.reason else "",
            )
            return CheckInOutcome(decision=decision, coordinate=coordinate, fence=fence, liveness=result)

        record = self._attendance.record_check_in(
            user_id=user_id,
            now=now,
            decision=decision,
            coordinate=coordinate,
            captured_image_ref=encode_jpeg_data_url(result.frame),
            challenge_text=challenge_text,
            challenge_completed=challenge_completed,
        )
        return CheckInOutcome(decision=decision, coordinate=coordinate, fence=fence, liveness=result, record=record)
