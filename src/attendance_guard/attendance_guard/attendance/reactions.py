from __future__ import annotations

import random
from typing import Optional

from ..core.enums import AttendanceStatus

DAILY_CHALLENGES = (
    "Smile and take attendance",
    "Say 'Good Morning' loudly",
    "Drink water before starting work",
    "Take a deep breath & relax",
    "High-five yourself (mentally)",
    "Do a quick stretch!",
    "Make a funny face",
    "Look sharp! Adjust your collar",
)

REACTIONS_ON_TIME = (
    "Boss Level Entry",
    "Rocket Start!",
    "Shining bright today!",
    "Let's crush it!",
    "Roar mode: ON",
    "You are speed!",
    "Crystal clear focus today",
)

REACTIONS_LATE = (
    "Late again today!",
    "Slept late last night?",
    "Slow and steady wins the race?",
    "Alarm didn't ring?",
    "Need more coffee?",
    "A little cardio running late?",
)


class ReactionPicker:
    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def daily_challenge(self) -> str:
        return self._rng.choice(DAILY_CHALLENGES)

    def reaction_for(self, status: AttendanceStatus) -> str:
        pool = REACTIONS_ON_TIME if status == AttendanceStatus.PRESENT else REACTIONS_LATE
        return self._rng.choice(pool)
