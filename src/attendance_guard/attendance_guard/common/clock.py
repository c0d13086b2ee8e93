from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..core.exceptions import InputError
from .datetime_utils import now_local


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall clock; every decision reads time through a Clock."""

    def now(self) -> datetime:
        return now_local()


def read_clock(clock: Clock) -> datetime:
    """Read ``clock`` or raise InputError; a failed read never defaults to "on time"."""
    try:
        value = clock.now()
    except OSError as e:
        raise InputError("Clock is unavailable") from e
    if not isinstance(value, datetime):
        raise InputError(f"Clock returned {type(value).__name__}, expected datetime")
    return value
