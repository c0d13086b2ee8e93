from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Who is acting: staff submit, admins decide."""

    ADMIN = "admin"
    USER = "user"


class AttendanceStatus(str, Enum):
    """Persisted attendance status. Late check-ins are stored as ABSENT."""

    PRESENT = "Present"
    ABSENT = "Absent"


class CheckInAction(str, Enum):
    CHECKED_IN = "CheckedIn"
    ALREADY_MARKED = "AlreadyMarked"
    TOO_EARLY = "TooEarly"
    BLOCKED = "Blocked"


class BlockReason(str, Enum):
    OUTSIDE_FENCE = "OutsideFence"
    LIVENESS_NOT_CONFIRMED = "LivenessNotConfirmed"


class OvertimePhase(str, Enum):
    NOT_STARTED = "NotStarted"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class LivenessState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    DETECTING = "detecting"
    CAPTURED = "captured"


class CorrectionStatus(str, Enum):
    """Lifecycle of a profile correction request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    EXPIRED = "expired"


class CorrectionField(str, Enum):
    """Closed set of profile fields a correction may target.

    PHONE keeps the stored tag ``Number`` used by existing documents.
    """

    NAME = "Name"
    PHONE = "Number"
    ADDRESS = "Address"
    PHOTO = "Photo"
