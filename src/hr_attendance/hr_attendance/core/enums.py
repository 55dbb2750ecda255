from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Daily attendance status.

    NOT_SET is synthetic: produced for an expected working day without a
    record and never persisted.
    """

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    LEAVE = "leave"
    HOLIDAY = "holiday"
    WEEKOFF = "weekoff"
    NOT_SET = "not_set"


class LeaveStatus(str, Enum):
    """Leave request lifecycle state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RollupPath(str, Enum):
    """Which store path produced a roll-up."""

    PRIMARY = "primary"
    FALLBACK = "fallback"
