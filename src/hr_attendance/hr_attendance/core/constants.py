"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus

PRESENT_EQUIVALENT_STATUSES = frozenset(
    {AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY}
)
NON_WORKING_STATUSES = frozenset({AttendanceStatus.HOLIDAY, AttendanceStatus.WEEKOFF})

# Duplicate records for one employee/day: the first status in this tuple wins.
STATUS_PRECEDENCE = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.LATE,
    AttendanceStatus.HALF_DAY,
    AttendanceStatus.LEAVE,
    AttendanceStatus.HOLIDAY,
    AttendanceStatus.WEEKOFF,
    AttendanceStatus.ABSENT,
)

BALANCE_WITHIN_LIMIT = "With In Limit"
BALANCE_EXCEED = "Exceed"

DEFAULT_ROLLUP_MAX_WORKERS = 4
DEFAULT_RECORD_LIMIT = 500
HOURS_PRECISION = 2
