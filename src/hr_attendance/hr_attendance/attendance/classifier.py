"""Attendance classification.

Maps a stored record (or its absence) to one ``AttendanceStatus`` and tells
the aggregator whether the day counts toward the numerator and denominator
of the attendance percentage.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.constants import PRESENT_EQUIVALENT_STATUSES, STATUS_PRECEDENCE
from ..core.enums import AttendanceStatus
from ..core.exceptions import DataIntegrityWarning
from .factory import ClassificationStrategyFactory
from .model import AttendanceDay
from .strategies.base import ClassifiedDay

logger = logging.getLogger(__name__)

_default_factory = ClassificationStrategyFactory()


def classify_day(
    record: Optional[AttendanceDay],
    *,
    factory: Optional[ClassificationStrategyFactory] = None,
) -> ClassifiedDay:
    strategy = (factory or _default_factory).for_record(record)
    decision = strategy.classify(record)
    if decision.warning is not None:
        logger.warning(
            "attendance integrity: %s",
            decision.warning.message,
            extra={"employee_id": decision.warning.employee_id, "date": str(decision.warning.day)},
        )
    return decision


def classify(record: Optional[AttendanceDay]) -> AttendanceStatus:
    return classify_day(record).status


def _rank(record: AttendanceDay) -> tuple:
    valid_present = record.status in PRESENT_EQUIVALENT_STATUSES and record.has_check_in
    try:
        precedence = STATUS_PRECEDENCE.index(record.status)
    except ValueError:
        precedence = len(STATUS_PRECEDENCE)
    return (0 if valid_present else 1, precedence, str(record.attendance_id or ""))


def resolve_duplicates(records: Iterable[AttendanceDay]) -> tuple[AttendanceDay, Optional[DataIntegrityWarning]]:
    """Pick one record out of several stored for the same employee and date.

    Valid present-equivalent records win, then ``STATUS_PRECEDENCE``, then
    the lowest attendance id.
    """

    ordered = sorted(records, key=_rank)
    if not ordered:
        raise ValueError("resolve_duplicates() needs at least one record")
    chosen = ordered[0]
    if len(ordered) == 1:
        return chosen, None

    warning = DataIntegrityWarning(
        f"{len(ordered)} records for one day, kept '{chosen.status.value}'",
        employee_id=chosen.employee_id,
        day=chosen.work_date,
    )
    logger.warning("attendance integrity: %s", warning.message, extra={"employee_id": chosen.employee_id})
    return chosen, warning
