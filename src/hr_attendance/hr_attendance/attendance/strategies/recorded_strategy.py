from __future__ import annotations

from typing import Optional

from ...core.constants import PRESENT_EQUIVALENT_STATUSES
from ...core.enums import AttendanceStatus
from ...core.exceptions import DataIntegrityWarning
from ..model import AttendanceDay
from .base import ClassificationStrategy, ClassifiedDay


class RecordedStatusStrategy(ClassificationStrategy):
    """Persisted status is authoritative; punches are only checked."""

    def classify(self, record: Optional[AttendanceDay]) -> ClassifiedDay:
        status = record.status

        if status == AttendanceStatus.NOT_SET:
            return ClassifiedDay(
                status=status,
                present_equivalent=False,
                counts_in_denominator=True,
                warning=DataIntegrityWarning(
                    "synthetic status 'not_set' found in a stored record",
                    employee_id=record.employee_id,
                    day=record.work_date,
                ),
            )

        if status in PRESENT_EQUIVALENT_STATUSES and not record.has_check_in:
            return ClassifiedDay(
                status=status,
                present_equivalent=False,
                counts_in_denominator=True,
                warning=DataIntegrityWarning(
                    f"status '{status.value}' without a check-in",
                    employee_id=record.employee_id,
                    day=record.work_date,
                ),
            )

        return ClassifiedDay(
            status=status,
            present_equivalent=status in PRESENT_EQUIVALENT_STATUSES,
            counts_in_denominator=True,
        )
