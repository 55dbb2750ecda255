from __future__ import annotations

from typing import Optional

from ..model import AttendanceDay
from .base import ClassificationStrategy, ClassifiedDay


class NonWorkingDayStrategy(ClassificationStrategy):
    """Holiday and week-off: terminal, excluded from the denominator."""

    def classify(self, record: Optional[AttendanceDay]) -> ClassifiedDay:
        return ClassifiedDay(
            status=record.status,
            present_equivalent=False,
            counts_in_denominator=False,
        )
