from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import AttendanceDay
from .base import ClassificationStrategy, ClassifiedDay


class MissingRecordStrategy(ClassificationStrategy):
    """No record for an expected working day."""

    def classify(self, record: Optional[AttendanceDay]) -> ClassifiedDay:
        return ClassifiedDay(
            status=AttendanceStatus.NOT_SET,
            present_equivalent=False,
            counts_in_denominator=True,
        )
