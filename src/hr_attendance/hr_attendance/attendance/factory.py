from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import NON_WORKING_STATUSES
from .model import AttendanceDay
from .strategies.base import ClassificationStrategy
from .strategies.missing_strategy import MissingRecordStrategy
from .strategies.non_working_strategy import NonWorkingDayStrategy
from .strategies.recorded_strategy import RecordedStatusStrategy


@dataclass
class ClassificationStrategyFactory:
    """Factory Pattern: choose the classification rule for a record."""

    def for_record(self, record: Optional[AttendanceDay]) -> ClassificationStrategy:
        if record is None:
            return MissingRecordStrategy()
        if record.status in NON_WORKING_STATUSES:
            return NonWorkingDayStrategy()
        return RecordedStatusStrategy()
