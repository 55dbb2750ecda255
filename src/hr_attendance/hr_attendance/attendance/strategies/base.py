from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ...core.exceptions import DataIntegrityWarning
from ..model import AttendanceDay


@dataclass(frozen=True)
class ClassifiedDay:
    status: AttendanceStatus
    present_equivalent: bool
    counts_in_denominator: bool
    warning: Optional[DataIntegrityWarning] = None


class ClassificationStrategy(ABC):
    """Strategy Pattern: encapsulate how a stored day is classified."""

    @abstractmethod
    def classify(self, record: Optional[AttendanceDay]) -> ClassifiedDay:
        raise NotImplementedError
