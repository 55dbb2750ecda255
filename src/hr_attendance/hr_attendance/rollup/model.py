from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RollupPath
from ..core.exceptions import DataIntegrityWarning


@dataclass(frozen=True)
class DepartmentAttendanceSummary:
    department: str
    total_employees: int
    present_count: int
    attendance_percentage: int
    department_id: Optional[str] = None
    expected_days: int = 0

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "department_id": self.department_id,
            "total_employees": self.total_employees,
            "present_count": self.present_count,
            "attendance_percentage": self.attendance_percentage,
        }


@dataclass(frozen=True)
class RollupResult:
    """Department roll-up for one month.

    An empty ``rows`` means the store had no departments ("no data"); store
    failures are raised, never turned into an empty result.
    """

    month: int
    year: int
    rows: tuple[DepartmentAttendanceSummary, ...]
    path: RollupPath
    fallback_reason: Optional[str] = None
    skipped_departments: tuple[str, ...] = ()
    warnings: tuple[DataIntegrityWarning, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def is_complete(self) -> bool:
        return not self.skipped_departments

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "path": self.path.value,
            "fallback_reason": self.fallback_reason,
            "complete": self.is_complete,
            "skipped_departments": list(self.skipped_departments),
            "rows": [r.to_dict() for r in self.rows],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class CompanyAttendanceSummary:
    month: int
    year: int
    total_employees: int
    present_count: int
    expected_days: int
    attendance_percentage: int
    path: RollupPath
    is_complete: bool = True

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "total_employees": self.total_employees,
            "present_count": self.present_count,
            "expected_days": self.expected_days,
            "attendance_percentage": self.attendance_percentage,
            "path": self.path.value,
            "complete": self.is_complete,
        }
