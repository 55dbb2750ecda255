from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Mapping, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import DataIntegrityWarning
from .hours import worked_hours


@dataclass(frozen=True)
class AttendanceDay:
    """One employee's attendance record for one calendar date."""

    employee_id: str
    work_date: date
    status: AttendanceStatus
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    total_hours: Optional[float] = None
    regularized: bool = False
    attendance_id: Optional[str] = None

    @classmethod
    def from_punches(
        cls,
        *,
        employee_id: str,
        work_date: date,
        status: AttendanceStatus,
        check_in: Optional[time] = None,
        check_out: Optional[time] = None,
        total_hours: Optional[float] = None,
        regularized: bool = False,
        attendance_id: Optional[str] = None,
    ) -> "AttendanceDay":
        """Build a record, deriving total_hours when both punches exist."""

        if check_in is not None and check_out is not None:
            total_hours = worked_hours(check_in, check_out)
        return cls(
            employee_id=employee_id,
            work_date=work_date,
            status=AttendanceStatus(status),
            check_in=check_in,
            check_out=check_out,
            total_hours=total_hours,
            regularized=regularized,
            attendance_id=attendance_id,
        )

    @property
    def has_check_in(self) -> bool:
        return self.check_in is not None

    def effective_hours(self) -> Optional[float]:
        if self.check_in is not None and self.check_out is not None:
            return worked_hours(self.check_in, self.check_out)
        if self.total_hours is None:
            return None
        return max(float(self.total_hours), 0.0)


@dataclass(frozen=True)
class AttendanceSummary:
    """Derived attendance figures for one employee or a pooled group."""

    period_start: date
    period_end: date
    expected_working_days: int
    present_equivalent: int
    attendance_percentage: int
    status_counts: Mapping[AttendanceStatus, int] = field(default_factory=dict)
    employee_id: Optional[str] = None
    employee_count: int = 1
    total_hours: float = 0.0
    warnings: tuple[DataIntegrityWarning, ...] = ()

    def count(self, status: AttendanceStatus) -> int:
        return int(self.status_counts.get(status, 0))

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "employee_count": self.employee_count,
            "expected_working_days": self.expected_working_days,
            "present_equivalent": self.present_equivalent,
            "attendance_percentage": self.attendance_percentage,
            "days_present": self.count(AttendanceStatus.PRESENT),
            "days_absent": self.count(AttendanceStatus.ABSENT),
            "days_leaves": self.count(AttendanceStatus.LEAVE),
            "status_counts": {s.value: self.count(s) for s in AttendanceStatus},
            "total_hours": self.total_hours,
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class AttendanceRecordRow:
    """Read-model for record listings (joined with employee/department)."""

    day: AttendanceDay
    employee_code: str
    employee_name: str
    department: Optional[str]

    def to_dict(self) -> dict:
        hours = self.day.effective_hours()
        return {
            "id": self.day.attendance_id,
            "employee_id": self.employee_code,
            "employee_name": self.employee_name,
            "department": self.department or "No Department",
            "date": self.day.work_date.isoformat(),
            "check_in": self.day.check_in.strftime("%H:%M:%S") if self.day.check_in else None,
            "check_out": self.day.check_out.strftime("%H:%M:%S") if self.day.check_out else None,
            "total_hours": hours,
            "status": self.day.status.value,
            "regularized": self.day.regularized,
        }


@dataclass(frozen=True)
class StatusBreakdownRow:
    status: AttendanceStatus
    count: int
    percentage: int

    def to_dict(self) -> dict:
        return {"status": self.status.value, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class TrendPoint:
    day: date
    present_count: int
    total_employees: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "present_count": self.present_count,
            "total_employees": self.total_employees,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class DepartmentAttendanceRow:
    """Read-model returned by the grouped (pre-aggregated) store query.

    ``excused_days`` counts working days marked holiday/weekoff, which are
    removed from the department's expected days.
    """

    department_id: str
    department: str
    total_employees: int
    present_count: int
    excused_days: int = 0
