from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceDay, AttendanceRecordRow, DepartmentAttendanceRow


class AttendanceRepository(Protocol):
    def list_for_employees(
        self,
        employee_ids: Sequence[str],
        *,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceDay]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        work_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceRecordRow]:
        """Return rows joined with employee and department, newest first."""

        raise NotImplementedError

    def department_attendance(self, *, start_date: date, end_date: date) -> Sequence[DepartmentAttendanceRow]:
        """Grouped per active department in a single query (fast path)."""

        raise NotImplementedError
