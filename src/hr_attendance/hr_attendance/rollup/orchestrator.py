"""Department and company attendance roll-ups.

The fast path is one grouped query against the store. When it fails or
returns nothing, every active department is recomputed from raw attendance
rows with the same aggregation rules, so both paths agree for the same data.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from typing import Optional, Sequence

from ..attendance.aggregator import aggregate
from ..attendance.model import DepartmentAttendanceRow
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, working_days
from ..common.percentages import percentage
from ..core.constants import DEFAULT_ROLLUP_MAX_WORKERS
from ..core.enums import RollupPath
from ..core.exceptions import DataIntegrityWarning, UpstreamFailure
from ..employees.department_model import Department
from ..employees.department_repository import DepartmentRepository
from ..employees.repository import EmployeeRepository
from .model import CompanyAttendanceSummary, DepartmentAttendanceSummary, RollupResult

logger = logging.getLogger(__name__)


def _sort_key(row: DepartmentAttendanceSummary) -> tuple:
    return (row.department, row.department_id or "")


def summary_from_row(row: DepartmentAttendanceRow, period_working_days: int) -> DepartmentAttendanceSummary:
    expected = max(row.total_employees * period_working_days - row.excused_days, 0)
    return DepartmentAttendanceSummary(
        department=row.department,
        department_id=row.department_id,
        total_employees=row.total_employees,
        present_count=row.present_count,
        attendance_percentage=percentage(row.present_count, expected),
        expected_days=expected,
    )


class RollupOrchestrator:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        *,
        max_workers: int = DEFAULT_ROLLUP_MAX_WORKERS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._departments = departments
        self._max_workers = max(int(max_workers), 1)

    def department_attendance(
        self,
        month: int,
        year: int,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> RollupResult:
        start, end = month_bounds(month, year)
        period_days = working_days(start, end)

        try:
            rows = self._attendance.department_attendance(start_date=start, end_date=end)
        except UpstreamFailure as exc:
            logger.warning("department roll-up fast path failed, recomputing: %s", exc)
            reason = "error"
        else:
            if rows:
                summaries = sorted((summary_from_row(r, period_days) for r in rows), key=_sort_key)
                logger.info("department roll-up served by fast path", extra={"month": month, "year": year})
                return RollupResult(month=int(month), year=int(year), rows=tuple(summaries), path=RollupPath.PRIMARY)
            logger.info("department roll-up fast path returned no rows, recomputing")
            reason = "empty"

        return self.recompute(int(month), int(year), cancel=cancel, fallback_reason=reason)

    def recompute(
        self,
        month: int,
        year: int,
        *,
        cancel: Optional[threading.Event] = None,
        fallback_reason: Optional[str] = None,
    ) -> RollupResult:
        """Rebuild every active department from raw rows.

        Store failures propagate. Departments not started before ``cancel``
        is set are listed in ``skipped_departments``.
        """

        start, end = month_bounds(month, year)
        departments = list(self._departments.list_active())

        outcomes = self._run(departments, start, end, cancel)

        rows: list[DepartmentAttendanceSummary] = []
        skipped: list[str] = []
        warnings: list[DataIntegrityWarning] = []
        for dept, outcome in zip(departments, outcomes):
            if outcome is None:
                skipped.append(dept.name)
                continue
            summary, dept_warnings = outcome
            rows.append(summary)
            warnings.extend(dept_warnings)

        if skipped:
            logger.warning("department roll-up cancelled for %d department(s)", len(skipped))

        return RollupResult(
            month=month,
            year=year,
            rows=tuple(sorted(rows, key=_sort_key)),
            path=RollupPath.FALLBACK,
            fallback_reason=fallback_reason,
            skipped_departments=tuple(skipped),
            warnings=tuple(warnings),
        )

    def company_attendance(
        self,
        month: int,
        year: int,
        *,
        cancel: Optional[threading.Event] = None,
    ) -> CompanyAttendanceSummary:
        result = self.department_attendance(month, year, cancel=cancel)
        total = sum(r.total_employees for r in result.rows)
        present = sum(r.present_count for r in result.rows)
        expected = sum(r.expected_days for r in result.rows)
        return CompanyAttendanceSummary(
            month=result.month,
            year=result.year,
            total_employees=total,
            present_count=present,
            expected_days=expected,
            attendance_percentage=percentage(present, expected),
            path=result.path,
            is_complete=result.is_complete,
        )

    def _run(self, departments: Sequence[Department], start: date, end: date, cancel: Optional[threading.Event]):
        if self._max_workers == 1 or len(departments) <= 1:
            return [self._department(d, start, end, cancel) for d in departments]

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(departments))) as pool:
            futures: list[Future] = [pool.submit(self._department, d, start, end, cancel) for d in departments]
            try:
                return [f.result() for f in futures]
            except BaseException:
                for f in futures:
                    f.cancel()
                raise

    def _department(self, dept: Department, start: date, end: date, cancel: Optional[threading.Event]):
        if cancel is not None and cancel.is_set():
            return None

        employees = self._employees.list_active(department_id=dept.id)
        employee_ids = [e.id for e in employees]
        if not employee_ids:
            zero = DepartmentAttendanceSummary(
                department=dept.name,
                department_id=dept.id,
                total_employees=0,
                present_count=0,
                attendance_percentage=0,
            )
            return zero, ()

        if cancel is not None and cancel.is_set():
            return None

        days = self._attendance.list_for_employees(employee_ids, start_date=start, end_date=end)
        pooled = aggregate(days, start, end, employee_ids=employee_ids)
        summary = DepartmentAttendanceSummary(
            department=dept.name,
            department_id=dept.id,
            total_employees=len(employee_ids),
            present_count=pooled.present_equivalent,
            attendance_percentage=pooled.attendance_percentage,
            expected_days=pooled.expected_working_days,
        )
        return summary, pooled.warnings
