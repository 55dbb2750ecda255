from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import is_working_day, iter_dates, month_bounds
from ..common.percentages import percentage
from ..core.constants import DEFAULT_RECORD_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .aggregator import aggregate_group, summarize_employee
from .classifier import classify_day, resolve_duplicates
from .model import AttendanceDay, AttendanceRecordRow, AttendanceSummary, StatusBreakdownRow, TrendPoint
from .repository import AttendanceRepository


@dataclass(frozen=True)
class TeamAttendance:
    members: tuple[AttendanceSummary, ...]
    pooled: AttendanceSummary

    def to_dict(self) -> dict:
        return {"members": [m.to_dict() for m in self.members], "pooled": self.pooled.to_dict()}


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def employee_summary(self, employee_id: str, *, start: date, end: date) -> AttendanceSummary:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        days = self._attendance.list_for_employees([employee_id], start_date=start, end_date=end)
        return summarize_employee(employee_id, days, start, end)

    def monthly_series(self, employee_id: str, year: int) -> list[AttendanceSummary]:
        """Twelve monthly summaries for the employee dashboard chart."""

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        year_start, _ = month_bounds(1, year)
        _, year_end = month_bounds(12, year)
        days = self._attendance.list_for_employees([employee_id], start_date=year_start, end_date=year_end)
        series = []
        for month in range(1, 13):
            start, end = month_bounds(month, year)
            series.append(summarize_employee(employee_id, days, start, end))
        return series

    def team_summaries(self, department_id: str, month: int, year: int) -> TeamAttendance:
        start, end = month_bounds(month, year)
        employees = self._employees.list_active(department_id=department_id)
        ids = [e.id for e in employees]
        days = self._attendance.list_for_employees(ids, start_date=start, end_date=end) if ids else []

        by_employee: dict[str, list[AttendanceDay]] = defaultdict(list)
        for d in days:
            by_employee[d.employee_id].append(d)

        members = tuple(summarize_employee(emp_id, by_employee.get(emp_id, ()), start, end) for emp_id in ids)
        return TeamAttendance(members=members, pooled=aggregate_group(members, start, end))

    def status_breakdown(self, day: date) -> list[StatusBreakdownRow]:
        """Status counts among active employees for one day."""

        employees = self._employees.list_active()
        ids = [e.id for e in employees]
        if not ids:
            return []

        statuses = self._statuses_by_day(ids, day, day).get(day, {})
        counts: dict[AttendanceStatus, int] = defaultdict(int)
        for emp_id in ids:
            status = statuses.get(emp_id)
            if status is None:
                if not is_working_day(day):
                    continue
                status = classify_day(None).status
            counts[status] += 1

        return [
            StatusBreakdownRow(status=s, count=counts[s], percentage=percentage(counts[s], len(ids)))
            for s in AttendanceStatus
            if counts.get(s)
        ]

    def attendance_trend(self, start: date, end: date) -> list[TrendPoint]:
        """Daily present-equivalent share of the active headcount, working days only."""

        if end < start:
            raise ValidationError("End date must be on or after start date")

        employees = self._employees.list_active()
        ids = [e.id for e in employees]
        present_by_day: dict[date, int] = defaultdict(int)
        if ids:
            for current, by_employee in self._present_by_day(ids, start, end).items():
                present_by_day[current] = len(by_employee)

        return [
            TrendPoint(
                day=current,
                present_count=present_by_day.get(current, 0),
                total_employees=len(ids),
                percentage=percentage(present_by_day.get(current, 0), len(ids)),
            )
            for current in iter_dates(start, end)
            if is_working_day(current)
        ]

    def list_records(
        self,
        *,
        work_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        employee_code: Optional[str] = None,
        department: Optional[str] = None,
        limit: int = DEFAULT_RECORD_LIMIT,
    ) -> Sequence[AttendanceRecordRow]:
        if status == AttendanceStatus.NOT_SET:
            raise ValidationError("'not_set' is never stored and cannot be filtered on")

        rows = list(self._attendance.list_records(work_date=work_date, status=status, limit=limit))

        if employee_code:
            needle = employee_code.strip().lower()
            rows = [r for r in rows if needle in r.employee_code.lower()]
        if department:
            rows = [r for r in rows if (r.department or "No Department") == department]
        return rows

    def _resolved(self, ids: Sequence[str], start: date, end: date) -> dict[tuple[str, date], AttendanceDay]:
        grouped: dict[tuple[str, date], list[AttendanceDay]] = defaultdict(list)
        for d in self._attendance.list_for_employees(ids, start_date=start, end_date=end):
            if start <= d.work_date <= end:
                grouped[(d.employee_id, d.work_date)].append(d)
        return {key: resolve_duplicates(records)[0] for key, records in grouped.items()}

    def _statuses_by_day(self, ids: Sequence[str], start: date, end: date) -> dict[date, dict[str, AttendanceStatus]]:
        out: dict[date, dict[str, AttendanceStatus]] = defaultdict(dict)
        for (emp_id, day), record in self._resolved(ids, start, end).items():
            out[day][emp_id] = classify_day(record).status
        return out

    def _present_by_day(self, ids: Sequence[str], start: date, end: date) -> dict[date, set[str]]:
        out: dict[date, set[str]] = defaultdict(set)
        for (emp_id, day), record in self._resolved(ids, start, end).items():
            if classify_day(record).present_equivalent:
                out[day].add(emp_id)
        return out
