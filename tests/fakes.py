from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.hr_attendance.hr_attendance.attendance.model import (
    AttendanceDay,
    AttendanceRecordRow,
    DepartmentAttendanceRow,
)
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus, LeaveStatus
from src.hr_attendance.hr_attendance.core.exceptions import UpstreamFailure
from src.hr_attendance.hr_attendance.employees.department_model import Department
from src.hr_attendance.hr_attendance.employees.model import Employee
from src.hr_attendance.hr_attendance.leaves.model import (
    LeaveBalance,
    LeaveRequest,
    LeaveRequestRow,
    LeaveType,
    NewLeaveRequest,
)


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.items = list(employees)

    def get_by_id(self, employee_id):
        return next((e for e in self.items if e.id == employee_id), None)

    def list_active(self, *, department_id=None):
        rows = [e for e in self.items if e.is_active]
        if department_id is not None:
            rows = [e for e in rows if e.department_id == department_id]
        return sorted(rows, key=lambda e: (e.name, e.id))


class InMemoryDepartments:
    def __init__(self, departments=(), *, fail=False):
        self.items = list(departments)
        self.fail = fail

    def list_active(self):
        if self.fail:
            raise UpstreamFailure("departments unavailable", operation="departments.list_active")
        return sorted((d for d in self.items if d.is_active), key=lambda d: (d.name, d.id))

    def get_by_id(self, department_id):
        return next((d for d in self.items if d.id == department_id), None)


class InMemoryAttendance:
    """Attendance store.

    ``grouped`` switches the fast path: "sql" computes the grouped rows the
    way the MySQL query does, "empty" returns nothing, "error" raises.
    """

    def __init__(self, days=(), *, employees=None, departments=None, grouped="sql", fail_raw=False):
        self.days = list(days)
        self.employees = employees or InMemoryEmployees()
        self.departments = departments or InMemoryDepartments()
        self.grouped = grouped
        self.fail_raw = fail_raw
        self.raw_calls = []

    def list_for_employees(self, employee_ids, *, start_date, end_date):
        self.raw_calls.append(tuple(employee_ids))
        if self.fail_raw:
            raise UpstreamFailure("attendance unavailable", operation="attendance.list_for_employees")
        wanted = set(employee_ids)
        return [d for d in self.days if d.employee_id in wanted and start_date <= d.work_date <= end_date]

    def list_records(self, *, work_date=None, status=None, limit=500):
        rows = []
        for d in sorted(self.days, key=lambda d: d.work_date, reverse=True):
            if work_date is not None and d.work_date != work_date:
                continue
            if status is not None and d.status != status:
                continue
            emp = self.employees.get_by_id(d.employee_id)
            dept = self.departments.get_by_id(emp.department_id) if emp and emp.department_id else None
            rows.append(
                AttendanceRecordRow(
                    day=d,
                    employee_code=emp.employee_code if emp else "N/A",
                    employee_name=emp.name if emp else "Unknown",
                    department=dept.name if dept else None,
                )
            )
        return rows[:limit]

    def department_attendance(self, *, start_date, end_date):
        if self.grouped == "error":
            raise UpstreamFailure("rpc failed", operation="attendance.department_attendance")
        if self.grouped == "empty":
            return []

        present_like = {"present", "late", "half_day"}
        out = []
        for dept in self.departments.list_active():
            emp_ids = {e.id for e in self.employees.list_active(department_id=dept.id)}
            per_day = {}
            for d in self.days:
                if d.employee_id in emp_ids and start_date <= d.work_date <= end_date:
                    per_day.setdefault((d.employee_id, d.work_date), []).append(d)

            present = 0
            excused = 0
            for (_, day), records in per_day.items():
                statuses = {r.status.value for r in records}
                if any(r.status.value in present_like and r.check_in is not None for r in records):
                    present += 1
                has_off = bool(statuses & {"holiday", "weekoff"})
                has_higher = bool(statuses & (present_like | {"leave"}))
                if has_off and not has_higher and day.weekday() < 5:
                    excused += 1
            out.append(
                DepartmentAttendanceRow(
                    department_id=dept.id,
                    department=dept.name,
                    total_employees=len(emp_ids),
                    present_count=present,
                    excused_days=excused,
                )
            )
        return out


class InMemoryLeaves:
    def __init__(self, *, leave_types=(), balances=(), requests=(), departments=None, employees=None):
        self.leave_types = {t.id: t for t in leave_types}
        self.balances = {b.id: b for b in balances}
        self.requests = {r.id: r for r in requests}
        self.departments = departments or InMemoryDepartments()
        self.employees = employees or InMemoryEmployees()
        self.decisions = []
        self.fail_balance_update = False
        self._next_id = 100

    def _new_id(self):
        self._next_id += 1
        return str(self._next_id)

    def list_leave_types(self):
        return sorted(self.leave_types.values(), key=lambda t: t.name)

    def get_leave_type(self, leave_type_id):
        return self.leave_types.get(leave_type_id)

    def create_request(self, draft: NewLeaveRequest, *, requested_at: datetime):
        rid = self._new_id()
        self.requests[rid] = LeaveRequest(
            id=rid,
            employee_id=draft.employee_id,
            leave_type_id=draft.leave_type_id,
            start_date=draft.start_date,
            end_date=draft.end_date,
            total_days=int(draft.total_days),
            reason=draft.reason,
            status=LeaveStatus.PENDING,
            requested_at=requested_at,
        )
        return rid

    def get_request(self, request_id):
        return self.requests.get(request_id)

    def list_requests(self, *, employee_id=None, leave_type_id=None, status=None, start_from=None, start_to=None):
        rows = list(self.requests.values())
        if employee_id is not None:
            rows = [r for r in rows if r.employee_id == employee_id]
        if leave_type_id is not None:
            rows = [r for r in rows if r.leave_type_id == leave_type_id]
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if start_from is not None:
            rows = [r for r in rows if r.start_date >= start_from]
        if start_to is not None:
            rows = [r for r in rows if r.start_date <= start_to]
        return rows

    def list_request_rows(self, *, start_from: date, start_to: date):
        out = []
        for r in self.list_requests(start_from=start_from, start_to=start_to):
            emp = self.employees.get_by_id(r.employee_id)
            dept = self.departments.get_by_id(emp.department_id) if emp and emp.department_id else None
            out.append(LeaveRequestRow(request=r, department=dept.name if dept else None))
        return out

    def decide_request(self, *, request_id, status, remarks):
        req = self.requests.get(request_id)
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.requests[request_id] = replace(req, status=status, remarks=remarks)
        self.decisions.append((request_id, status))
        return True

    def get_balance(self, *, employee_id, leave_type_id, year) -> Optional[LeaveBalance]:
        for b in self.balances.values():
            if (b.employee_id, b.leave_type_id, b.year) == (employee_id, leave_type_id, year):
                return b
        return None

    def list_balances(self, *, employee_id, year):
        return [b for b in self.balances.values() if b.employee_id == employee_id and b.year == year]

    def create_balance(self, balance):
        bid = self._new_id()
        self.balances[bid] = replace(balance, id=bid)
        return bid

    def update_used_days(self, *, balance_id, used_days, previous_used_days):
        current = self.balances.get(balance_id)
        if self.fail_balance_update or not current or current.used_days != previous_used_days:
            return False
        self.balances[balance_id] = replace(current, used_days=used_days)
        return True


def emp(emp_id, dept_id="d1", *, name=None, active=True):
    return Employee(
        id=emp_id,
        employee_code=f"EMP-{emp_id}",
        name=name or f"Employee {emp_id}",
        department_id=dept_id,
        is_active=active,
    )


def dept(dept_id, name, *, active=True):
    return Department(id=dept_id, name=name, is_active=active)


def leave_type(type_id="casual", *, name="Casual Leave", max_days=12):
    return LeaveType(id=type_id, name=name, max_days=max_days)


def day(employee_id, work_date, status, *, check_in=None, check_out=None, attendance_id=None, total_hours=None):
    return AttendanceDay.from_punches(
        employee_id=employee_id,
        work_date=work_date,
        status=AttendanceStatus(status),
        check_in=check_in,
        check_out=check_out,
        total_hours=total_hours,
        attendance_id=attendance_id,
    )
