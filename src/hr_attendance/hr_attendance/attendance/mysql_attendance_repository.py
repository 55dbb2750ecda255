from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_mysql_time
from .model import AttendanceDay, AttendanceRecordRow, DepartmentAttendanceRow
from .repository import AttendanceRepository

_DAY_COLUMNS = "a.id, a.employee_id, a.date, a.check_in, a.check_out, a.total_hours, a.status, a.regularized"

# One row per employee and day first, so duplicate records resolve the same way
# as in attendance.classifier.resolve_duplicates.
_DEPARTMENT_ATTENDANCE_SQL = """
    SELECT d.id AS department_id,
           d.name AS department_name,
           COUNT(DISTINCT e.id) AS total_employees,
           COALESCE(SUM(dd.present_day), 0) AS present_count,
           COALESCE(SUM(CASE WHEN dd.has_off = 1 AND dd.has_higher = 0
                              AND WEEKDAY(dd.work_date) < 5 THEN 1 ELSE 0 END), 0) AS excused_days
    FROM departments d
    LEFT JOIN employees e
           ON e.department_id = d.id AND e.status = 'active'
    LEFT JOIN (
        SELECT a.employee_id,
               a.date AS work_date,
               MAX(CASE WHEN a.status IN ('present', 'late', 'half_day')
                         AND a.check_in IS NOT NULL
                        THEN 1 ELSE 0 END) AS present_day,
               MAX(CASE WHEN a.status IN ('holiday', 'weekoff') THEN 1 ELSE 0 END) AS has_off,
               MAX(CASE WHEN a.status IN ('present', 'late', 'half_day', 'leave') THEN 1 ELSE 0 END) AS has_higher
        FROM attendance a
        WHERE a.date BETWEEN %s AND %s
        GROUP BY a.employee_id, a.date
    ) dd ON dd.employee_id = e.id
    WHERE d.status = 'active'
    GROUP BY d.id, d.name
    ORDER BY d.name, d.id
"""


def _to_day(r: dict) -> AttendanceDay:
    total_hours = r.get("total_hours")
    return AttendanceDay(
        employee_id=str(r["employee_id"]),
        work_date=r["date"],
        status=AttendanceStatus(r["status"]),
        check_in=normalize_mysql_time(r.get("check_in")),
        check_out=normalize_mysql_time(r.get("check_out")),
        total_hours=float(total_hours) if total_hours is not None else None,
        regularized=bool(r.get("regularized")),
        attendance_id=str(r["id"]) if r.get("id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employees(
        self,
        employee_ids: Sequence[str],
        *,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceDay]:
        if not employee_ids:
            return []
        with db_cursor(self._conn_factory, operation="attendance.list_for_employees") as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAY_COLUMNS}
                FROM attendance a
                WHERE a.employee_id IN ({in_clause(employee_ids)})
                  AND a.date BETWEEN %s AND %s
                ORDER BY a.employee_id, a.date, a.id
                """,
                (*employee_ids, start_date, end_date),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def list_records(
        self,
        *,
        work_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceRecordRow]:
        sql = f"""
            SELECT {_DAY_COLUMNS},
                   e.employee_id AS employee_code, e.name AS employee_name, d.name AS department_name
            FROM attendance a
            LEFT JOIN employees e ON e.id = a.employee_id
            LEFT JOIN departments d ON d.id = e.department_id
            WHERE 1=1
        """
        params: list = []
        if work_date is not None:
            sql += " AND a.date=%s"
            params.append(work_date)
        if status is not None:
            sql += " AND a.status=%s"
            params.append(status.value)
        sql += " ORDER BY a.date DESC, a.id LIMIT %s"
        params.append(int(limit))

        with db_cursor(self._conn_factory, operation="attendance.list_records") as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceRecordRow(
                    day=_to_day(r),
                    employee_code=r.get("employee_code") or "N/A",
                    employee_name=r.get("employee_name") or "Unknown",
                    department=r.get("department_name"),
                )
                for r in fetchall(cur)
            ]

    def department_attendance(self, *, start_date: date, end_date: date) -> Sequence[DepartmentAttendanceRow]:
        with db_cursor(self._conn_factory, operation="attendance.department_attendance") as (_, cur):
            cur.execute(_DEPARTMENT_ATTENDANCE_SQL, (start_date, end_date))
            return [
                DepartmentAttendanceRow(
                    department_id=str(r["department_id"]),
                    department=r["department_name"],
                    total_employees=int(r["total_employees"] or 0),
                    present_count=int(r["present_count"] or 0),
                    excused_days=int(r["excused_days"] or 0),
                )
                for r in fetchall(cur)
            ]
