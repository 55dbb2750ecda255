from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow, LeaveType, NewLeaveRequest
from .repository import LeaveRepository

_REQUEST_COLUMNS = """
    r.id, r.employee_id, r.leave_type_id, r.start_date, r.end_date, r.total_days,
    r.reason, r.status, r.remarks, r.requested_at, r.created_at
"""
_BALANCE_COLUMNS = "id, employee_id, leave_type_id, year, allocated_days, carried_forward, used_days"


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        leave_type_id=str(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=int(r["total_days"]),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        requested_at=r.get("requested_at") or r.get("created_at"),
        remarks=r.get("remarks"),
    )


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        leave_type_id=str(r["leave_type_id"]),
        year=int(r["year"]),
        allocated_days=float(r["allocated_days"] or 0),
        carried_forward=float(r.get("carried_forward") or 0),
        used_days=float(r["used_days"] or 0),
    )


def _to_leave_type(r: dict) -> LeaveType:
    return LeaveType(
        id=str(r["id"]),
        name=r["name"],
        max_days=int(r.get("max_days") or 0),
        is_paid=bool(r.get("is_paid", True)),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Leave types --------
    def list_leave_types(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory, operation="leave_types.list") as (_, cur):
            cur.execute("SELECT id, name, max_days, is_paid FROM leave_types WHERE status='active' ORDER BY name")
            return [_to_leave_type(r) for r in fetchall(cur)]

    def get_leave_type(self, leave_type_id: str) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory, operation="leave_types.get") as (_, cur):
            cur.execute("SELECT id, name, max_days, is_paid FROM leave_types WHERE id=%s", (leave_type_id,))
            r = fetchone(cur)
            return _to_leave_type(r) if r else None

    # -------- Leave requests --------
    def create_request(self, draft: NewLeaveRequest, *, requested_at: datetime) -> str:
        with db_cursor(self._conn_factory, operation="leave_requests.create") as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type_id, start_date, end_date, total_days, reason, status, requested_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.employee_id,
                    draft.leave_type_id,
                    draft.start_date,
                    draft.end_date,
                    int(draft.total_days or 0),
                    draft.reason,
                    LeaveStatus.PENDING.value,
                    requested_at,
                ),
            )
            return str(cur.lastrowid)

    def get_request(self, request_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory, operation="leave_requests.get") as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests r WHERE r.id=%s", (request_id,))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        leave_type_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        sql = f"SELECT {_REQUEST_COLUMNS} FROM leave_requests r WHERE 1=1"
        params: list = []
        if employee_id is not None:
            sql += " AND r.employee_id=%s"
            params.append(employee_id)
        if leave_type_id is not None:
            sql += " AND r.leave_type_id=%s"
            params.append(leave_type_id)
        if status is not None:
            sql += " AND r.status=%s"
            params.append(status.value)
        if start_from is not None:
            sql += " AND r.start_date >= %s"
            params.append(start_from)
        if start_to is not None:
            sql += " AND r.start_date <= %s"
            params.append(start_to)
        sql += " ORDER BY r.created_at DESC, r.id"

        with db_cursor(self._conn_factory, operation="leave_requests.list") as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def list_request_rows(self, *, start_from: date, start_to: date) -> Sequence[LeaveRequestRow]:
        with db_cursor(self._conn_factory, operation="leave_requests.list_rows") as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}, d.name AS department_name
                FROM leave_requests r
                LEFT JOIN employees e ON e.id = r.employee_id
                LEFT JOIN departments d ON d.id = e.department_id
                WHERE r.start_date BETWEEN %s AND %s
                ORDER BY r.start_date, r.id
                """,
                (start_from, start_to),
            )
            return [LeaveRequestRow(request=_to_request(r), department=r.get("department_name")) for r in fetchall(cur)]

    def decide_request(self, *, request_id: str, status: LeaveStatus, remarks: Optional[str]) -> bool:
        with db_cursor(self._conn_factory, operation="leave_requests.decide") as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, remarks=%s, updated_at=NOW()
                WHERE id=%s AND status=%s
                """,
                (status.value, remarks, request_id, LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    # -------- Balances --------
    def get_balance(self, *, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory, operation="leave_balances.get") as (_, cur):
            cur.execute(
                f"""
                SELECT {_BALANCE_COLUMNS} FROM leave_balances
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (employee_id, leave_type_id, int(year)),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_balances(self, *, employee_id: str, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory, operation="leave_balances.list") as (_, cur):
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s AND year=%s ORDER BY leave_type_id",
                (employee_id, int(year)),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def create_balance(self, balance: LeaveBalance) -> str:
        with db_cursor(self._conn_factory, operation="leave_balances.create") as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balances(employee_id, leave_type_id, year, allocated_days, carried_forward, used_days)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    balance.employee_id,
                    balance.leave_type_id,
                    int(balance.year),
                    balance.allocated_days,
                    balance.carried_forward,
                    balance.used_days,
                ),
            )
            return str(cur.lastrowid)

    def update_used_days(self, *, balance_id: str, used_days: float, previous_used_days: float) -> bool:
        with db_cursor(self._conn_factory, operation="leave_balances.update_used_days") as (_, cur):
            cur.execute(
                "UPDATE leave_balances SET used_days=%s WHERE id=%s AND used_days=%s",
                (used_days, balance_id, previous_used_days),
            )
            return cur.rowcount > 0
