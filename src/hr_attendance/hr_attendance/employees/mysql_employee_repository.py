from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "id, employee_id, name, department_id, status"


def _to_employee(r: dict) -> Employee:
    return Employee(
        id=str(r["id"]),
        employee_code=str(r.get("employee_id") or "N/A"),
        name=r.get("name") or "Unknown",
        department_id=str(r["department_id"]) if r.get("department_id") is not None else None,
        is_active=(r.get("status") or "active") == "active",
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory, operation="employees.get_by_id") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active(self, *, department_id: Optional[str] = None) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees WHERE status='active'"
        params: list = []
        if department_id is not None:
            sql += " AND department_id=%s"
            params.append(department_id)
        sql += " ORDER BY name, id"

        with db_cursor(self._conn_factory, operation="employees.list_active") as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]
