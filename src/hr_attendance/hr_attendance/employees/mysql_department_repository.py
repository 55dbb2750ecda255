from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .department_model import Department
from .department_repository import DepartmentRepository


def _to_department(r: dict) -> Department:
    return Department(id=str(r["id"]), name=r["name"], is_active=(r.get("status") or "active") == "active")


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory, operation="departments.list_active") as (_, cur):
            cur.execute("SELECT id, name, status FROM departments WHERE status='active' ORDER BY name, id")
            return [_to_department(r) for r in fetchall(cur)]
