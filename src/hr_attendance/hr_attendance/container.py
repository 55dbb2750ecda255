from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_ROLLUP_MAX_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .employees.department_repository import DepartmentRepository
from .employees.mysql_department_repository import MySQLDepartmentRepository
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .rollup.orchestrator import RollupOrchestrator


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    leaves_repo: LeaveRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    rollup: RollupOrchestrator


def wire(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    leaves_repo: LeaveRepository,
    rollup_max_workers: int = DEFAULT_ROLLUP_MAX_WORKERS,
) -> Container:
    """Compose services over any set of repositories (MySQL or in-memory)."""

    return Container(
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        leaves_repo=leaves_repo,
        attendance_service=AttendanceService(attendance_repo, employees_repo),
        leave_service=LeaveService(leaves_repo, employees_repo),
        rollup=RollupOrchestrator(
            attendance_repo,
            employees_repo,
            departments_repo,
            max_workers=rollup_max_workers,
        ),
    )


def build_container(*, db_config: dict, rollup_max_workers: int = DEFAULT_ROLLUP_MAX_WORKERS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config), pool_size=rollup_max_workers + 1)
    return wire(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        rollup_max_workers=rollup_max_workers,
    )
