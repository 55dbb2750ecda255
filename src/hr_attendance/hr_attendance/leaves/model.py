from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveType:
    id: str
    name: str
    max_days: int
    is_paid: bool = True


@dataclass(frozen=True)
class LeaveBalance:
    """Ledger row for one (employee, leave type, year)."""

    id: Optional[str]
    employee_id: str
    leave_type_id: str
    year: int
    allocated_days: float
    used_days: float = 0
    carried_forward: float = 0


@dataclass(frozen=True)
class BalanceView:
    remaining: float
    status: str


@dataclass(frozen=True)
class NewLeaveRequest:
    """Leave request as submitted, before the store assigns an id."""

    employee_id: str
    leave_type_id: str
    start_date: date
    end_date: date
    reason: str
    total_days: Optional[int] = None


@dataclass(frozen=True)
class LeaveRequest:
    id: str
    employee_id: str
    leave_type_id: str
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    requested_at: datetime
    remarks: Optional[str] = None

    @property
    def year(self) -> int:
        return self.start_date.year

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "leave_type_id": self.leave_type_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_days": self.total_days,
            "reason": self.reason,
            "status": self.status.value,
            "requested_at": self.requested_at.isoformat(),
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class LeaveRequestRow:
    """Read-model: request joined with its employee's department."""

    request: LeaveRequest
    department: Optional[str]


@dataclass(frozen=True)
class LeaveOverlap:
    employee_id: str
    first_request_id: str
    second_request_id: str
    overlap_start: date
    overlap_end: date

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "first_request_id": self.first_request_id,
            "second_request_id": self.second_request_id,
            "overlap_start": self.overlap_start.isoformat(),
            "overlap_end": self.overlap_end.isoformat(),
        }


@dataclass(frozen=True)
class LeaveReportRow:
    department: str
    month: int
    year: int
    total_leaves: int
    pending: int
    approved: int
    rejected: int

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "month": f"{self.year:04d}-{self.month:02d}",
            "total_leaves": self.total_leaves,
            "pending": self.pending,
            "approved": self.approved,
            "rejected": self.rejected,
        }
