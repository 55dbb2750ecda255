from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveBalance, LeaveRequest, LeaveRequestRow, LeaveType, NewLeaveRequest


class LeaveRepository(Protocol):
    # Leave types
    def list_leave_types(self) -> Sequence[LeaveType]:
        raise NotImplementedError

    def get_leave_type(self, leave_type_id: str) -> Optional[LeaveType]:
        raise NotImplementedError

    # Leave requests
    def create_request(self, draft: NewLeaveRequest, *, requested_at: datetime) -> str:
        raise NotImplementedError

    def get_request(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[str] = None,
        leave_type_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_request_rows(self, *, start_from: date, start_to: date) -> Sequence[LeaveRequestRow]:
        """Requests starting in [start_from, start_to] joined with department."""

        raise NotImplementedError

    def decide_request(self, *, request_id: str, status: LeaveStatus, remarks: Optional[str]) -> bool:
        """Set the final status; only updates a request that is still pending."""

        raise NotImplementedError

    # Balances
    def get_balance(self, *, employee_id: str, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_balances(self, *, employee_id: str, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def create_balance(self, balance: LeaveBalance) -> str:
        raise NotImplementedError

    def update_used_days(self, *, balance_id: str, used_days: float, previous_used_days: float) -> bool:
        """Single-row update guarded by the previously read value."""

        raise NotImplementedError
