from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import is_working_day, iter_dates, month_bounds, now_local, working_days
from ..common.percentages import percentage
from ..core.enums import LeaveStatus
from ..core.exceptions import NotFoundError, UpstreamFailure, ValidationError
from ..employees.repository import EmployeeRepository
from .ledger import apply_approval, compute_balance
from .lifecycle import find_overlaps, transition, validate_submission
from .model import (
    BalanceView,
    LeaveBalance,
    LeaveOverlap,
    LeaveReportRow,
    LeaveRequest,
    NewLeaveRequest,
)
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceRow:
    balance: LeaveBalance
    leave_type: str
    view: BalanceView

    def to_dict(self) -> dict:
        return {
            "id": self.balance.id,
            "employee_id": self.balance.employee_id,
            "leave_type_id": self.balance.leave_type_id,
            "leave_type": self.leave_type,
            "year": self.balance.year,
            "allocated_days": self.balance.allocated_days,
            "carried_forward": self.balance.carried_forward,
            "used_days": self.balance.used_days,
            "balance": self.view.remaining,
            "status": self.view.status,
        }


@dataclass(frozen=True)
class ApprovalOutcome:
    request: LeaveRequest
    balance: LeaveBalance
    view: BalanceView


class LeaveService:
    """Use cases: submit, approve and reject leave; balance and report views."""

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._clock = clock

    def submit(self, draft: NewLeaveRequest) -> LeaveRequest:
        now = self._clock()
        draft = validate_submission(draft, submitted_at=now)

        if not self._employees.get_by_id(draft.employee_id):
            raise NotFoundError("Employee not found")
        if not self._leaves.get_leave_type(draft.leave_type_id):
            raise NotFoundError("Leave type not found")

        request_id = self._leaves.create_request(draft, requested_at=now)
        logger.info("leave request submitted", extra={"request_id": request_id, "employee_id": draft.employee_id})
        return LeaveRequest(
            id=request_id,
            employee_id=draft.employee_id,
            leave_type_id=draft.leave_type_id,
            start_date=draft.start_date,
            end_date=draft.end_date,
            total_days=int(draft.total_days or 0),
            reason=draft.reason,
            status=LeaveStatus.PENDING,
            requested_at=now,
        )

    def approve(self, request_id: str, *, remarks: Optional[str] = None) -> ApprovalOutcome:
        request = self._get_request(request_id)
        approved = transition(request, LeaveStatus.APPROVED, remarks=(remarks or "").strip() or "Leave approved by HR")

        balance = self._balance_for(approved)
        already_applied = {
            r.id
            for r in self._leaves.list_requests(
                employee_id=approved.employee_id,
                leave_type_id=approved.leave_type_id,
                status=LeaveStatus.APPROVED,
            )
            if r.year == approved.year
        }
        updated = apply_approval(balance, approved, applied_request_ids=already_applied)

        if not self._leaves.decide_request(request_id=approved.id, status=LeaveStatus.APPROVED, remarks=approved.remarks):
            raise ValidationError("Leave request was already decided")

        if balance.id is None:
            updated = replace(updated, id=self._leaves.create_balance(updated))
            logger.info("leave balance opened", extra={"employee_id": approved.employee_id, "year": approved.year})
        elif not self._leaves.update_used_days(
            balance_id=str(balance.id),
            used_days=updated.used_days,
            previous_used_days=balance.used_days,
        ):
            logger.error(
                "leave approved but balance update was not applied",
                extra={"request_id": approved.id, "balance_id": balance.id},
            )
            raise UpstreamFailure("Leave balance changed concurrently; approval recorded without ledger update")

        view = compute_balance(updated)
        if view.remaining < 0:
            logger.warning("leave balance exceeded", extra={"employee_id": approved.employee_id, "remaining": view.remaining})
        logger.info("leave request approved", extra={"request_id": approved.id})
        return ApprovalOutcome(request=approved, balance=updated, view=view)

    def reject(self, request_id: str, *, remarks: Optional[str] = None) -> LeaveRequest:
        request = self._get_request(request_id)
        rejected = transition(request, LeaveStatus.REJECTED, remarks=(remarks or "").strip() or "Leave rejected by HR")
        if not self._leaves.decide_request(request_id=rejected.id, status=LeaveStatus.REJECTED, remarks=rejected.remarks):
            raise ValidationError("Leave request was already decided")
        logger.info("leave request rejected", extra={"request_id": rejected.id})
        return rejected

    def balances(self, employee_id: str, year: int) -> list[BalanceRow]:
        types = {t.id: t.name for t in self._leaves.list_leave_types()}
        rows = [
            BalanceRow(balance=b, leave_type=types.get(b.leave_type_id, "Unknown Type"), view=compute_balance(b))
            for b in self._leaves.list_balances(employee_id=employee_id, year=int(year))
        ]
        rows.sort(key=lambda r: (r.leave_type, r.balance.leave_type_id))
        return rows

    def leave_report(self, month: int, year: int) -> list[LeaveReportRow]:
        """Per department request counts for requests starting in the month."""

        start, end = month_bounds(month, year)
        stats: dict[str, dict[str, int]] = {}
        for row in self._leaves.list_request_rows(start_from=start, start_to=end):
            dept = row.department or "No Department"
            s = stats.setdefault(dept, {"total": 0, "pending": 0, "approved": 0, "rejected": 0})
            s["total"] += 1
            s[row.request.status.value] += 1

        return [
            LeaveReportRow(
                department=dept,
                month=int(month),
                year=int(year),
                total_leaves=s["total"],
                pending=s["pending"],
                approved=s["approved"],
                rejected=s["rejected"],
            )
            for dept, s in sorted(stats.items())
        ]

    def leave_utilization(self, employee_id: str, month: int, year: int) -> int:
        """Approved leave working days in the month as a share of its working days."""

        start, end = month_bounds(month, year)
        taken: set = set()
        for r in self._leaves.list_requests(employee_id=employee_id, status=LeaveStatus.APPROVED, start_to=end):
            if r.end_date < start:
                continue
            for day in iter_dates(max(r.start_date, start), min(r.end_date, end)):
                if is_working_day(day):
                    taken.add(day)
        return percentage(len(taken), working_days(start, end))

    def overlapping_requests(self, employee_id: str) -> list[LeaveOverlap]:
        overlaps = find_overlaps(self._leaves.list_requests(employee_id=employee_id, status=LeaveStatus.APPROVED))
        if overlaps:
            logger.warning("overlapping approved leave", extra={"employee_id": employee_id, "count": len(overlaps)})
        return overlaps

    def _get_request(self, request_id: str) -> LeaveRequest:
        request = self._leaves.get_request(request_id)
        if not request:
            raise NotFoundError("Leave request not found")
        return request

    def _balance_for(self, request: LeaveRequest) -> LeaveBalance:
        """Stored balance row, or an unsaved one (``id=None``) opened from the leave type."""

        balance = self._leaves.get_balance(
            employee_id=request.employee_id,
            leave_type_id=request.leave_type_id,
            year=request.year,
        )
        if balance is not None:
            return balance

        leave_type = self._leaves.get_leave_type(request.leave_type_id)
        if not leave_type:
            raise NotFoundError("Leave type not found")

        return LeaveBalance(
            id=None,
            employee_id=request.employee_id,
            leave_type_id=request.leave_type_id,
            year=request.year,
            allocated_days=leave_type.max_days,
        )
