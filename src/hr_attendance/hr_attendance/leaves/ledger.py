"""Leave balance ledger.

Pure functions over ``LeaveBalance`` rows. The ledger keeps no history:
callers pass the ids of requests already applied to a row.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Collection

from ..common.validators import require_non_negative
from ..core.constants import BALANCE_EXCEED, BALANCE_WITHIN_LIMIT
from ..core.enums import LeaveStatus
from ..core.exceptions import ValidationError
from .lifecycle import inclusive_total_days
from .model import BalanceView, LeaveBalance, LeaveRequest


def _check_balance(balance: LeaveBalance) -> None:
    for name in ("allocated_days", "carried_forward", "used_days"):
        require_non_negative(getattr(balance, name), name)


def compute_balance(balance: LeaveBalance) -> BalanceView:
    _check_balance(balance)
    remaining = balance.allocated_days + (balance.carried_forward or 0) - balance.used_days
    return BalanceView(
        remaining=remaining,
        status=BALANCE_EXCEED if remaining < 0 else BALANCE_WITHIN_LIMIT,
    )


def apply_approval(
    balance: LeaveBalance,
    request: LeaveRequest,
    *,
    applied_request_ids: Collection[str] = (),
) -> LeaveBalance:
    """Return ``balance`` with the approved request's days added to ``used_days``."""

    _check_balance(balance)

    if request.status != LeaveStatus.APPROVED:
        raise ValidationError("Only approved requests can be applied to a balance")
    if request.employee_id != balance.employee_id:
        raise ValidationError("Request employee does not match the balance row")
    if request.leave_type_id != balance.leave_type_id:
        raise ValidationError("Request leave type does not match the balance row")
    if request.year != balance.year:
        raise ValidationError("Request year does not match the balance row")
    if request.id in applied_request_ids:
        raise ValidationError(f"Request {request.id} was already applied to this balance")

    days = inclusive_total_days(request.start_date, request.end_date)
    if request.total_days != days:
        raise ValidationError(f"total_days must be {days} for the requested range")

    return replace(balance, used_days=balance.used_days + days)
