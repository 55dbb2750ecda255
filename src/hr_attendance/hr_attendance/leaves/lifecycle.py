from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.validators import require_non_empty
from ..core.enums import LeaveStatus
from ..core.exceptions import ValidationError
from .model import LeaveOverlap, LeaveRequest, NewLeaveRequest

ALLOWED_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset(),
    LeaveStatus.REJECTED: frozenset(),
}


def inclusive_total_days(start_date: date, end_date: date) -> int:
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")
    return (end_date - start_date).days + 1


def validate_submission(draft: NewLeaveRequest, *, submitted_at: datetime) -> NewLeaveRequest:
    """Check a new request and return it with ``total_days`` recomputed.

    A caller supplied ``total_days`` must match the inclusive span.
    """

    days = inclusive_total_days(draft.start_date, draft.end_date)
    if draft.total_days is not None and int(draft.total_days) != days:
        raise ValidationError(f"total_days must be {days} for the requested range")
    if draft.start_date < submitted_at.date():
        raise ValidationError("Start date cannot be in the past")
    reason = require_non_empty(draft.reason, "Reason")
    return replace(draft, total_days=days, reason=reason)


def can_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def transition(request: LeaveRequest, target: LeaveStatus, *, remarks: Optional[str] = None) -> LeaveRequest:
    if not can_transition(request.status, target):
        raise ValidationError(
            f"Cannot move leave request {request.id} from {request.status.value} to {LeaveStatus(target).value}"
        )
    return replace(request, status=target, remarks=remarks if remarks is not None else request.remarks)


def find_overlaps(requests: Iterable[LeaveRequest]) -> list[LeaveOverlap]:
    """Pairs of approved requests of one employee whose date ranges overlap.

    Flags only; prevention belongs to scheduling policy.
    """

    by_employee: dict[str, list[LeaveRequest]] = {}
    for r in requests:
        if r.status == LeaveStatus.APPROVED:
            by_employee.setdefault(r.employee_id, []).append(r)

    overlaps: list[LeaveOverlap] = []
    for employee_id in sorted(by_employee):
        items = sorted(by_employee[employee_id], key=lambda r: (r.start_date, r.end_date, r.id))
        for i, first in enumerate(items):
            for second in items[i + 1:]:
                if second.start_date > first.end_date:
                    break
                overlaps.append(
                    LeaveOverlap(
                        employee_id=employee_id,
                        first_request_id=first.id,
                        second_request_id=second.id,
                        overlap_start=max(first.start_date, second.start_date),
                        overlap_end=min(first.end_date, second.end_date),
                    )
                )
    return overlaps
