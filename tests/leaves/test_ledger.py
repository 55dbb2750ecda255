from datetime import date, datetime

import pytest

from src.hr_attendance.hr_attendance.core.enums import LeaveStatus
from src.hr_attendance.hr_attendance.core.exceptions import ValidationError
from src.hr_attendance.hr_attendance.leaves.ledger import apply_approval, compute_balance
from src.hr_attendance.hr_attendance.leaves.model import LeaveBalance, LeaveRequest


def _balance(**kw):
    values = dict(id="b1", employee_id="e1", leave_type_id="casual", year=2025, allocated_days=20)
    values.update(kw)
    return LeaveBalance(**values)


def _request(**kw):
    values = dict(
        id="r1",
        employee_id="e1",
        leave_type_id="casual",
        start_date=date(2025, 3, 10),
        end_date=date(2025, 3, 12),
        total_days=3,
        reason="Family trip",
        status=LeaveStatus.APPROVED,
        requested_at=datetime(2025, 3, 1, 9, 0),
    )
    values.update(kw)
    return LeaveRequest(**values)


def test_overdrawn_balance_exceeds():
    view = compute_balance(_balance(carried_forward=2, used_days=25))
    assert view.remaining == -3
    assert view.status == "Exceed"


def test_zero_remaining_is_within_limit():
    view = compute_balance(_balance(used_days=20))
    assert view.remaining == 0
    assert view.status == "With In Limit"


def test_compute_balance_is_idempotent():
    b = _balance(carried_forward=1.5, used_days=4)
    assert compute_balance(b) == compute_balance(b)


def test_more_used_days_never_increase_remaining():
    previous = None
    for used in range(0, 30):
        remaining = compute_balance(_balance(used_days=used)).remaining
        if previous is not None:
            assert remaining <= previous
        previous = remaining


def test_negative_fields_are_rejected():
    with pytest.raises(ValidationError):
        compute_balance(_balance(allocated_days=-1))
    with pytest.raises(ValidationError):
        compute_balance(_balance(carried_forward=-2))


def test_apply_approval_adds_request_days():
    updated = apply_approval(_balance(used_days=4), _request())
    assert updated.used_days == 7
    assert updated.allocated_days == 20


@pytest.mark.parametrize(
    "change",
    [
        {"employee_id": "e2"},
        {"leave_type_id": "sick"},
        {"start_date": date(2026, 1, 5), "end_date": date(2026, 1, 7)},
    ],
)
def test_apply_approval_rejects_mismatched_row(change):
    with pytest.raises(ValidationError):
        apply_approval(_balance(), _request(**change))


def test_apply_approval_rejects_double_application():
    with pytest.raises(ValidationError):
        apply_approval(_balance(), _request(), applied_request_ids={"r1"})


def test_apply_approval_requires_approved_request():
    with pytest.raises(ValidationError):
        apply_approval(_balance(), _request(status=LeaveStatus.PENDING))


def test_apply_approval_recomputes_total_days():
    with pytest.raises(ValidationError):
        apply_approval(_balance(), _request(total_days=5))


def test_apply_approval_does_not_mutate_input():
    b = _balance(used_days=1)
    apply_approval(b, _request())
    assert b.used_days == 1
