"""Attendance aggregation over a period.

Group figures are pooled: numerators and denominators are summed across
members before dividing, never averaged per member.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import is_working_day, iter_dates, working_days
from ..common.percentages import percentage
from ..core.constants import HOURS_PRECISION
from ..core.enums import AttendanceStatus
from ..core.exceptions import DataIntegrityWarning, ValidationError
from .classifier import classify_day, resolve_duplicates
from .model import AttendanceDay, AttendanceSummary


def _check_period(period_start: date, period_end: date) -> None:
    if period_end < period_start:
        raise ValidationError("Period end must be on or after period start")


def summarize_employee(
    employee_id: str,
    days: Iterable[AttendanceDay],
    period_start: date,
    period_end: date,
) -> AttendanceSummary:
    """Summary for one employee; foreign or out-of-period records are ignored."""

    _check_period(period_start, period_end)

    by_date: dict[date, list[AttendanceDay]] = defaultdict(list)
    for day in days:
        if day.employee_id != employee_id:
            continue
        if period_start <= day.work_date <= period_end:
            by_date[day.work_date].append(day)

    counts: Counter = Counter()
    warnings: list[DataIntegrityWarning] = []
    present = 0
    excused = 0
    hours = 0.0

    for current in iter_dates(period_start, period_end):
        records = by_date.get(current)
        if not records:
            if is_working_day(current):
                counts[AttendanceStatus.NOT_SET] += 1
            continue

        record, duplicate_warning = resolve_duplicates(records)
        if duplicate_warning is not None:
            warnings.append(duplicate_warning)

        decision = classify_day(record)
        counts[decision.status] += 1
        if decision.warning is not None:
            warnings.append(decision.warning)
        if decision.present_equivalent:
            present += 1
        if not decision.counts_in_denominator and is_working_day(current):
            excused += 1

        worked = record.effective_hours()
        if worked:
            hours += worked

    expected = max(working_days(period_start, period_end) - excused, 0)
    return AttendanceSummary(
        period_start=period_start,
        period_end=period_end,
        expected_working_days=expected,
        present_equivalent=present,
        attendance_percentage=percentage(present, expected),
        status_counts=dict(counts),
        employee_id=employee_id,
        employee_count=1,
        total_hours=round(hours, HOURS_PRECISION),
        warnings=tuple(warnings),
    )


def aggregate_group(
    summaries: Sequence[AttendanceSummary],
    period_start: date,
    period_end: date,
) -> AttendanceSummary:
    """Pool member summaries into one department or company figure."""

    _check_period(period_start, period_end)

    counts: Counter = Counter()
    warnings: list[DataIntegrityWarning] = []
    present = 0
    expected = 0
    members = 0
    hours = 0.0
    for s in summaries:
        counts.update(s.status_counts)
        warnings.extend(s.warnings)
        present += s.present_equivalent
        expected += s.expected_working_days
        members += s.employee_count
        hours += s.total_hours

    return AttendanceSummary(
        period_start=period_start,
        period_end=period_end,
        expected_working_days=expected,
        present_equivalent=present,
        attendance_percentage=percentage(present, expected),
        status_counts=dict(counts),
        employee_id=None,
        employee_count=members,
        total_hours=round(hours, HOURS_PRECISION),
        warnings=tuple(warnings),
    )


def aggregate(
    days: Iterable[AttendanceDay],
    period_start: date,
    period_end: date,
    *,
    employee_ids: Optional[Sequence[str]] = None,
) -> AttendanceSummary:
    """Summarize attendance for one employee or a group.

    ``employee_ids`` is the roster; employees without any record still count
    toward the expected days. Without a roster the employees found in
    ``days`` are used, so a roster is required when ``days`` is empty.
    A single-member result keeps its ``employee_id``.
    """

    _check_period(period_start, period_end)
    days = list(days)

    if employee_ids is None:
        if not days:
            raise ValidationError("employee_ids is required when there are no attendance records")
        roster: list[str] = []
        for day in days:
            if day.employee_id not in roster:
                roster.append(day.employee_id)
    else:
        roster = list(dict.fromkeys(employee_ids))

    by_employee: dict[str, list[AttendanceDay]] = defaultdict(list)
    for day in days:
        by_employee[day.employee_id].append(day)

    members = [
        summarize_employee(emp_id, by_employee.get(emp_id, ()), period_start, period_end) for emp_id in roster
    ]
    if len(members) == 1:
        return members[0]
    return aggregate_group(members, period_start, period_end)
