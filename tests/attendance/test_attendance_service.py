from datetime import date, time

import pytest

from src.hr_attendance.hr_attendance.attendance.service import AttendanceService
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus
from src.hr_attendance.hr_attendance.core.exceptions import NotFoundError, ValidationError
from tests.fakes import InMemoryAttendance, InMemoryDepartments, InMemoryEmployees, day, dept, emp

MONDAY = date(2025, 3, 10)
IN = time(9, 0)
OUT = time(17, 0)


def _service(days=(), employees=None, departments=None):
    employees = employees or InMemoryEmployees([emp("e1", "d1"), emp("e2", "d1"), emp("e3", "d2"), emp("e4", "d2")])
    departments = departments or InMemoryDepartments([dept("d1", "Engineering"), dept("d2", "Sales")])
    store = InMemoryAttendance(days, employees=employees, departments=departments)
    return AttendanceService(store, employees)


def test_employee_summary_counts_working_days():
    svc = _service([day("e1", MONDAY, "present", check_in=IN, check_out=OUT)])

    summary = svc.employee_summary("e1", start=date(2025, 3, 10), end=date(2025, 3, 14))

    assert summary.expected_working_days == 5
    assert summary.present_equivalent == 1
    assert summary.attendance_percentage == 20
    assert summary.count(AttendanceStatus.NOT_SET) == 4
    assert summary.total_hours == 8.0


def test_employee_summary_unknown_employee():
    with pytest.raises(NotFoundError):
        _service().employee_summary("nope", start=MONDAY, end=MONDAY)


def test_employee_summary_rejects_reversed_range():
    with pytest.raises(ValidationError):
        _service().employee_summary("e1", start=date(2025, 3, 14), end=MONDAY)


def test_monthly_series_has_twelve_months():
    svc = _service([day("e1", MONDAY, "late", check_in=IN, check_out=OUT)])

    series = svc.monthly_series("e1", 2025)

    assert len(series) == 12
    assert [s.period_start.month for s in series] == list(range(1, 13))
    assert series[2].present_equivalent == 1
    assert series[2].expected_working_days == 21
    assert sum(s.present_equivalent for s in series) == 1


def test_team_summaries_pool_members():
    days = [day("e1", d, "present", check_in=IN, check_out=OUT) for d in (date(2025, 3, 3), date(2025, 3, 4))]
    svc = _service(days)

    team = svc.team_summaries("d1", 3, 2025)

    assert [m.employee_id for m in team.members] == ["e1", "e2"]
    assert team.pooled.employee_count == 2
    assert team.pooled.expected_working_days == 42
    assert team.pooled.present_equivalent == 2
    assert team.pooled.attendance_percentage == 5


def test_team_summaries_without_members():
    team = _service().team_summaries("d9", 3, 2025)
    assert team.members == ()
    assert team.pooled.attendance_percentage == 0


def test_status_breakdown_fills_missing_employees_with_not_set():
    svc = _service(
        [
            day("e1", MONDAY, "present", check_in=IN, check_out=OUT),
            day("e2", MONDAY, "absent"),
            day("e3", MONDAY, "leave"),
        ]
    )

    rows = {r.status: r for r in svc.status_breakdown(MONDAY)}

    assert rows[AttendanceStatus.PRESENT].count == 1
    assert rows[AttendanceStatus.PRESENT].percentage == 25
    assert rows[AttendanceStatus.ABSENT].count == 1
    assert rows[AttendanceStatus.LEAVE].count == 1
    assert rows[AttendanceStatus.NOT_SET].count == 1
    assert sum(r.count for r in rows.values()) == 4


def test_status_breakdown_on_weekend_skips_missing():
    saturday = date(2025, 3, 15)
    rows = _service([day("e1", saturday, "weekoff")]).status_breakdown(saturday)
    assert [(r.status, r.count) for r in rows] == [(AttendanceStatus.WEEKOFF, 1)]


def test_attendance_trend_covers_working_days_only():
    svc = _service(
        [
            day("e1", MONDAY, "present", check_in=IN, check_out=OUT),
            day("e2", MONDAY, "half_day", check_in=IN, check_out=time(13, 0)),
            day("e3", date(2025, 3, 11), "present", check_in=IN),
        ]
    )

    trend = svc.attendance_trend(date(2025, 3, 10), date(2025, 3, 16))

    assert [p.day for p in trend] == [date(2025, 3, d) for d in range(10, 15)]
    assert trend[0].present_count == 2
    assert trend[0].percentage == 50
    assert trend[1].present_count == 1
    assert trend[1].percentage == 25
    assert trend[2].present_count == 0


def test_list_records_filters():
    svc = _service(
        [
            day("e1", MONDAY, "present", check_in=IN, check_out=OUT),
            day("e3", MONDAY, "absent"),
            day("e1", date(2025, 3, 11), "late", check_in=time(9, 30)),
        ]
    )

    assert len(svc.list_records()) == 3
    assert len(svc.list_records(work_date=MONDAY)) == 2
    assert [r.employee_code for r in svc.list_records(department="Sales")] == ["EMP-e3"]
    assert [r.day.status for r in svc.list_records(employee_code="e1", status=AttendanceStatus.LATE)] == [
        AttendanceStatus.LATE
    ]


def test_list_records_rejects_not_set_filter():
    with pytest.raises(ValidationError):
        _service().list_records(status=AttendanceStatus.NOT_SET)
