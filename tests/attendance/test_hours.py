from datetime import date, time

from src.hr_attendance.hr_attendance.attendance.hours import worked_hours
from src.hr_attendance.hr_attendance.attendance.model import AttendanceDay
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus


def test_worked_hours_difference():
    assert worked_hours(time(9, 0), time(17, 30)) == 8.5
    assert worked_hours(time(9, 0), time(9, 20)) == 0.33


def test_checkout_before_checkin_is_zero():
    assert worked_hours(time(17, 0), time(8, 0)) == 0.0


def test_from_punches_derives_total_hours():
    d = AttendanceDay.from_punches(
        employee_id="e1",
        work_date=date(2025, 3, 10),
        status=AttendanceStatus.PRESENT,
        check_in=time(9, 0),
        check_out=time(18, 0),
        total_hours=3,
    )
    assert d.total_hours == 9.0


def test_effective_hours_uses_supplied_value_without_both_punches():
    d = AttendanceDay(
        employee_id="e1",
        work_date=date(2025, 3, 10),
        status=AttendanceStatus.PRESENT,
        check_in=time(9, 0),
        total_hours=7.5,
    )
    assert d.effective_hours() == 7.5
    assert AttendanceDay("e1", date(2025, 3, 10), AttendanceStatus.ABSENT).effective_hours() is None
