from datetime import date, time

import pytest

from src.hr_attendance.hr_attendance.container import wire
from src.hr_attendance.hr_attendance.leaves.model import LeaveBalance
from src.hr_attendance.hr_attendance.main import create_app
from tests.fakes import (
    InMemoryAttendance,
    InMemoryDepartments,
    InMemoryEmployees,
    InMemoryLeaves,
    day,
    dept,
    emp,
    leave_type,
)


def _client(monkeypatch, *, grouped="sql", fail_raw=False):
    monkeypatch.setenv("APP_ENV", "testing")
    employees = InMemoryEmployees([emp("e1", "d1"), emp("e2", "d2")])
    departments = InMemoryDepartments([dept("d1", "Engineering"), dept("d2", "Sales")])
    attendance = InMemoryAttendance(
        [
            day("e1", date(2025, 3, 3), "present", check_in=time(9, 0), check_out=time(17, 0)),
            day("e2", date(2025, 3, 3), "absent"),
        ],
        employees=employees,
        departments=departments,
        grouped=grouped,
        fail_raw=fail_raw,
    )
    leaves = InMemoryLeaves(
        leave_types=[leave_type("casual", max_days=12)],
        balances=[
            LeaveBalance(id="b1", employee_id="e1", leave_type_id="casual", year=2099, allocated_days=12)
        ],
        departments=departments,
        employees=employees,
    )
    container = wire(
        attendance_repo=attendance,
        employees_repo=employees,
        departments_repo=departments,
        leaves_repo=leaves,
        rollup_max_workers=1,
    )
    app = create_app(container)
    return app.test_client()


def test_department_attendance(monkeypatch):
    client = _client(monkeypatch)

    resp = client.get("/api/attendance/departments?month=3&year=2025")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["path"] == "primary"
    assert [r["department"] for r in body["rows"]] == ["Engineering", "Sales"]
    assert body["rows"][0]["present_count"] == 1


def test_department_attendance_bad_month(monkeypatch):
    client = _client(monkeypatch)

    resp = client.get("/api/attendance/departments?month=13&year=2025")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_upstream_failure_maps_to_502(monkeypatch):
    client = _client(monkeypatch, grouped="error", fail_raw=True)

    resp = client.get("/api/attendance/company?month=3&year=2025")

    assert resp.status_code == 502
    assert resp.get_json()["error"] == "upstream_failure"


def test_employee_summary_routes(monkeypatch):
    client = _client(monkeypatch)

    ok = client.get("/api/attendance/employees/e1/summary?start=2025-03-03&end=2025-03-07")
    missing = client.get("/api/attendance/employees/zz/summary?start=2025-03-03&end=2025-03-07")
    bad_date = client.get("/api/attendance/employees/e1/summary?start=03/03/2025&end=2025-03-07")

    assert ok.status_code == 200
    assert ok.get_json()["attendance_percentage"] == 20
    assert missing.status_code == 404
    assert bad_date.status_code == 400


def test_records_rejects_unknown_status(monkeypatch):
    client = _client(monkeypatch)

    assert client.get("/api/attendance/records?status=present").status_code == 200
    assert client.get("/api/attendance/records?status=sleeping").status_code == 400
    assert client.get("/api/attendance/records?status=not_set").status_code == 400


def test_leave_submit_and_approve(monkeypatch):
    client = _client(monkeypatch)

    created = client.post(
        "/api/leaves",
        json={
            "employee_id": "e1",
            "leave_type_id": "casual",
            "start_date": "2099-03-10",
            "end_date": "2099-03-12",
            "reason": "Family trip",
        },
    )
    assert created.status_code == 201
    request_id = created.get_json()["id"]
    assert created.get_json()["total_days"] == 3

    approved = client.post(f"/api/leaves/{request_id}/approve", json={})
    assert approved.status_code == 200
    assert approved.get_json()["balance"] == {"used_days": 3, "remaining": 9, "status": "With In Limit"}

    again = client.post(f"/api/leaves/{request_id}/approve", json={})
    assert again.status_code == 400

    balances = client.get("/api/leaves/balances/e1?year=2099").get_json()
    assert balances[0]["balance"] == 9


@pytest.mark.parametrize(
    "payload",
    [
        {"start_date": "2099-03-10", "end_date": "2099-03-12", "total_days": 5},
        {"start_date": "2000-01-10", "end_date": "2000-01-12"},
        {"start_date": "2099-03-12", "end_date": "2099-03-10"},
    ],
)
def test_leave_submit_validation(monkeypatch, payload):
    client = _client(monkeypatch)
    body = {"employee_id": "e1", "leave_type_id": "casual", "reason": "Trip", **payload}

    assert client.post("/api/leaves", json=body).status_code == 400


def test_unknown_leave_request_is_404(monkeypatch):
    client = _client(monkeypatch)
    assert client.post("/api/leaves/nope/reject", json={}).status_code == 404
