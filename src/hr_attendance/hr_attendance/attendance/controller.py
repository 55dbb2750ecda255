from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container


def _month_year():
    month = require_positive_int(request.args.get("month"), "month")
    year = require_positive_int(request.args.get("year"), "year")
    return month, year


def _status_arg():
    value = (request.args.get("status") or "").strip()
    if not value:
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown attendance status {value!r}")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/departments", methods=["GET"], endpoint="department_attendance")
    def department_attendance():
        month, year = _month_year()
        return jsonify(container.rollup.department_attendance(month, year).to_dict())

    @app.route("/api/attendance/company", methods=["GET"], endpoint="company_attendance")
    def company_attendance():
        month, year = _month_year()
        return jsonify(container.rollup.company_attendance(month, year).to_dict())

    @app.route("/api/attendance/departments/<department_id>/team", methods=["GET"], endpoint="team_attendance")
    def team_attendance(department_id: str):
        month, year = _month_year()
        return jsonify(container.attendance_service.team_summaries(department_id, month, year).to_dict())

    @app.route("/api/attendance/employees/<employee_id>/summary", methods=["GET"], endpoint="employee_summary")
    def employee_summary(employee_id: str):
        start = parse_iso_date(request.args.get("start", ""))
        end = parse_iso_date(request.args.get("end", ""))
        summary = container.attendance_service.employee_summary(employee_id, start=start, end=end)
        return jsonify(summary.to_dict())

    @app.route("/api/attendance/employees/<employee_id>/monthly", methods=["GET"], endpoint="employee_monthly")
    def employee_monthly(employee_id: str):
        year = require_positive_int(request.args.get("year"), "year")
        series = container.attendance_service.monthly_series(employee_id, year)
        return jsonify([s.to_dict() for s in series])

    @app.route("/api/attendance/breakdown", methods=["GET"], endpoint="status_breakdown")
    def status_breakdown():
        day = parse_iso_date(request.args.get("date", ""))
        return jsonify([r.to_dict() for r in container.attendance_service.status_breakdown(day)])

    @app.route("/api/attendance/trend", methods=["GET"], endpoint="attendance_trend")
    def attendance_trend():
        start = parse_iso_date(request.args.get("start", ""))
        end = parse_iso_date(request.args.get("end", ""))
        return jsonify([p.to_dict() for p in container.attendance_service.attendance_trend(start, end)])

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    def attendance_records():
        day = request.args.get("date")
        rows = container.attendance_service.list_records(
            work_date=parse_iso_date(day) if day else None,
            status=_status_arg(),
            employee_code=request.args.get("employee_id"),
            department=request.args.get("department"),
        )
        return jsonify([r.to_dict() for r in rows])
