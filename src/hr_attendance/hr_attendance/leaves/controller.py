from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_positive_int
from ..container import Container
from .model import NewLeaveRequest


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    def submit_leave():
        data = request.get_json(silent=True) or {}
        total_days = data.get("total_days")
        if total_days is not None:
            total_days = require_positive_int(total_days, "total_days")

        draft = NewLeaveRequest(
            employee_id=require_non_empty(str(data.get("employee_id") or ""), "employee_id"),
            leave_type_id=require_non_empty(str(data.get("leave_type_id") or ""), "leave_type_id"),
            start_date=parse_iso_date(data.get("start_date", "")),
            end_date=parse_iso_date(data.get("end_date", "")),
            reason=data.get("reason") or "",
            total_days=total_days,
        )
        created = container.leave_service.submit(draft)
        return jsonify(created.to_dict()), 201

    @app.route("/api/leaves/<request_id>/approve", methods=["POST"], endpoint="approve_leave")
    def approve_leave(request_id: str):
        data = request.get_json(silent=True) or {}
        outcome = container.leave_service.approve(request_id, remarks=data.get("remarks"))
        return jsonify(
            {
                "request": outcome.request.to_dict(),
                "balance": {
                    "used_days": outcome.balance.used_days,
                    "remaining": outcome.view.remaining,
                    "status": outcome.view.status,
                },
            }
        )

    @app.route("/api/leaves/<request_id>/reject", methods=["POST"], endpoint="reject_leave")
    def reject_leave(request_id: str):
        data = request.get_json(silent=True) or {}
        return jsonify(container.leave_service.reject(request_id, remarks=data.get("remarks")).to_dict())

    @app.route("/api/leaves/balances/<employee_id>", methods=["GET"], endpoint="leave_balances")
    def leave_balances(employee_id: str):
        year = require_positive_int(request.args.get("year"), "year")
        return jsonify([r.to_dict() for r in container.leave_service.balances(employee_id, year)])

    @app.route("/api/leaves/report", methods=["GET"], endpoint="leave_report")
    def leave_report():
        month = require_positive_int(request.args.get("month"), "month")
        year = require_positive_int(request.args.get("year"), "year")
        return jsonify([r.to_dict() for r in container.leave_service.leave_report(month, year)])

    @app.route("/api/leaves/employees/<employee_id>/utilization", methods=["GET"], endpoint="leave_utilization")
    def leave_utilization(employee_id: str):
        month = require_positive_int(request.args.get("month"), "month")
        year = require_positive_int(request.args.get("year"), "year")
        value = container.leave_service.leave_utilization(employee_id, month, year)
        return jsonify({"employee_id": employee_id, "month": month, "year": year, "percentage": value})

    @app.route("/api/leaves/employees/<employee_id>/overlaps", methods=["GET"], endpoint="leave_overlaps")
    def leave_overlaps(employee_id: str):
        return jsonify([o.to_dict() for o in container.leave_service.overlapping_requests(employee_id)])
