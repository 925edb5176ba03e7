from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, json_body, make_guard
from ..api.serializers import to_json
from ..common.datetime_utils import parse_date
from ..container import Container
from ..security.policy import authenticated


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)
    attendance = container.attendance_service

    @app.route("/api/attendance/check-in-out", methods=["POST"], endpoint="attendance_record")
    @guard(authenticated())
    def attendance_record():
        data = json_body()
        result = attendance.record(
            current_principal().user_id,
            attendance_type=data.get("attendanceType"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return jsonify({"message": "Attendance recorded successfully", "attendance": to_json(result)}), 201

    @app.route("/api/attendance/check-in-out", methods=["GET"], endpoint="attendance_history")
    @guard(authenticated())
    def attendance_history():
        day = request.args.get("date")
        records = attendance.list_for_user(
            current_principal().user_id,
            day=parse_date(day, "date") if day else None,
        )
        return jsonify(to_json(list(records)))
