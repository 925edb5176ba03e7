from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, make_guard
from ..api.serializers import to_json
from ..container import Container
from ..security.policy import admin_only


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)

    @app.route("/api/admin/reports", methods=["GET"], endpoint="admin_reports")
    @guard(admin_only())
    def admin_reports():
        report = container.report_service.summarize(
            request.args.get("reportType"),
            request.args.get("startDate"),
            request.args.get("endDate"),
            current_role=current_principal().role,
        )
        return jsonify(to_json(report))
