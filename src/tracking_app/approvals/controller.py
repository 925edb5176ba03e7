from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, json_body, make_guard
from ..api.serializers import to_json
from ..container import Container
from ..core.enums import ResourceKind
from ..security.policy import admin_only

_RESPONSE_KEYS = {
    ResourceKind.USER: "user",
    ResourceKind.LEAVE: "leaveRequest",
    ResourceKind.MISSION: "missionRequest",
}


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)
    workflow = container.approval_workflow

    def decide(resource, item_id, decision):
        principal = current_principal()
        outcome = workflow.decide(
            resource,
            item_id,
            decision,
            current_role=principal.role,
            admin_user_id=principal.user_id,
        )
        return jsonify(
            {
                "message": f"{outcome.label} {outcome.verb} successfully",
                _RESPONSE_KEYS[outcome.resource]: to_json(outcome.item),
            }
        )

    @app.route("/api/admin/approvals", methods=["GET"], endpoint="approvals_pending")
    @guard(admin_only())
    def approvals_pending():
        items = workflow.list_pending(request.args.get("resource"), current_role=current_principal().role)
        return jsonify(to_json(list(items)))

    @app.route("/api/admin/approvals", methods=["PUT"], endpoint="approvals_decide")
    @guard(admin_only())
    def approvals_decide():
        data = json_body()
        return decide(request.args.get("resource"), data.get("id"), data.get("status"))

    # Registration-only shortcut kept for older admin clients: body {userId, role}.
    @app.route("/api/auth/approve-user", methods=["GET"], endpoint="approve_user_pending")
    @guard(admin_only())
    def approve_user_pending():
        items = workflow.list_pending(ResourceKind.USER, current_role=current_principal().role)
        return jsonify(to_json(list(items)))

    @app.route("/api/auth/approve-user", methods=["PUT"], endpoint="approve_user_decide")
    @guard(admin_only())
    def approve_user_decide():
        data = json_body()
        return decide(ResourceKind.USER, data.get("userId"), data.get("role") or "STAFF")
