from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, json_body, make_guard, param
from ..api.serializers import to_json
from ..container import Container
from ..security.policy import admin_only, authenticated


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)
    plans = container.workplan_service

    @app.route("/api/workplan/manage", methods=["POST"], endpoint="workplan_create")
    @guard(authenticated())
    def workplan_create():
        data = json_body()
        plan = plans.create(
            current_principal().user_id,
            title=data.get("title"),
            description=data.get("description"),
            due_date=data.get("dueDate"),
        )
        return jsonify({"message": "Work plan created successfully", "workPlan": to_json(plan)}), 201

    @app.route("/api/workplan/manage", methods=["GET"], endpoint="workplan_list")
    @guard(authenticated())
    def workplan_list():
        items = plans.list_for_user(current_principal().user_id, status=request.args.get("status"))
        return jsonify(to_json(list(items)))

    @app.route("/api/workplan/manage", methods=["PUT"], endpoint="workplan_update")
    @guard(authenticated())
    def workplan_update():
        data = json_body()
        principal = current_principal()
        plan = plans.update(principal.user_id, param("id", data), data, author_role=principal.role)
        return jsonify({"message": "Work plan updated successfully", "workPlan": to_json(plan)})

    @app.route("/api/workplan/manage", methods=["DELETE"], endpoint="workplan_delete")
    @guard(authenticated())
    def workplan_delete():
        plans.delete(current_principal().user_id, request.args.get("id"))
        return jsonify({"message": "Work plan deleted successfully"})

    @app.route("/api/admin/workplan-tracking", methods=["GET"], endpoint="workplan_tracking")
    @guard(admin_only())
    def workplan_tracking():
        items = plans.list_all(
            current_role=current_principal().role,
            user_id=request.args.get("userId"),
            status=request.args.get("status"),
        )
        return jsonify(to_json(list(items)))

    @app.route("/api/admin/workplan-tracking", methods=["PUT"], endpoint="workplan_tracking_update")
    @guard(admin_only())
    def workplan_tracking_update():
        data = json_body()
        principal = current_principal()
        plan = plans.admin_update(
            current_role=principal.role,
            admin_user_id=principal.user_id,
            plan_id=data.get("id"),
            status=data.get("status"),
            comments=data.get("comments"),
        )
        return jsonify({"message": "Work plan updated successfully", "workPlan": to_json(plan)})
