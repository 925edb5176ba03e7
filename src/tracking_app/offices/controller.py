from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, json_body, make_guard, param
from ..api.serializers import to_json
from ..container import Container
from ..security.policy import admin_only


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)
    offices = container.office_service

    @app.route("/api/office/location", methods=["GET"], endpoint="office_list")
    def office_list():
        return jsonify(to_json(list(offices.list_active())))

    @app.route("/api/office/location", methods=["POST"], endpoint="office_create")
    @guard(admin_only())
    def office_create():
        data = json_body()
        office = offices.create(
            current_role=current_principal().role,
            name=data.get("name"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius=data.get("radius"),
        )
        return jsonify({"message": "Office location created successfully", "office": to_json(office)}), 201

    @app.route("/api/office/location", methods=["PUT"], endpoint="office_update")
    @guard(admin_only())
    def office_update():
        data = json_body()
        office = offices.update(
            current_role=current_principal().role,
            office_id=param("id", data),
            changes=data,
        )
        return jsonify({"message": "Office location updated successfully", "office": to_json(office)})

    @app.route("/api/office/location", methods=["DELETE"], endpoint="office_delete")
    @guard(admin_only())
    def office_delete():
        offices.deactivate(current_role=current_principal().role, office_id=request.args.get("id"))
        return jsonify({"message": "Office location deleted successfully"})
