from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, json_body, make_guard, param
from ..api.serializers import to_json
from ..container import Container
from ..core.enums import RequestKind
from ..security.policy import authenticated

_ROUTES = {
    RequestKind.LEAVE: ("/api/leave/request", "leaveRequest", "Leave request"),
    RequestKind.MISSION: ("/api/mission/request", "missionRequest", "Mission request"),
}


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)
    service = container.request_service

    def create(kind: RequestKind, data: dict):
        user_id = current_principal().user_id
        if kind == RequestKind.LEAVE:
            return service.create_leave(
                user_id,
                start_date=data.get("startDate"),
                end_date=data.get("endDate"),
                reason=data.get("reason"),
            )
        return service.create_mission(
            user_id,
            title=data.get("title"),
            description=data.get("description"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )

    def add_routes(kind: RequestKind) -> None:
        path, key, label = _ROUTES[kind]
        prefix = kind.value

        @app.route(path, methods=["POST"], endpoint=f"{prefix}_create")
        @guard(authenticated())
        def create_request():
            item = create(kind, json_body())
            return jsonify({"message": f"{label} submitted successfully", key: to_json(item)}), 201

        @app.route(path, methods=["GET"], endpoint=f"{prefix}_list")
        @guard(authenticated())
        def list_requests():
            return jsonify(to_json(list(service.list_for_user(kind, current_principal().user_id))))

        @app.route(path, methods=["PUT"], endpoint=f"{prefix}_update")
        @guard(authenticated())
        def update_request():
            data = json_body()
            item = service.update(kind, current_principal().user_id, param("id", data), data)
            return jsonify({"message": f"{label} updated successfully", key: to_json(item)})

        @app.route(path, methods=["DELETE"], endpoint=f"{prefix}_cancel")
        @guard(authenticated())
        def cancel_request():
            request_id = request.args.get("id") or (json_body().get("id") if request.data else None)
            service.cancel(kind, current_principal().user_id, request_id)
            return jsonify({"message": f"{label} cancelled successfully"})

    for kind in RequestKind:
        add_routes(kind)
