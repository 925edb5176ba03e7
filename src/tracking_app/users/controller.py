from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.guards import current_principal, json_body, make_guard, param
from ..api.serializers import to_json
from ..container import Container
from ..security.policy import admin_only, authenticated


def register(app: Flask, container: Container) -> None:
    guard = make_guard(container.token_service)
    auth = container.auth_service
    users = container.user_service

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        user = auth.register(
            email=data.get("email"),
            password=data.get("password"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            position=data.get("position"),
            department=data.get("department"),
        )
        return (
            jsonify({"message": "Registration successful. Please wait for admin approval.", "user": to_json(user)}),
            201,
        )

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        result = auth.authenticate(data.get("email"), data.get("password"))
        return jsonify({"message": "Login successful", "token": result.token, "user": to_json(result.user)})

    @app.route("/api/profile", methods=["GET"], endpoint="profile_get")
    @guard(authenticated())
    def profile_get():
        return jsonify(to_json(users.get(current_principal().user_id)))

    @app.route("/api/profile", methods=["PUT"], endpoint="profile_update")
    @guard(authenticated())
    def profile_update():
        user = users.update_profile(current_principal().user_id, json_body())
        return jsonify({"message": "Profile updated successfully", "user": to_json(user)})

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @guard(admin_only())
    def admin_users():
        items = users.list_users(
            current_role=current_principal().role,
            role=request.args.get("role"),
            is_active=request.args.get("isActive"),
        )
        return jsonify(to_json(list(items)))

    @app.route("/api/admin/users", methods=["PUT"], endpoint="admin_users_update")
    @guard(admin_only())
    def admin_users_update():
        data = json_body()
        principal = current_principal()
        user = users.admin_update(
            current_role=principal.role,
            admin_user_id=principal.user_id,
            user_id=param("id", data),
            changes=data,
        )
        return jsonify({"message": "User updated successfully", "user": to_json(user)})

    @app.route("/api/admin/users", methods=["DELETE"], endpoint="admin_users_delete")
    @guard(admin_only())
    def admin_users_delete():
        principal = current_principal()
        users.deactivate(
            current_role=principal.role,
            admin_user_id=principal.user_id,
            user_id=request.args.get("id"),
        )
        return jsonify({"message": "User deactivated successfully"})
