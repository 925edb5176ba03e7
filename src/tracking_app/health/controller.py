from __future__ import annotations

from datetime import datetime, timezone

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(
            {
                "status": "OK",
                "message": "TrackingApp Backend API is running",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "version": container.api_version,
            }
        )
