from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

_HTTP_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def register_error_handlers(app: Flask) -> None:
    """Every failure leaves the API as ``{"message": ...}`` with the matching status."""

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("Request failed: %s", e)
        return jsonify({"message": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": _HTTP_MESSAGES.get(e.code, e.description)}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error: %s", e)
        return jsonify({"message": "Internal server error"}), 500
