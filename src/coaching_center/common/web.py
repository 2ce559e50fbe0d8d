from __future__ import annotations

from functools import wraps

from flask import current_app, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "operator_id" not in session:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_owner_id() -> int:
    return int(session["operator_id"])


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def parse_bool(value) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def domain_error_response(error: DomainError):
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return jsonify({"success": False, "message": str(error)}), status
    return jsonify({"success": False, "message": str(error)}), 400


def server_error_response(message: str, error: Exception):
    body = {"success": False, "message": message}
    if current_app.config.get("DEBUG"):
        body["error"] = str(error)
    return jsonify(body), 500
