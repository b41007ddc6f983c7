"""JSON envelope helpers shared by every endpoint."""

from typing import Any

from flask import jsonify


def success_response(
    data: Any = None, message: str | None = None, status_code: int = 200
):
    """Wrap ``data`` in a success envelope."""
    response = {"success": True}

    if data is not None:
        response["data"] = data

    if message is not None:
        response["message"] = message

    return jsonify(response), status_code


def error_response(
    code: str, message: str, details: dict | None = None, status_code: int = 400
):
    """Wrap an error code and message in a failure envelope."""
    response = {"success": False, "error": {"code": code, "message": message}}

    if details is not None:
        response["error"]["details"] = details

    return jsonify(response), status_code


def unauthorized(message: str = "Not authenticated"):
    return error_response("UNAUTHORIZED", message, status_code=401)


def not_found(message: str = "Resource not found"):
    return error_response("NOT_FOUND", message, status_code=404)


def validation_error(details: dict):
    return error_response(
        "VALIDATION_ERROR", "Invalid input data", details, status_code=400
    )


def conflict(message: str = "Resource conflict"):
    return error_response("CONFLICT", message, status_code=409)


def server_error(message: str = "Internal server error"):
    return error_response("SERVER_ERROR", message, status_code=500)
