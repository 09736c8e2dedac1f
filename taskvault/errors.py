"""Typed errors raised by the stores and services, rendered as JSON by Flask."""

from flask import current_app, jsonify
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException


class TaskVaultError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(TaskVaultError):
    status_code = 400
    message = "Invalid request body"


class ConflictError(TaskVaultError):
    # Duplicate email is reported as a plain 400 on the wire.
    status_code = 400
    message = "Email already registered"


class InvalidCredentialsError(TaskVaultError):
    status_code = 400
    message = "Invalid credentials"


class UnauthorizedError(TaskVaultError):
    status_code = 401
    message = "Missing bearer token"


class ForbiddenError(TaskVaultError):
    status_code = 403
    message = "Invalid or expired token"


class NotFoundError(TaskVaultError):
    status_code = 404
    message = "Task not found"


def register_error_handlers(app):
    @app.errorhandler(TaskVaultError)
    def handle_taskvault_error(exc):
        return jsonify(message=exc.message), exc.status_code

    @app.errorhandler(PyMongoError)
    def handle_storage_error(exc):
        current_app.logger.exception("Storage failure: %s", exc)
        return jsonify(message="Storage unavailable"), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify(message=exc.description if exc.code != 404 else "Not Found"), exc.code

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(message="Internal Server Error"), 500
