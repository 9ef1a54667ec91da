from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyClosedError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; InvalidOrder/OutOfWindow fall through to ValidationError's
# 422 while keeping their own ``code``.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotFoundError, 404),
    (AlreadyClosedError, 409),
    (ConflictError, 409),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (StoreUnavailableError, 503),
    (ValidationError, 422),
)


def status_for(exc: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 400


def error_response(exc: DomainError):
    return jsonify({"success": False, "code": exc.code, "message": str(exc)}), status_for(exc)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if isinstance(exc, StoreUnavailableError):
            logger.error("store unavailable: %s", exc)
        return error_response(exc)

    @app.errorhandler(500)
    def handle_internal_error(exc: HTTPException):
        original = getattr(exc, "original_exception", None)
        if original is not None:
            logger.error("unhandled error", exc_info=original)
        return jsonify({"success": False, "code": "internal_error", "message": "Internal server error"}), 500


def current_student_id() -> str:
    return str(session["student_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "student_id" not in session:
            return error_response(AuthenticationError("Please log in first"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "student_id" not in session:
            return error_response(AuthenticationError("Please log in first"))
        if session.get("role") != Role.ADMIN.value:
            return error_response(AuthorizationError("Administrator only"))
        return view(*args, **kwargs)

    return wrapper
