"""HTTP error boundary: every failure leaves as ``application/problem+json``.

Service code raises :class:`AuthError` tagged with an :class:`ErrorKind`; this
module is the only place that turns kinds into status codes and decides which
failures are expected (client mistakes, logged at warning) and which are
unexpected (operator problems, logged at error with a traceback).
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from auth_api.core.logger import ensure_request_id
from auth_api.services._shared.errors import AuthError, ErrorKind

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

KIND_STATUS: dict[ErrorKind, int] = {kind: kind.http_status_hint for kind in ErrorKind}
UNEXPECTED_KINDS: frozenset[ErrorKind] = frozenset({ErrorKind.PERSISTENCE_FAILURE})

# Database failures that escape the service layer (e.g. from the health probe).
_DB_ERRORS: tuple[tuple[type[SQLAlchemyError], HTTPStatus, str], ...] = (
    (IntegrityError, HTTPStatus.CONFLICT, "Resource conflict"),
    (OperationalError, HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable"),
)


def _status_code(status: int) -> str:
    """Stable snake_case code for a bare HTTP status (``404`` -> ``not_found``)."""
    try:
        return HTTPStatus(status).name.lower()
    except ValueError:
        return "error"


def _problem(status: int, code: str, detail: str, details: dict[str, Any] | None = None) -> Response:
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": detail,
        "instance": request.path,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    resp = jsonify(body)
    resp.status_code = status
    resp.mimetype = PROBLEM_MIMETYPE
    return resp


class APIError(Exception):
    """Error raised by the HTTP layer itself, before any service is called.

    :param message: Client-safe description.
    :param status_code: HTTP status, ``400`` unless overridden.
    :param code: Machine-readable identifier.
    """

    def __init__(self, message: str, status_code: int = 400, code: str = "bad_request") -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code


class BadRequest(APIError):
    def __init__(self, message: str = "Request body must be a JSON object") -> None:
        super().__init__(message, HTTPStatus.BAD_REQUEST)


def auth_error_status(err: AuthError) -> int:
    """Resolve the HTTP status for a tagged service failure."""
    return KIND_STATUS.get(err.kind, HTTPStatus.INTERNAL_SERVER_ERROR)


def init_app(app: Flask) -> None:
    """Register problem+json handlers on ``app``."""

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        status = auth_error_status(err)
        if err.kind in UNEXPECTED_KINDS:
            log.error("%s (%s)", err.kind.code, status, exc_info=err, extra={"kind": err.kind.code})
        else:
            log.warning("%s (%s): %s", err.kind.code, status, err.message, extra={"kind": err.kind.code})
        return _problem(status, err.kind.code, err.message)

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        log.warning("%s (%s): %s", err.code, err.status_code, err.message)
        return _problem(err.status_code, err.code, err.message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        fields = sorted(err.messages) if isinstance(err.messages, dict) else []
        log.warning("validation_error on %s", ", ".join(fields) or "body")
        return _problem(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            details={"errors": err.messages},
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or HTTPStatus.INTERNAL_SERVER_ERROR
        code = _status_code(status)
        detail = f"Route '{request.path}' not found" if status == HTTPStatus.NOT_FOUND else err.description
        (log.error if status >= 500 else log.warning)("%s (%s): %s", code, status, detail)
        resp = _problem(status, code, detail or HTTPStatus(status).phrase)
        # Keep headers such as Retry-After (rate limiter) and Allow (405).
        for header, value in err.get_headers():
            if header.lower() != "content-type":
                resp.headers[header] = value
        return resp

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        log.error("database error", exc_info=err)
        for exc_type, status, detail in _DB_ERRORS:
            if isinstance(err, exc_type):
                return _problem(status, _status_code(status), detail)
        return _problem(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error")

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled exception", exc_info=err)
        return _problem(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error")
