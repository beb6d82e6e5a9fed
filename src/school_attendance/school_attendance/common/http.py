from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request

from ..core.enums import Role
from ..core.exceptions import (
    AccountDisabledError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    DuplicateScanError,
    InactiveError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first: lookup walks this list in order.
_ERROR_MAP = [
    (ValidationError, "validation_error", 400),
    (NotFoundError, "not_found", 404),
    (InactiveError, "inactive", 409),
    (DuplicateScanError, "duplicate_scan", 409),
    (ConflictError, "conflict", 409),
    (InvalidCredentialsError, "invalid_credentials", 401),
    (AccountDisabledError, "account_disabled", 403),
    (InvalidTokenError, "invalid_token", 401),
    (AuthenticationError, "unauthenticated", 401),
    (AuthorizationError, "forbidden", 403),
]


def error_payload(exc: DomainError) -> tuple[dict, int]:
    for exc_type, kind, status in _ERROR_MAP:
        if isinstance(exc, exc_type):
            break
    else:
        kind, status = "domain_error", 400

    body = {"success": False, "error": kind, "message": str(exc)}
    if isinstance(exc, DuplicateScanError):
        # The UI shows this as a notice, not a failure.
        body["informational"] = True
    return body, status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        body, status = error_payload(exc)
        logger.debug("%s -> %s %s", request.path, status, body["error"])
        return jsonify(body), status

    @app.errorhandler(404)
    def handle_not_found(_exc):
        return jsonify({"success": False, "error": "not_found", "message": "Resource not found"}), 404


def json_body() -> dict:
    """The request's JSON object; a missing or unparsable body counts as ``{}``."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenError("Missing bearer token")
    return token.strip()


def token_required(auth_service, *roles: Role):
    """Verify the bearer token on every call and expose the claims as ``g.claims``.

    With ``roles`` given, the token's role must be one of them.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            claims = auth_service.verify_token(bearer_token())
            if roles and claims.role not in roles:
                raise AuthorizationError("You do not have permission for this action")
            g.claims = claims
            return view(*args, **kwargs)

        return wrapper

    return decorator
