"""Request helpers shared by the workflow blueprints.

- enforce_api_token: optional static bearer token guard (before_request)
- resolve_tenant_id: tenant from X-Tenant-Id or the configured default
- parse_pagination: limit/offset/filter query parameters
- json_body: request body as a JSON object
- get_workflow_service: the WorkflowService bound to the app
"""
from __future__ import annotations
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional, Tuple

from flask import current_app, request

from workflow_api.core.errors import APIError, ErrorMessage, ValidationError
from workflow_api.core.workflow_service import WorkflowService

TENANT_HEADER = "X-Tenant-Id"

logger = logging.getLogger(__name__)


class UnauthorizedError(APIError):
    status = 401


def get_workflow_service() -> WorkflowService:
    return current_app.extensions["workflow_service"]


def _invalid(description: str) -> ValidationError:
    return ValidationError.from_message(ErrorMessage.ERROR_CODE_INVALID_INPUT, description)


# ─────────────────────────────────────────────────────────────────────────────
# Authentication
# ─────────────────────────────────────────────────────────────────────────────

def _validate_static_token(provided_token: str, expected_token: str) -> bool:
    """Constant-time comparison of the bearer token (timing-attack safe)."""
    return hmac.compare_digest(provided_token.encode(), expected_token.encode())


def _log_auth_failure(token: str, reason: str) -> None:
    """Log a rejected request without leaking the token (SHA256 prefix only)."""
    token_hash = hashlib.sha256(token.encode()).hexdigest()[:12] if token else "none"
    correlation_id = request.headers.get("X-Correlation-Id", "none")
    client_ip = request.remote_addr
    logger.info(
        "Rejected API call | reason=%s | token_hash=%s | path=%s | correlation_id=%s | client_ip=%s",
        reason, token_hash, request.path, correlation_id, client_ip,
    )


def enforce_api_token() -> None:
    """Require ``Authorization: Bearer <token>`` when an API token is configured.

    Registered as ``before_request`` on the resource blueprints.

    Raises:
        UnauthorizedError: On a missing, malformed or wrong token
    """
    cfg = current_app.config.get("APP_CONFIG")
    if not cfg or not cfg.api_token_enabled:
        return None

    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        _log_auth_failure("", "missing bearer token")
        raise UnauthorizedError.from_message(
            ErrorMessage.ERROR_CODE_UNAUTHORIZED,
            "Authorization header must use Bearer token scheme: 'Authorization: Bearer <token>'.",
        )

    token = auth_header[7:].strip()
    if not token or not _validate_static_token(token, cfg.api_token):
        _log_auth_failure(token, "invalid bearer token")
        raise UnauthorizedError.from_message(ErrorMessage.ERROR_CODE_UNAUTHORIZED, "Invalid bearer token.")
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Request parsing
# ─────────────────────────────────────────────────────────────────────────────

def resolve_tenant_id() -> int:
    """Return the tenant for this request.

    Raises:
        ValidationError: If the header is not an integer
    """
    raw = request.headers.get(TENANT_HEADER)
    if raw is None or not raw.strip():
        return current_app.config["APP_CONFIG"].default_tenant_id
    try:
        return int(raw.strip())
    except ValueError:
        raise _invalid(f"{TENANT_HEADER} must be an integer.")


def _non_negative_int(name: str) -> Optional[int]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise _invalid(f"Query parameter {name} must be an integer.")
    if value < 0:
        raise _invalid(f"Query parameter {name} must not be negative.")
    return value


def parse_pagination() -> Tuple[Optional[int], Optional[int], Optional[str]]:
    """Return (limit, offset, filter) from the query string; missing values are None."""
    return _non_negative_int("limit"), _non_negative_int("offset"), request.args.get("filter") or None


def json_body() -> Dict[str, Any]:
    """Return the request body as a JSON object.

    Raises:
        ValidationError: If the body is missing or not a JSON object
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise _invalid("Request body must be a JSON object.")
    return payload
