"""Health check endpoints."""
from flask import Blueprint, current_app

from workflow_api.core.backend.exceptions import WorkflowError

bp = Blueprint("health", __name__)


@bp.route("/health")
def health_check():
    """Basic health check endpoint."""
    return ("ok", 200, {"Content-Type": "text/plain"})


@bp.route("/ready")
def readiness_check():
    """Readiness check: the backend must answer a count query."""
    service = current_app.extensions["workflow_service"]
    tenant_id = current_app.config["APP_CONFIG"].default_tenant_id
    try:
        service.backend.get_workflows_count(tenant_id, None)
    except WorkflowError as exc:
        current_app.logger.warning("Readiness check failed: %s", exc)
        return ("backend unavailable", 503, {"Content-Type": "text/plain"})
    return ("ready", 200, {"Content-Type": "text/plain"})
