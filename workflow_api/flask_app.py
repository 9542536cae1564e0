"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with the workflow service, blueprints and error
handlers.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, request
from werkzeug.middleware.proxy_fix import ProxyFix

from workflow_api.config import AppConfig, load_settings
from workflow_api.config.settings import BACKEND_REMOTE
from workflow_api.core.backend.base import WorkflowManagementBackend
from workflow_api.core.workflow_service import WorkflowService

API_BASE_PATH = "/api/server/v1"

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(cfg: Optional[AppConfig] = None,
               backend: Optional[WorkflowManagementBackend] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Configuration (defaults to load_settings())
        backend: Workflow backend (defaults to the one named by cfg.backend)
    """
    cfg = cfg or load_settings()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg
    app.config["MAX_CONTENT_LENGTH"] = cfg.max_content_length
    app.config["API_BASE_PATH"] = API_BASE_PATH
    app.json.sort_keys = False
    app.config["OPENAPI_SPEC_PATH"] = cfg.openapi_spec_path or str(
        Path(app.root_path).parent / "openapi" / "workflow_openapi.yaml"
    )

    if backend is None:
        backend = build_backend(cfg)
    app.extensions["workflow_service"] = WorkflowService(backend)

    # One reverse proxy (nginx) in front; only the last X-Forwarded-* hop is trusted
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)  # type: ignore

    # Register blueprints
    from workflow_api.api import associations, docs, errors, health, workflows

    app.register_blueprint(health.bp)
    app.register_blueprint(docs.bp)
    app.register_blueprint(workflows.bp, url_prefix=API_BASE_PATH)
    app.register_blueprint(associations.bp, url_prefix=API_BASE_PATH)

    # Register error handlers
    errors.register_error_handlers(app)

    @app.after_request
    def add_correlation_id(response):
        """Echo the correlation ID for tracing."""
        correlation_id = request.headers.get("X-Correlation-Id")
        if correlation_id:
            response.headers["X-Correlation-Id"] = correlation_id
        return response

    logger.info("Workflow API registered at %s (backend=%s)", API_BASE_PATH, type(backend).__name__)
    return app


def build_backend(cfg: AppConfig) -> WorkflowManagementBackend:
    """Instantiate the backend selected by configuration."""
    if cfg.backend == BACKEND_REMOTE:
        from workflow_api.core.backend.client import RemoteWorkflowBackend
        return RemoteWorkflowBackend(cfg.backend_url, token=cfg.backend_token or None,
                                     timeout=cfg.backend_timeout)

    from workflow_api.core.backend.memory import InMemoryWorkflowBackend
    return InMemoryWorkflowBackend()


# ─────────────────────────────────────────────────────────────────────────────
# Application Instance (for Gunicorn)
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.environ.get("PORT", "5000")))
