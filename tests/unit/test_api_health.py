"""Tests for health check endpoints."""
from unittest.mock import MagicMock

import pytest
from flask import Flask

from workflow_api.api.health import bp as health_bp
from workflow_api.config import AppConfig
from workflow_api.core.backend.exceptions import WorkflowError
from workflow_api.core.workflow_service import WorkflowService


@pytest.fixture()
def backend():
    mock = MagicMock()
    mock.get_workflows_count.return_value = 0
    return mock


@pytest.fixture()
def client(backend):
    app = Flask(__name__)
    app.config["APP_CONFIG"] = AppConfig(default_tenant_id=5)
    app.extensions["workflow_service"] = WorkflowService(backend)
    app.register_blueprint(health_bp)
    with app.test_client() as client:
        yield client


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.data == b"ok"
    assert response.content_type.startswith("text/plain")


def test_readiness_check(client, backend):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.data == b"ready"
    backend.get_workflows_count.assert_called_once_with(5, None)


def test_readiness_check_backend_down(client, backend):
    backend.get_workflows_count.side_effect = WorkflowError("unreachable")
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.content_type.startswith("text/plain")
