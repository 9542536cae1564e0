"""Pytest shared fixtures for the workflow API tests."""
import os
import pathlib
import sys

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Configure test environment BEFORE any app imports (flask_app builds an app at import)
os.environ.setdefault("WORKFLOW_BACKEND", "memory")
os.environ.pop("WORKFLOW_API_TOKEN", None)

import pytest

from workflow_api.config import AppConfig
from workflow_api.core.backend.memory import InMemoryWorkflowBackend
from workflow_api.core.workflow_service import WorkflowService
from workflow_api.flask_app import API_BASE_PATH, create_app


def workflow_payload(name="User Approval Workflow", engine="WorkflowEngine",
                     template="MultiStepApprovalTemplate", steps=None, description="Approve new users"):
    """Build a POST /workflows body."""
    if steps is None:
        steps = [
            {"step": 1, "options": [{"entity": "roles", "values": ["Employee", "Manager"]}]},
            {"step": 2, "options": [{"entity": "users", "values": ["alice"]}]},
        ]
    return {
        "name": name,
        "description": description,
        "engine": engine,
        "template": {"name": template, "steps": steps},
    }


def association_payload(workflow_id, name="User Registration Workflow Association",
                        operation="ADD_USER", **extra):
    """Build a POST /workflow-associations body."""
    payload = {"associationName": name, "operation": operation, "workflowId": workflow_id}
    payload.update(extra)
    return payload


@pytest.fixture()
def backend():
    return InMemoryWorkflowBackend()


@pytest.fixture()
def service(backend):
    return WorkflowService(backend)


@pytest.fixture()
def app_config():
    return AppConfig()


@pytest.fixture()
def app(app_config, backend):
    flask_app = create_app(app_config, backend=backend)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture()
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def api_path():
    """Prefix a resource path with the API base path."""
    def _build(path: str) -> str:
        return f"{API_BASE_PATH}{path}"
    return _build


@pytest.fixture(name="workflow_payload")
def workflow_payload_fixture():
    return workflow_payload


@pytest.fixture(name="association_payload")
def association_payload_fixture():
    return association_payload
