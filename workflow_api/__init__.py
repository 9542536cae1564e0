"""Workflow Management REST API package.

To use the Flask app:
    from workflow_api.flask_app import create_app

To use the service layer without Flask:
    from workflow_api.core.workflow_service import WorkflowService
    from workflow_api.core.backend.memory import InMemoryWorkflowBackend

    service = WorkflowService(InMemoryWorkflowBackend())
"""
# Note: flask_app is not imported by default so the core can be used
# without Flask installed
