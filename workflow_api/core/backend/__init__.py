"""Workflow management backends.

The service layer talks to persistence through the abstract
``WorkflowManagementBackend`` contract. Two implementations ship:

    - memory.py : InMemoryWorkflowBackend (default, single process)
    - client.py : RemoteWorkflowBackend (HTTP workflow management service)

Modules are NOT auto-imported here so that ``exceptions`` stays importable
from the error mapper without pulling in the models. Import explicitly:
    from workflow_api.core.backend.memory import InMemoryWorkflowBackend
    from workflow_api.core.backend.client import RemoteWorkflowBackend
"""
