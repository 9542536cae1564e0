"""Core Business Logic Module

Workflow and workflow-association management, independent of the HTTP
framework.

Module Structure:
    - backend/                 : Backend contract, exceptions, in-memory and HTTP backends
    - workflow_service.py      : WorkflowService facade (CRUD, pagination, error mapping)
    - parameter_transformer.py : Template steps ↔ flat parameter records
    - models.py                : Domain records and request/response representations
    - errors.py                : Error catalogue and APIError taxonomy

Usage Pattern:
    Modules are NOT auto-imported. Import explicitly when needed:
        from workflow_api.core.workflow_service import WorkflowService
        from workflow_api.core.errors import APIError, NotFoundError
        from workflow_api.core.parameter_transformer import ParameterTransformer
"""
