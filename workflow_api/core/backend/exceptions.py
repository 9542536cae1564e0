"""Workflow backend exceptions for error handling."""


class WorkflowError(Exception):
    """Base exception for backend failures (server side)."""
    pass


class WorkflowClientError(WorkflowError):
    """Backend rejected the request because of caller input."""
    pass


class WorkflowNotFoundError(WorkflowClientError):
    """Referenced workflow or association does not exist."""
    pass


class WorkflowBackendAPIError(WorkflowError):
    """HTTP error from a remote workflow management service.
    
    Attributes:
        status_code: HTTP status code
        message: Error message from response
        endpoint: API endpoint that failed
    """
    
    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")
