"""Error catalogue and HTTP error envelope for the workflow API.

Every failure leaving the service layer is an ``APIError`` carrying an HTTP
status and an ``ErrorResponse`` body::

    {"code": "WF-60002", "message": "Workflow not found.",
     "description": "Unable to find a workflow with the ID: abc."}

Taxonomy:
    - ValidationError (400): malformed or missing input, detected locally
    - NotFoundError   (404): referenced workflow/association is absent
    - ClientFault     (400): backend rejected the request (caller error)
    - ServerFault     (500): unexpected backend failure
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .backend.exceptions import WorkflowNotFoundError

logger = logging.getLogger(__name__)


class ErrorMessage(Enum):
    """Stable error codes with a message and a description template."""

    # Client errors
    ERROR_CODE_INVALID_INPUT = (
        "WF-60001", "Invalid input.", "{}")
    ERROR_CODE_WORKFLOW_NOT_FOUND = (
        "WF-60002", "Workflow not found.", "Unable to find a workflow with the ID: {}.")
    ERROR_CODE_ASSOCIATION_NOT_FOUND = (
        "WF-60003", "Workflow association not found.",
        "Unable to find a workflow association with the ID: {}.")
    ERROR_CODE_CLIENT_ERROR_ADDING_WORKFLOW = (
        "WF-60004", "Unable to add the workflow.", "Invalid workflow details provided.")
    ERROR_CODE_CLIENT_ERROR_UPDATING_WORKFLOW = (
        "WF-60005", "Unable to update the workflow.",
        "Invalid details provided for the workflow with the ID: {}.")
    ERROR_CODE_CLIENT_ERROR_LISTING_WORKFLOWS = (
        "WF-60006", "Unable to list workflows.", "Invalid pagination or filter parameters.")
    ERROR_CODE_CLIENT_ERROR_ADDING_ASSOCIATION = (
        "WF-60007", "Unable to add the workflow association.",
        "Invalid workflow association details provided.")
    ERROR_CODE_CLIENT_ERROR_UPDATING_ASSOCIATION = (
        "WF-60008", "Unable to update the workflow association.",
        "Invalid details provided for the workflow association with the ID: {}.")
    ERROR_CODE_CLIENT_ERROR_LISTING_ASSOCIATIONS = (
        "WF-60009", "Unable to list workflow associations.",
        "Invalid pagination or filter parameters.")
    ERROR_CODE_UNAUTHORIZED = (
        "WF-60010", "Unauthorized request.", "{}")
    ERROR_CODE_RESOURCE_NOT_FOUND = (
        "WF-60011", "Resource not found.", "The requested resource does not exist.")
    ERROR_CODE_METHOD_NOT_ALLOWED = (
        "WF-60012", "Method not allowed.", "The method is not allowed for the requested URL.")
    ERROR_CODE_PAYLOAD_TOO_LARGE = (
        "WF-60013", "Payload too large.", "Request payload exceeds the maximum allowed size.")

    # Server errors
    ERROR_CODE_UNEXPECTED = (
        "WF-65000", "Unexpected server error.", "An unexpected error occurred.")
    ERROR_CODE_ERROR_ADDING_WORKFLOW = (
        "WF-65001", "Unable to add the workflow.", "Server encountered an error while adding the workflow.")
    ERROR_CODE_ERROR_UPDATING_WORKFLOW = (
        "WF-65002", "Unable to update the workflow.",
        "Server encountered an error while updating the workflow with the ID: {}.")
    ERROR_CODE_ERROR_RETRIEVING_WORKFLOW = (
        "WF-65003", "Unable to retrieve the workflow.",
        "Server encountered an error while retrieving the workflow with the ID: {}.")
    ERROR_CODE_ERROR_LISTING_WORKFLOWS = (
        "WF-65004", "Unable to list workflows.", "Server encountered an error while listing workflows.")
    ERROR_CODE_ERROR_REMOVING_WORKFLOW = (
        "WF-65005", "Unable to remove the workflow.",
        "Server encountered an error while removing the workflow with the ID: {}.")
    ERROR_CODE_ERROR_ADDING_ASSOCIATION = (
        "WF-65006", "Unable to add the workflow association.",
        "Server encountered an error while adding the workflow association.")
    ERROR_CODE_ERROR_RETRIEVING_ASSOCIATION = (
        "WF-65007", "Unable to retrieve the workflow association.",
        "Server encountered an error while retrieving the workflow association with the ID: {}.")
    ERROR_CODE_ERROR_LISTING_ASSOCIATIONS = (
        "WF-65008", "Unable to list workflow associations.",
        "Server encountered an error while listing workflow associations.")
    ERROR_CODE_ERROR_UPDATING_ASSOCIATION = (
        "WF-65009", "Unable to update the workflow association.",
        "Server encountered an error while updating the workflow association with the ID: {}.")
    ERROR_CODE_ERROR_REMOVING_ASSOCIATION = (
        "WF-65010", "Unable to remove the workflow association.",
        "Server encountered an error while removing the workflow association with the ID: {}.")

    def __init__(self, code: str, message: str, description: str):
        self.code = code
        self.message = message
        self.description = description


@dataclass
class ErrorResponse:
    """Uniform error body returned for every failed request."""
    code: str
    message: str
    description: str
    trace_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        body = {
            "code": self.code,
            "message": self.message,
            "description": self.description,
        }
        if self.trace_id:
            body["traceId"] = self.trace_id
        return body


class APIError(Exception):
    """Error with an HTTP status and an ``ErrorResponse`` body."""

    status = 500

    def __init__(self, error: ErrorResponse, status: Optional[int] = None):
        self.error = error
        if status is not None:
            self.status = status
        super().__init__(error.description)

    @property
    def code(self) -> str:
        return self.error.code

    def to_dict(self) -> dict[str, Any]:
        return self.error.to_dict()

    @classmethod
    def from_error(cls, error: ErrorMessage, data: Optional[str] = None) -> "APIError":
        """Build from a catalogue entry, interpolating ``data`` into the description."""
        return cls(ErrorResponse(error.code, error.message, include_data(error.description, data)))

    @classmethod
    def from_message(cls, error: ErrorMessage, description: str) -> "APIError":
        """Build from a catalogue entry with a caller-supplied description."""
        return cls(ErrorResponse(error.code, error.message, description))


class ValidationError(APIError):
    status = 400


class NotFoundError(APIError):
    status = 404


class ClientFault(APIError):
    status = 400


class ServerFault(APIError):
    status = 500


def include_data(template: str, data: Optional[str]) -> str:
    """Interpolate contextual data (e.g. an id) into a description template.

    Blank data interpolates the empty string so no placeholder leaks out.
    """
    if data is not None and str(data).strip():
        return template.replace("{}", str(data), 1)
    return template.replace("{}", "", 1)


def handle_client_error(error: ErrorMessage, data: Optional[str], exc: Exception) -> APIError:
    """Map a backend client failure to a 400 (or 404 for not-found) error.

    The backend's own message, when present, replaces the catalogue description.
    """
    error_cls = NotFoundError if isinstance(exc, WorkflowNotFoundError) else ClientFault
    message = str(exc)
    if message:
        logger.debug("Client error %s: %s", error.code, message)
        return error_cls.from_message(error, message)
    logger.debug("Client error %s", error.code, exc_info=exc)
    return error_cls.from_error(error, data)


def handle_server_error(error: ErrorMessage, data: Optional[str], exc: Exception) -> ServerFault:
    """Map an unexpected backend failure to a 500 error.

    The underlying message is logged with its traceback but only the catalogue
    description reaches the caller.
    """
    logger.error("Server error %s: %s", error.code, str(exc) or include_data(error.description, data),
                 exc_info=exc)
    return ServerFault.from_error(error, data)
