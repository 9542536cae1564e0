"""HTTP backend for a remote workflow management service.

Handles authentication headers, timeouts and mapping of HTTP failures onto
the backend exception hierarchy:

    404          -> WorkflowNotFoundError (lookups return None instead)
    other 4xx    -> WorkflowClientError
    5xx          -> WorkflowBackendAPIError
    network fail -> WorkflowError
    bad payload  -> WorkflowError

Caller-supplied ids are always sent as a single escaped path segment.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar
from urllib.parse import quote

import requests

from ..models import Association, Parameter, Workflow, WorkflowEvent
from .base import WorkflowManagementBackend
from .exceptions import (
    WorkflowBackendAPIError,
    WorkflowClientError,
    WorkflowError,
    WorkflowNotFoundError,
)

REQUEST_TIMEOUT = 5

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _segment(value: Any) -> str:
    """Escape an id for use as exactly one URL path segment."""
    return quote(str(value), safe="")


class RemoteWorkflowBackend(WorkflowManagementBackend):
    """Workflow backend calling a remote REST service.

    Usage:
        backend = RemoteWorkflowBackend("http://workflow-mgt:9763/api", token="...")
        backend.get_workflow("3f1c...")
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = REQUEST_TIMEOUT):
        """Initialize the remote backend.

        Args:
            base_url: Base URL of the workflow management service
            token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token = token

    # ─────────────────────────────────────────────────────────────────────────
    # Workflows
    # ─────────────────────────────────────────────────────────────────────────

    def add_workflow(self, workflow: Workflow, parameters: List[Parameter], tenant_id: int) -> None:
        self._send(requests.post, "/workflows", json={
            "tenantId": tenant_id,
            "workflow": workflow.to_dict(),
            "parameters": [p.to_dict() for p in parameters],
        })

    def get_workflow(self, workflow_id: str) -> Optional[Workflow]:
        path = f"/workflows/{_segment(workflow_id)}"
        data = self._get_optional(path)
        return self._decode(path, lambda: Workflow.from_dict(data)) if data is not None else None

    def get_workflow_parameters(self, workflow_id: str) -> Optional[List[Parameter]]:
        path = f"/workflows/{_segment(workflow_id)}/parameters"
        data = self._get_optional(path)
        if data is None:
            return None
        return self._decode(path, lambda: [Parameter.from_dict(p) for p in data])

    def list_paginated_workflows(self, tenant_id: int, limit: int, offset: int,
                                 filter: Optional[str]) -> List[Workflow]:
        data = self._get_json("/workflows", params=self._page_params(tenant_id, limit, offset, filter))
        return self._decode("/workflows", lambda: [Workflow.from_dict(w) for w in data])

    def get_workflows_count(self, tenant_id: int, filter: Optional[str]) -> int:
        return self._count("/workflows/count", tenant_id, filter)

    def remove_workflow(self, workflow_id: str) -> None:
        self._send(requests.delete, f"/workflows/{_segment(workflow_id)}")

    # ─────────────────────────────────────────────────────────────────────────
    # Associations
    # ─────────────────────────────────────────────────────────────────────────

    def add_association(self, association_name: str, workflow_id: str, event_id: str,
                        condition: Optional[str]) -> None:
        self._send(requests.post, "/associations", json={
            "associationName": association_name,
            "workflowId": workflow_id,
            "eventId": event_id,
            "condition": condition,
        })

    def get_association(self, association_id: str) -> Optional[Association]:
        path = f"/associations/{_segment(association_id)}"
        data = self._get_optional(path)
        return self._decode(path, lambda: Association.from_dict(data)) if data is not None else None

    def list_paginated_associations(self, tenant_id: int, limit: int, offset: int,
                                    filter: Optional[str]) -> List[Association]:
        data = self._get_json("/associations", params=self._page_params(tenant_id, limit, offset, filter))
        return self._decode("/associations", lambda: [Association.from_dict(a) for a in data])

    def get_associations_count(self, tenant_id: int, filter: Optional[str]) -> int:
        return self._count("/associations/count", tenant_id, filter)

    def update_association(self, association_id: str, association_name: Optional[str],
                           workflow_id: Optional[str], event_id: Optional[str],
                           condition: Optional[str], enabled: bool) -> None:
        payload = {
            "associationName": association_name,
            "workflowId": workflow_id,
            "eventId": event_id,
            "condition": condition,
            "enabled": enabled,
        }
        # Absent keys mean "unchanged" on the remote side
        self._send(requests.patch, f"/associations/{_segment(association_id)}",
                   json={key: value for key, value in payload.items() if value is not None})

    def remove_association(self, association_id: int) -> None:
        self._send(requests.delete, f"/associations/{_segment(association_id)}")

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def get_event(self, event_id: str) -> Optional[WorkflowEvent]:
        path = f"/events/{_segment(event_id)}"
        data = self._get_optional(path)
        return self._decode(path, lambda: WorkflowEvent.from_dict(data)) if data is not None else None

    # ─────────────────────────────────────────────────────────────────────────
    # HTTP helpers
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _page_params(tenant_id: int, limit: Optional[int] = None, offset: Optional[int] = None,
                     filter: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"tenantId": tenant_id}
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        if filter:
            params["filter"] = filter
        return params

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _count(self, path: str, tenant_id: int, filter: Optional[str]) -> int:
        data = self._get_json(path, params=self._page_params(tenant_id, filter=filter))
        return self._decode(path, lambda: int(data["count"]))

    def _get_json(self, path: str, **kwargs) -> Any:
        resp = self._send(requests.get, path, **kwargs)
        return self._decode(path, resp.json)

    def _get_optional(self, path: str) -> Optional[Any]:
        """GET a resource, returning None when the service answers 404."""
        try:
            return self._get_json(path)
        except WorkflowNotFoundError:
            return None

    @staticmethod
    def _decode(path: str, build: Callable[[], T]) -> T:
        """Run a payload parser, turning shape errors into WorkflowError.

        Raises:
            WorkflowError: If the service answered with an unexpected payload
        """
        try:
            return build()
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise WorkflowError(f"Malformed response from workflow management service ({path}): {exc!r}") from exc

    def _send(self, method, path: str, **kwargs) -> requests.Response:
        """Execute a request against the service.

        Args:
            method: requests function (requests.get, requests.post, ...)
            path: API endpoint path with ids already escaped (e.g., "/workflows/abc")
            **kwargs: Additional arguments for the requests call

        Returns:
            Response object

        Raises:
            WorkflowError: On HTTP or network failure
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", getattr(method, "__name__", "request").upper(), url)
        try:
            resp = method(url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise WorkflowError(f"Workflow management service unreachable: {exc}") from exc
        self._handle_error(resp)
        return resp

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Args:
            resp: Response object to check

        Raises:
            WorkflowNotFoundError: On 404
            WorkflowClientError: On other 4xx
            WorkflowBackendAPIError: On 5xx
        """
        if resp.status_code < 400:
            return
        message = self._error_message(resp)
        if resp.status_code == 404:
            raise WorkflowNotFoundError(message)
        if resp.status_code < 500:
            raise WorkflowClientError(message)
        raise WorkflowBackendAPIError(resp.status_code, message, resp.url)

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text
        if isinstance(body, dict):
            return body.get("description") or body.get("message") or resp.text
        return resp.text
