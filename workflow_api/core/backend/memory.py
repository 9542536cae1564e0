"""In-memory workflow management backend.

Keeps workflows, parameters and associations in process memory. Suitable for
single-process deployments, demos and tests. Reads return copies so callers
cannot mutate stored state.
"""
from __future__ import annotations
import logging
import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from ..models import Association, Operation, Parameter, Workflow, WorkflowEvent
from .base import WorkflowManagementBackend
from .exceptions import WorkflowClientError, WorkflowNotFoundError
from .filters import compile_filter

logger = logging.getLogger(__name__)

WORKFLOW_FILTER_ATTRIBUTES = {
    "name": lambda workflow: workflow.name,
    "engine": lambda workflow: workflow.engine_id,
    "template": lambda workflow: workflow.template_id,
}

ASSOCIATION_FILTER_ATTRIBUTES = {
    "associationName": lambda association: association.association_name,
    "operation": lambda association: association.event_id,
    "workflowName": lambda association: association.workflow_name,
}


def default_events() -> List[WorkflowEvent]:
    """One registered event per supported identity operation."""
    return [
        WorkflowEvent(
            event_id=operation.value,
            event_friendly_name=operation.value.replace("_", " ").title(),
            category="USER" if "USER" in operation.value else "ROLE",
        )
        for operation in Operation
    ]


class InMemoryWorkflowBackend(WorkflowManagementBackend):
    """Thread-safe dictionary store implementing the backend contract."""

    def __init__(self, events: Optional[Iterable[WorkflowEvent]] = None):
        self._lock = threading.RLock()
        self._workflows: Dict[str, Tuple[Workflow, int]] = {}
        self._parameters: Dict[str, List[Parameter]] = {}
        self._associations: Dict[int, Association] = {}
        self._next_association_id = 1
        self._events = {event.event_id: event for event in (events if events is not None else default_events())}

    # ─────────────────────────────────────────────────────────────────────────
    # Workflows
    # ─────────────────────────────────────────────────────────────────────────

    def add_workflow(self, workflow: Workflow, parameters: List[Parameter], tenant_id: int) -> None:
        with self._lock:
            self._workflows[workflow.workflow_id] = (replace(workflow), tenant_id)
            self._parameters[workflow.workflow_id] = [replace(p) for p in parameters]
        logger.debug("Stored workflow %s with %d parameters", workflow.workflow_id, len(parameters))

    def get_workflow(self, workflow_id: str) -> Optional[Workflow]:
        with self._lock:
            entry = self._workflows.get(workflow_id)
            return replace(entry[0]) if entry else None

    def get_workflow_parameters(self, workflow_id: str) -> Optional[List[Parameter]]:
        with self._lock:
            parameters = self._parameters.get(workflow_id)
            if parameters is None:
                return None
            return [replace(p) for p in parameters]

    def list_paginated_workflows(self, tenant_id: int, limit: int, offset: int,
                                 filter: Optional[str]) -> List[Workflow]:
        matches = self._matching_workflows(tenant_id, filter)
        return [replace(w) for w in matches[offset:offset + limit]]

    def get_workflows_count(self, tenant_id: int, filter: Optional[str]) -> int:
        return len(self._matching_workflows(tenant_id, filter))

    def remove_workflow(self, workflow_id: str) -> None:
        with self._lock:
            if workflow_id not in self._workflows:
                raise WorkflowNotFoundError(f"A workflow with ID: {workflow_id} doesn't exist.")
            del self._workflows[workflow_id]
            self._parameters.pop(workflow_id, None)
            orphaned = [key for key, a in self._associations.items() if a.workflow_id == workflow_id]
            for key in orphaned:
                del self._associations[key]
        logger.debug("Removed workflow %s and %d associations", workflow_id, len(orphaned))

    def _matching_workflows(self, tenant_id: int, filter: Optional[str]) -> List[Workflow]:
        predicate = compile_filter(filter, WORKFLOW_FILTER_ATTRIBUTES)
        with self._lock:
            return [w for w, tenant in self._workflows.values() if tenant == tenant_id and predicate(w)]

    # ─────────────────────────────────────────────────────────────────────────
    # Associations
    # ─────────────────────────────────────────────────────────────────────────

    def add_association(self, association_name: str, workflow_id: str, event_id: str,
                        condition: Optional[str]) -> None:
        with self._lock:
            self._require_workflow(workflow_id)
            self._require_event(event_id)
            association_id = self._next_association_id
            self._next_association_id += 1
            self._associations[association_id] = Association(
                association_id=str(association_id),
                association_name=association_name,
                event_id=event_id,
                workflow_id=workflow_id,
                condition=condition,
                enabled=True,
            )
        logger.debug("Stored association %s for workflow %s", association_id, workflow_id)

    def get_association(self, association_id: str) -> Optional[Association]:
        key = self._parse_association_id(association_id)
        with self._lock:
            association = self._associations.get(key) if key is not None else None
            return self._materialize(association) if association else None

    def list_paginated_associations(self, tenant_id: int, limit: int, offset: int,
                                    filter: Optional[str]) -> List[Association]:
        return self._matching_associations(tenant_id, filter)[offset:offset + limit]

    def get_associations_count(self, tenant_id: int, filter: Optional[str]) -> int:
        return len(self._matching_associations(tenant_id, filter))

    def update_association(self, association_id: str, association_name: Optional[str],
                           workflow_id: Optional[str], event_id: Optional[str],
                           condition: Optional[str], enabled: bool) -> None:
        key = self._parse_association_id(association_id)
        with self._lock:
            current = self._associations.get(key) if key is not None else None
            if current is None:
                raise WorkflowNotFoundError(f"A workflow association with ID: {association_id} doesn't exist.")
            if workflow_id is not None:
                self._require_workflow(workflow_id)
            if event_id is not None:
                self._require_event(event_id)
            self._associations[key] = replace(
                current,
                association_name=association_name if association_name is not None else current.association_name,
                workflow_id=workflow_id if workflow_id is not None else current.workflow_id,
                event_id=event_id if event_id is not None else current.event_id,
                condition=condition if condition is not None else current.condition,
                enabled=enabled,
            )

    def remove_association(self, association_id: int) -> None:
        with self._lock:
            if association_id not in self._associations:
                raise WorkflowNotFoundError(f"A workflow association with ID: {association_id} doesn't exist.")
            del self._associations[association_id]

    def _matching_associations(self, tenant_id: int, filter: Optional[str]) -> List[Association]:
        predicate = compile_filter(filter, ASSOCIATION_FILTER_ATTRIBUTES)
        with self._lock:
            associations = [
                self._materialize(a) for a in self._associations.values()
                if self._workflows.get(a.workflow_id, (None, None))[1] == tenant_id
            ]
        return [a for a in associations if predicate(a)]

    def _materialize(self, association: Association) -> Association:
        """Copy an association with the current name of its workflow."""
        entry = self._workflows.get(association.workflow_id)
        return replace(association, workflow_name=entry[0].name if entry else "")

    @staticmethod
    def _parse_association_id(association_id: str) -> Optional[int]:
        try:
            return int(association_id)
        except (TypeError, ValueError):
            return None

    # ─────────────────────────────────────────────────────────────────────────
    # Events
    # ─────────────────────────────────────────────────────────────────────────

    def get_event(self, event_id: str) -> Optional[WorkflowEvent]:
        event = self._events.get(event_id)
        return replace(event) if event else None

    def register_event(self, event: WorkflowEvent) -> None:
        with self._lock:
            self._events[event.event_id] = replace(event)

    def _require_workflow(self, workflow_id: str) -> None:
        if workflow_id not in self._workflows:
            raise WorkflowClientError(f"A workflow with ID: {workflow_id} doesn't exist.")

    def _require_event(self, event_id: str) -> None:
        if event_id not in self._events:
            raise WorkflowClientError(f"An event with ID: {event_id} doesn't exist.")
