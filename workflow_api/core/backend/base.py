"""Abstract contract for workflow management backends.

The service layer owns no persistence; every read and write goes through an
implementation of ``WorkflowManagementBackend`` injected at startup.

Failures:
    - WorkflowClientError (and WorkflowNotFoundError): caller-caused
    - WorkflowError: anything else
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Association, Parameter, Workflow, WorkflowEvent


class WorkflowManagementBackend(ABC):
    """Storage for workflows, their parameters, associations and events."""

    # Workflow operations

    @abstractmethod
    def add_workflow(self, workflow: Workflow, parameters: List[Parameter], tenant_id: int) -> None:
        """
        Persist a workflow and replace its parameter set.

        Adding a workflow whose id already exists overwrites it.
        """
        pass

    @abstractmethod
    def get_workflow(self, workflow_id: str) -> Optional[Workflow]:
        """Return the workflow, or None if it does not exist."""
        pass

    @abstractmethod
    def get_workflow_parameters(self, workflow_id: str) -> Optional[List[Parameter]]:
        """Return the workflow's parameter records, or None if the workflow does not exist."""
        pass

    @abstractmethod
    def list_paginated_workflows(self, tenant_id: int, limit: int, offset: int,
                                 filter: Optional[str]) -> List[Workflow]:
        """
        List one page of the tenant's workflows.

        Raises:
            WorkflowClientError: If the filter cannot be parsed
        """
        pass

    @abstractmethod
    def get_workflows_count(self, tenant_id: int, filter: Optional[str]) -> int:
        """Count the tenant's workflows matching the filter, ignoring pagination."""
        pass

    @abstractmethod
    def remove_workflow(self, workflow_id: str) -> None:
        """
        Remove a workflow, its parameters and its associations.

        Raises:
            WorkflowNotFoundError: If the workflow does not exist
        """
        pass

    # Association operations

    @abstractmethod
    def add_association(self, association_name: str, workflow_id: str, event_id: str,
                        condition: Optional[str]) -> None:
        pass

    @abstractmethod
    def get_association(self, association_id: str) -> Optional[Association]:
        """Return the association, or None if it does not exist."""
        pass

    @abstractmethod
    def list_paginated_associations(self, tenant_id: int, limit: int, offset: int,
                                    filter: Optional[str]) -> List[Association]:
        pass

    @abstractmethod
    def get_associations_count(self, tenant_id: int, filter: Optional[str]) -> int:
        pass

    @abstractmethod
    def update_association(self, association_id: str, association_name: Optional[str],
                           workflow_id: Optional[str], event_id: Optional[str],
                           condition: Optional[str], enabled: bool) -> None:
        """
        Update an association. ``None`` arguments leave the stored value unchanged.

        Raises:
            WorkflowNotFoundError: If the association does not exist
            WorkflowClientError: If the new workflow or event does not exist
        """
        pass

    @abstractmethod
    def remove_association(self, association_id: int) -> None:
        pass

    # Events

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[WorkflowEvent]:
        """Return the registered event, or None if no such event is registered."""
        pass
