"""Workflow Service Layer — workflow and association management.

Single entry point used by the REST blueprints for every workflow and
workflow-association operation. It validates input, flattens workflow
templates into backend parameters (and back), applies default pagination and
translates backend failures into ``APIError`` envelopes.

Architecture:
    /workflows              ──┐
                              ├──> WorkflowService ──> WorkflowManagementBackend
    /workflow-associations  ──┘

Error mapping:
    - local input problems          -> ValidationError (400)
    - missing workflow/association   -> NotFoundError (404)
    - backend WorkflowClientError    -> ClientFault (400)
    - backend WorkflowError          -> ServerFault (500)
"""
from __future__ import annotations
import logging
import uuid
from typing import List, Optional

from .backend.base import WorkflowManagementBackend
from .backend.exceptions import WorkflowClientError, WorkflowError
from .errors import (
    ErrorMessage,
    NotFoundError,
    ValidationError,
    handle_client_error,
    handle_server_error,
)
from .models import (
    Association,
    Operation,
    Parameter,
    Workflow,
    WorkflowAssociationListItem,
    WorkflowAssociationListResponse,
    WorkflowAssociationPatchRequest,
    WorkflowAssociationRequest,
    WorkflowAssociationResponse,
    WorkflowListItem,
    WorkflowListResponse,
    WorkflowRequest,
    WorkflowResponse,
    WorkflowTemplate,
)
from .parameter_transformer import ParameterTransformer

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0

logger = logging.getLogger(__name__)


class WorkflowService:
    """Facade over the workflow management backend."""

    def __init__(self, backend: WorkflowManagementBackend):
        """Initialize workflow service.

        Args:
            backend: Workflow management backend holding all state
        """
        self.backend = backend

    # ─────────────────────────────────────────────────────────────────────────
    # Workflows
    # ─────────────────────────────────────────────────────────────────────────

    def add_workflow(self, request: WorkflowRequest, tenant_id: int) -> WorkflowResponse:
        """Create a workflow with a generated id.

        Returns:
            The stored workflow, read back from the backend

        Raises:
            ValidationError: If the template name or engine is empty
        """
        workflow_id = str(uuid.uuid4())
        try:
            self._save_workflow(request, workflow_id, tenant_id)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_CLIENT_ERROR_ADDING_WORKFLOW, None, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_ADDING_WORKFLOW, None, exc)
        logger.info("Workflow %s added (tenant=%s)", workflow_id, tenant_id)
        return self.get_workflow(workflow_id)

    def update_workflow(self, request: WorkflowRequest, workflow_id: str, tenant_id: int) -> WorkflowResponse:
        """Replace an existing workflow and its template configuration.

        Raises:
            NotFoundError: If no workflow exists for the id
            ValidationError: If the template name or engine is empty
        """
        try:
            if self.backend.get_workflow(workflow_id) is None:
                raise NotFoundError.from_error(ErrorMessage.ERROR_CODE_WORKFLOW_NOT_FOUND, workflow_id)
            self._save_workflow(request, workflow_id, tenant_id)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_CLIENT_ERROR_UPDATING_WORKFLOW, workflow_id, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_UPDATING_WORKFLOW, workflow_id, exc)
        logger.info("Workflow %s updated (tenant=%s)", workflow_id, tenant_id)
        return self.get_workflow(workflow_id)

    def get_workflow(self, workflow_id: str) -> WorkflowResponse:
        """Return a workflow with its template steps rebuilt from parameters.

        Raises:
            NotFoundError: If the workflow or its parameters are absent
        """
        try:
            workflow = self.backend.get_workflow(workflow_id)
            parameters = self.backend.get_workflow_parameters(workflow_id)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_WORKFLOW_NOT_FOUND, workflow_id, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_RETRIEVING_WORKFLOW, workflow_id, exc)

        if workflow is None or parameters is None:
            raise NotFoundError.from_error(ErrorMessage.ERROR_CODE_WORKFLOW_NOT_FOUND, workflow_id)
        return self._workflow_details(workflow, parameters)

    def list_workflows(self, limit: Optional[int], offset: Optional[int], filter: Optional[str],
                       tenant_id: int) -> WorkflowListResponse:
        """List one page of workflow summaries.

        When either limit or offset is missing both fall back to the defaults.
        ``totalResults`` is counted separately and ignores pagination.
        """
        if limit is None or offset is None:
            limit, offset = DEFAULT_LIMIT, DEFAULT_OFFSET
        try:
            workflows = self.backend.list_paginated_workflows(tenant_id, limit, offset, filter)
            total = self.backend.get_workflows_count(tenant_id, filter)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_CLIENT_ERROR_LISTING_WORKFLOWS, None, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_LISTING_WORKFLOWS, None, exc)

        items = [self._workflow_summary(w) for w in workflows]
        return WorkflowListResponse(
            total_results=total,
            start_index=offset + 1,
            count=len(items),
            workflows=items,
        )

    def remove_workflow(self, workflow_id: str) -> None:
        """Remove a workflow. Existence is left to the backend to report."""
        try:
            self.backend.remove_workflow(workflow_id)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_WORKFLOW_NOT_FOUND, workflow_id, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_REMOVING_WORKFLOW, workflow_id, exc)
        logger.info("Workflow %s removed", workflow_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Associations
    # ─────────────────────────────────────────────────────────────────────────

    def add_association(self, request: WorkflowAssociationRequest) -> WorkflowAssociationRequest:
        """Associate a workflow with an operation and echo the request back.

        Raises:
            ValidationError: If the workflow or the operation's event does not exist
        """
        error = ErrorMessage.ERROR_CODE_CLIENT_ERROR_ADDING_ASSOCIATION
        try:
            workflow = self.backend.get_workflow(request.workflow_id)
            event = self.backend.get_event(request.operation.value)
            if workflow is None:
                raise ValidationError.from_message(
                    error, f"A workflow with ID: {request.workflow_id} doesn't exist.")
            if event is None:
                raise ValidationError.from_message(
                    error, f"An event with ID: {request.operation.value} doesn't exist.")
            self.backend.add_association(request.association_name, request.workflow_id,
                                         request.operation.value, request.association_condition)
        except WorkflowClientError as exc:
            raise handle_client_error(error, None, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_ADDING_ASSOCIATION, None, exc)
        logger.info("Association '%s' added for workflow %s on %s",
                    request.association_name, request.workflow_id, request.operation.value)
        return request

    def get_association(self, association_id: str) -> WorkflowAssociationResponse:
        """Return one association.

        Raises:
            NotFoundError: If the association does not exist
        """
        try:
            association = self.backend.get_association(association_id)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_ASSOCIATION_NOT_FOUND, association_id, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_RETRIEVING_ASSOCIATION, association_id, exc)

        if association is None:
            raise NotFoundError.from_error(ErrorMessage.ERROR_CODE_ASSOCIATION_NOT_FOUND, association_id)
        return self._association_details(association)

    def list_associations(self, limit: Optional[int], offset: Optional[int], filter: Optional[str],
                          tenant_id: int) -> WorkflowAssociationListResponse:
        """List one page of association summaries (same defaults as workflows)."""
        if limit is None or offset is None:
            limit, offset = DEFAULT_LIMIT, DEFAULT_OFFSET
        try:
            associations = self.backend.list_paginated_associations(tenant_id, limit, offset, filter)
            total = self.backend.get_associations_count(tenant_id, filter)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_CLIENT_ERROR_LISTING_ASSOCIATIONS, None, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_LISTING_ASSOCIATIONS, None, exc)

        items = [self._association_summary(a) for a in associations]
        return WorkflowAssociationListResponse(
            total_results=total,
            start_index=offset + 1,
            count=len(items),
            workflow_associations=items,
        )

    def remove_association(self, association_id: str) -> None:
        """Remove an association after checking that it exists.

        Raises:
            NotFoundError: If the association does not exist (nothing is deleted)
        """
        try:
            if self.backend.get_association(association_id) is None:
                raise NotFoundError.from_error(ErrorMessage.ERROR_CODE_ASSOCIATION_NOT_FOUND, association_id)
            try:
                numeric_id = int(association_id)
            except ValueError:
                raise NotFoundError.from_error(ErrorMessage.ERROR_CODE_ASSOCIATION_NOT_FOUND, association_id)
            self.backend.remove_association(numeric_id)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_ASSOCIATION_NOT_FOUND, association_id, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_REMOVING_ASSOCIATION, association_id, exc)
        logger.info("Association %s removed", association_id)

    def update_association(self, association_id: str,
                           patch: WorkflowAssociationPatchRequest) -> WorkflowAssociationResponse:
        """Partially update an association.

        A missing ``isEnabled`` keeps the stored flag; a missing ``operation``
        is forwarded as absent and left to the backend.

        Raises:
            NotFoundError: If ``isEnabled`` is missing and the association does not exist
        """
        try:
            if patch.is_enabled is None:
                current = self.backend.get_association(association_id)
                if current is None:
                    raise NotFoundError.from_error(ErrorMessage.ERROR_CODE_ASSOCIATION_NOT_FOUND, association_id)
                enabled = current.enabled
            else:
                enabled = patch.is_enabled

            event_id = patch.operation.value if patch.operation is not None else None
            self.backend.update_association(association_id, patch.association_name, patch.workflow_id,
                                            event_id, patch.association_condition, enabled)
        except WorkflowClientError as exc:
            raise handle_client_error(ErrorMessage.ERROR_CODE_CLIENT_ERROR_UPDATING_ASSOCIATION,
                                      association_id, exc)
        except WorkflowError as exc:
            raise handle_server_error(ErrorMessage.ERROR_CODE_ERROR_UPDATING_ASSOCIATION, association_id, exc)
        logger.info("Association %s updated", association_id)
        return self.get_association(association_id)

    # ─────────────────────────────────────────────────────────────────────────
    # Mapping helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _save_workflow(self, request: WorkflowRequest, workflow_id: str, tenant_id: int) -> None:
        workflow = self._create_workflow(request, workflow_id)
        parameters = ParameterTransformer.to_parameters(workflow_id, request.template.steps)
        self.backend.add_workflow(workflow, parameters, tenant_id)

    @staticmethod
    def _create_workflow(request: WorkflowRequest, workflow_id: str) -> Workflow:
        template_id = request.template.name if request.template else ""
        if not template_id:
            raise ValidationError.from_message(ErrorMessage.ERROR_CODE_INVALID_INPUT, "Template ID can't be empty")
        if not request.engine:
            raise ValidationError.from_message(ErrorMessage.ERROR_CODE_INVALID_INPUT,
                                               "Workflow engine ID can't be empty")
        return Workflow(
            workflow_id=workflow_id,
            name=request.name,
            description=request.description,
            template_id=template_id,
            engine_id=request.engine,
        )

    @staticmethod
    def _workflow_details(workflow: Workflow, parameters: List[Parameter]) -> WorkflowResponse:
        return WorkflowResponse(
            id=workflow.workflow_id,
            name=workflow.name,
            description=workflow.description,
            engine=workflow.engine_id,
            template=WorkflowTemplate(
                name=workflow.template_id,
                steps=ParameterTransformer.to_steps(parameters),
            ),
        )

    @staticmethod
    def _workflow_summary(workflow: Workflow) -> WorkflowListItem:
        return WorkflowListItem(
            id=workflow.workflow_id,
            name=workflow.name,
            description=workflow.description,
            engine=workflow.engine_id,
            template=workflow.template_id,
        )

    @staticmethod
    def _association_details(association: Association) -> WorkflowAssociationResponse:
        return WorkflowAssociationResponse(
            id=association.association_id,
            association_name=association.association_name,
            operation=Operation(association.event_id),
            workflow_name=association.workflow_name,
            association_condition=association.condition,
            is_enabled=association.enabled,
        )

    @staticmethod
    def _association_summary(association: Association) -> WorkflowAssociationListItem:
        return WorkflowAssociationListItem(
            id=association.association_id,
            association_name=association.association_name,
            operation=Operation(association.event_id),
            workflow_name=association.workflow_name,
            is_enabled=association.enabled,
        )
