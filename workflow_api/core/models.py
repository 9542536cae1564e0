"""Workflow domain records and REST request/response representations.

Domain records (``Workflow``, ``Parameter``, ``Association``, ``WorkflowEvent``)
are what the backend stores. Request/response classes mirror the JSON shapes
of the ``/workflows`` and ``/workflow-associations`` resources (camelCase on
the wire, snake_case in Python).

Request parsing (``from_dict``) checks structure and types and raises
``ValidationError`` for malformed payloads; business rules (non-empty
template/engine, existing workflow, registered event) are enforced by
``WorkflowService``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import ErrorMessage, ValidationError

# Option values are stored joined by this separator
PARAMETER_VALUE_SEPARATOR = ","


class Operation(str, Enum):
    """Identity operations a workflow can be associated with."""
    ADD_USER = "ADD_USER"
    DELETE_USER = "DELETE_USER"
    UPDATE_ROLES_OF_USERS = "UPDATE_ROLES_OF_USERS"
    ADD_ROLE = "ADD_ROLE"
    DELETE_ROLE = "DELETE_ROLE"
    UPDATE_ROLE_NAME = "UPDATE_ROLE_NAME"
    UPDATE_USERS_OF_ROLE = "UPDATE_USERS_OF_ROLE"
    DELETE_USER_CLAIMS = "DELETE_USER_CLAIMS"
    UPDATE_USER_CLAIMS = "UPDATE_USER_CLAIMS"


# ─────────────────────────────────────────────────────────────────────────────
# Domain records (backend side)
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Workflow:
    workflow_id: str
    name: str
    description: Optional[str]
    template_id: str
    engine_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workflowId": self.workflow_id,
            "workflowName": self.name,
            "workflowDescription": self.description,
            "templateId": self.template_id,
            "workflowImplId": self.engine_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Workflow":
        return cls(
            workflow_id=data["workflowId"],
            name=data.get("workflowName", ""),
            description=data.get("workflowDescription"),
            template_id=data.get("templateId", ""),
            engine_id=data.get("workflowImplId", ""),
        )


@dataclass
class Parameter:
    """Flat key/value record holding one piece of workflow configuration."""
    workflow_id: str
    param_name: str
    param_value: str
    qualified_name: str
    holder: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workflowId": self.workflow_id,
            "paramName": self.param_name,
            "paramValue": self.param_value,
            "qName": self.qualified_name,
            "holder": self.holder,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Parameter":
        return cls(
            workflow_id=data.get("workflowId", ""),
            param_name=data.get("paramName", ""),
            param_value=data.get("paramValue", ""),
            qualified_name=data.get("qName", ""),
            holder=data.get("holder", ""),
        )


@dataclass
class Association:
    association_id: str
    association_name: str
    event_id: str
    workflow_id: str
    workflow_name: str = ""
    condition: Optional[str] = None
    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "associationId": self.association_id,
            "associationName": self.association_name,
            "eventId": self.event_id,
            "workflowId": self.workflow_id,
            "workflowName": self.workflow_name,
            "condition": self.condition,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Association":
        return cls(
            association_id=str(data["associationId"]),
            association_name=data.get("associationName", ""),
            event_id=data.get("eventId", ""),
            workflow_id=data.get("workflowId", ""),
            workflow_name=data.get("workflowName", ""),
            condition=data.get("condition"),
            enabled=bool(data.get("enabled", True)),
        )


@dataclass
class WorkflowEvent:
    """An event registered with the workflow engine."""
    event_id: str
    event_friendly_name: str = ""
    description: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkflowEvent":
        return cls(
            event_id=data["eventId"],
            event_friendly_name=data.get("eventFriendlyName", ""),
            description=data.get("description", ""),
            category=data.get("category", ""),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Request parsing helpers
# ─────────────────────────────────────────────────────────────────────────────

def _invalid(description: str) -> ValidationError:
    return ValidationError.from_message(ErrorMessage.ERROR_CODE_INVALID_INPUT, description)


def _require_object(value: Any, name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise _invalid(f"{name} must be an object")
    return value


def _require_str(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        raise _invalid(f"Property {key} cannot be null.")
    if not isinstance(value, str):
        raise _invalid(f"Property {key} must be a string.")
    return value


def _optional_str(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise _invalid(f"Property {key} must be a string.")
    return value


def _optional_bool(payload: Dict[str, Any], key: str) -> Optional[bool]:
    value = payload.get(key)
    if value is not None and not isinstance(value, bool):
        raise _invalid(f"Property {key} must be a boolean.")
    return value


def _parse_operation(value: Any) -> Operation:
    try:
        return Operation(value)
    except ValueError:
        raise _invalid(f"Unsupported operation: {value}")


# ─────────────────────────────────────────────────────────────────────────────
# Workflow representations
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class OptionDetails:
    entity: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"entity": self.entity, "values": list(self.values)}

    @classmethod
    def from_dict(cls, data: Any) -> "OptionDetails":
        data = _require_object(data, "option")
        values = data.get("values") or []
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise _invalid("Property values must be a list of strings.")
        for value in values:
            if not value:
                raise _invalid("Property values cannot contain empty strings.")
            if PARAMETER_VALUE_SEPARATOR in value:
                raise _invalid(f"Value '{value}' cannot contain '{PARAMETER_VALUE_SEPARATOR}'.")
        return cls(entity=_require_str(data, "entity"), values=values)


@dataclass
class TemplateStep:
    step: int
    options: List[OptionDetails] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"step": self.step, "options": [option.to_dict() for option in self.options]}

    @classmethod
    def from_dict(cls, data: Any) -> "TemplateStep":
        data = _require_object(data, "step")
        step = data.get("step")
        if isinstance(step, bool) or not isinstance(step, int):
            raise _invalid("Property step must be an integer.")
        options = data.get("options") or []
        if not isinstance(options, list):
            raise _invalid("Property options must be a list.")
        # A step is only persisted through its options
        if not options:
            raise _invalid(f"Property options of step {step} cannot be empty.")
        parsed = [OptionDetails.from_dict(o) for o in options]
        entities = [option.entity for option in parsed]
        if len(set(entities)) != len(entities):
            raise _invalid(f"Step {step} lists the same entity more than once.")
        return cls(step=step, options=parsed)


@dataclass
class WorkflowTemplate:
    name: str
    steps: List[TemplateStep] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "steps": [step.to_dict() for step in self.steps]}

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowTemplate":
        data = _require_object(data, "template")
        steps = data.get("steps") or []
        if not isinstance(steps, list):
            raise _invalid("Property steps must be a list.")
        parsed = [TemplateStep.from_dict(s) for s in steps]
        numbers = [step.step for step in parsed]
        if any(later <= earlier for earlier, later in zip(numbers, numbers[1:])):
            raise _invalid("Step numbers must be unique and in ascending order.")
        return cls(name=_optional_str(data, "name") or "", steps=parsed)


@dataclass
class WorkflowRequest:
    name: str
    engine: str
    template: WorkflowTemplate
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "WorkflowRequest":
        payload = _require_object(payload, "Request body")
        if payload.get("template") is None:
            raise _invalid("Property template cannot be null.")
        return cls(
            name=_require_str(payload, "name"),
            engine=_optional_str(payload, "engine") or "",
            template=WorkflowTemplate.from_dict(payload["template"]),
            description=_optional_str(payload, "description"),
        )


@dataclass
class WorkflowResponse:
    id: str
    name: str
    description: Optional[str]
    engine: str
    template: WorkflowTemplate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "engine": self.engine,
            "template": self.template.to_dict(),
        }


@dataclass
class WorkflowListItem:
    id: str
    name: str
    description: Optional[str]
    engine: str
    template: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "engine": self.engine,
            "template": self.template,
        }


@dataclass
class WorkflowListResponse:
    total_results: int
    start_index: int
    count: int
    workflows: List[WorkflowListItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalResults": self.total_results,
            "startIndex": self.start_index,
            "count": self.count,
            "workflows": [item.to_dict() for item in self.workflows],
        }


# ─────────────────────────────────────────────────────────────────────────────
# Association representations
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class WorkflowAssociationRequest:
    association_name: str
    operation: Operation
    workflow_id: str
    association_condition: Optional[str] = None
    is_enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "associationName": self.association_name,
            "operation": self.operation.value,
            "workflowId": self.workflow_id,
            "associationCondition": self.association_condition,
            "isEnabled": self.is_enabled,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "WorkflowAssociationRequest":
        payload = _require_object(payload, "Request body")
        is_enabled = _optional_bool(payload, "isEnabled")
        return cls(
            association_name=_require_str(payload, "associationName"),
            operation=_parse_operation(_require_str(payload, "operation")),
            workflow_id=_require_str(payload, "workflowId"),
            association_condition=_optional_str(payload, "associationCondition"),
            is_enabled=True if is_enabled is None else is_enabled,
        )


@dataclass
class WorkflowAssociationPatchRequest:
    """Partial update; ``None`` means the field was not supplied."""
    association_name: Optional[str] = None
    operation: Optional[Operation] = None
    workflow_id: Optional[str] = None
    association_condition: Optional[str] = None
    is_enabled: Optional[bool] = None

    @classmethod
    def from_dict(cls, payload: Any) -> "WorkflowAssociationPatchRequest":
        payload = _require_object(payload, "Request body")
        operation = _optional_str(payload, "operation")
        return cls(
            association_name=_optional_str(payload, "associationName"),
            operation=_parse_operation(operation) if operation is not None else None,
            workflow_id=_optional_str(payload, "workflowId"),
            association_condition=_optional_str(payload, "associationCondition"),
            is_enabled=_optional_bool(payload, "isEnabled"),
        )


@dataclass
class WorkflowAssociationResponse:
    id: str
    association_name: str
    operation: Operation
    workflow_name: str
    association_condition: Optional[str]
    is_enabled: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "associationName": self.association_name,
            "operation": self.operation.value,
            "workflowName": self.workflow_name,
            "associationCondition": self.association_condition,
            "isEnabled": self.is_enabled,
        }


@dataclass
class WorkflowAssociationListItem:
    id: str
    association_name: str
    operation: Operation
    workflow_name: str
    is_enabled: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "associationName": self.association_name,
            "operation": self.operation.value,
            "workflowName": self.workflow_name,
            "isEnabled": self.is_enabled,
        }


@dataclass
class WorkflowAssociationListResponse:
    total_results: int
    start_index: int
    count: int
    workflow_associations: List[WorkflowAssociationListItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalResults": self.total_results,
            "startIndex": self.start_index,
            "count": self.count,
            "workflowAssociations": [item.to_dict() for item in self.workflow_associations],
        }
