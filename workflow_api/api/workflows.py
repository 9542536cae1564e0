"""Workflow management REST endpoints (/workflows).

All business logic lives in ``WorkflowService``; these handlers only parse
the request, resolve the tenant and serialize the result. Errors are raised
as ``APIError`` and rendered by the app-level error handler.
"""
from __future__ import annotations
from flask import Blueprint, jsonify, url_for

from workflow_api.api.decorators import (
    enforce_api_token,
    get_workflow_service,
    json_body,
    parse_pagination,
    resolve_tenant_id,
)
from workflow_api.core.models import WorkflowRequest

bp = Blueprint("workflows", __name__)
bp.before_request(enforce_api_token)


@bp.route("/workflows", methods=["POST"])
def add_workflow():
    """Create a workflow; responds 201 with the stored workflow."""
    workflow_request = WorkflowRequest.from_dict(json_body())
    workflow = get_workflow_service().add_workflow(workflow_request, resolve_tenant_id())
    response = jsonify(workflow.to_dict())
    response.status_code = 201
    response.headers["Location"] = url_for("workflows.get_workflow", workflow_id=workflow.id)
    return response


@bp.route("/workflows", methods=["GET"])
def list_workflows():
    limit, offset, filter_str = parse_pagination()
    workflows = get_workflow_service().list_workflows(limit, offset, filter_str, resolve_tenant_id())
    return jsonify(workflows.to_dict()), 200


@bp.route("/workflows/<workflow_id>", methods=["GET"])
def get_workflow(workflow_id: str):
    return jsonify(get_workflow_service().get_workflow(workflow_id).to_dict()), 200


@bp.route("/workflows/<workflow_id>", methods=["PUT"])
def update_workflow(workflow_id: str):
    """Replace a workflow's details and template."""
    workflow_request = WorkflowRequest.from_dict(json_body())
    workflow = get_workflow_service().update_workflow(workflow_request, workflow_id, resolve_tenant_id())
    return jsonify(workflow.to_dict()), 200


@bp.route("/workflows/<workflow_id>", methods=["DELETE"])
def delete_workflow(workflow_id: str):
    get_workflow_service().remove_workflow(workflow_id)
    return "", 204
