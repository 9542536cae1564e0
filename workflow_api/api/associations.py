"""Workflow association REST endpoints (/workflow-associations)."""
from __future__ import annotations
from flask import Blueprint, jsonify

from workflow_api.api.decorators import (
    enforce_api_token,
    get_workflow_service,
    json_body,
    parse_pagination,
    resolve_tenant_id,
)
from workflow_api.core.models import WorkflowAssociationPatchRequest, WorkflowAssociationRequest

bp = Blueprint("associations", __name__)
bp.before_request(enforce_api_token)


@bp.route("/workflow-associations", methods=["POST"])
def add_association():
    """Associate a workflow with an operation; echoes the request with 201."""
    association_request = WorkflowAssociationRequest.from_dict(json_body())
    association = get_workflow_service().add_association(association_request)
    return jsonify(association.to_dict()), 201


@bp.route("/workflow-associations", methods=["GET"])
def list_associations():
    limit, offset, filter_str = parse_pagination()
    associations = get_workflow_service().list_associations(limit, offset, filter_str, resolve_tenant_id())
    return jsonify(associations.to_dict()), 200


@bp.route("/workflow-associations/<association_id>", methods=["GET"])
def get_association(association_id: str):
    return jsonify(get_workflow_service().get_association(association_id).to_dict()), 200


@bp.route("/workflow-associations/<association_id>", methods=["PATCH"])
def update_association(association_id: str):
    """Partially update an association (unset fields stay unchanged)."""
    patch = WorkflowAssociationPatchRequest.from_dict(json_body())
    association = get_workflow_service().update_association(association_id, patch)
    return jsonify(association.to_dict()), 200


@bp.route("/workflow-associations/<association_id>", methods=["DELETE"])
def delete_association(association_id: str):
    get_workflow_service().remove_association(association_id)
    return "", 204
