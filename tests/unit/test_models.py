"""Tests for request parsing of workflow templates."""
import pytest

from workflow_api.core.errors import ValidationError
from workflow_api.core.models import OptionDetails, TemplateStep, WorkflowTemplate
from workflow_api.core.parameter_transformer import ParameterTransformer


def _option(entity="roles", values=("Admin",)):
    return {"entity": entity, "values": list(values)}


@pytest.mark.parametrize("values", [["Sales, EMEA"], ["a,b"], ["Admin", ""]])
def test_option_rejects_values_lost_on_storage(values):
    with pytest.raises(ValidationError) as exc:
        OptionDetails.from_dict(_option(values=values))
    assert exc.value.code == "WF-60001"


def test_option_accepts_missing_values():
    assert OptionDetails.from_dict({"entity": "claims"}) == OptionDetails("claims", [])


def test_step_requires_options():
    with pytest.raises(ValidationError, match="cannot be empty"):
        TemplateStep.from_dict({"step": 1})


def test_step_rejects_duplicate_entities():
    with pytest.raises(ValidationError, match="same entity"):
        TemplateStep.from_dict({"step": 1, "options": [_option(), _option(values=["Manager"])]})


@pytest.mark.parametrize("numbers", [[2, 1], [1, 1], [1, 3, 2]])
def test_template_rejects_unordered_or_repeated_steps(numbers):
    steps = [{"step": n, "options": [_option()]} for n in numbers]
    with pytest.raises(ValidationError, match="ascending"):
        WorkflowTemplate.from_dict({"name": "MultiStepApprovalTemplate", "steps": steps})


def test_parsed_template_survives_storage():
    template = WorkflowTemplate.from_dict({
        "name": "MultiStepApprovalTemplate",
        "steps": [
            {"step": 1, "options": [_option(values=["Employee", "Manager"]), _option("users", ["alice"])]},
            {"step": 3, "options": [_option("claims", [])]},
        ],
    })

    parameters = ParameterTransformer.to_parameters("wf-1", template.steps)

    assert ParameterTransformer.to_steps(parameters) == template.steps
