from workflow_api.core.models import OptionDetails, Parameter, TemplateStep
from workflow_api.core.parameter_transformer import (
    APPROVAL_STEPS,
    TEMPLATE,
    ParameterTransformer,
)


def _steps():
    return [
        TemplateStep(step=1, options=[
            OptionDetails(entity="roles", values=["Employee", "Manager"]),
            OptionDetails(entity="users", values=["alice"]),
        ]),
        TemplateStep(step=2, options=[OptionDetails(entity="claims", values=[])]),
    ]


def test_qualified_name_format():
    assert ParameterTransformer.qualified_name(1, "roles") == "step:1:roles"


def test_to_parameters_one_record_per_option():
    parameters = ParameterTransformer.to_parameters("wf-1", _steps())

    assert [p.qualified_name for p in parameters] == ["step:1:roles", "step:1:users", "step:2:claims"]
    assert parameters[0].param_value == "Employee,Manager"
    assert parameters[2].param_value == ""
    assert all(p.workflow_id == "wf-1" for p in parameters)
    assert all(p.param_name == APPROVAL_STEPS for p in parameters)
    assert all(p.holder == TEMPLATE for p in parameters)


def test_to_parameters_empty_steps():
    assert ParameterTransformer.to_parameters("wf-1", []) == []


def test_to_steps_restores_template():
    parameters = ParameterTransformer.to_parameters("wf-1", _steps())
    assert ParameterTransformer.to_steps(parameters) == _steps()


def test_to_steps_sorts_steps_and_keeps_option_order():
    parameters = [
        Parameter("wf-1", APPROVAL_STEPS, "bob", "step:3:users", TEMPLATE),
        Parameter("wf-1", APPROVAL_STEPS, "Admin", "step:1:roles", TEMPLATE),
        Parameter("wf-1", APPROVAL_STEPS, "carol", "step:1:users", TEMPLATE),
    ]

    steps = ParameterTransformer.to_steps(parameters)

    assert [s.step for s in steps] == [1, 3]
    assert [o.entity for o in steps[0].options] == ["roles", "users"]
    assert steps[1].options == [OptionDetails(entity="users", values=["bob"])]


def test_to_steps_ignores_non_template_holders():
    parameters = [
        Parameter("wf-1", "Engine", "x", "engine:timeout", "Engine"),
        Parameter("wf-1", APPROVAL_STEPS, "Admin", "step:1:roles", TEMPLATE),
    ]

    steps = ParameterTransformer.to_steps(parameters)

    assert len(steps) == 1
    assert steps[0].options[0].values == ["Admin"]


def test_to_steps_entity_may_contain_delimiter():
    parameters = [Parameter("wf-1", APPROVAL_STEPS, "v", "step:2:claims:http://wso2.org", TEMPLATE)]
    steps = ParameterTransformer.to_steps(parameters)
    assert steps[0].options[0].entity == "claims:http://wso2.org"
