"""Workflow template ↔ parameter record transformations.

The backend stores a workflow's approval configuration as flat parameter
records. Each (step, option) pair becomes one record:

    qualified_name = "step:<n>:<entity>"
    param_value    = values joined by ","
    holder         = "Template"

Usage:
    # Template steps → parameters
    parameters = ParameterTransformer.to_parameters(workflow_id, template.steps)

    # Parameters → template steps
    steps = ParameterTransformer.to_steps(parameters)
"""
from __future__ import annotations
from typing import Dict, Iterable, List

from .models import PARAMETER_VALUE_SEPARATOR, OptionDetails, Parameter, TemplateStep

APPROVAL_STEPS = "ApprovalSteps"
APPROVAL_STEP = "step"
STEP_NAME_DELIMITER = ":"
TEMPLATE = "Template"


class ParameterTransformer:
    """Bidirectional transformer for template steps and parameter records."""

    @staticmethod
    def qualified_name(step: int, entity: str) -> str:
        """Build the qualified name of one step option.

        Example:
            >>> ParameterTransformer.qualified_name(1, "roles")
            'step:1:roles'
        """
        return f"{APPROVAL_STEP}{STEP_NAME_DELIMITER}{step}{STEP_NAME_DELIMITER}{entity}"

    @staticmethod
    def to_parameters(workflow_id: str, steps: Iterable[TemplateStep]) -> List[Parameter]:
        """Flatten template steps into parameter records.

        Args:
            workflow_id: Workflow the parameters belong to
            steps: Template steps, each holding entity/values options

        Returns:
            One Template parameter per (step, option) pair, in input order
        """
        parameters = []
        for step in steps:
            for option in step.options:
                parameters.append(Parameter(
                    workflow_id=workflow_id,
                    param_name=APPROVAL_STEPS,
                    param_value=PARAMETER_VALUE_SEPARATOR.join(option.values),
                    qualified_name=ParameterTransformer.qualified_name(step.step, option.entity),
                    holder=TEMPLATE,
                ))
        return parameters

    @staticmethod
    def to_steps(parameters: Iterable[Parameter]) -> List[TemplateStep]:
        """Rebuild template steps from parameter records.

        Records held by anything other than the template are ignored. Options
        keep their record order within a step; steps are sorted by number.

        Args:
            parameters: Parameter records of one workflow

        Returns:
            Template steps with their options
        """
        steps: Dict[int, TemplateStep] = {}
        for parameter in parameters:
            if parameter.holder != TEMPLATE:
                continue
            _, step_number, entity = parameter.qualified_name.split(STEP_NAME_DELIMITER, 2)
            step = steps.setdefault(int(step_number), TemplateStep(step=int(step_number)))
            values = parameter.param_value.split(PARAMETER_VALUE_SEPARATOR) if parameter.param_value else []
            step.options.append(OptionDetails(entity=entity, values=values))
        return [steps[number] for number in sorted(steps)]
