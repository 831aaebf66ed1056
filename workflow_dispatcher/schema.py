"""Form schema derived from the declared dispatch inputs."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal, TypeAlias

from workflow_dispatcher.fields import field_for
from workflow_dispatcher.models.inputs import Input

FormValue: TypeAlias = str | bool


@dataclass(frozen=True, kw_only=True)
class ValidationRule:
    """Constraint on a single form value."""

    required: Literal[True] = True


@dataclass(frozen=True, kw_only=True)
class FormSchema:
    """Initial values and validation rules of a dispatch form."""

    initial_values: Mapping[str, FormValue]
    validation_rules: Mapping[str, ValidationRule]


def build_initial_values(inputs: Sequence[Input]) -> Mapping[str, FormValue]:
    """Map every input name to the default of its form field."""
    return {input.name: field_for(input).default for input in inputs}


def build_validation_rules(inputs: Sequence[Input]) -> Mapping[str, ValidationRule]:
    """Map required input names to their rule.

    Inputs that are not required get no entry; a missing key means the value
    is unconstrained.
    """
    return {input.name: ValidationRule() for input in inputs if input.required}


def build_form_schema(inputs: Sequence[Input]) -> FormSchema:
    """Derive the complete form schema from the inputs."""
    return FormSchema(
        initial_values=build_initial_values(inputs),
        validation_rules=build_validation_rules(inputs),
    )


def field_error(inputs: Sequence[Input], name: str, value: FormValue | None) -> str:
    """Return the inline error for a field value, empty when valid."""
    for input in inputs:
        if input.name == name:
            if input.required and not value:
                return f"{name} is required"
            break
    return ""
