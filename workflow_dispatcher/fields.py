"""Mapping of declared input types to form field presentation."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeAlias

from workflow_dispatcher.models.inputs import Input


@dataclass(frozen=True, kw_only=True)
class ChoiceField:
    """Dropdown offering the declared options."""

    name: str
    title: str
    options: Sequence[str]
    default: str


@dataclass(frozen=True, kw_only=True)
class BooleanField:
    """Checkbox with a boolean default."""

    name: str
    title: str
    default: bool


@dataclass(frozen=True, kw_only=True)
class TextField:
    """Free text field."""

    name: str
    title: str
    default: str


FieldSpec: TypeAlias = ChoiceField | BooleanField | TextField


def field_for(input: Input) -> FieldSpec:
    """Return the form field presenting an input.

    Only the literal default ``"true"`` checks a boolean field; ``"True"`` or
    any other text leaves it unchecked. A choice input without options gives a
    dropdown with nothing to select.
    """
    if input.type == "choice":
        return ChoiceField(
            name=input.name,
            title=input.name,
            options=tuple(input.options),
            default=input.default,
        )
    if input.type == "boolean":
        return BooleanField(
            name=input.name, title=input.name, default=input.default == "true"
        )
    return TextField(name=input.name, title=input.name, default=input.default)


def fields_for(inputs: Sequence[Input]) -> Sequence[FieldSpec]:
    """Return the form fields for inputs, in declaration order."""
    return [field_for(input) for input in inputs]
