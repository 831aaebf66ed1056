"""Models for the inputs declared by a manual-dispatch trigger."""

from collections.abc import Sequence
from typing import Any, Literal, TypeAlias

from pydantic import Field, field_validator

from workflow_dispatcher.models.base import Model

InputType: TypeAlias = Literal["choice", "boolean", "string"]

KNOWN_INPUT_TYPES: frozenset[str] = frozenset({"choice", "boolean", "string"})


class Input(Model):
    """One declared parameter of a ``workflow_dispatch`` trigger.

    Fields missing from the manifest fall back to empty values, and any type
    tag other than ``choice`` or ``boolean`` is read as free text.
    """

    name: str = Field(..., description="Input key, also the dispatch payload key")
    description: str = Field(default="", description="Human readable hint")
    default: str = Field(default="", description="Pre-filled value")
    required: bool = Field(default=False, description="Value must be non-empty")
    type: InputType = Field(default="string", description="Declared input type")
    options: Sequence[str] = Field(
        default=(), description="Legal values, only used for choice inputs"
    )

    @field_validator("description", "default", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("required", mode="before")
    @classmethod
    def _missing_is_optional(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_text(cls, value: Any) -> str:
        if isinstance(value, str) and value in KNOWN_INPUT_TYPES:
            return value
        return "string"

    @field_validator("options", mode="before")
    @classmethod
    def _options_as_text(cls, value: Any) -> Sequence[str]:
        if not value:
            return ()
        if isinstance(value, str | int | float):
            return (str(value),)
        if not isinstance(value, list | tuple):
            raise ValueError("options must be a list")
        return tuple(str(option) for option in value)
