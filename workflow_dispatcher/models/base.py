"""Base model configuration for workflow data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen base model shared by manifest and backend records."""

    model_config = ConfigDict(frozen=True)
