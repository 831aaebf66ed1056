"""Pydantic models for GitHub REST API responses."""

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel

from workflow_dispatcher.models.workflow import Workflow


class ContentResponse(BaseModel):
    """Response from the repository contents API for a single file."""

    type: Literal["file", "dir", "symlink", "submodule"]
    path: str
    content: str = ""
    encoding: str | None = None


class WorkflowsResponse(BaseModel):
    """Response from the list repository workflows API."""

    total_count: int
    workflows: Sequence[Workflow]


class RepositoryResponse(BaseModel):
    """Subset of the get repository API response."""

    full_name: str
    default_branch: str


class Branch(BaseModel):
    """A branch from the list branches API."""

    name: str
