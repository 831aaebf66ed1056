"""Models for workflows and repositories listed by a backend."""

from collections.abc import Sequence

from pydantic import Field

from workflow_dispatcher.models.base import Model


class Workflow(Model):
    """A workflow definition of a repository."""

    id: int = Field(..., description="Backend workflow identifier")
    name: str = Field(..., description="Display name")
    path: str = Field(..., description="Manifest path inside the repository")
    state: str = Field(default="active", description="Workflow state")
    url: str = Field(default="", description="API URL of the workflow")
    html_url: str = Field(default="", description="Browser URL of the manifest")


class RepositoryData(Model):
    """Repository metadata needed to pick the dispatch ref."""

    full_name: str = Field(..., description="Repository in owner/repo format")
    default_branch: str = Field(default="", description="Default branch name")
    branches: Sequence[str] = Field(default=(), description="Branch names")
