"""Abstract base class for remote workflow backends."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from workflow_dispatcher.models.workflow import RepositoryData, Workflow


@dataclass(frozen=True, kw_only=True)
class WorkflowBackend(ABC):
    """Abstract base for services hosting workflows and running them.

    Implementations translate their transport failures into the error
    taxonomy: ContentFetchError for manifest reads and DispatchTransportError
    for dispatch calls.
    """

    @abstractmethod
    async def get_content(self, owner: str, repo: str, path: str) -> str:
        """Fetch the base64 encoded content of a repository file.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository

        Returns:
            Base64 encoded file content

        Raises:
            ContentFetchError: If the file cannot be fetched or has no content

        """

    @abstractmethod
    async def create_workflow_dispatch(
        self,
        owner: str,
        repo: str,
        workflow_id: int,
        ref: str,
        inputs: Mapping[str, str | bool],
    ) -> None:
        """Request a new run of a workflow.

        Args:
            owner: Repository owner
            repo: Repository name
            workflow_id: Workflow identifier
            ref: Branch or tag the run is created for
            inputs: Values of the workflow inputs

        Raises:
            DispatchTransportError: If the run request is rejected

        """

    @abstractmethod
    async def list_workflows(self, owner: str, repo: str) -> Sequence[Workflow]:
        """List the workflows of a repository."""

    @abstractmethod
    async def get_repository(self, owner: str, repo: str) -> RepositoryData:
        """Fetch the default branch and branch names of a repository."""


def split_repository(repository_full_name: str) -> tuple[str, str]:
    """Split an ``owner/repo`` name into its owner and repository parts."""
    owner, _, repo = repository_full_name.partition("/")
    if not owner or not repo:
        raise ValueError(
            f"Repository must be in owner/repo format, got '{repository_full_name}'"
        )
    return owner, repo
