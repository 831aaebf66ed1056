"""GitHub backend implementation."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import TypeAdapter, ValidationError

from workflow_dispatcher.backends.base import WorkflowBackend
from workflow_dispatcher.backends.github.config import GitHubConfig
from workflow_dispatcher.backends.github.models import (
    Branch,
    ContentResponse,
    RepositoryResponse,
    WorkflowsResponse,
)
from workflow_dispatcher.errors import (
    BackendRequestError,
    ContentFetchError,
    DispatchTransportError,
)
from workflow_dispatcher.models.workflow import RepositoryData, Workflow

log = logging.getLogger(__name__)

BRANCHES_ADAPTER = TypeAdapter(list[Branch])


async def error_message(response: aiohttp.ClientResponse) -> str:
    """Return the message GitHub attached to an error response."""
    text = await response.text()
    try:
        data = await response.json(content_type=None)
    except ValueError:
        return f"{response.status} {text}"
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return f"{response.status} {text}"


@dataclass(frozen=True, kw_only=True)
class GitHubBackend(WorkflowBackend):
    """Workflow backend for GitHub Actions."""

    config: GitHubConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubConfig
    ) -> AsyncGenerator["GitHubBackend", None]:
        """Create backend with managed session lifecycle."""
        headers = {
            "Authorization": f"Bearer {config.token.get_secret_value()}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": config.api_version,
        }
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
        ) as session:
            yield cls(config=config, session=session)

    async def get_content(self, owner: str, repo: str, path: str) -> str:
        """Fetch base64 file content, rejecting anything that is not a file."""
        url = f"/repos/{owner}/{repo}/contents/{quote(path)}"
        log.info("Fetching content: owner=%s, repo=%s, path=%s", owner, repo, path)

        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    message = await error_message(response)
                    raise ContentFetchError(f"Failed to fetch {path}: {message}")
                data = await response.json()
        except (aiohttp.ClientError, TimeoutError) as e:
            reason = str(e) or type(e).__name__
            raise ContentFetchError(f"Failed to fetch {path}: {reason}") from e

        if not isinstance(data, dict):
            raise ContentFetchError("No content found")

        try:
            content = ContentResponse.model_validate(data)
        except ValidationError as e:
            raise ContentFetchError("No content found") from e

        if content.type != "file" or not content.content:
            raise ContentFetchError("No content found")

        return content.content

    async def create_workflow_dispatch(
        self,
        owner: str,
        repo: str,
        workflow_id: int,
        ref: str,
        inputs: Mapping[str, str | bool],
    ) -> None:
        """Create a workflow dispatch event."""
        url = f"/repos/{owner}/{repo}/actions/workflows/{workflow_id}/dispatches"
        payload = {"ref": ref, "inputs": dict(inputs)}

        log.info(
            "Dispatching workflow: api_base_url=%s, url=%s, owner=%s, repo=%s, "
            "workflow_id=%s, ref=%s, inputs=%s",
            self.config.api_base_url,
            url,
            owner,
            repo,
            workflow_id,
            ref,
            sorted(inputs),
        )

        try:
            async with self.session.post(url, json=payload) as response:
                if response.status != 204:
                    raise DispatchTransportError(await error_message(response))
        except (aiohttp.ClientError, TimeoutError) as e:
            raise DispatchTransportError(str(e) or type(e).__name__) from e

    async def list_workflows(self, owner: str, repo: str) -> Sequence[Workflow]:
        """List all workflows of a repository, following pagination."""
        url = f"/repos/{owner}/{repo}/actions/workflows"
        workflows: list[Workflow] = []
        page = 1

        while True:
            data = await self._get_json(
                url, {"per_page": str(self.config.per_page), "page": str(page)}
            )
            response = WorkflowsResponse.model_validate(data)
            workflows.extend(response.workflows)

            if (
                len(response.workflows) < self.config.per_page
                or len(workflows) >= response.total_count
            ):
                break

            page += 1

        return workflows

    async def get_repository(self, owner: str, repo: str) -> RepositoryData:
        """Fetch repository default branch and all branch names."""
        repository = RepositoryResponse.model_validate(
            await self._get_json(f"/repos/{owner}/{repo}")
        )

        url = f"/repos/{owner}/{repo}/branches"
        branches: list[str] = []
        page = 1

        while True:
            data = await self._get_json(
                url, {"per_page": str(self.config.per_page), "page": str(page)}
            )
            page_branches = BRANCHES_ADAPTER.validate_python(data)
            branches.extend(branch.name for branch in page_branches)

            if len(page_branches) < self.config.per_page:
                break

            page += 1

        return RepositoryData(
            full_name=repository.full_name,
            default_branch=repository.default_branch,
            branches=branches,
        )

    async def _get_json(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> Any:
        try:
            async with self.session.get(url, params=params) as response:
                if response.status != 200:
                    message = await error_message(response)
                    raise BackendRequestError(f"Failed to get {url}: {message}")
                return await response.json()
        except (aiohttp.ClientError, TimeoutError) as e:
            reason = str(e) or type(e).__name__
            raise BackendRequestError(f"Failed to get {url}: {reason}") from e
