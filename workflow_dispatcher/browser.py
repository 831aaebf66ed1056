"""Browsing of repository workflows with a favorites section."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from workflow_dispatcher.backends.base import WorkflowBackend, split_repository
from workflow_dispatcher.favorites import (
    FavoritesStore,
    load_favorites,
    sort_workflows,
    toggle_favorite_workflow,
)
from workflow_dispatcher.form import DispatchForm
from workflow_dispatcher.models.result import DispatchResult
from workflow_dispatcher.models.workflow import RepositoryData, Workflow
from workflow_dispatcher.notices import Notifier
from workflow_dispatcher.submitter import DispatchSubmitter

log = logging.getLogger(__name__)

API_REPOS_PREFIX = "https://api.github.com/repos/"
WEB_PREFIX = "https://github.com/"


def get_last_path_component(url: str) -> str:
    """Return the part of a path after the last slash."""
    return url.split("/")[-1]


def create_workflow_url(workflow: Workflow) -> str:
    """Build the browser URL listing the runs of a workflow.

    The API URL ends with the workflow id, the browser URL with the manifest
    file name.
    """
    path = "/".join(workflow.url.split("/")[:-1])
    web_path = path.replace(API_REPOS_PREFIX, WEB_PREFIX, 1)
    return f"{web_path}/{get_last_path_component(workflow.path)}"


@dataclass(frozen=True, kw_only=True)
class WorkflowSection:
    """Titled group of workflows in the list."""

    title: str
    workflows: Sequence[Workflow]


@dataclass(kw_only=True)
class WorkflowBrowser:
    """Workflows of one repository, their favorites and the open form.

    The "All" section is only shown once favorites have loaded, so the first
    favorite comes first in the list when there is one.
    """

    backend: WorkflowBackend
    store: FavoritesStore
    notifier: Notifier
    repository_full_name: str
    workflows: Sequence[Workflow] = ()
    favorites: Sequence[Workflow] = ()
    favorites_loaded: bool = False
    repository: RepositoryData | None = None
    form: DispatchForm | None = None
    _selection: int = field(default=0, repr=False)
    _favorites_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def default_branch(self) -> str:
        """Default branch of the repository, empty until loaded."""
        return self.repository.default_branch if self.repository else ""

    async def load(self) -> None:
        """Load workflows and repository data, then the favorites."""
        owner, repo = split_repository(self.repository_full_name)
        workflows, repository = await asyncio.gather(
            self.backend.list_workflows(owner, repo),
            self.backend.get_repository(owner, repo),
        )
        self.workflows = tuple(workflows)
        self.repository = repository
        log.info(
            "Loaded %d workflow(s) for %s",
            len(self.workflows),
            self.repository_full_name,
        )

        self.favorites = await load_favorites(self.store, self.workflows)
        self.favorites_loaded = True

    @property
    def active_workflows(self) -> Sequence[Workflow]:
        """Active workflows sorted by name."""
        return sort_workflows(
            [workflow for workflow in self.workflows if workflow.state == "active"]
        )

    def sections(self) -> Sequence[WorkflowSection]:
        """Return the list sections to show."""
        sections = [WorkflowSection(title="Favorites", workflows=self.favorites)]
        if self.favorites_loaded:
            sections.append(
                WorkflowSection(title="All", workflows=self.active_workflows)
            )
        return sections

    def find_workflow(self, key: str) -> Workflow | None:
        """Find a workflow by id, name or manifest file name."""
        for workflow in self.workflows:
            if key in (
                str(workflow.id),
                workflow.name,
                workflow.path,
                get_last_path_component(workflow.path),
            ):
                return workflow
        return None

    async def toggle_favorite(self, workflow: Workflow) -> Sequence[Workflow]:
        """Add or remove a workflow from the favorites.

        Concurrent toggles run one after the other.
        """
        async with self._favorites_lock:
            self.favorites = await toggle_favorite_workflow(
                self.store, workflow, self.workflows
            )
        return self.favorites

    async def select_workflow(self, workflow: Workflow) -> DispatchForm | None:
        """Open the dispatch form of a workflow.

        Returns:
            The loaded form, or None when another workflow was selected while
            this one was loading

        """
        self._selection += 1
        selection = self._selection

        form = DispatchForm(
            backend=self.backend,
            notifier=self.notifier,
            workflow=workflow,
            repository_full_name=self.repository_full_name,
        )
        await form.load()

        if selection != self._selection:
            log.info("Discarding stale form for workflow %s", workflow.id)
            return None

        self.form = form
        return form

    def close_form(self) -> None:
        """Close the open form and drop any form still loading."""
        self._selection += 1
        self.form = None

    async def run_with_defaults(self, workflow: Workflow) -> DispatchResult:
        """Dispatch a workflow on the default branch without inputs."""
        submitter = DispatchSubmitter(backend=self.backend, notifier=self.notifier)
        return await submitter.run_with_defaults(
            workflow.id, self.repository_full_name, self.default_branch
        )
