"""Shared fixtures for workflow dispatcher tests."""

from collections.abc import Generator
from unittest.mock import Mock

import pytest
from aioresponses import aioresponses as aioresponses_cls

from workflow_dispatcher.backends.base import WorkflowBackend
from workflow_dispatcher.models.workflow import Workflow
from workflow_dispatcher.notices import RecordingNotifier
from workflow_dispatcher.testing.factories import (
    RepositoryDataFactory,
    WorkflowFactory,
)
from workflow_dispatcher.testing.stores import InMemoryStore


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Create a notifier recording all notices."""
    return RecordingNotifier()


@pytest.fixture
def store() -> InMemoryStore:
    """Create an empty favorites store."""
    return InMemoryStore()


@pytest.fixture
def workflow() -> Workflow:
    """Create the deploy workflow."""
    return WorkflowFactory.build(
        id=42,
        name="Deploy",
        path=".github/workflows/deploy.yml",
        url="https://api.github.com/repos/test-owner/test-repo/actions/workflows/42",
    )


@pytest.fixture
def backend_mock() -> Mock:
    """Create mock backend with a repository on main."""
    backend = Mock(spec=WorkflowBackend)
    backend.get_repository.return_value = RepositoryDataFactory.build()
    return backend
