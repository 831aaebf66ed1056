"""Tests for backend loading module."""

import pytest

from workflow_dispatcher.backends.github import github_manifest
from workflow_dispatcher.backends.loading import (
    BackendNotFoundError,
    installed_backends,
    load_backend_manifest,
)


def test_load_backend_manifest_returns_manifest() -> None:
    """Loads backend manifest by key."""
    manifest = load_backend_manifest("github")

    assert manifest is github_manifest


def test_load_backend_manifest_raises_for_unknown_backend() -> None:
    """Raises BackendNotFoundError for unknown backend key."""
    with pytest.raises(BackendNotFoundError) as exc_info:
        load_backend_manifest("unknown-backend")

    assert str(exc_info.value) == (
        "Unknown workflow backend 'unknown-backend'. Installed backends: github"
    )


def test_installed_backends_lists_github() -> None:
    """The GitHub backend is registered by the package."""
    assert "github" in installed_backends()
