"""GitHub backend module."""

from workflow_dispatcher.backends.github.backend import GitHubBackend
from workflow_dispatcher.backends.github.config import GitHubConfig
from workflow_dispatcher.backends.github.manifest import github_manifest

__all__ = ["GitHubBackend", "GitHubConfig", "github_manifest"]
