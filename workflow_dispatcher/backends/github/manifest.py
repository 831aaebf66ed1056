"""GitHub backend manifest."""

from workflow_dispatcher.backends.github.backend import GitHubBackend
from workflow_dispatcher.backends.github.config import GitHubConfig
from workflow_dispatcher.backends.manifest import BackendManifest

github_manifest = BackendManifest(
    config_cls=GitHubConfig,
    backend_factory=GitHubBackend.from_config,
)
