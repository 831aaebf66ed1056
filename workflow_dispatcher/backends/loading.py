"""Loading of workflow backends registered as entry points."""

from importlib.metadata import entry_points
from typing import Any

from workflow_dispatcher.backends.manifest import BackendManifest
from workflow_dispatcher.errors import WorkflowDispatcherError

ENTRY_POINT_GROUP = "workflow_dispatcher.backends"


class BackendNotFoundError(WorkflowDispatcherError):
    """Raised when no installed backend matches the ``--backend`` key."""


def installed_backends() -> list[str]:
    """Return the keys of all installed backends, sorted."""
    return sorted(entry.name for entry in entry_points(group=ENTRY_POINT_GROUP))


def load_backend_manifest(key: str) -> BackendManifest[Any]:
    """Load the manifest of the backend registered under key.

    Raises:
        BackendNotFoundError: If no backend is registered under key

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise BackendNotFoundError(
            f"Unknown workflow backend '{key}'. "
            f"Installed backends: {', '.join(installed_backends()) or 'none'}"
        )

    manifest: BackendManifest[Any] = next(iter(matches)).load()
    return manifest
