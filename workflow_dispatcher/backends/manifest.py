"""Backend manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from workflow_dispatcher.backends.base import WorkflowBackend

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class BackendManifest(Generic[ConfigT]):
    """Manifest describing a backend plugin.

    The manifest references the configuration class and the backend factory
    so that backends are only imported when selected by key.
    """

    config_cls: type[ConfigT]
    backend_factory: Callable[[ConfigT], AbstractAsyncContextManager[WorkflowBackend]]
