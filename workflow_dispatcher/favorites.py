"""Favorite workflows persisted in a key/value store."""

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from workflow_dispatcher.models.workflow import Workflow

log = logging.getLogger(__name__)

FAVORITES_KEY = "favorite-workflows"


class FavoritesStore(Protocol):
    """String keyed persistent store."""

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under key, None when absent."""

    async def set_item(self, key: str, value: str) -> None:
        """Store value under key."""


@dataclass(frozen=True, kw_only=True)
class JsonFileStore:
    """Store keeping all items in a single JSON object file."""

    path: Path

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under key, None when absent."""
        items = await asyncio.to_thread(self._read)
        return items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, keeping the other items."""
        items = await asyncio.to_thread(self._read)
        items[key] = value
        await asyncio.to_thread(self._write, items)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            items = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as e:
            log.warning("Ignoring unreadable store file %s: %s", self.path, e)
            return {}
        if not isinstance(items, dict):
            log.warning("Ignoring store file %s without a JSON object", self.path)
            return {}
        return items

    def _write(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(items, indent=2), encoding="utf-8")


def sort_workflows(workflows: Sequence[Workflow]) -> Sequence[Workflow]:
    """Sort workflows by name, case-sensitive ascending."""
    return sorted(workflows, key=lambda workflow: workflow.name)


async def get_favorite_workflow_ids(store: FavoritesStore) -> list[int]:
    """Read the favorite workflow identifiers.

    Nothing stored, or a value that is not a JSON list of ids, reads as no
    favorites.
    """
    stored = await store.get_item(FAVORITES_KEY)
    if not stored:
        return []
    try:
        favorite_ids = json.loads(stored)
    except (TypeError, ValueError) as e:
        log.warning("Ignoring unreadable favorites: %s", e)
        return []
    if not isinstance(favorite_ids, list):
        log.warning("Ignoring favorites that are not a list: %r", favorite_ids)
        return []
    return [
        workflow_id
        for workflow_id in favorite_ids
        if isinstance(workflow_id, int) and not isinstance(workflow_id, bool)
    ]


async def load_favorites(
    store: FavoritesStore, workflows: Sequence[Workflow]
) -> Sequence[Workflow]:
    """Return the known workflows marked as favorite, sorted by name.

    Stored identifiers without a matching workflow are ignored.
    """
    favorite_ids = await get_favorite_workflow_ids(store)
    by_id = {workflow.id: workflow for workflow in workflows}
    return sort_workflows(
        [by_id[workflow_id] for workflow_id in favorite_ids if workflow_id in by_id]
    )


def is_favorite_workflow(workflow: Workflow, favorites: Sequence[Workflow]) -> bool:
    """Check if a workflow is one of the favorites."""
    return any(favorite.id == workflow.id for favorite in favorites)


async def toggle_favorite_workflow(
    store: FavoritesStore, workflow: Workflow, workflows: Sequence[Workflow]
) -> Sequence[Workflow]:
    """Flip the favorite status of a workflow and return the new favorites."""
    favorite_ids = await get_favorite_workflow_ids(store)
    if workflow.id in favorite_ids:
        favorite_ids.remove(workflow.id)
        log.info("Removed workflow %s from favorites", workflow.id)
    else:
        favorite_ids.append(workflow.id)
        log.info("Added workflow %s to favorites", workflow.id)

    await store.set_item(FAVORITES_KEY, json.dumps(favorite_ids))
    return await load_favorites(store, workflows)
