"""In-memory favorites store for tests."""

from dataclasses import dataclass, field


@dataclass(kw_only=True)
class InMemoryStore:
    """Favorites store keeping items in a dict and counting writes."""

    items: dict[str, str] = field(default_factory=dict)
    writes: int = 0

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under key, None when absent."""
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        """Store value under key."""
        self.items[key] = value
        self.writes += 1
