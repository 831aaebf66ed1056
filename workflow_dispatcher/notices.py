"""Notifiers delivering user notices."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from workflow_dispatcher.models.result import Notice

log = logging.getLogger(__name__)

NOTICE_LEVELS = {
    "animated": logging.INFO,
    "success": logging.INFO,
    "failure": logging.WARNING,
}


class Notifier(Protocol):
    """Sink for user-visible notices."""

    async def show(self, notice: Notice) -> None:
        """Show a notice to the user."""


@dataclass(frozen=True, kw_only=True)
class LoggingNotifier:
    """Notifier writing notices to a logger."""

    logger: logging.Logger = field(default=log)

    async def show(self, notice: Notice) -> None:
        """Log the notice at a level matching its style."""
        level = NOTICE_LEVELS[notice.style]
        if notice.message:
            self.logger.log(level, "%s: %s", notice.title, notice.message)
        else:
            self.logger.log(level, "%s", notice.title)


@dataclass(frozen=True, kw_only=True)
class RecordingNotifier:
    """Notifier keeping every notice it was given, in order."""

    notices: list[Notice] = field(default_factory=list)

    async def show(self, notice: Notice) -> None:
        """Record the notice."""
        self.notices.append(notice)

    def failures(self) -> list[Notice]:
        """Return the failure notices."""
        return [notice for notice in self.notices if notice.style == "failure"]
