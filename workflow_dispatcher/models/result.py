"""Models for user notices and dispatch outcomes."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, kw_only=True)
class Notice:
    """Transient, non-blocking message shown to the user."""

    style: Literal["animated", "success", "failure"]
    title: str
    message: str | None = None


@dataclass(frozen=True, kw_only=True)
class DispatchResult:
    """Outcome of a single dispatch request.

    A failed request is reported, never retried.
    """

    status: Literal["success", "failure"]
    message: str | None = None
