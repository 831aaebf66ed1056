"""Tests for notifiers."""

import logging

import pytest

from workflow_dispatcher.models.result import Notice
from workflow_dispatcher.notices import LoggingNotifier, RecordingNotifier


async def test_logging_notifier_logs_failures_as_warnings(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Failure notices are logged as warnings with their message."""
    notifier = LoggingNotifier(logger=logging.getLogger("test"))

    with caplog.at_level(logging.INFO):
        await notifier.show(Notice(style="animated", title="Sending run request"))
        await notifier.show(
            Notice(
                style="failure",
                title="Failed sending run request",
                message="Not Found",
            )
        )

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.INFO, "Sending run request"),
        (logging.WARNING, "Failed sending run request: Not Found"),
    ]


async def test_recording_notifier_keeps_order() -> None:
    """Recorded notices keep their order."""
    notifier = RecordingNotifier()
    first = Notice(style="animated", title="first")
    second = Notice(style="failure", title="second")

    await notifier.show(first)
    await notifier.show(second)

    assert notifier.notices == [first, second]
    assert notifier.failures() == [second]
