"""Extraction of manual-dispatch inputs from a parsed manifest."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from workflow_dispatcher.decoder import decode_manifest
from workflow_dispatcher.errors import ManifestDecodeError, NoTriggerError
from workflow_dispatcher.models.inputs import Input
from workflow_dispatcher.models.result import Notice
from workflow_dispatcher.notices import Notifier

log = logging.getLogger(__name__)

DISPATCH_TRIGGER = "workflow_dispatch"
NOT_RUNNABLE_TITLE = "Workflow cannot be run"


def find_dispatch_trigger(document: Mapping[Any, Any]) -> Mapping[Any, Any] | None:
    """Return the ``on.workflow_dispatch`` node, or None when absent.

    PyYAML reads a bare ``on`` key as boolean True under YAML 1.1 rules, so
    both keys are looked up. The string and list trigger forms
    (``on: workflow_dispatch``, ``on: [push, workflow_dispatch]``) and a null
    trigger value yield an empty node.
    """
    triggers = document.get("on", document.get(True))

    if isinstance(triggers, str):
        return {} if triggers == DISPATCH_TRIGGER else None

    if isinstance(triggers, list):
        return {} if DISPATCH_TRIGGER in triggers else None

    if not isinstance(triggers, Mapping) or DISPATCH_TRIGGER not in triggers:
        return None

    trigger = triggers[DISPATCH_TRIGGER]
    return trigger if isinstance(trigger, Mapping) else {}


def extract_inputs(document: Mapping[Any, Any]) -> Sequence[Input]:
    """Project the dispatch trigger inputs into ordered Input records.

    Raises:
        NoTriggerError: If the manifest has no workflow_dispatch trigger
        ManifestDecodeError: If an input declaration cannot be read

    """
    trigger = find_dispatch_trigger(document)
    if trigger is None:
        raise NoTriggerError("No workflow_dispatch trigger found")

    declared = trigger.get("inputs")
    if not isinstance(declared, Mapping):
        return []

    inputs: list[Input] = []
    for name, fields in declared.items():
        if not isinstance(fields, Mapping):
            fields = {}
        try:
            inputs.append(
                Input(
                    name=str(name),
                    description=fields.get("description"),
                    default=fields.get("default"),
                    required=fields.get("required"),
                    type=fields.get("type"),
                    options=fields.get("options"),
                )
            )
        except ValidationError as e:
            raise ManifestDecodeError(f"Invalid declaration of input {name}") from e

    return inputs


async def load_inputs(raw_content: str, notifier: Notifier) -> Sequence[Input]:
    """Decode a manifest and extract its inputs, degrading to no inputs.

    Decoding failures and a missing dispatch trigger are reported with a
    single failure notice instead of being raised.
    """
    if not raw_content:
        return []

    try:
        return extract_inputs(decode_manifest(raw_content))
    except ManifestDecodeError as e:
        log.warning("Failed to load workflow configuration: %s", e)
        await notifier.show(
            Notice(
                style="failure",
                title=NOT_RUNNABLE_TITLE,
                message="Error loading workflow configuration",
            )
        )
    except NoTriggerError as e:
        log.info("Workflow is not manually triggerable: %s", e)
        await notifier.show(
            Notice(style="failure", title=NOT_RUNNABLE_TITLE, message=str(e))
        )
    return []
