"""Validation and submission of workflow dispatch requests."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from workflow_dispatcher.backends.base import WorkflowBackend, split_repository
from workflow_dispatcher.errors import DispatchTransportError, InputValidationError
from workflow_dispatcher.models.inputs import Input
from workflow_dispatcher.models.result import DispatchResult, Notice
from workflow_dispatcher.notices import Notifier
from workflow_dispatcher.schema import FormValue

log = logging.getLogger(__name__)

BRANCH_FIELD = "branch"


@dataclass(frozen=True, kw_only=True)
class DispatchRequest:
    """A run request for one workflow on one ref."""

    workflow_id: int
    repository_full_name: str
    ref: str
    inputs: Mapping[str, FormValue]


def validate_form_values(
    inputs: Sequence[Input], values: Mapping[str, FormValue | None]
) -> None:
    """Check that every required input has a value.

    Raises:
        InputValidationError: Naming the first required input, in declaration
            order, whose value is missing, empty or false

    """
    for input in inputs:
        if input.required and not values.get(input.name):
            raise InputValidationError(input.name)


def build_dispatch_request(
    workflow_id: int,
    repository_full_name: str,
    ref: str,
    values: Mapping[str, FormValue],
) -> DispatchRequest:
    """Build a dispatch request from form values.

    The branch selector is a dispatch parameter, not a workflow input, so it
    is left out of the inputs.
    """
    return DispatchRequest(
        workflow_id=workflow_id,
        repository_full_name=repository_full_name,
        ref=ref,
        inputs={name: value for name, value in values.items() if name != BRANCH_FIELD},
    )


@dataclass(frozen=True, kw_only=True)
class DispatchSubmitter:
    """Sends validated dispatch requests to a backend."""

    backend: WorkflowBackend
    notifier: Notifier

    async def submit(
        self,
        workflow_id: int,
        repository_full_name: str,
        ref: str,
        inputs: Sequence[Input],
        values: Mapping[str, FormValue],
    ) -> DispatchResult:
        """Validate the values and send exactly one dispatch request.

        Args:
            workflow_id: Workflow to run
            repository_full_name: Repository in owner/repo format
            ref: Branch or tag to run on
            inputs: Declared inputs of the workflow
            values: Form values, possibly including the branch selector

        Returns:
            The outcome of the request; transport failures are reported here

        Raises:
            InputValidationError: If a required input is missing; nothing is
                sent in that case

        """
        request = build_dispatch_request(
            workflow_id, repository_full_name, ref, values
        )
        validate_form_values(inputs, request.inputs)
        return await self.send(request)

    async def send(self, request: DispatchRequest) -> DispatchResult:
        """Send a dispatch request and report its progress as notices."""
        await self.notifier.show(Notice(style="animated", title="Sending run request"))

        owner, repo = split_repository(request.repository_full_name)
        try:
            await self.backend.create_workflow_dispatch(
                owner, repo, request.workflow_id, request.ref, request.inputs
            )
        except DispatchTransportError as e:
            log.warning(
                "Dispatch of workflow %s on %s failed: %s",
                request.workflow_id,
                request.ref,
                e,
            )
            await self.notifier.show(
                Notice(
                    style="failure",
                    title="Failed sending run request",
                    message=str(e),
                )
            )
            return DispatchResult(status="failure", message=str(e))

        log.info("Dispatched workflow %s on %s", request.workflow_id, request.ref)
        await self.notifier.show(Notice(style="success", title="Sent run request"))
        return DispatchResult(status="success")

    async def run_with_defaults(
        self, workflow_id: int, repository_full_name: str, default_branch: str
    ) -> DispatchResult:
        """Run a workflow on the default branch without any input values."""
        return await self.send(
            DispatchRequest(
                workflow_id=workflow_id,
                repository_full_name=repository_full_name,
                ref=default_branch,
                inputs={},
            )
        )
