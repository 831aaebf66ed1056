"""Dispatch form state machine tying manifest loading to submission."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from workflow_dispatcher.backends.base import WorkflowBackend, split_repository
from workflow_dispatcher.errors import (
    ContentFetchError,
    FormNotReadyError,
    InputValidationError,
)
from workflow_dispatcher.extractor import NOT_RUNNABLE_TITLE, load_inputs
from workflow_dispatcher.fields import FieldSpec, fields_for
from workflow_dispatcher.models.inputs import Input
from workflow_dispatcher.models.result import DispatchResult, Notice
from workflow_dispatcher.models.workflow import RepositoryData, Workflow
from workflow_dispatcher.notices import Notifier
from workflow_dispatcher.schema import (
    FormSchema,
    FormValue,
    build_form_schema,
    field_error,
)
from workflow_dispatcher.submitter import BRANCH_FIELD, DispatchSubmitter

log = logging.getLogger(__name__)

FormState: TypeAlias = Literal["idle", "loading", "ready", "submitting", "success", "failed"]

SUBMITTABLE_STATES: frozenset[FormState] = frozenset({"ready", "success", "failed"})


@dataclass(kw_only=True)
class DispatchForm:
    """Form for running one workflow of one repository.

    The form moves through idle, loading, ready, submitting and then success
    or failed. Submitting is only accepted from ready, success or failed, so a
    form never has two submissions in flight.
    """

    backend: WorkflowBackend
    notifier: Notifier
    workflow: Workflow
    repository_full_name: str
    state: FormState = "idle"
    inputs: Sequence[Input] = ()
    schema: FormSchema = field(
        default_factory=lambda: FormSchema(initial_values={}, validation_rules={})
    )
    repository: RepositoryData | None = None
    selected_branch: str = ""
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def fields(self) -> Sequence[FieldSpec]:
        """Form fields of the workflow inputs, in declaration order."""
        return fields_for(self.inputs)

    async def load(self) -> None:
        """Fetch repository data and the workflow inputs concurrently.

        Neither failure leaves the form loading: a manifest that cannot be
        fetched or read gives a form without inputs.
        """
        self.state = "loading"
        repository, inputs = await asyncio.gather(
            self._load_repository(), self._load_inputs()
        )
        self.repository = repository
        self.selected_branch = repository.default_branch
        self.set_inputs(inputs)
        self.state = "ready"

    def set_inputs(self, inputs: Sequence[Input]) -> None:
        """Replace the inputs and derive the schema again."""
        self.inputs = tuple(inputs)
        self.schema = build_form_schema(self.inputs)
        self.errors = {}

    def select_branch(self, branch: str) -> None:
        """Select the ref the workflow runs on."""
        self.selected_branch = branch

    def update_field(self, name: str, value: FormValue | None) -> str:
        """Check a single field value and remember its inline error."""
        self.errors[name] = field_error(self.inputs, name, value)
        return self.errors[name]

    async def submit(self, values: Mapping[str, FormValue]) -> DispatchResult:
        """Validate the values and dispatch the workflow.

        Raises:
            FormNotReadyError: If the form is still loading or a submission
                is already in flight

        """
        if self.state not in SUBMITTABLE_STATES:
            raise FormNotReadyError(
                f"Cannot submit form for {self.workflow.name} while {self.state}"
            )

        self.state = "submitting"
        ref = str(values.get(BRANCH_FIELD) or self.selected_branch)
        submitter = DispatchSubmitter(backend=self.backend, notifier=self.notifier)

        try:
            if not ref:
                raise InputValidationError(BRANCH_FIELD)
            result = await submitter.submit(
                self.workflow.id, self.repository_full_name, ref, self.inputs, values
            )
        except InputValidationError as e:
            self.state = "ready"
            self.errors[e.input_name] = f"{e.input_name} is required"
            await self.notifier.show(
                Notice(style="failure", title="Inputs are invalid", message=str(e))
            )
            return DispatchResult(status="failure", message=str(e))
        except BaseException:
            self.state = "failed"
            raise

        self.state = "success" if result.status == "success" else "failed"
        return result

    async def _load_repository(self) -> RepositoryData:
        owner, repo = split_repository(self.repository_full_name)
        try:
            return await self.backend.get_repository(owner, repo)
        except Exception as e:
            log.error("Failed to load repository %s: %s", self.repository_full_name, e)
            await self.notifier.show(
                Notice(
                    style="failure",
                    title="Failed loading repository",
                    message=str(e),
                )
            )
            return RepositoryData(full_name=self.repository_full_name)

    async def _load_inputs(self) -> Sequence[Input]:
        owner, repo = split_repository(self.repository_full_name)
        try:
            content = await self.backend.get_content(owner, repo, self.workflow.path)
            return await load_inputs(content, self.notifier)
        except ContentFetchError as e:
            log.warning("Failed to fetch %s: %s", self.workflow.path, e)
            message = str(e)
        except Exception as e:
            log.error(
                "Failed to load inputs of %s: %s", self.workflow.path, e, exc_info=e
            )
            message = str(e) or type(e).__name__

        await self.notifier.show(
            Notice(style="failure", title=NOT_RUNNABLE_TITLE, message=message)
        )
        return []
