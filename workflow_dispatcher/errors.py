"""Error taxonomy for manifest loading, form handling and dispatching."""


class WorkflowDispatcherError(Exception):
    """Base class for all workflow dispatcher errors."""


class ManifestDecodeError(WorkflowDispatcherError):
    """Raised when a workflow manifest cannot be decoded or parsed."""


class NoTriggerError(WorkflowDispatcherError):
    """Raised when a manifest has no ``workflow_dispatch`` trigger."""


class ContentFetchError(WorkflowDispatcherError):
    """Raised when the manifest content cannot be fetched."""


class InputValidationError(WorkflowDispatcherError):
    """Raised when a required input has no value at submit time."""

    def __init__(self, input_name: str) -> None:
        super().__init__(f"Input {input_name} is required")
        self.input_name = input_name


class DispatchTransportError(WorkflowDispatcherError):
    """Raised when the backend rejects or fails a dispatch call."""


class FormNotReadyError(WorkflowDispatcherError):
    """Raised when a form is submitted while loading or already submitting."""


class BackendRequestError(WorkflowDispatcherError):
    """Raised when a backend API request fails or returns an error status."""
