"""Error taxonomy for process creation.

Two families:

    WorkflowDefinitionError  the workflow is malformed. Fatal: the caller
                             must fix the workflow, retrying cannot help.
    RemoteCallError          the Capture API rejected or failed a call.
                             Candidates for a caller-owned retry policy.

Every error is tagged with the CapturePhase that failed.
"""

from __future__ import annotations

from processposter.models.pipeline import CapturePhase
from processposter.models.property import ReservedProperty


class CaptureError(Exception):
    """Base exception for everything create_process can raise."""

    phase: CapturePhase = CapturePhase.SYNTHESIZE
    retryable: bool = False

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        # Set by the gateway when a file was already uploaded before this failure.
        self.uploaded_path: str | None = None


# ── Structural / definition errors ───────────────────────────────────────────


class WorkflowDefinitionError(CaptureError):
    """Raised when a workflow lacks something every process needs."""

    phase = CapturePhase.SYNTHESIZE
    retryable = False

    def __init__(self, message: str, workflow_id: str = ""):
        super().__init__(message)
        self.workflow_id = workflow_id


class MissingInitiatorNode(WorkflowDefinitionError):
    """Raised when no node of the workflow has the initiator category."""


class MissingReservedProperty(WorkflowDefinitionError):
    """Raised when a reserved property slot is absent from the workflow."""

    slot: ReservedProperty

    def __init__(self, workflow_id: str = ""):
        super().__init__(
            f"Workflow {workflow_id!r} has no {self.slot.prop_name!r} property "
            f"(id {self.slot.prop_id})",
            workflow_id=workflow_id,
        )


class MissingBatchIdProperty(MissingReservedProperty):
    slot = ReservedProperty.BATCH_ID


class MissingFilePathProperty(MissingReservedProperty):
    slot = ReservedProperty.FILE_PATH


# ── Remote call failures ─────────────────────────────────────────────────────


class RemoteCallError(CaptureError):
    """Raised when a Capture API call does not succeed.

    ``detail`` holds the raw response body (or the transport error text
    when no response arrived); ``status_code`` is None in the latter case.
    """

    retryable = True

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        prefix = f"{self.phase.value} failed"
        if status_code is not None:
            prefix += f" (HTTP {status_code})"
        super().__init__(f"{prefix}: {detail}" if detail else prefix, original_error)
        self.detail = detail
        self.status_code = status_code


class FileUploadFailed(RemoteCallError):
    phase = CapturePhase.UPLOAD


class WorkflowFetchFailed(RemoteCallError):
    phase = CapturePhase.FETCH_WORKFLOW


class ProcessSubmitFailed(RemoteCallError):
    phase = CapturePhase.SUBMIT
