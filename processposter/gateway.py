"""CaptureGateway: creates a process in one call.

Pipeline, strictly sequential (each step needs the previous one's output):

    upload          bytes         → UploadedFile       FileUploadFailed
    fetch_workflow  workflow id   → WorkflowSnapshot   WorkflowFetchFailed
    synthesize      snapshot+path → Process (draft)    WorkflowDefinitionError
    submit          draft         → Process (stored)   ProcessSubmitFailed

Nothing is rolled back. A failure after the upload leaves the file in the
API cache directory; its path is attached to the raised error as
``uploaded_path``. Retry policy belongs to the caller.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Awaitable
from pathlib import Path
from typing import Any, TypeVar

import structlog

from processposter.errors import CaptureError, FileUploadFailed
from processposter.models.pipeline import CapturePhase, UploadedFile
from processposter.models.process import Process
from processposter.models.workflow import WorkflowSnapshot
from processposter.synthesizer import ProcessSynthesizer
from processposter.tools.capture_api import CaptureApiClient

logger = structlog.get_logger(component="gateway")

T = TypeVar("T")


class CaptureGateway:
    """Uploads a file, spawns a process for it, and posts the process.

    The gateway keeps no per-call state, so concurrent create_process()
    calls on one instance are independent.
    """

    def __init__(
        self,
        client: CaptureApiClient | None = None,
        synthesizer: ProcessSynthesizer | None = None,
    ) -> None:
        self.client = client or CaptureApiClient()
        self.synthesizer = synthesizer or ProcessSynthesizer()

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> CaptureGateway:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def create_process(
        self,
        workflow_id: str,
        container_id: int,
        file: bytes | str | Path,
        file_name: str | None = None,
    ) -> Process:
        """Post a new process for *file* to the Capture API.

        Args:
            workflow_id:   Workflow to spawn the process from.
            container_id:  Portal to post the process to.
            file:          Raw bytes, or a path to a local file.
            file_name:     Name to upload under. Required with raw bytes;
                           defaults to the base name of a path.

        Returns:
            The process as it exists in the database.
        """
        data, file_name = await _read_file(file, file_name)
        log = logger.bind(
            correlation_id=str(uuid.uuid4())[:8],
            workflow_id=workflow_id,
            container_id=container_id,
        )
        log.info("capture_started", file_name=file_name, size=len(data))
        started = time.monotonic()

        uploaded = await self._run_phase(log, CapturePhase.UPLOAD, self.upload(data, file_name))
        try:
            workflow = await self._run_phase(
                log, CapturePhase.FETCH_WORKFLOW, self.fetch_workflow(workflow_id, container_id)
            )
            draft = await self._run_phase(
                log, CapturePhase.SYNTHESIZE, self._synthesize(workflow, uploaded.path)
            )
            stored = await self._run_phase(
                log, CapturePhase.SUBMIT, self.client.submit_process(container_id, draft)
            )
        except CaptureError as e:
            e.uploaded_path = uploaded.path
            raise

        log.info(
            "process_submitted",
            process_id=stored.id,
            batch_id=stored.batch_id,
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return stored

    # ── Phases ────────────────────────────────────────────────

    async def upload(self, data: bytes, file_name: str) -> UploadedFile:
        """Upload *data* and return the first stored path."""
        paths = await self.client.upload_file(data, file_name)
        if not paths:
            raise FileUploadFailed("Failed to post the file to the API.")
        # A single file was posted, so only the first path matters.
        return UploadedFile(path=paths[0], file_name=file_name, size=len(data))

    async def fetch_workflow(self, workflow_id: str, container_id: int) -> WorkflowSnapshot:
        return await self.client.get_workflow(workflow_id, container_id)

    async def _synthesize(self, workflow: WorkflowSnapshot, stored_file_path: str) -> Process:
        return self.synthesizer.synthesize(workflow, stored_file_path)

    @staticmethod
    async def _run_phase(log: Any, phase: CapturePhase, step: Awaitable[T]) -> T:
        """Await one pipeline step, logging its outcome and duration."""
        started = time.monotonic()
        try:
            result = await step
        except CaptureError as e:
            log.error(
                "capture_phase_failed",
                phase=phase.value,
                error_type=type(e).__name__,
                error=e.message,
                retryable=e.retryable,
            )
            raise
        log.debug(
            "capture_phase_complete",
            phase=phase.value,
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return result


async def _read_file(file: bytes | str | Path, file_name: str | None) -> tuple[bytes, str]:
    if isinstance(file, (bytes, bytearray)):
        if not file_name:
            raise ValueError("file_name is required when posting raw bytes")
        return bytes(file), file_name

    path = Path(file)
    data = await asyncio.to_thread(path.read_bytes)
    return data, file_name or path.name
