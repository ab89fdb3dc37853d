"""Async client for the Capture API.

Route map:
    Upload file:    POST files                                    (multipart)
    Get workflow:   GET  portal/{container_id}/workflow/{workflow_id}
    Submit process: POST portal/{container_id}/process            (JSON)

Every request carries a Basic authorization header built once from
"username:password" at construction, and accepts JSON only.

Any non-success status is raised as the phase's RemoteCallError with the
raw response body as detail; the API has no structured error schema.
"""

from __future__ import annotations

import base64
import mimetypes
from typing import Any

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from processposter.config import settings
from processposter.errors import (
    FileUploadFailed,
    ProcessSubmitFailed,
    RemoteCallError,
    WorkflowFetchFailed,
)
from processposter.models.process import Process
from processposter.models.workflow import WorkflowSnapshot

logger = structlog.get_logger(component="capture_api")

_PATH_LIST = TypeAdapter(list[str])


def basic_auth_header(username: str, password: str) -> str:
    """``Basic base64("username:password")`` as the Capture API expects it."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class CaptureApiClient:
    """Async client for one Capture API instance.

    Single httpx client, single base URL, Basic auth on every request.

    Args:
        base_url:   API root, e.g. ``http://server/CaptureApi/api``.
        username:   Authorizing user.
        password:   Password for the authorizing user.
        timeout:    Transport timeout in seconds for every call.
        transport:  Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.capture_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.capture_timeout
        self._headers = {
            "Authorization": basic_auth_header(
                username if username is not None else settings.capture_username,
                password if password is not None else settings.capture_password,
            ),
            "Accept": "application/json",
        }
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url + "/",
                headers=self._headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> CaptureApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _send(
        self,
        error_cls: type[RemoteCallError],
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one request, raising *error_cls* unless it succeeds."""
        client = await self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("capture_api_unreachable", url=url, error=str(e))
            raise error_cls(str(e), original_error=e) from e

        if not response.is_success:
            logger.error("capture_api_error", url=url, status=response.status_code)
            raise error_cls(response.text, status_code=response.status_code)
        return response

    # ── Files ─────────────────────────────────────────────────────────────

    async def upload_file(self, data: bytes, file_name: str) -> list[str]:
        """Post a file to the API's cache directory.

        The engine consumes this file when the process runs.

        Returns:
            Full server-side paths of the stored files (one per posted file).
        """
        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        response = await self._send(
            FileUploadFailed,
            "POST",
            "files",
            files={file_name: (file_name, data, content_type)},
        )
        try:
            paths = _PATH_LIST.validate_json(response.content)
        except ValidationError as e:
            raise FileUploadFailed(response.text, status_code=response.status_code, original_error=e) from e

        logger.debug("file_uploaded", file_name=file_name, size=len(data), paths=len(paths))
        return paths

    # ── Workflows ─────────────────────────────────────────────────────────

    async def get_workflow(self, workflow_id: str, container_id: int) -> WorkflowSnapshot:
        """Get a workflow (as a snapshot) from a portal."""
        response = await self._send(
            WorkflowFetchFailed,
            "GET",
            f"portal/{container_id}/workflow/{workflow_id}",
        )
        try:
            workflow = WorkflowSnapshot.model_validate_json(response.content)
        except ValidationError as e:
            raise WorkflowFetchFailed(response.text, status_code=response.status_code, original_error=e) from e

        logger.debug("workflow_fetched", workflow_id=workflow.id, nodes=len(workflow.nodes))
        return workflow

    # ── Processes ─────────────────────────────────────────────────────────

    async def submit_process(self, container_id: int, process: Process) -> Process:
        """Post a single process to a portal.

        Returns:
            The process as it exists in the database.
        """
        response = await self._send(
            ProcessSubmitFailed,
            "POST",
            f"portal/{container_id}/process",
            json=process.to_wire(),
        )
        try:
            stored = Process.model_validate_json(response.content)
        except ValidationError as e:
            raise ProcessSubmitFailed(response.text, status_code=response.status_code, original_error=e) from e

        logger.debug("process_stored", process_id=stored.id, workflow_id=stored.workflow_id)
        return stored
