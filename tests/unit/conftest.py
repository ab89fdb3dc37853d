"""Unit-test conftest: FakeCaptureApi, workflow payloads, and a fixed clock.

All fixtures here are available to every test under tests/unit/ without import.
No test opens a real connection: the Capture API is served by
httpx.MockTransport.
"""

from __future__ import annotations

import copy
import json
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest

from processposter.models.workflow import WorkflowSnapshot
from processposter.tools.capture_api import CaptureApiClient

BASE_URL = "http://capture.test/CaptureApi/api"
STORED_PATH = "/cache/doc123.pdf"
FIXED_NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone(timedelta(hours=-5)))

WORKFLOW_PAYLOAD: dict[str, Any] = {
    "ID": "W1",
    "Name": "Intake",
    "Description": "ignored by the snapshot",
    "Nodes": {
        "n0": {"Category": "3", "Title": "Import"},
        "n1": {"Category": "18", "Title": "Initiator"},
        "n2": {"Category": "7", "Title": "Export"},
    },
    "Properties": [
        {"ID": 0, "Name": "BatchID", "Type": 1, "SystemProperty": True, "Value": ""},
        {"ID": -1, "Name": "FilePath", "Type": 1, "SystemProperty": True, "Value": ""},
        {
            "ID": 7,
            "Name": "Invoice Number",
            "Type": 1,
            "SystemProperty": False,
            "Value": "",
            "MValue": None,
            "Confidence": 0,
            "SourceType": 2,
            "PortalID": 3,
            "DBID": 11,
            "FieldID": 4,
            "TableFields": None,
            "Left": 10,
            "Top": 20,
            "Right": 110,
            "Bottom": 40,
            "Page": 1,
            "TemplateProperty": True,
        },
    ],
}


# ─────────────────────────────────────────────────────────────────────────────
# FakeCaptureApi: scripted Capture API behind httpx.MockTransport
# ─────────────────────────────────────────────────────────────────────────────

class FakeCaptureApi:
    """Scripted responses for the three Capture API routes.

    Each route is a ``(status, body)`` pair; a str body is sent verbatim,
    anything else as JSON. With ``submit=None`` the process route echoes the
    posted process back with ``ID=42`` and a server-filled ``Priority``.
    ``raises`` makes every request fail at the transport level.

    Every request is recorded in ``requests`` for assertions.
    """

    def __init__(
        self,
        *,
        upload: tuple[int, Any] = (200, [STORED_PATH]),
        workflow: tuple[int, Any] | None = None,
        submit: tuple[int, Any] | None = None,
        raises: Exception | None = None,
    ) -> None:
        self.upload = upload
        self.workflow = workflow or (200, copy.deepcopy(WORKFLOW_PAYLOAD))
        self.submit = submit
        self.raises = raises
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raises:
            raise self.raises

        path = request.url.path
        if request.method == "POST" and path.endswith("/files"):
            status, body = self.upload
        elif request.method == "GET" and "/workflow/" in path:
            status, body = self.workflow
        elif request.method == "POST" and path.endswith("/process"):
            if self.submit is None:
                body = json.loads(request.content)
                body["ID"] = 42
                body["Priority"] = 3
                status = 200
            else:
                status, body = self.submit
        else:
            return httpx.Response(404, text=f"no route for {request.method} {path}")

        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self) -> CaptureApiClient:
        return CaptureApiClient(
            base_url=BASE_URL,
            username="admin",
            password="secret",
            timeout=5.0,
            transport=httpx.MockTransport(self.handler),
        )

    @property
    def calls(self) -> list[tuple[str, str]]:
        """``(method, path)`` of every request, in order."""
        return [(r.method, r.url.path) for r in self.requests]

    def submitted(self) -> dict[str, Any]:
        """JSON body of the last process POST."""
        posts = [r for r in self.requests if r.url.path.endswith("/process")]
        return json.loads(posts[-1].content)


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def workflow_payload() -> dict[str, Any]:
    """A fresh copy of the W1/"Intake" workflow as the API returns it."""
    return copy.deepcopy(WORKFLOW_PAYLOAD)


@pytest.fixture
def workflow(workflow_payload) -> WorkflowSnapshot:
    return WorkflowSnapshot.model_validate(workflow_payload)


@pytest.fixture
def fixed_clock():
    """A clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def capture_api() -> FakeCaptureApi:
    """A FakeCaptureApi where every route succeeds."""
    return FakeCaptureApi()


@pytest.fixture
def make_capture_api():
    """Factory for FakeCaptureApi with scripted routes."""
    return FakeCaptureApi


@pytest.fixture
def stored_path() -> str:
    """Path the fake files route returns for an upload."""
    return STORED_PATH
