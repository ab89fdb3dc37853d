"""Integration-test conftest: live Capture API fixtures.

Integration tests require:
    PROCESSPOSTER_TEST_LIVE=1            (set in shell before running)
    CAPTURE_API_URL / CAPTURE_USERNAME / CAPTURE_PASSWORD
    PROCESSPOSTER_TEST_WORKFLOW_ID       workflow to spawn test processes from
    PROCESSPOSTER_TEST_PORTAL_ID         portal that owns the workflow

Run with:
    PROCESSPOSTER_TEST_LIVE=1 pytest tests/integration/ -v

Every run leaves a real process (and its uploaded file) on the server.
"""

from __future__ import annotations

import os

import pytest


@pytest.fixture
def live_workflow_id() -> str:
    return os.environ["PROCESSPOSTER_TEST_WORKFLOW_ID"]


@pytest.fixture
def live_portal_id() -> int:
    return int(os.environ["PROCESSPOSTER_TEST_PORTAL_ID"])
