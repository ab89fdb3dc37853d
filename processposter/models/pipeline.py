"""Typed intermediates of the capture pipeline.

upload → UploadedFile → fetch_workflow → WorkflowSnapshot
       → synthesize → Process (draft) → submit → Process (authoritative)
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class CapturePhase(str, enum.Enum):
    """The four steps of CaptureGateway.create_process, in order."""

    UPLOAD = "upload"
    FETCH_WORKFLOW = "fetch_workflow"
    SYNTHESIZE = "synthesize"
    SUBMIT = "submit"


class UploadedFile(BaseModel):
    """A file that now exists in the Capture API cache directory."""

    path: str = Field(description="Server-side path returned by the files route")
    file_name: str = Field(description="Name the file was posted under")
    size: int = Field(default=0, description="Number of bytes posted")
