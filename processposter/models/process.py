"""Process: one unit of work flowing through a Capture workflow.

This is a partial representation of the engine's process object: only the
fields needed to post a new process are declared. Anything else the API
returns is kept as extra data, so the authoritative copy handed back by
``submit_process`` is not lossy.

The engine rejects ``null`` for History and FilePages; both must be
(possibly empty) arrays. Null input is normalised to an empty list.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from processposter.models.property import Property, ReservedProperty, find_reserved


class ProcessType(enum.IntEnum):
    GLOBAL_ACTION = 1
    GLOBAL_CAPTURE = 2


class ProcessStatus(enum.IntEnum):
    """Every status a process can take in the engine."""

    WAIT_QUEUE = 1
    PROCESSING = 2
    ERRORED = 3
    COMPLETED = 4
    READY = 5
    MANUALLY_COMPLETED = 6
    WAIT_TIMER = 7
    QUEUE_TIMER = 8
    VALIDATION = 9
    SUB_PROCESSING = 10


class Process(BaseModel):
    """A process record, either synthesized locally or returned by the API."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int = Field(default=0, alias="ID", description="Assigned by the API on submit; 0 before")
    workflow_id: str = Field(default="", alias="WorkflowID")
    workflow_name: str = Field(default="", alias="WorkflowName")
    first_accessed_at: datetime | None = Field(default=None, alias="FirstAccessed")
    last_accessed_at: datetime | None = Field(default=None, alias="LastAccessed")
    current_node: str = Field(default="", alias="CurrentNode")
    properties: list[Property] = Field(default_factory=list, alias="Properties")
    type: ProcessType = Field(default=ProcessType.GLOBAL_CAPTURE, alias="ProcessType")
    status: ProcessStatus = Field(default=ProcessStatus.READY, alias="Status")
    # Entry shapes are owned by the engine; kept opaque.
    history: list[Any] = Field(default_factory=list, alias="History")
    file_pages: list[Any] = Field(default_factory=list, alias="FilePages")

    @field_validator("properties", "history", "file_pages", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("workflow_id", "workflow_name", "current_node", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    # ── Reserved slots ────────────────────────────────────────

    @property
    def batch_id(self) -> str | None:
        prop = find_reserved(self.properties, ReservedProperty.BATCH_ID)
        return prop.value if prop else None

    @property
    def file_path(self) -> str | None:
        prop = find_reserved(self.properties, ReservedProperty.FILE_PATH)
        return prop.value if prop else None

    # ── Serialization ─────────────────────────────────────────

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready payload using the engine's field names."""
        return self.model_dump(mode="json", by_alias=True)
