"""ProcessSynthesizer: builds a new Process from a workflow and a stored file.

Pure derivation, no I/O. The rules:

    1. workflow id/name copied onto the process
    2. FirstAccessed == LastAccessed == now
    3. type GLOBAL_CAPTURE, status READY (the engine picks READY processes up)
    4. current node = the workflow's initiator node (category "18")
    5. properties = deep copy of the workflow's default properties
    6. BatchID (id 0) gets a fresh GUID
    7. FilePath (id -1) gets the server-side path of the uploaded file
    8. History and FilePages are empty lists, never null

Synthesis is all-or-nothing: a malformed workflow raises a
WorkflowDefinitionError and no Process is produced.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime

import structlog

from processposter.errors import (
    MissingBatchIdProperty,
    MissingFilePathProperty,
    MissingReservedProperty,
)
from processposter.models.process import Process, ProcessStatus, ProcessType
from processposter.models.property import Property, ReservedProperty, find_reserved
from processposter.models.workflow import WorkflowSnapshot
from processposter.utils.clock import now_local

logger = structlog.get_logger(component="synthesizer")

_MISSING_SLOT_ERRORS: dict[ReservedProperty, type[MissingReservedProperty]] = {
    ReservedProperty.BATCH_ID: MissingBatchIdProperty,
    ReservedProperty.FILE_PATH: MissingFilePathProperty,
}


def new_batch_id() -> str:
    """A globally unique batch identifier, in GUID string form."""
    return str(uuid.uuid4())


class ProcessSynthesizer:
    """Derives ready-to-post processes from workflow snapshots.

    Args:
        clock:             Returns the timestamp stamped on new processes.
        batch_id_factory:  Returns a fresh BatchID per call.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = now_local,
        batch_id_factory: Callable[[], str] = new_batch_id,
    ) -> None:
        self.clock = clock
        self.batch_id_factory = batch_id_factory

    def synthesize(self, workflow: WorkflowSnapshot, stored_file_path: str) -> Process:
        """Create a Process ready for posting to the Capture API.

        Args:
            workflow:          Snapshot the process is spawned from.
            stored_file_path:  Path of the uploaded file on the API server.

        Raises:
            MissingInitiatorNode:     no node has category "18".
            MissingBatchIdProperty:   no property with id 0 named "BatchID".
            MissingFilePathProperty:  no property with id -1 named "FilePath".
        """
        current_node = workflow.initiator_node()

        properties = [prop.model_copy(deep=True) for prop in workflow.properties]
        self._reserved(properties, ReservedProperty.BATCH_ID, workflow).value = self.batch_id_factory()
        self._reserved(properties, ReservedProperty.FILE_PATH, workflow).value = stored_file_path

        stamp = self.clock()
        process = Process(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            first_accessed_at=stamp,
            last_accessed_at=stamp,
            current_node=current_node,
            properties=properties,
            type=ProcessType.GLOBAL_CAPTURE,
            status=ProcessStatus.READY,
            history=[],
            file_pages=[],
        )

        logger.debug(
            "process_synthesized",
            workflow_id=workflow.id,
            current_node=current_node,
            batch_id=process.batch_id,
            properties=len(properties),
        )
        return process

    @staticmethod
    def _reserved(
        properties: list[Property], slot: ReservedProperty, workflow: WorkflowSnapshot
    ) -> Property:
        prop = find_reserved(properties, slot)
        if prop is None:
            raise _MISSING_SLOT_ERRORS[slot](workflow.id)
        return prop


_default = ProcessSynthesizer()


def synthesize(workflow: WorkflowSnapshot, stored_file_path: str) -> Process:
    """Synthesize with the real clock and GUID generator."""
    return _default.synthesize(workflow, stored_file_path)
