"""WorkflowSnapshot: read-only projection of a Capture workflow.

Only the parts needed to spawn a process are modelled: identity, default
properties, and the node categories (to find the initiator). Everything
else the API returns is ignored.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from processposter.errors import MissingInitiatorNode
from processposter.models.property import Property

logger = structlog.get_logger(component="workflow")

# Node category of the entry point every new process starts from
INITIATOR_CATEGORY = "18"


class Node(BaseModel):
    """Partial node: the category is all that is needed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    category: str = Field(default="", alias="Category")

    @field_validator("category", mode="before")
    @classmethod
    def _category_as_str(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, int):
            return str(value)
        return value


class WorkflowSnapshot(BaseModel):
    """A workflow as fetched for one process-creation request.

    Attributes:
        id:          Workflow identifier.
        name:        Display name, copied onto spawned processes.
        properties:  Default property set; processes start from a deep copy.
        nodes:       Node id → Node, in document order.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(alias="ID")
    name: str = Field(default="", alias="Name")
    properties: tuple[Property, ...] = Field(default=(), alias="Properties")
    nodes: dict[str, Node] = Field(default_factory=dict, alias="Nodes")

    @field_validator("properties", "nodes", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {} if info.field_name == "nodes" else ()
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _null_name_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    def initiator_node(self) -> str:
        """Return the key of the initiator node.

        Raises:
            MissingInitiatorNode: no node has category ``"18"``.
        """
        initiators = [key for key, node in self.nodes.items() if node.category == INITIATOR_CATEGORY]
        if not initiators:
            raise MissingInitiatorNode(
                f"Workflow {self.id!r} has no initiator node (category {INITIATOR_CATEGORY})",
                workflow_id=self.id,
            )
        if len(initiators) > 1:
            logger.warning(
                "multiple_initiator_nodes",
                workflow_id=self.id,
                nodes=initiators,
                chosen=initiators[0],
            )
        return initiators[0]
