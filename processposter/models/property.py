"""Property: the named, typed attribute shared by workflows and processes.

The Capture API sends properties with PascalCase keys and a flat
bounding box (``Left``/``Top``/``Right``/``Bottom``/``Page``). The model
groups the box into ``bounding_box`` on input and flattens it again on
output, so a property survives a fetch → submit cycle unchanged.

Reserved properties are slots every workflow must declare. They are
matched on BOTH id and name; the engine relies on that dual key.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_validator,
    model_serializer,
    model_validator,
)

# Wire key or attribute name → BoundingBox attribute
_BOX_KEYS: dict[str, str] = {
    "Left": "left",
    "Top": "top",
    "Right": "right",
    "Bottom": "bottom",
    "Page": "page",
    "left": "left",
    "top": "top",
    "right": "right",
    "bottom": "bottom",
    "page": "page",
}


class BoundingBox(BaseModel):
    """Zone of the page a property value was captured from."""

    model_config = ConfigDict(populate_by_name=True)

    left: int = Field(default=0, alias="Left")
    top: int = Field(default=0, alias="Top")
    right: int = Field(default=0, alias="Right")
    bottom: int = Field(default=0, alias="Bottom")
    page: int = Field(default=0, alias="Page")


class Property(BaseModel):
    """A single property as it exists on both Workflow and Process objects.

    Every field the engine knows is modelled, so a process never drifts
    from the workflow that spawned it.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = Field(default=0, alias="ID")
    name: str = Field(default="", alias="Name")
    type: int = Field(default=0, alias="Type")
    is_system: bool = Field(default=False, alias="SystemProperty")
    value: str | None = Field(default=None, alias="Value")
    meta_value: Any = Field(default=None, alias="MValue")
    confidence: int = Field(default=0, alias="Confidence")
    source_type: int = Field(default=0, alias="SourceType")
    container_id: int = Field(default=0, alias="PortalID")
    field_source_id: int = Field(default=0, alias="DBID")
    field_id: int = Field(default=0, alias="FieldID")
    table_fields: Any = Field(default=None, alias="TableFields")
    bounding_box: BoundingBox = Field(default_factory=BoundingBox)
    is_template_property: bool = Field(default=False, alias="TemplateProperty")

    @field_validator("name", mode="before")
    @classmethod
    def _null_name_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="before")
    @classmethod
    def _gather_bounding_box(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "bounding_box" in data:
            return data
        if not any(key in data for key in _BOX_KEYS):
            return data
        data = dict(data)
        box: dict[str, Any] = {}
        for key, attr in _BOX_KEYS.items():
            if key in data:
                box[attr] = data.pop(key)
        data["bounding_box"] = box
        return data

    @model_serializer(mode="wrap")
    def _flatten_bounding_box(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        box = data.pop("bounding_box", None)
        if isinstance(box, dict):
            data.update(box)
        return data


class ReservedProperty(enum.Enum):
    """Well-known property slots, as ``(id, name)`` pairs."""

    BATCH_ID = (0, "BatchID")
    FILE_PATH = (-1, "FilePath")

    def __init__(self, prop_id: int, prop_name: str) -> None:
        self.prop_id = prop_id
        self.prop_name = prop_name

    def matches(self, prop: Property) -> bool:
        return prop.id == self.prop_id and prop.name == self.prop_name


def find_reserved(properties: Iterable[Property], slot: ReservedProperty) -> Property | None:
    """Return the first property filling *slot*, or None."""
    for prop in properties:
        if slot.matches(prop):
            return prop
    return None
