"""
View data models.

Flat view rows from the view section and the per-screen component tree built
from them by parent-id linkage.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, Field


class AttributeKind(str, Enum):
    """Value types a view attribute can carry."""

    DIMENSION = "dimension"
    TEXT = "text"
    COLOR = "color"
    RESOURCE = "resource"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"


class ViewAttribute(BaseModel):
    """A typed view attribute, e.g. layout_width=d:-1."""

    name: str
    kind: AttributeKind
    value: str


class ViewRecord(BaseModel):
    """One row of the view section."""

    screen: str = Field(description="Layout name, e.g. main")
    line: int = Field(description="1-based line number in the view section")
    view_id: str
    type: str = Field(description="Component type tag, e.g. Button")
    parent_id: str | None = Field(default=None, description="None for the root view")
    attributes: list[ViewAttribute] = Field(default_factory=list)

    def attribute(self, name: str) -> ViewAttribute | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


class ViewNode(BaseModel):
    """A view and its children in record order."""

    record: ViewRecord
    children: list[ViewNode] = Field(default_factory=list)

    @property
    def view_id(self) -> str:
        return self.record.view_id

    def walk(self) -> Iterator[ViewNode]:
        """Depth-first, pre-order traversal."""
        yield self
        for child in self.children:
            yield from child.walk()


ViewNode.model_rebuild()


class ViewTree(BaseModel):
    """The component tree of one screen."""

    screen: str
    root: ViewNode

    def walk(self) -> Iterator[ViewNode]:
        return self.root.walk()

    @property
    def view_ids(self) -> list[str]:
        return [node.view_id for node in self.walk()]


class ViewIdEntry(BaseModel):
    """Source-level information about one view id."""

    java_type: str
    needs_reference: bool = False


class ViewIdIndex(BaseModel):
    """Per-screen mapping from view id to its declared type and reference need."""

    screen: str
    entries: dict[str, ViewIdEntry] = Field(default_factory=dict)

    def __contains__(self, view_id: str) -> bool:
        return view_id in self.entries

    @property
    def referenced(self) -> dict[str, ViewIdEntry]:
        """Entries needing a field and a lookup, in tree order."""
        return {k: v for k, v in self.entries.items() if v.needs_reference}
