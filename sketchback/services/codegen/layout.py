"""
XML Layout Generator.

Renders a ViewTree as an Android layout document: one element per node,
depth-first, with attributes translated through the attribute table.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ...core.exceptions import MalformedViewTree, UnsupportedComponent
from ...core.logging import get_logger
from ...models.project import FileIndex, ProjectMetadata, ResourceIndex, ResourceKind
from ...models.view import ViewAttribute, ViewNode, ViewTree
from ..trees.components import ChildLayout, component
from .tables import ATTRIBUTES, AttributeSpec, ValueFormat

logger = get_logger(__name__)

NAMESPACES = {
    "android": "http://schemas.android.com/apk/res/android",
    "tools": "http://schemas.android.com/tools",
}

for _prefix, _uri in NAMESPACES.items():
    ET.register_namespace(_prefix, _uri)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

SIZES = {"-1": "match_parent", "-2": "wrap_content"}


def _qualified(name: str, namespace: str = "android") -> str:
    return f"{{{NAMESPACES[namespace]}}}{name}"


def escape_android_text(text: str) -> str:
    """Escape text the way aapt expects inside a string attribute."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    if escaped[:1] in ("@", "?"):
        escaped = "\\" + escaped
    return escaped


def activity_class_name(screen: str) -> str:
    """``main`` → ``MainActivity``."""
    return f"{screen[:1].upper()}{screen[1:]}Activity"


class XmlLayoutGenerator:
    """Generates the layout document of one screen."""

    def __init__(
        self,
        tree: ViewTree,
        resources: ResourceIndex,
        files: FileIndex,
        metadata: ProjectMetadata,
        indent: str = "    ",
    ) -> None:
        self.tree = tree
        self.resources = resources
        self.files = files
        self.metadata = metadata
        self.indent = indent

    def generate(self) -> str:
        root = self._element(self.tree.root, parent_layout=None)
        if self.files.activity(self.tree.screen) is not None:
            context = f"{self.metadata.package_name}.{activity_class_name(self.tree.screen)}"
            root.set(_qualified("context", "tools"), context)

        ET.indent(root, space=self.indent)
        body = ET.tostring(root, encoding="unicode")
        logger.debug("Generated layout", screen=self.tree.screen, views=len(self.tree.view_ids))
        return f"{XML_DECLARATION}\n{body}\n"

    def _element(self, node: ViewNode, parent_layout: ChildLayout | None) -> ET.Element:
        record = node.record
        spec = component(record.type)
        if spec is None:
            raise UnsupportedComponent(
                message="no component mapping for view type",
                tag=record.type,
                screen=self.tree.screen,
                context={"view_id": node.view_id},
            )

        element = ET.Element(spec.xml_tag)
        element.set(_qualified("id"), f"@+id/{node.view_id}")

        for attribute in record.attributes:
            attr_spec = ATTRIBUTES.get(attribute.name)
            if attr_spec is None or attr_spec.kind != attribute.kind:
                raise UnsupportedComponent(
                    message="no attribute mapping",
                    tag=f"{record.type}.{attribute.name}",
                    screen=self.tree.screen,
                    context={"view_id": node.view_id, "kind": attribute.kind.value},
                )
            if attribute.name == "orientation" and record.type != "LinearLayout":
                raise UnsupportedComponent(
                    message="orientation applies to LinearLayout only",
                    tag=f"{record.type}.{attribute.name}",
                    screen=self.tree.screen,
                    context={"view_id": node.view_id},
                )
            if attribute.name == "layout_weight" and parent_layout != ChildLayout.WEIGHTED:
                logger.info(
                    "Dropping layout_weight outside a weighted container",
                    screen=self.tree.screen,
                    view_id=node.view_id,
                )
                continue
            element.set(
                _qualified(attr_spec.xml_name, attr_spec.namespace),
                self._value(node, attribute, attr_spec),
            )

        if record.type == "LinearLayout" and record.attribute("orientation") is None:
            element.set(_qualified("orientation"), "vertical")

        for child in node.children:
            element.append(self._element(child, parent_layout=spec.child_layout))
        return element

    def _value(self, node: ViewNode, attribute: ViewAttribute, spec: AttributeSpec) -> str:
        value = attribute.value
        fmt = spec.format
        if fmt == ValueFormat.SIZE:
            return SIZES.get(value, f"{value}dp")
        if fmt == ValueFormat.DP:
            return f"{value}dp"
        if fmt == ValueFormat.SP:
            return f"{value}sp"
        if fmt == ValueFormat.TEXT:
            return escape_android_text(value)
        if fmt == ValueFormat.COLOR:
            return f"#{value}"
        if fmt == ValueFormat.BOOLEAN:
            return value
        if fmt == ValueFormat.DRAWABLE:
            self._require(node, self.resources.has(ResourceKind.IMAGE, value), f"image '{value}'")
            return f"@drawable/{value}"
        if fmt == ValueFormat.FONT:
            self._require(node, self.resources.has(ResourceKind.FONT, value), f"font '{value}'")
            return f"@font/{value}"
        if fmt == ValueFormat.LAYOUT:
            self._require(node, self.files.is_custom_view(value), f"custom view '{value}'")
            return f"@layout/{value}"
        return value

    def _require(self, node: ViewNode, present: bool, what: str) -> None:
        if not present:
            raise MalformedViewTree(
                message=f"unresolved resource: {what}",
                screen=self.tree.screen,
                view_id=node.view_id,
            )


def generate_layout(
    tree: ViewTree,
    resources: ResourceIndex,
    files: FileIndex,
    metadata: ProjectMetadata,
    indent: str = "    ",
) -> str:
    """Render one screen's layout XML."""
    return XmlLayoutGenerator(tree, resources, files, metadata, indent=indent).generate()
