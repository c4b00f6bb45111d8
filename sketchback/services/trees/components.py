"""
Component table.

Maps every supported view type tag to its XML element, Java type and the child
layout semantics of containers. A tag missing from this table is unsupported.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ChildLayout(str, Enum):
    """How a container positions its children."""

    NONE = "none"
    WEIGHTED = "weighted"
    ABSOLUTE = "absolute"


class ComponentSpec(BaseModel):
    """Mapping entry for one component type tag."""

    model_config = ConfigDict(frozen=True)

    xml_tag: str
    java_type: str
    java_import: str
    child_layout: ChildLayout = ChildLayout.NONE
    max_children: int | None = None


def _widget(name: str, package: str = "android.widget") -> ComponentSpec:
    return ComponentSpec(xml_tag=name, java_type=name, java_import=f"{package}.{name}")


COMPONENTS: dict[str, ComponentSpec] = {
    "LinearLayout": ComponentSpec(
        xml_tag="LinearLayout",
        java_type="LinearLayout",
        java_import="android.widget.LinearLayout",
        child_layout=ChildLayout.WEIGHTED,
    ),
    "FrameLayout": ComponentSpec(
        xml_tag="FrameLayout",
        java_type="FrameLayout",
        java_import="android.widget.FrameLayout",
        child_layout=ChildLayout.ABSOLUTE,
    ),
    "ScrollView": ComponentSpec(
        xml_tag="ScrollView",
        java_type="ScrollView",
        java_import="android.widget.ScrollView",
        child_layout=ChildLayout.ABSOLUTE,
        max_children=1,
    ),
    "HorizontalScrollView": ComponentSpec(
        xml_tag="HorizontalScrollView",
        java_type="HorizontalScrollView",
        java_import="android.widget.HorizontalScrollView",
        child_layout=ChildLayout.ABSOLUTE,
        max_children=1,
    ),
    "TextView": _widget("TextView"),
    "Button": _widget("Button"),
    "EditText": _widget("EditText"),
    "ImageView": _widget("ImageView"),
    "CheckBox": _widget("CheckBox"),
    "Switch": _widget("Switch"),
    "SeekBar": _widget("SeekBar"),
    "ProgressBar": _widget("ProgressBar"),
    "Spinner": _widget("Spinner"),
    "ListView": _widget("ListView"),
    "WebView": _widget("WebView", package="android.webkit"),
    "CalendarView": _widget("CalendarView"),
}


def component(tag: str) -> ComponentSpec | None:
    return COMPONENTS.get(tag)
