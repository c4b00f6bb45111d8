"""Layout and source generators."""

from .layout import XmlLayoutGenerator, activity_class_name, escape_android_text, generate_layout
from .source import JavaSourceGenerator, generate_source, java_string

__all__ = [
    "JavaSourceGenerator",
    "XmlLayoutGenerator",
    "activity_class_name",
    "escape_android_text",
    "generate_layout",
    "generate_source",
    "java_string",
]
