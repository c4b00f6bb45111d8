"""Data models for sketchback."""

from .logic import (
    Block,
    Branch,
    Call,
    ComponentDeclaration,
    ControlBlock,
    Expression,
    Handler,
    HandlerArgument,
    HandlerKind,
    LiteralType,
    LiteralValue,
    LogicRecord,
    LogicTree,
    MoreBlockDeclaration,
    MoreBlockParameter,
    Reference,
    ReferenceNamespace,
    ScreenDeclarations,
    StatementBlock,
    VariableBlock,
    VariableDeclaration,
    VariableType,
)
from .project import (
    ActivityFile,
    DecryptedProject,
    FileIndex,
    KeyboardSetting,
    LibraryIndex,
    LibraryRecord,
    LogicSection,
    Orientation,
    ProjectMetadata,
    RawProject,
    ResourceIndex,
    ResourceKind,
    ResourceRecord,
    SketchProject,
    ViewSection,
)
from .view import (
    AttributeKind,
    ViewAttribute,
    ViewIdEntry,
    ViewIdIndex,
    ViewNode,
    ViewRecord,
    ViewTree,
)

__all__ = [
    "Block",
    "Branch",
    "Call",
    "ComponentDeclaration",
    "ControlBlock",
    "Expression",
    "Handler",
    "HandlerArgument",
    "HandlerKind",
    "LiteralType",
    "LiteralValue",
    "LogicRecord",
    "LogicTree",
    "MoreBlockDeclaration",
    "MoreBlockParameter",
    "Reference",
    "ReferenceNamespace",
    "ScreenDeclarations",
    "StatementBlock",
    "VariableBlock",
    "VariableDeclaration",
    "VariableType",
    "ActivityFile",
    "DecryptedProject",
    "FileIndex",
    "KeyboardSetting",
    "LibraryIndex",
    "LibraryRecord",
    "LogicSection",
    "Orientation",
    "ProjectMetadata",
    "RawProject",
    "ResourceIndex",
    "ResourceKind",
    "ResourceRecord",
    "SketchProject",
    "ViewSection",
    "AttributeKind",
    "ViewAttribute",
    "ViewIdEntry",
    "ViewIdIndex",
    "ViewNode",
    "ViewRecord",
    "ViewTree",
]
