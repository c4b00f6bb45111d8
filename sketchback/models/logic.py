"""
Logic data models.

Expressions are parsed once into a typed tree (literal | reference | call) and
blocks are reassembled into nested sequences, so the source generator never
re-parses serialized cells.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class LiteralType(str, Enum):
    """Types a literal cell can carry."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    COLOR = "color"
    ENUM = "enum"
    RESOURCE = "resource"


class ReferenceNamespace(str, Enum):
    """Namespaces a reference cell can point into."""

    VARIABLE = "variable"
    VIEW = "view"
    ARGUMENT = "argument"


class LiteralValue(BaseModel):
    """A literal parameter, already validated against its type."""

    kind: Literal["literal"] = "literal"
    type: LiteralType
    value: str


class Reference(BaseModel):
    """A reference to a variable, a view id or a handler argument."""

    kind: Literal["reference"] = "reference"
    namespace: ReferenceNamespace
    name: str


class Call(BaseModel):
    """A nested function-call expression with its own argument list."""

    kind: Literal["call"] = "call"
    tag: str
    args: list[Expression] = Field(default_factory=list)


Expression = Annotated[Union[LiteralValue, Reference, Call], Field(discriminator="kind")]

Call.model_rebuild()


def iter_references(expressions: list[Expression]):
    """Yield every Reference found in a list of expressions, depth-first."""
    for expression in expressions:
        if isinstance(expression, Reference):
            yield expression
        elif isinstance(expression, Call):
            yield from iter_references(expression.args)


class VariableType(str, Enum):
    """Screen-level variable types."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    MAP = "map"


class VariableDeclaration(BaseModel):
    """A screen-level variable or list declaration."""

    type: VariableType
    name: str
    is_list: bool = False


class ComponentDeclaration(BaseModel):
    """A non-visual component (Intent, SharedPreferences, ...) owned by a screen."""

    type: str
    name: str
    extra: str = ""


class MoreBlockParameter(BaseModel):
    """One parameter of a user-defined function."""

    type_code: Literal["s", "d", "b", "m"]
    name: str


class MoreBlockDeclaration(BaseModel):
    """A user-defined function ("more block") signature."""

    name: str
    parameters: list[MoreBlockParameter] = Field(default_factory=list)


class LogicRecord(BaseModel):
    """One block row of a handler group in the logic section."""

    screen: str = Field(description="Activity name, e.g. MainActivity")
    handler: str = Field(description="Handler key, e.g. button1_onClick")
    line: int = Field(description="1-based line number in the logic section")
    block_id: str
    depth: int = Field(ge=0)
    tag: str
    params: list[Expression] = Field(default_factory=list)


class ScreenDeclarations(BaseModel):
    """Everything a screen declares outside of its handlers."""

    variables: list[VariableDeclaration] = Field(default_factory=list)
    components: list[ComponentDeclaration] = Field(default_factory=list)
    more_blocks: list[MoreBlockDeclaration] = Field(default_factory=list)

    def more_block(self, name: str) -> MoreBlockDeclaration | None:
        for declaration in self.more_blocks:
            if declaration.name == name:
                return declaration
        return None

    @property
    def names(self) -> set[str]:
        """Every field name the screen declares."""
        return {v.name for v in self.variables} | {c.name for c in self.components}


class StatementBlock(BaseModel):
    """A leaf block translating to exactly one statement."""

    kind: Literal["statement"] = "statement"
    block_id: str
    tag: str
    params: list[Expression] = Field(default_factory=list)


class VariableBlock(BaseModel):
    """A block that declares (localVar) or assigns a variable."""

    kind: Literal["variable"] = "variable"
    block_id: str
    tag: str
    target: str
    params: list[Expression] = Field(default_factory=list)


class Branch(BaseModel):
    """One nested sequence of a control-flow block."""

    tag: str
    params: list[Expression] = Field(default_factory=list)
    blocks: list[Block] = Field(default_factory=list)


class ControlBlock(BaseModel):
    """An if-chain or loop owning one or more nested sequences."""

    kind: Literal["control"] = "control"
    block_id: str
    tag: str
    branches: list[Branch] = Field(default_factory=list)


Block = Annotated[
    Union[StatementBlock, VariableBlock, ControlBlock], Field(discriminator="kind")
]

Branch.model_rebuild()
ControlBlock.model_rebuild()


class HandlerKind(str, Enum):
    """How a handler is bound into the generated activity."""

    INITIALIZE = "initialize"
    ACTIVITY_EVENT = "activity_event"
    VIEW_EVENT = "view_event"
    MORE_BLOCK = "more_block"


class HandlerArgument(BaseModel):
    """A parameter visible to blocks inside a handler, referenced as `a:<name>`."""

    java_type: str
    name: str


class Handler(BaseModel):
    """An event handler with its ordered, possibly nested block sequence."""

    key: str
    kind: HandlerKind
    target: str = Field(default="", description="View id or more-block name")
    event: str = Field(default="")
    arguments: list[HandlerArgument] = Field(default_factory=list)
    blocks: list[Block] = Field(default_factory=list)

    @property
    def method_name(self) -> str:
        if self.kind == HandlerKind.INITIALIZE:
            return "initializeLogic"
        if self.kind == HandlerKind.ACTIVITY_EVENT:
            return self.event
        if self.kind == HandlerKind.MORE_BLOCK:
            return f"_{self.target}"
        return f"_{self.target}_{self.event}"


class LogicTree(BaseModel):
    """All handlers of one screen, in program order."""

    screen: str
    declarations: ScreenDeclarations = Field(default_factory=ScreenDeclarations)
    handlers: dict[str, Handler] = Field(default_factory=dict)
