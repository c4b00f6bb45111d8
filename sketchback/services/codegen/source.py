"""
Source Generator.

Renders one activity screen as a Java class: fields for declarations and
referenced views, the setup method, and one method per logic handler.
Every block, expression and component goes through the mapping tables in
``tables``; anything unmapped is an error.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from ...core.exceptions import MalformedLogicTree, UnsupportedBlock, UnsupportedComponent
from ...core.logging import get_logger
from ...models.logic import (
    Block,
    Call,
    ControlBlock,
    Expression,
    Handler,
    HandlerArgument,
    HandlerKind,
    LiteralType,
    LiteralValue,
    LogicTree,
    Reference,
    ReferenceNamespace,
    StatementBlock,
    VariableBlock,
)
from ...models.project import ActivityFile, LibraryIndex, ProjectMetadata, ResourceIndex, ResourceKind
from ...models.view import ViewIdIndex
from ..trees.components import COMPONENTS
from ..trees.events import ACTIVITY_EVENTS, MORE_BLOCK_SUFFIX, MORE_BLOCK_TYPES, VIEW_EVENTS
from .tables import (
    COMPONENT_DECLARATIONS,
    CONTROL_OPENERS,
    EXPRESSIONS,
    KEYBOARD_MODES,
    LISTS,
    ORIENTATIONS,
    STATEMENTS,
    VARIABLES,
    Template,
)

logger = get_logger(__name__)

COMPAT_LIBRARY = "compat"
FUNCTION_CALL_TAG = "definedFunc"
DECLARATION_TAG = "localVar"

HANDLER_ORDER = (
    HandlerKind.INITIALIZE,
    HandlerKind.ACTIVITY_EVENT,
    HandlerKind.VIEW_EVENT,
    HandlerKind.MORE_BLOCK,
)

_JAVA_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
}


def _java_char(ch: str) -> str:
    if ch in _JAVA_ESCAPES:
        return _JAVA_ESCAPES[ch]
    if ord(ch) < 0x20 or ord(ch) == 0x7F:
        return f"\\u{ord(ch):04x}"
    return ch


def java_string(text: str) -> str:
    """Quote text as a Java string literal.

    Line terminators use their short escapes; other control characters become
    ``\\uXXXX``, which Java accepts inside a literal.
    """
    return '"' + "".join(_java_char(ch) for ch in text) + '"'


class _Writer:
    """Accumulates indented source lines."""

    def __init__(self, unit: str) -> None:
        self.unit = unit
        self.level = 0
        self.lines: list[str] = []

    def line(self, text: str = "") -> None:
        self.lines.append(f"{self.unit * self.level}{text}" if text else "")

    def tabbed(self, text: str) -> None:
        """Emit a table line whose leading TABs are extra indentation levels."""
        stripped = text.lstrip("\t")
        depth = len(text) - len(stripped)
        self.lines.append(f"{self.unit * (self.level + depth)}{stripped}" if stripped else "")

    @contextmanager
    def block(self, opener: str, closer: str = "}") -> Iterator[None]:
        self.line(opener)
        self.level += 1
        yield
        self.level -= 1
        self.line(closer)

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"


class JavaSourceGenerator:
    """Generates the Java source of one activity screen."""

    def __init__(
        self,
        tree: LogicTree,
        view_index: ViewIdIndex,
        activity_name: str,
        layout_name: str,
        metadata: ProjectMetadata,
        libraries: LibraryIndex,
        activity_file: ActivityFile | None,
        *,
        resources: ResourceIndex,
        indent: str = "    ",
    ) -> None:
        self.tree = tree
        self.view_index = view_index
        self.activity_name = activity_name
        self.layout_name = layout_name
        self.metadata = metadata
        self.libraries = libraries
        self.activity_file = activity_file
        self.resources = resources
        self.indent = indent

        self._imports: set[str] = {"android.os.Bundle"}
        self._handler: Handler | None = None
        self._repeat_count = 0

    def generate(self) -> str:
        if self.libraries.enabled(COMPAT_LIBRARY):
            base_class = "AppCompatActivity"
            self._imports.add("androidx.appcompat.app.AppCompatActivity")
        else:
            base_class = "Activity"
            self._imports.add("android.app.Activity")

        body = _Writer(self.indent)
        with body.block(f"public class {self.activity_name} extends {base_class} {{"):
            self._fields(body)
            self._on_create(body)
            self._initialize(body)
            for handler in self._ordered_handlers():
                body.line()
                self._method(body, handler)
            self._undefined_more_blocks(body)

        header = [f"package {self.metadata.package_name};", ""]
        header.extend(f"import {name};" for name in sorted(self._imports))
        header.append("")
        logger.debug(
            "Generated source",
            activity=self.activity_name,
            handlers=len(self.tree.handlers),
            imports=len(self._imports),
        )
        return "\n".join(header) + "\n" + body.render()

    # -- class members --------------------------------------------------

    def _fields(self, out: _Writer) -> None:
        fields = []
        for variable in self.tree.declarations.variables:
            table = LISTS if variable.is_list else VARIABLES
            declaration = table[variable.type.value]
            self._imports.update(declaration.imports)
            fields.append(f"private {declaration.java_type} {variable.name} = {declaration.initializer};")

        for declared in self.tree.declarations.components:
            declaration = COMPONENT_DECLARATIONS.get(declared.type)
            if declaration is None:
                raise UnsupportedComponent(
                    message="no declaration mapping for component",
                    tag=declared.type,
                    screen=self.tree.screen,
                    context={"name": declared.name},
                )
            self._imports.update(declaration.imports)
            if declaration.initializer:
                fields.append(f"private {declaration.java_type} {declared.name} = {declaration.initializer};")
            else:
                fields.append(f"private {declaration.java_type} {declared.name};")

        for view_id, entry in self.view_index.referenced.items():
            self._imports.add(self._view_import(entry.java_type))
            fields.append(f"private {entry.java_type} {view_id};")

        if fields:
            out.line()
            for field in fields:
                out.line(field)

    def _on_create(self, out: _Writer) -> None:
        out.line()
        out.line("@Override")
        with out.block("protected void onCreate(Bundle _savedInstanceState) {"):
            out.line("super.onCreate(_savedInstanceState);")
            out.line(f"setContentView(R.layout.{self.layout_name});")
            out.line("initialize(_savedInstanceState);")
            out.line("initializeLogic();")

    def _initialize(self, out: _Writer) -> None:
        out.line()
        with out.block("private void initialize(Bundle _savedInstanceState) {"):
            self._window_settings(out)

            for view_id in self.view_index.referenced:
                out.line(f"{view_id} = findViewById(R.id.{view_id});")

            for declared in self.tree.declarations.components:
                setup = COMPONENT_DECLARATIONS[declared.type].setup
                if setup:
                    out.line(setup.format(name=declared.name, extra=java_string(declared.extra)))

            for handler in self.tree.handlers.values():
                if handler.kind != HandlerKind.VIEW_EVENT:
                    continue
                self._handler = handler
                self._check_event_target(handler)
                event = VIEW_EVENTS[handler.event]
                self._imports.update(event.imports)
                for line in event.listener:
                    out.tabbed(line.format(view=handler.target, method=handler.method_name))
            self._handler = None

    def _window_settings(self, out: _Writer) -> None:
        if self.activity_file is None:
            return
        orientation = ORIENTATIONS[self.activity_file.orientation.value]
        if orientation:
            self._imports.add("android.content.pm.ActivityInfo")
            out.line(orientation)
        keyboard = KEYBOARD_MODES[self.activity_file.keyboard.value]
        if keyboard:
            self._imports.add("android.view.WindowManager")
            out.line(keyboard)

    def _ordered_handlers(self) -> list[Handler]:
        handlers = list(self.tree.handlers.values())
        if not any(h.kind == HandlerKind.INITIALIZE for h in handlers):
            handlers.append(Handler(key="", kind=HandlerKind.INITIALIZE))
        return sorted(handlers, key=lambda h: HANDLER_ORDER.index(h.kind))

    def _undefined_more_blocks(self, out: _Writer) -> None:
        """Declared functions without a body still need a callable method."""
        for declaration in self.tree.declarations.more_blocks:
            if f"{declaration.name}{MORE_BLOCK_SUFFIX}" in self.tree.handlers:
                continue
            arguments = [
                HandlerArgument(java_type=MORE_BLOCK_TYPES[p.type_code], name=p.name)
                for p in declaration.parameters
            ]
            out.line()
            self._method(
                out,
                Handler(
                    key=f"{declaration.name}{MORE_BLOCK_SUFFIX}",
                    kind=HandlerKind.MORE_BLOCK,
                    target=declaration.name,
                    arguments=arguments,
                ),
            )

    def _method(self, out: _Writer, handler: Handler) -> None:
        self._handler = handler
        self._repeat_count = 0
        for argument in handler.arguments:
            if argument.java_type.startswith("HashMap"):
                self._imports.add("java.util.HashMap")

        if handler.kind == HandlerKind.INITIALIZE:
            signature = "private void initializeLogic() {"
        elif handler.kind == HandlerKind.ACTIVITY_EVENT:
            out.line("@Override")
            signature = f"public void {handler.method_name}() {{"
        else:
            params = ", ".join(f"final {a.java_type} _{a.name}" for a in handler.arguments)
            signature = f"public void {handler.method_name}({params}) {{"

        with out.block(signature):
            if handler.kind == HandlerKind.ACTIVITY_EVENT and ACTIVITY_EVENTS[handler.event].calls_super:
                out.line(f"super.{handler.event}();")
            self._blocks(out, handler.blocks)
        self._handler = None

    # -- blocks ---------------------------------------------------------

    def _blocks(self, out: _Writer, blocks: list[Block]) -> None:
        for block in blocks:
            if isinstance(block, ControlBlock):
                self._control(out, block)
            elif isinstance(block, VariableBlock) and block.tag == DECLARATION_TAG:
                out.line(self._local_variable(block))
            else:
                out.line(self._statement(block))

    def _control(self, out: _Writer, block: ControlBlock) -> None:
        counter = ""
        if block.tag == "repeat":
            self._repeat_count += 1
            counter = f"_repeat{self._repeat_count}"

        for index, branch in enumerate(block.branches):
            template = CONTROL_OPENERS[branch.tag]
            args = self._arguments(template, branch.tag, branch.params, block.block_id)
            opener = template.template.format(*args, counter=counter)
            if index == 0:
                out.line(opener)
            else:
                out.level -= 1
                out.line(opener)
            out.level += 1
            self._blocks(out, branch.blocks)
        out.level -= 1
        out.line("}")

    def _local_variable(self, block: VariableBlock) -> str:
        var_type = block.params[0].value
        declaration = VARIABLES[var_type]
        self._imports.update(declaration.imports)
        if len(block.params) == 3:
            value = self._expression(block.params[2], block.block_id)
        else:
            value = declaration.initializer
        return f"{declaration.java_type} {block.target} = {value};"

    def _statement(self, block: StatementBlock | VariableBlock) -> str:
        if block.tag == FUNCTION_CALL_TAG:
            name = block.params[0].value
            args = ", ".join(self._expression(p, block.block_id) for p in block.params[1:])
            return f"_{name}({args});"

        template = STATEMENTS.get(block.tag)
        if template is None:
            raise self._unsupported(block.tag, block.block_id)
        args = self._arguments(template, block.tag, block.params, block.block_id)
        return template.template.format(*args)

    # -- expressions ----------------------------------------------------

    def _arguments(self, template: Template, tag: str, params: list[Expression], block_id: str) -> list[str]:
        if len(params) != template.arity:
            raise self._malformed(
                f"'{tag}' takes {template.arity} parameter(s), got {len(params)}", block_id
            )
        self._imports.update(template.imports)
        return [self._expression(p, block_id) for p in params]

    def _expression(self, expression: Expression, block_id: str) -> str:
        if isinstance(expression, LiteralValue):
            return self._literal(expression, block_id)
        if isinstance(expression, Reference):
            return self._reference(expression, block_id)
        if isinstance(expression, Call):
            template = EXPRESSIONS.get(expression.tag)
            if template is None:
                raise self._unsupported(expression.tag, block_id)
            return template.template.format(
                *self._arguments(template, expression.tag, expression.args, block_id)
            )
        raise TypeError(f"unknown expression node {expression!r}")

    def _literal(self, literal: LiteralValue, block_id: str) -> str:
        if literal.type == LiteralType.STRING:
            return java_string(literal.value)
        if literal.type == LiteralType.COLOR:
            return f"0x{literal.value}"
        if literal.type == LiteralType.RESOURCE:
            if not self.resources.has(ResourceKind.IMAGE, literal.value):
                raise self._malformed(f"unresolved image resource '{literal.value}'", block_id)
            return f"R.drawable.{literal.value}"
        return literal.value

    def _reference(self, reference: Reference, block_id: str) -> str:
        if reference.namespace == ReferenceNamespace.ARGUMENT:
            return f"_{reference.name}"
        if reference.namespace == ReferenceNamespace.VIEW and reference.name not in self.view_index:
            raise self._malformed(f"view '{reference.name}' is not in layout '{self.layout_name}'", block_id)
        return reference.name

    # -- helpers --------------------------------------------------------

    def _check_event_target(self, handler: Handler) -> None:
        entry = self.view_index.entries.get(handler.target)
        if entry is None:
            raise self._malformed(f"event target '{handler.target}' is not in layout '{self.layout_name}'", "")
        allowed = VIEW_EVENTS[handler.event].components
        if allowed is not None and entry.java_type not in allowed:
            raise self._malformed(f"{handler.event} does not apply to {entry.java_type} '{handler.target}'", "")

    def _view_import(self, java_type: str) -> str:
        for spec in COMPONENTS.values():
            if spec.java_type == java_type:
                return spec.java_import
        raise UnsupportedComponent(message="no component mapping for view type", tag=java_type, screen=self.tree.screen)

    def _malformed(self, message: str, block_id: str) -> MalformedLogicTree:
        return MalformedLogicTree(
            message=message,
            screen=self.tree.screen,
            handler=self._handler.key if self._handler else "",
            block_id=block_id,
        )

    def _unsupported(self, tag: str, block_id: str) -> UnsupportedBlock:
        return UnsupportedBlock(
            message="no template for block tag",
            tag=tag,
            screen=self.tree.screen,
            handler=self._handler.key if self._handler else "",
            context={"block_id": block_id},
        )


def generate_source(
    tree: LogicTree,
    view_index: ViewIdIndex,
    activity_name: str,
    layout_name: str,
    metadata: ProjectMetadata,
    libraries: LibraryIndex,
    activity_file: ActivityFile | None,
    *,
    resources: ResourceIndex,
    indent: str = "    ",
) -> str:
    """Render one activity screen's Java source."""
    return JavaSourceGenerator(
        tree,
        view_index,
        activity_name,
        layout_name,
        metadata,
        libraries,
        activity_file,
        resources=resources,
        indent=indent,
    ).generate()
