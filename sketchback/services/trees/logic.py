"""
Logic Tree Builder.

Logic records arrive flat, in program order, with an explicit nesting depth.
The builder groups them by screen and handler, then rebuilds nested block
sequences: control-flow openers start a child sequence one level deeper, and a
record at a shallower depth closes the sequences above it. Depth is
authoritative; two consecutive records at the same depth are always siblings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...core.exceptions import MalformedLogicTree, UnsupportedBlock
from ...core.logging import get_logger
from ...models.logic import (
    Branch,
    ControlBlock,
    Expression,
    Handler,
    HandlerKind,
    LiteralType,
    LiteralValue,
    LogicRecord,
    LogicTree,
    Reference,
    ReferenceNamespace,
    ScreenDeclarations,
    StatementBlock,
    VariableBlock,
    iter_references,
)
from ...models.project import LogicSection
from ..parsing.cells import IDENTIFIER
from .events import classify_handler, handler_arguments

logger = get_logger(__name__)

CONTROL_TAGS = frozenset({"if", "repeat", "forever", "while"})
BRANCH_TAGS = frozenset({"elseIf", "else"})
ASSIGNMENT_TAGS = frozenset({"setVar", "increaseInt", "decreaseInt"})
DECLARATION_TAG = "localVar"
FUNCTION_CALL_TAG = "definedFunc"

LOCAL_TYPES = ("boolean", "number", "string", "map")


@dataclass
class _Frame:
    """An open block sequence and the locals declared in it."""

    blocks: list
    scope: set[str] = field(default_factory=set)


class LogicTreeBuilder:
    """Builds the LogicTree of one screen."""

    def __init__(
        self,
        screen: str,
        records: list[LogicRecord],
        declarations: ScreenDeclarations,
        handler_keys: list[str],
    ) -> None:
        self.screen = screen
        self.records = records
        self.declarations = declarations
        self.handler_keys = handler_keys
        self._block_ids: set[str] = set()

    def build(self) -> LogicTree:
        by_handler: dict[str, list[LogicRecord]] = {key: [] for key in self.handler_keys}
        for record in self.records:
            by_handler.setdefault(record.handler, []).append(record)

        handlers = {key: self._build_handler(key, records) for key, records in by_handler.items()}
        return LogicTree(screen=self.screen, declarations=self.declarations, handlers=handlers)

    def _error(self, message: str, handler: str, record: LogicRecord | None = None) -> MalformedLogicTree:
        context = {"line": record.line} if record else {}
        return MalformedLogicTree(
            message=message,
            context=context,
            screen=self.screen,
            handler=handler,
            block_id=record.block_id if record else "",
        )

    def _build_handler(self, key: str, records: list[LogicRecord]) -> Handler:
        binding = classify_handler(key)
        if binding is None:
            event = key.rpartition("_")[2] or key
            raise UnsupportedBlock(
                message=f"no event binding for handler '{key}'",
                tag=event,
                screen=self.screen,
                handler=key,
            )

        more_block = None
        if binding.kind == HandlerKind.MORE_BLOCK:
            more_block = self.declarations.more_block(binding.target)
            if more_block is None:
                raise self._error(f"body of undeclared more block '{binding.target}'", key)

        arguments = handler_arguments(binding, more_block)
        argument_names = {a.name for a in arguments}

        root = _Frame(blocks=[])
        stack = [root]

        for record in records:
            if record.block_id in self._block_ids:
                raise self._error(f"duplicate block id '{record.block_id}'", key, record)
            self._block_ids.add(record.block_id)

            open_depth = len(stack) - 1
            if record.depth > open_depth:
                raise self._error(
                    f"record at depth {record.depth} but only {open_depth} block(s) are open",
                    key,
                    record,
                )
            del stack[record.depth + 1:]
            frame = stack[-1]

            self._resolve(record.params, stack, argument_names, key, record)

            if record.tag in BRANCH_TAGS:
                stack.append(self._add_branch(frame, record, key))
            elif record.tag in CONTROL_TAGS:
                self._check_arity(record, key, 0 if record.tag == "forever" else 1)
                branch = Branch(tag=record.tag, params=record.params)
                block = ControlBlock(block_id=record.block_id, tag=record.tag, branches=[branch])
                frame.blocks.append(block)
                stack.append(_Frame(blocks=block.branches[0].blocks))
            elif record.tag == DECLARATION_TAG:
                frame.blocks.append(self._declare_local(frame, record, key))
            elif record.tag in ASSIGNMENT_TAGS:
                frame.blocks.append(self._assignment(record, key))
            else:
                if record.tag == FUNCTION_CALL_TAG:
                    self._check_function_call(record, key)
                frame.blocks.append(
                    StatementBlock(block_id=record.block_id, tag=record.tag, params=record.params)
                )

        logger.debug(
            "Built handler",
            screen=self.screen,
            handler=key,
            kind=binding.kind.value,
            records=len(records),
        )
        return Handler(
            key=key,
            kind=binding.kind,
            target=binding.target,
            event=binding.event,
            arguments=arguments,
            blocks=root.blocks,
        )

    def _add_branch(self, frame: _Frame, record: LogicRecord, key: str) -> _Frame:
        previous = frame.blocks[-1] if frame.blocks else None
        if not isinstance(previous, ControlBlock) or previous.tag != "if":
            raise self._error(f"'{record.tag}' does not follow an if block", key, record)
        if previous.branches[-1].tag == "else":
            raise self._error(f"'{record.tag}' follows an else branch", key, record)
        self._check_arity(record, key, 1 if record.tag == "elseIf" else 0)

        branch = Branch(tag=record.tag, params=record.params)
        previous.branches.append(branch)
        return _Frame(blocks=previous.branches[-1].blocks)

    def _check_arity(self, record: LogicRecord, key: str, expected: int) -> None:
        if len(record.params) != expected:
            raise self._error(
                f"'{record.tag}' takes {expected} parameter(s), got {len(record.params)}",
                key,
                record,
            )

    def _declare_local(self, frame: _Frame, record: LogicRecord, key: str) -> VariableBlock:
        params = record.params
        if len(params) not in (2, 3) or not all(
            isinstance(p, LiteralValue) and p.type == LiteralType.ENUM for p in params[:2]
        ):
            raise self._error("localVar expects type and name enums and an optional value", key, record)
        var_type, name = params[0].value, params[1].value
        if var_type not in LOCAL_TYPES:
            raise self._error(f"invalid local variable type '{var_type}'", key, record)
        if not IDENTIFIER.match(name):
            raise self._error(f"invalid local variable name '{name}'", key, record)
        frame.scope.add(name)
        return VariableBlock(block_id=record.block_id, tag=record.tag, target=name, params=params)

    def _assignment(self, record: LogicRecord, key: str) -> VariableBlock:
        expected = 2 if record.tag == "setVar" else 1
        target = record.params[0] if record.params else None
        if (
            len(record.params) != expected
            or not isinstance(target, Reference)
            or target.namespace != ReferenceNamespace.VARIABLE
        ):
            raise self._error(f"'{record.tag}' expects a variable reference first", key, record)
        return VariableBlock(
            block_id=record.block_id, tag=record.tag, target=target.name, params=record.params
        )

    def _check_function_call(self, record: LogicRecord, key: str) -> None:
        name = record.params[0] if record.params else None
        if not isinstance(name, LiteralValue) or name.type != LiteralType.ENUM:
            raise self._error("definedFunc expects the function name first", key, record)
        declaration = self.declarations.more_block(name.value)
        if declaration is None:
            raise self._error(f"call to undeclared more block '{name.value}'", key, record)
        if len(record.params) - 1 != len(declaration.parameters):
            raise self._error(
                f"'{name.value}' takes {len(declaration.parameters)} argument(s), "
                f"got {len(record.params) - 1}",
                key,
                record,
            )

    def _resolve(
        self,
        params: list[Expression],
        stack: list[_Frame],
        argument_names: set[str],
        key: str,
        record: LogicRecord,
    ) -> None:
        visible = set(self.declarations.names)
        for frame in stack:
            visible |= frame.scope

        for reference in iter_references(params):
            if reference.namespace == ReferenceNamespace.VARIABLE and reference.name not in visible:
                raise self._error(f"unresolved variable '{reference.name}'", key, record)
            if reference.namespace == ReferenceNamespace.ARGUMENT and reference.name not in argument_names:
                raise self._error(f"unresolved handler argument '{reference.name}'", key, record)


def build_logic_trees(section: LogicSection) -> dict[str, LogicTree]:
    """Group flat logic records by screen and build one LogicTree per screen."""
    by_screen: dict[str, list[LogicRecord]] = {screen: [] for screen in section.declarations}
    for record in section.records:
        by_screen.setdefault(record.screen, []).append(record)

    trees = {}
    for screen, records in by_screen.items():
        builder = LogicTreeBuilder(
            screen=screen,
            records=records,
            declarations=section.declarations.get(screen, ScreenDeclarations()),
            handler_keys=section.handler_keys.get(screen, []),
        )
        trees[screen] = builder.build()

    logger.info("Logic trees built", screens=len(trees))
    return trees

