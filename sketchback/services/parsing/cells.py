"""
Cell decoding.

Logic parameters and view attributes are stored as comma-separated cells. A
cell item is either ``prefix:text`` or a bracketed call ``[tag,item,...]``
whose arguments are items themselves, so cells decode into expression trees.
"""

from __future__ import annotations

import re

from ...core.exceptions import MalformedSection
from ...models.logic import (
    Call,
    Expression,
    LiteralType,
    LiteralValue,
    Reference,
    ReferenceNamespace,
)
from ...models.view import AttributeKind, ViewAttribute

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
NUMBER = re.compile(r"^-?\d+(\.\d+)?$")
ENUM = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\|[A-Za-z_][A-Za-z0-9_]*)*$")
HEX_COLOR = re.compile(r"^#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")

LITERAL_PREFIXES: dict[str, LiteralType] = {
    "s": LiteralType.STRING,
    "n": LiteralType.NUMBER,
    "b": LiteralType.BOOLEAN,
    "c": LiteralType.COLOR,
    "e": LiteralType.ENUM,
    "r": LiteralType.RESOURCE,
}

REFERENCE_PREFIXES: dict[str, ReferenceNamespace] = {
    "v": ReferenceNamespace.VARIABLE,
    "w": ReferenceNamespace.VIEW,
    "a": ReferenceNamespace.ARGUMENT,
}

ATTRIBUTE_PREFIXES: dict[str, AttributeKind] = {
    "d": AttributeKind.DIMENSION,
    "s": AttributeKind.TEXT,
    "c": AttributeKind.COLOR,
    "r": AttributeKind.RESOURCE,
    "n": AttributeKind.NUMBER,
    "b": AttributeKind.BOOLEAN,
    "e": AttributeKind.ENUM,
}

_ESCAPES = {"t": "\t", "n": "\n"}
_TERMINATORS = {",", "]"}


def normalize_color(text: str) -> str | None:
    """Return a color as 8 upper-case hex digits (AARRGGBB), or None if invalid.

    Decimal colors are signed 32-bit ints (Android's packed ARGB), so
    ``-16777216`` is opaque black and anything outside that range is rejected.
    """
    if HEX_COLOR.match(text):
        digits = text[1:].upper()
        return digits if len(digits) == 8 else "FF" + digits
    if re.match(r"^-?\d+$", text):
        value = int(text)
        if -(2**31) <= value < 2**31:
            return f"{value & 0xFFFFFFFF:08X}"
    return None


class CellReader:
    """Recursive-descent reader over one raw (still escaped) cell."""

    def __init__(self, text: str, section: str, line: int) -> None:
        self.text = text
        self.pos = 0
        self.section = section
        self.line = line

    def fail(self, message: str) -> MalformedSection:
        return MalformedSection(
            message=f"{message} at column {self.pos + 1} of cell {self.text!r}",
            section=self.section,
            line=self.line,
        )

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if not self.at_end() else ""

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.fail(f"expected {char!r}")
        self.pos += 1

    def read_text(self) -> str:
        """Read escaped text up to the next unescaped comma or closing bracket."""
        out = []
        while not self.at_end():
            char = self.text[self.pos]
            if char in _TERMINATORS:
                break
            if char == "[":
                raise self.fail("unescaped '[' inside text")
            if char == "\\":
                self.pos += 1
                if self.at_end():
                    raise self.fail("dangling escape")
                escaped = self.text[self.pos]
                out.append(_ESCAPES.get(escaped, escaped))
            else:
                out.append(char)
            self.pos += 1
        return "".join(out)

    def read_prefix(self) -> str:
        start = self.pos
        while not self.at_end() and self.peek() not in (":", ",", "]", "["):
            self.pos += 1
        prefix = self.text[start:self.pos]
        self.expect(":")
        return prefix

    def read_item(self) -> Expression:
        if self.peek() == "[":
            return self.read_call()

        prefix = self.read_prefix()
        text = self.read_text()

        if prefix in LITERAL_PREFIXES:
            return self.make_literal(LITERAL_PREFIXES[prefix], text)
        if prefix in REFERENCE_PREFIXES:
            if not IDENTIFIER.match(text):
                raise self.fail(f"invalid reference name {text!r}")
            return Reference(namespace=REFERENCE_PREFIXES[prefix], name=text)
        raise self.fail(f"unknown cell prefix {prefix!r}")

    def read_call(self) -> Call:
        self.expect("[")
        tag = self.read_text().strip()
        if not tag:
            raise self.fail("call without a tag")

        args: list[Expression] = []
        while self.peek() == ",":
            self.pos += 1
            args.append(self.read_item())
        self.expect("]")
        return Call(tag=tag, args=args)

    def make_literal(self, literal_type: LiteralType, text: str) -> LiteralValue:
        if literal_type == LiteralType.NUMBER and not NUMBER.match(text):
            raise self.fail(f"invalid number {text!r}")
        if literal_type == LiteralType.BOOLEAN and text not in ("true", "false"):
            raise self.fail(f"invalid boolean {text!r}")
        if literal_type == LiteralType.COLOR:
            color = normalize_color(text)
            if color is None:
                raise self.fail(f"invalid color {text!r}")
            text = color
        if literal_type == LiteralType.ENUM and not ENUM.match(text):
            raise self.fail(f"invalid enum value {text!r}")
        if literal_type == LiteralType.RESOURCE and not IDENTIFIER.match(text):
            raise self.fail(f"invalid resource name {text!r}")
        return LiteralValue(type=literal_type, value=text)

    def read_list(self) -> list[Expression]:
        """Read the whole cell as a comma-separated item list."""
        items: list[Expression] = []
        if self.at_end():
            return items
        while True:
            items.append(self.read_item())
            if self.at_end():
                return items
            self.expect(",")

    def read_attributes(self) -> list[ViewAttribute]:
        """Read the whole cell as comma-separated ``name=prefix:text`` pairs."""
        attributes: list[ViewAttribute] = []
        if self.at_end():
            return attributes
        while True:
            start = self.pos
            while not self.at_end() and self.peek() != "=":
                self.pos += 1
            name = self.text[start:self.pos]
            if not IDENTIFIER.match(name):
                raise self.fail(f"invalid attribute name {name!r}")
            self.expect("=")

            prefix = self.read_prefix()
            if prefix not in ATTRIBUTE_PREFIXES:
                raise self.fail(f"unknown attribute prefix {prefix!r}")
            kind = ATTRIBUTE_PREFIXES[prefix]
            value = self.read_text()
            attributes.append(ViewAttribute(name=name, kind=kind, value=self.check_attribute(kind, value)))

            if self.at_end():
                return attributes
            self.expect(",")

    def check_attribute(self, kind: AttributeKind, value: str) -> str:
        if kind == AttributeKind.DIMENSION:
            if not re.match(r"^-?\d+$", value) or int(value) < -2:
                raise self.fail(f"invalid dimension {value!r}")
        elif kind == AttributeKind.TEXT:
            return value
        else:
            literal_type = {
                AttributeKind.COLOR: LiteralType.COLOR,
                AttributeKind.RESOURCE: LiteralType.RESOURCE,
                AttributeKind.NUMBER: LiteralType.NUMBER,
                AttributeKind.BOOLEAN: LiteralType.BOOLEAN,
                AttributeKind.ENUM: LiteralType.ENUM,
            }[kind]
            return self.make_literal(literal_type, value).value
        return value


def parse_parameters(cell: str, section: str, line: int) -> list[Expression]:
    """Decode a logic parameter cell into expression nodes."""
    return CellReader(cell, section, line).read_list()


def parse_attributes(cell: str, section: str, line: int) -> list[ViewAttribute]:
    """Decode a view attribute cell into typed attributes."""
    return CellReader(cell, section, line).read_attributes()
