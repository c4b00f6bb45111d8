"""
Line framing shared by every section parser.

A section is a sequence of ``@header`` lines, each followed by the TAB-separated
records belonging to it. Blank lines are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...core.exceptions import MalformedSection

_ESCAPES = {"t": "\t", "n": "\n"}


@dataclass
class RawRecord:
    """A record line split into raw (still escaped) fields."""

    line: int
    fields: list[str]


@dataclass
class Group:
    """A header and the records that follow it."""

    header: str
    line: int
    records: list[RawRecord] = field(default_factory=list)


def unescape(text: str) -> str:
    """Resolve backslash escapes: ``\\t`` and ``\\n`` map to control chars, ``\\x`` to x."""
    if "\\" not in text:
        return text

    out = []
    chars = iter(text)
    for char in chars:
        if char != "\\":
            out.append(char)
            continue
        escaped = next(chars, "\\")
        out.append(_ESCAPES.get(escaped, escaped))
    return "".join(out)


def split_groups(text: str, section: str) -> list[Group]:
    """Split section text into header groups.

    Raises:
        MalformedSection: If a record appears before the first header or a
            header is empty.
    """
    groups: list[Group] = []
    current: Group | None = None

    for number, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue

        if line.startswith("@"):
            header = line[1:].strip()
            if not header:
                raise MalformedSection(message="empty header", section=section, line=number)
            current = Group(header=header, line=number)
            groups.append(current)
            continue

        if current is None:
            raise MalformedSection(
                message="record appears before any header", section=section, line=number
            )
        current.records.append(RawRecord(line=number, fields=line.split("\t")))

    return groups


def expect_fields(record: RawRecord, count: int, section: str, kind: str) -> list[str]:
    """Check a record's field count and return its raw fields."""
    if len(record.fields) != count:
        raise MalformedSection(
            message=f"{kind} record has {len(record.fields)} fields, expected {count}",
            section=section,
            line=record.line,
        )
    return record.fields
