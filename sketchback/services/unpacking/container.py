"""
Container Unpacker.

Turns a backup file into a RawProject. Two container layouts are understood:

* the framed layout: a magic/version header followed by length-prefixed,
  optionally zlib-compressed entries tagged with a section name;
* ZIP backups, whose sections live at ``data/<section>`` and ``project``.

Entries that do not name one of the six sections are ignored.
"""

from __future__ import annotations

import struct
import zipfile
import zlib
from pathlib import Path

from ...core.exceptions import MalformedContainer
from ...core.logging import get_logger
from ...core.types import SECTION_NAMES
from ...models.project import DecryptedProject, RawProject

logger = get_logger(__name__)

MAGIC = b"SKBK"
VERSION = 1
FLAG_COMPRESSED = 0x01

_HEADER = struct.Struct(">4sB")
_ENTRY_FLAGS_LENGTH = struct.Struct(">BI")

ZIP_ENTRY_NAMES: dict[str, str] = {
    "data/logic": "logic",
    "data/view": "view",
    "data/file": "file",
    "data/library": "library",
    "data/resource": "resource",
    "project": "project",
}


def _unpack_framed(data: bytes) -> dict[str, bytes]:
    if len(data) < _HEADER.size:
        raise MalformedContainer(message="file is shorter than the container header", section="header")

    magic, version = _HEADER.unpack_from(data, 0)
    if magic != MAGIC:
        raise MalformedContainer(message=f"bad magic {magic!r}", section="header")
    if version != VERSION:
        raise MalformedContainer(message=f"unsupported container version {version}", section="header")

    sections: dict[str, bytes] = {}
    offset = _HEADER.size
    index = 0

    while offset < len(data):
        entry = f"entry #{index}"

        name_len = data[offset]
        offset += 1
        if offset + name_len > len(data):
            raise MalformedContainer(message="truncated entry name", section=entry)
        name = data[offset:offset + name_len].decode("ascii", errors="replace")
        offset += name_len

        if offset + _ENTRY_FLAGS_LENGTH.size > len(data):
            raise MalformedContainer(message="truncated length prefix", section=name)
        flags, length = _ENTRY_FLAGS_LENGTH.unpack_from(data, offset)
        offset += _ENTRY_FLAGS_LENGTH.size

        if length > len(data) - offset:
            raise MalformedContainer(
                message=f"entry length {length} exceeds remaining {len(data) - offset} bytes",
                section=name,
            )
        payload = data[offset:offset + length]
        offset += length
        index += 1

        if name not in SECTION_NAMES:
            logger.debug("Ignoring unknown container entry", entry=name, size=length)
            continue
        if name in sections:
            raise MalformedContainer(message="section appears more than once", section=name)

        if flags & FLAG_COMPRESSED:
            try:
                payload = zlib.decompress(payload)
            except zlib.error as e:
                raise MalformedContainer(message="corrupt compressed entry", section=name, cause=e) from e

        sections[name] = payload

    return sections


def _unpack_zip(path: Path) -> dict[str, bytes]:
    sections: dict[str, bytes] = {}
    try:
        with zipfile.ZipFile(path, "r") as zf:
            for info in zf.infolist():
                section = ZIP_ENTRY_NAMES.get(info.filename)
                if section is None:
                    continue
                if section in sections:
                    raise MalformedContainer(message="section appears more than once", section=section)
                sections[section] = zf.read(info)
    except (zipfile.BadZipFile, zlib.error) as e:
        raise MalformedContainer(message="corrupt ZIP backup", section="archive", cause=e) from e
    return sections


def unpack(path: Path | str) -> RawProject:
    """Unpack a backup file into its six raw sections.

    Args:
        path: Path to the backup file.

    Returns:
        RawProject holding the six sections' bytes.

    Raises:
        MalformedContainer: If the container is truncated, corrupt, or misses
            a section.
    """
    path = Path(path)
    logger.info("Unpacking backup", path=str(path))

    if zipfile.is_zipfile(path):
        sections = _unpack_zip(path)
        layout = "zip"
    else:
        sections = _unpack_framed(path.read_bytes())
        layout = "framed"

    project = RawProject(sections=sections)
    logger.info("Backup unpacked", layout=layout, sizes={k: len(v) for k, v in sections.items()})
    return project


def read_folder(path: Path | str) -> RawProject:
    """Read the six section files of an extracted project folder."""
    path = Path(path)
    sections: dict[str, bytes] = {}
    for name in SECTION_NAMES:
        file_path = path / name
        if not file_path.is_file():
            raise MalformedContainer(
                message=f"file '{name}' does not exist inside {path}", section=name
            )
        sections[name] = file_path.read_bytes()
    return RawProject(sections=sections)


def write_folder(project: RawProject | DecryptedProject, path: Path | str) -> list[Path]:
    """Write each section of a project to its own file inside a folder."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    written = []
    for name in SECTION_NAMES:
        content = project[name]
        target = path / name
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
        written.append(target)
    logger.info("Sections written", path=str(path), count=len(written))
    return written
