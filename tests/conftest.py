"""Test configuration for sketchback."""

import io
import struct
import tempfile
import zipfile
import zlib
from pathlib import Path

import pytest


def _lines(*rows):
    """Join rows (tuples of fields or header strings) into section text."""
    return "\n".join(row if isinstance(row, str) else "\t".join(row) for row in rows) + "\n"


LOGIC = _lines(
    "@MainActivity.java_var",
    ("string", "name"),
    ("number", "count"),
    "@MainActivity.java_list",
    ("string", "items"),
    "@MainActivity.java_components",
    ("Intent", "intent", ""),
    ("SharedPreferences", "prefs", "settings"),
    "@MainActivity.java_func",
    ("greet", "%s.text"),
    "@MainActivity.java_onCreate_initializeLogic",
    ("10", "0", "setText", "w:textview1,s:Welcome"),
    ("11", "0", "repeat", "n:3"),
    ("12", "1", "increaseInt", "v:count"),
    "@MainActivity.java_button1_onClick",
    ("20", "0", "showMessage", "s:Clicked"),
    "@MainActivity.java_greet_moreBlock",
    ("30", "0", "showMessage", "a:text"),
    "@SecondActivity.java_onBackPressed",
    ("40", "0", "finishActivity", ""),
)

VIEW = _lines(
    "@main.xml",
    ("linear1", "LinearLayout", "", "layout_width=d:-1,layout_height=d:-1,padding=d:8"),
    ("textview1", "TextView", "linear1",
     "layout_width=d:-2,layout_height=d:-2,text=s:Hello,textSize=n:14,textColor=c:#000000"),
    ("button1", "Button", "linear1", "layout_width=d:-1,layout_height=d:-2,text=s:Click me,layout_weight=n:1"),
    "@main.xml_fab",
    ("_fab", "FloatingActionButton", "", ""),
    "@second.xml",
    ("frame1", "FrameLayout", "", "layout_width=d:-1,layout_height=d:-1"),
    ("imageview1", "ImageView", "frame1", "layout_width=d:-2,layout_height=d:-2,src=r:logo"),
)

FILE = _lines(
    "@activity",
    ("main", "portrait", "unspecified"),
    ("second", "both", "hidden"),
)

LIBRARY = _lines(
    "@library",
    ("compat", "N"),
)

RESOURCE = _lines(
    "@images",
    ("logo", "logo.png"),
    "@sounds",
    "@fonts",
)

PROJECT = _lines(
    "@project",
    ("package_name", "com.example.demo"),
    ("app_name", "Demo"),
    ("version_code", "3"),
    ("version_name", "1.2"),
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_sections():
    """Plaintext of the six sections of a two-screen project.

    ``main`` holds a LinearLayout with a TextView and a Button whose click
    handler shows one message; ``second`` holds a FrameLayout with an image.
    """
    return {
        "logic": LOGIC,
        "view": VIEW,
        "file": FILE,
        "library": LIBRARY,
        "resource": RESOURCE,
        "project": PROJECT,
    }


@pytest.fixture
def encrypted_sections(sample_sections):
    """The sample sections, each passed through the format cipher."""
    from sketchback.services.unpacking import encrypt

    return {name: encrypt(text) for name, text in sample_sections.items()}


@pytest.fixture
def pack_framed():
    """Return a builder for framed containers.

    The builder takes ``{entry_name: payload_bytes}`` and an optional set of
    entry names to zlib-compress, and returns the container bytes.
    """
    from sketchback.services.unpacking.container import (
        _ENTRY_FLAGS_LENGTH,
        _HEADER,
        FLAG_COMPRESSED,
        MAGIC,
        VERSION,
    )

    def build(entries, compressed=()):
        out = io.BytesIO()
        out.write(_HEADER.pack(MAGIC, VERSION))
        for name, payload in entries.items():
            flags = 0
            if name in compressed:
                payload = zlib.compress(payload)
                flags |= FLAG_COMPRESSED
            encoded = name.encode("ascii")
            out.write(struct.pack(">B", len(encoded)))
            out.write(encoded)
            out.write(_ENTRY_FLAGS_LENGTH.pack(flags, len(payload)))
            out.write(payload)
        return out.getvalue()

    return build


@pytest.fixture
def framed_backup(temp_dir, encrypted_sections, pack_framed):
    """A framed backup of the encrypted sample project on disk."""
    path = temp_dir / "demo.skbk"
    path.write_bytes(pack_framed(encrypted_sections, compressed={"logic", "view"}))
    return path


@pytest.fixture
def zip_backup(temp_dir, encrypted_sections):
    """A ZIP backup of the encrypted sample project on disk."""
    path = temp_dir / "demo.sh"
    with zipfile.ZipFile(path, "w") as zf:
        for name, payload in encrypted_sections.items():
            zf.writestr(name if name == "project" else f"data/{name}", payload)
        zf.writestr("resources/images/logo.png", b"\x89PNG")
    return path


@pytest.fixture
def section_folder(temp_dir, sample_sections, encrypted_sections):
    """An extracted project folder mixing plaintext and ciphertext files."""
    folder = temp_dir / "sections"
    folder.mkdir()
    for name in sample_sections:
        if name in ("logic", "project"):
            (folder / name).write_text(sample_sections[name], encoding="utf-8")
        else:
            (folder / name).write_bytes(encrypted_sections[name])
    return folder


@pytest.fixture
def storage(temp_dir):
    """Create a storage backend for testing.

    Args:
        temp_dir: Pytest fixture providing a temporary directory path.

    Returns:
        LocalStorageBackend: A local storage backend instance configured
            to use an ``out`` folder inside the temporary directory.
    """
    from sketchback.storage import LocalStorageBackend
    return LocalStorageBackend(temp_dir / "out")


@pytest.fixture
def project(sample_sections):
    """The sample sections parsed into a SketchProject."""
    from sketchback.models import DecryptedProject
    from sketchback.services.parsing import parse_sections

    return parse_sections(DecryptedProject(sections=sample_sections))
