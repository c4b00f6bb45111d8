"""Unit tests for container unpacking."""

import struct
import zipfile

import pytest

from sketchback.core.exceptions import MalformedContainer
from sketchback.core.types import SECTION_NAMES
from sketchback.services.unpacking import decrypt_project, read_folder, unpack, write_folder
from sketchback.services.unpacking.container import _ENTRY_FLAGS_LENGTH, FLAG_COMPRESSED, MAGIC, VERSION

HEADER = MAGIC + bytes([VERSION])


class TestFramedContainer:
    """Tests for the framed container layout."""

    def test_unpack_yields_six_sections(self, framed_backup, encrypted_sections):
        raw = unpack(framed_backup)
        assert set(raw.sections) == set(SECTION_NAMES)
        assert raw.sections == encrypted_sections

    def test_unknown_entries_are_ignored(self, temp_dir, encrypted_sections, pack_framed):
        entries = {"thumbnail": b"\x00\x01", **encrypted_sections, "extra": b"zzz"}
        path = temp_dir / "extra.skbk"
        path.write_bytes(pack_framed(entries))
        assert unpack(path).sections == encrypted_sections

    def test_missing_section_fails(self, temp_dir, encrypted_sections, pack_framed):
        entries = {k: v for k, v in encrypted_sections.items() if k != "resource"}
        path = temp_dir / "partial.skbk"
        path.write_bytes(pack_framed(entries))
        with pytest.raises(MalformedContainer) as exc_info:
            unpack(path)
        assert exc_info.value.section == "resource"

    def test_truncated_entry_fails(self, temp_dir, encrypted_sections, pack_framed):
        data = pack_framed(encrypted_sections)
        path = temp_dir / "truncated.skbk"
        path.write_bytes(data[:-5])
        with pytest.raises(MalformedContainer, match="exceeds remaining"):
            unpack(path)

    def test_bad_magic_fails(self, temp_dir):
        path = temp_dir / "bad.skbk"
        path.write_bytes(b"NOPE\x01")
        with pytest.raises(MalformedContainer) as exc_info:
            unpack(path)
        assert exc_info.value.section == "header"

    def test_unsupported_version_fails(self, temp_dir):
        path = temp_dir / "v9.skbk"
        path.write_bytes(MAGIC + b"\x09")
        with pytest.raises(MalformedContainer, match="version"):
            unpack(path)

    def test_duplicate_section_fails(self, temp_dir, encrypted_sections, pack_framed):
        data = pack_framed(encrypted_sections) + pack_framed({"logic": b"again"})[5:]
        path = temp_dir / "dup.skbk"
        path.write_bytes(data)
        with pytest.raises(MalformedContainer, match="more than once"):
            unpack(path)

    @pytest.mark.parametrize(
        "tail, message",
        [
            (b"\x0alog", "truncated entry name"),
            (b"\x05logic\x00\x00\x00", "truncated length prefix"),
        ],
    )
    def test_truncated_entry_header_fails(self, temp_dir, tail, message):
        path = temp_dir / "short.skbk"
        path.write_bytes(HEADER + tail)
        with pytest.raises(MalformedContainer, match=message):
            unpack(path)

    def test_corrupt_compressed_entry_fails(self, temp_dir):
        payload = b"not a zlib stream"
        entry = struct.pack(">B", 5) + b"logic" + _ENTRY_FLAGS_LENGTH.pack(FLAG_COMPRESSED, len(payload)) + payload
        path = temp_dir / "corrupt.skbk"
        path.write_bytes(HEADER + entry)
        with pytest.raises(MalformedContainer, match="corrupt compressed entry") as exc_info:
            unpack(path)
        assert exc_info.value.section == "logic"
        assert exc_info.value.__cause__ is not None


class TestZipContainer:
    """Tests for ZIP backups."""

    def test_unpack_zip(self, zip_backup, encrypted_sections):
        assert unpack(zip_backup).sections == encrypted_sections

    def test_duplicate_zip_section_fails(self, temp_dir, encrypted_sections):
        path = temp_dir / "dup.sh"
        with zipfile.ZipFile(path, "w") as zf:
            for name, payload in encrypted_sections.items():
                zf.writestr(name if name == "project" else f"data/{name}", payload)
            with pytest.warns(UserWarning):
                zf.writestr("data/logic", b"again")
        with pytest.raises(MalformedContainer, match="more than once") as exc_info:
            unpack(path)
        assert exc_info.value.section == "logic"


class TestFolders:
    """Tests for extracted section folders."""

    def test_read_folder_keeps_bytes(self, section_folder, sample_sections):
        raw = read_folder(section_folder)
        assert raw["logic"] == sample_sections["logic"].encode("utf-8")
        assert decrypt_project(raw).sections == sample_sections

    def test_read_folder_missing_file(self, section_folder):
        (section_folder / "library").unlink()
        with pytest.raises(MalformedContainer) as exc_info:
            read_folder(section_folder)
        assert exc_info.value.section == "library"

    def test_write_folder_decrypted(self, framed_backup, temp_dir, sample_sections):
        target = temp_dir / "extracted"
        written = write_folder(decrypt_project(unpack(framed_backup)), target)
        assert sorted(p.name for p in written) == sorted(SECTION_NAMES)
        assert (target / "project").read_text(encoding="utf-8") == sample_sections["project"]
