"""Unit tests for the command-line interface."""

from typer.testing import CliRunner

from sketchback.cli import app
from sketchback.services.unpacking import encrypt

runner = CliRunner()


def test_extract_decrypts_sections(framed_backup, temp_dir, sample_sections):
    target = temp_dir / "extracted"
    result = runner.invoke(app, ["extract", str(framed_backup), "-o", str(target)])
    assert result.exit_code == 0, result.output
    assert (target / "logic").read_text(encoding="utf-8") == sample_sections["logic"]


def test_extract_without_decryption(framed_backup, temp_dir, encrypted_sections):
    target = temp_dir / "raw"
    result = runner.invoke(app, ["extract", str(framed_backup), "-o", str(target), "--no-decrypt"])
    assert result.exit_code == 0, result.output
    assert (target / "view").read_bytes() == encrypted_sections["view"]


def test_extract_malformed_backup(temp_dir):
    bad = temp_dir / "bad.skbk"
    bad.write_bytes(b"garbage")
    result = runner.invoke(app, ["extract", str(bad), "-o", str(temp_dir / "x")])
    assert result.exit_code == 1
    assert "MalformedContainer" in result.output


def test_decrypt_single_file(temp_dir):
    source = temp_dir / "library"
    source.write_bytes(encrypt("@library\ncompat\tN\n"))
    target = temp_dir / "library.txt"

    result = runner.invoke(app, ["decrypt", str(source), "-o", str(target)])
    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == "@library\ncompat\tN\n"

    again = runner.invoke(app, ["decrypt", str(source), "-o", str(target)])
    assert again.exit_code == 1

    forced = runner.invoke(app, ["decrypt", str(source), "-o", str(target), "--force"])
    assert forced.exit_code == 0


def test_generate(framed_backup, temp_dir):
    out = temp_dir / "generated"
    result = runner.invoke(app, ["generate", str(framed_backup), "-o", str(out), "--layout", "main"])
    assert result.exit_code == 0, result.output
    assert (out / "res/layout/main.xml").exists()
    assert (out / "java/com/example/demo/MainActivity.java").exists()
    assert not (out / "res/layout/second.xml").exists()
    assert (out / "java/com/example/demo/SecondActivity.java").exists()


def test_generate_conflicting_modes(framed_backup, temp_dir):
    result = runner.invoke(
        app, ["generate", str(framed_backup), "-o", str(temp_dir / "g"), "--layout-only", "--java-only"]
    )
    assert result.exit_code == 1


def test_config():
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "sketchwaresecure" in result.output


def test_generate_refuses_existing_output(framed_backup, temp_dir):
    existing = temp_dir / "existing"
    existing.mkdir()
    (existing / "keep.txt").write_text("keep", encoding="utf-8")

    result = runner.invoke(app, ["generate", str(framed_backup), "-o", str(existing)])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert sorted(p.name for p in existing.iterdir()) == ["keep.txt"]


def test_verbose_leaves_cached_config_untouched():
    from sketchback.core.config import get_config

    before = get_config().log_level
    result = runner.invoke(app, ["--verbose", "config"])
    assert result.exit_code == 0
    assert get_config().log_level == before
