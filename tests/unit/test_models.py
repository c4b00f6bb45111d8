"""Unit tests for core models, configuration and errors."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from sketchback.core.config import Config, DecodingConfig
from sketchback.core.exceptions import (
    MalformedContainer,
    MalformedLogicTree,
    MalformedSection,
    ServiceError,
    ValidationError,
)
from sketchback.core.types import ServiceResult
from sketchback.models import (
    DecryptedProject,
    Handler,
    HandlerKind,
    ProjectMetadata,
    RawProject,
    ScreenDeclarations,
    VariableDeclaration,
    VariableType,
    ViewIdEntry,
    ViewIdIndex,
)


class TestProjectModels:
    """Tests for project-level models."""

    def test_raw_project_requires_every_section(self):
        with pytest.raises(MalformedContainer) as exc_info:
            RawProject(sections={"logic": b"", "view": b""})
        assert exc_info.value.section == "file"

    def test_decrypted_project_lookup(self, sample_sections):
        project = DecryptedProject(sections=sample_sections)
        assert project["library"] == sample_sections["library"]

    def test_package_path(self):
        metadata = ProjectMetadata(package_name="com.acme.tool", app_name="Tool")
        assert metadata.package_path.parts == ("com", "acme", "tool")


class TestLogicModels:
    """Tests for logic models."""

    @pytest.mark.parametrize("kind,target,event,expected", [
        (HandlerKind.INITIALIZE, "", "initializeLogic", "initializeLogic"),
        (HandlerKind.ACTIVITY_EVENT, "", "onPause", "onPause"),
        (HandlerKind.VIEW_EVENT, "button1", "onClick", "_button1_onClick"),
        (HandlerKind.MORE_BLOCK, "greet", "", "_greet"),
    ])
    def test_method_names(self, kind, target, event, expected):
        assert Handler(key="k", kind=kind, target=target, event=event).method_name == expected

    def test_declared_names(self):
        declarations = ScreenDeclarations(variables=[
            VariableDeclaration(type=VariableType.STRING, name="a"),
            VariableDeclaration(type=VariableType.NUMBER, name="b", is_list=True),
        ])
        assert declarations.names == {"a", "b"}
        assert declarations.more_block("a") is None


class TestViewIdIndex:
    """Tests for the view id index."""

    def test_referenced_filters_entries(self):
        index = ViewIdIndex(screen="main", entries={
            "root": ViewIdEntry(java_type="LinearLayout"),
            "button1": ViewIdEntry(java_type="Button", needs_reference=True),
        })
        assert "root" in index
        assert "ghost" not in index
        assert list(index.referenced) == ["button1"]


class TestConfig:
    """Tests for configuration."""

    def test_defaults(self):
        config = Config()
        assert config.decoding.cipher_key == "sketchwaresecure"
        assert config.decoding.skipped_view_extensions == ["xml_fab"]
        assert config.output.layout_dir == "res/layout"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SKB_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SKB_SOURCE_DIR", "app/src/main/java")
        config = Config.from_env()
        assert config.log_level == "DEBUG"
        assert config.output.source_dir == "app/src/main/java"

    def test_key_must_be_sixteen_bytes(self):
        with pytest.raises(PydanticValidationError):
            DecodingConfig(cipher_key="short")


class TestErrors:
    """Tests for exception messages."""

    def test_section_error_names_line(self):
        error = MalformedSection(message="bad cell", section="logic", line=12)
        assert "logic" in str(error)
        assert "12" in str(error)

    def test_logic_error_names_location(self):
        error = MalformedLogicTree(message="depth", screen="MainActivity", handler="b_onClick", block_id="7")
        text = str(error)
        assert "MainActivity" in text
        assert "b_onClick" in text
        assert "7" in text

    def test_validation_and_service_errors(self):
        assert "source" in str(ValidationError(message="missing", field_name="source"))
        error = ServiceError(message="boom", service_name="decompile", operation="decompile")
        assert str(error).startswith("[decompile.decompile]")


class TestServiceResult:
    """Tests for the result wrapper."""

    def test_ok_and_fail(self):
        ok = ServiceResult.ok("data", duration_ms=1.5)
        assert ok.success and ok.data == "data" and ok.metadata == {"duration_ms": 1.5}
        failed = ServiceResult.fail("nope")
        assert not failed.success and failed.error == "nope"
