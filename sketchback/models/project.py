"""
Project-level data models.

RawProject and DecryptedProject are transient carriers of the six sections;
SketchProject is the parsed form consumed by the tree builders and generators.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.exceptions import MalformedContainer
from ..core.types import SECTION_NAMES
from .logic import LogicRecord, ScreenDeclarations
from .view import ViewRecord


def _check_sections(sections: dict) -> None:
    for name in SECTION_NAMES:
        if name not in sections:
            raise MalformedContainer(message="required section is missing", section=name)


class RawProject(BaseModel):
    """Section name → raw (possibly encrypted) bytes."""

    sections: dict[str, bytes]

    @model_validator(mode="after")
    def _all_sections_present(self) -> RawProject:
        _check_sections(self.sections)
        return self

    def __getitem__(self, name: str) -> bytes:
        return self.sections[name]


class DecryptedProject(BaseModel):
    """Section name → UTF-8 plaintext."""

    sections: dict[str, str]

    @model_validator(mode="after")
    def _all_sections_present(self) -> DecryptedProject:
        _check_sections(self.sections)
        return self

    def __getitem__(self, name: str) -> str:
        return self.sections[name]


class ProjectMetadata(BaseModel):
    """Package name, app name and version info from the project section."""

    model_config = ConfigDict(frozen=True)

    package_name: str
    app_name: str
    version_code: int = 1
    version_name: str = "1.0"

    @property
    def package_path(self) -> Path:
        return Path(*self.package_name.split("."))


class ResourceKind(str, Enum):
    """Resource groups of the resource section."""

    IMAGE = "images"
    SOUND = "sounds"
    FONT = "fonts"


class ResourceRecord(BaseModel):
    """A bundled asset: name used in references, file it was imported from."""

    kind: ResourceKind
    name: str
    filename: str


class ResourceIndex(BaseModel):
    """All resources of a project, grouped by kind."""

    records: list[ResourceRecord] = Field(default_factory=list)

    def has(self, kind: ResourceKind, name: str) -> bool:
        return any(r.kind == kind and r.name == name for r in self.records)

    def names(self, kind: ResourceKind) -> list[str]:
        return [r.name for r in self.records if r.kind == kind]


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    BOTH = "both"


class KeyboardSetting(str, Enum):
    UNSPECIFIED = "unspecified"
    VISIBLE = "visible"
    HIDDEN = "hidden"


class ActivityFile(BaseModel):
    """An activity entry of the file section."""

    name: str = Field(description="Layout name of the activity screen")
    orientation: Orientation = Orientation.PORTRAIT
    keyboard: KeyboardSetting = KeyboardSetting.UNSPECIFIED


class FileIndex(BaseModel):
    """Activities and custom (list item) views declared in the file section."""

    activities: list[ActivityFile] = Field(default_factory=list)
    custom_views: list[str] = Field(default_factory=list)

    def activity(self, name: str) -> ActivityFile | None:
        for activity in self.activities:
            if activity.name == name:
                return activity
        return None

    def is_custom_view(self, name: str) -> bool:
        return name in self.custom_views


class LibraryRecord(BaseModel):
    """A library toggle of the library section."""

    name: str
    enabled: bool = False


class LibraryIndex(BaseModel):
    records: list[LibraryRecord] = Field(default_factory=list)

    def enabled(self, name: str) -> bool:
        return any(r.name == name and r.enabled for r in self.records)


class LogicSection(BaseModel):
    """Parsed logic section: flat block records plus per-screen declarations."""

    records: list[LogicRecord] = Field(default_factory=list)
    declarations: dict[str, ScreenDeclarations] = Field(default_factory=dict)
    handler_keys: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Screen → handler keys in header order, including empty handlers",
    )


class ViewSection(BaseModel):
    """Parsed view section: flat records plus screens in header order."""

    records: list[ViewRecord] = Field(default_factory=list)
    screens: list[str] = Field(default_factory=list)


class SketchProject(BaseModel):
    """Every section of a project, parsed into typed records."""

    metadata: ProjectMetadata
    logic: LogicSection
    view: ViewSection
    resources: ResourceIndex
    files: FileIndex
    libraries: LibraryIndex
