"""
Decompile Service.

Runs the whole pipeline for one backup: unpack, decrypt, parse, build trees,
generate layouts and sources, write. Every artifact is generated in memory
before the first one is written, so a failing screen leaves no output behind.
"""

from __future__ import annotations

import time
from pathlib import Path

from pydantic import BaseModel, Field

from ...core.config import get_config
from ...core.exceptions import MalformedLogicTree, ServiceError, SketchbackError, ValidationError
from ...core.logging import bind_context, clear_context, get_logger
from ...core.types import ServiceResult
from ...models.logic import LogicTree
from ...models.project import RawProject, SketchProject
from ...storage import StorageBackend
from ..codegen import activity_class_name, generate_layout, generate_source
from ..parsing import parse_sections
from ..trees import build_logic_trees, build_view_id_index, build_view_trees, referenced_view_ids
from ..unpacking import decrypt_project, read_folder, unpack

logger = get_logger(__name__)


class DecompileInput(BaseModel):
    """Input for the decompile service."""

    source: Path = Field(description="Backup file (ZIP or framed) or extracted section folder")
    activities: list[str] = Field(default_factory=list, description="Restrict to these activity classes")
    layouts: list[str] = Field(default_factory=list, description="Restrict to these layout names")
    layout_only: bool = Field(default=False, description="Only generate layouts")
    java_only: bool = Field(default=False, description="Only generate sources")


class DecompileOutput(BaseModel):
    """Output from the decompile service."""

    package_name: str
    screens: list[str] = Field(default_factory=list, description="Screens that were generated")
    layout_keys: list[str] = Field(default_factory=list)
    source_keys: list[str] = Field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        return self.layout_keys + self.source_keys


class DecompileService:
    """Service turning a project backup into layout and source files."""

    def __init__(self, storage: StorageBackend) -> None:
        """Initialize the decompile service.

        Args:
            storage: Storage backend the generated files are written to
        """
        self.storage = storage
        self.output_config = get_config().output

    def _load(self, source: Path) -> RawProject:
        if not source.exists():
            raise ValidationError(message=f"input not found: {source}", field_name="source")
        if source.is_dir():
            logger.info("Reading section folder", path=str(source))
            return read_folder(source)
        return unpack(source)

    def _select_screens(self, project: SketchProject, input_data: DecompileInput) -> tuple[list[str], list[str]]:
        """Screens whose layout and whose activity source are requested.

        Layout names restrict layouts only; activity names restrict sources only.
        """
        screens = project.view.screens
        activity_screens = [s for s in screens if not project.files.is_custom_view(s)]

        known_activities = {activity_class_name(s) for s in activity_screens}
        for name in input_data.activities:
            if name not in known_activities:
                raise ValidationError(message=f"no activity named '{name}'", field_name="activities")
        for name in input_data.layouts:
            if name not in screens:
                raise ValidationError(message=f"no layout named '{name}'", field_name="layouts")

        layouts = [] if input_data.java_only else [
            s for s in screens if not input_data.layouts or s in input_data.layouts
        ]
        sources = [] if input_data.layout_only else [
            s for s in activity_screens
            if not input_data.activities or activity_class_name(s) in input_data.activities
        ]
        return layouts, sources

    def _validate(self, input_data: DecompileInput) -> None:
        if input_data.layout_only and input_data.java_only:
            raise ValidationError(
                message="layout_only and java_only are mutually exclusive",
                field_name="layout_only",
            )
        if input_data.java_only and input_data.layouts:
            raise ValidationError(
                message="cannot restrict layouts when only sources are generated",
                field_name="layouts",
            )
        if input_data.layout_only and input_data.activities:
            raise ValidationError(
                message="cannot restrict activities when only layouts are generated",
                field_name="activities",
            )

    def _check_logic_screens(self, project: SketchProject, logic_trees: dict[str, LogicTree]) -> None:
        activities = {
            activity_class_name(s) for s in project.view.screens if not project.files.is_custom_view(s)
        }
        for screen in logic_trees:
            if screen not in activities:
                raise MalformedLogicTree(
                    message="logic belongs to a screen without an activity layout",
                    screen=screen,
                    handler="",
                    block_id="",
                )

    def _layout_key(self, screen: str) -> str:
        return f"{self.output_config.layout_dir}/{screen}.xml"

    def _source_key(self, project: SketchProject, activity: str) -> str:
        package_dir = project.metadata.package_path.as_posix()
        return f"{self.output_config.source_dir}/{package_dir}/{activity}.{self.output_config.source_extension}"

    def generate(self, project: SketchProject, input_data: DecompileInput) -> tuple[dict[str, str], dict[str, str]]:
        """Build trees and generate every requested artifact in memory.

        Returns:
            Two dicts of storage key → content: layouts and sources.
        """
        logic_trees = build_logic_trees(project.logic)
        view_trees = build_view_trees(project.view.records, project.view.screens)
        self._check_logic_screens(project, logic_trees)
        referenced = referenced_view_ids(project.logic)
        indent = self.output_config.indent

        layout_screens, source_screens = self._select_screens(project, input_data)
        layouts: dict[str, str] = {}
        sources: dict[str, str] = {}
        for screen in layout_screens:
            bind_context(screen=screen)
            layouts[self._layout_key(screen)] = generate_layout(
                view_trees[screen], project.resources, project.files, project.metadata, indent=indent
            )

        for screen in source_screens:
            bind_context(screen=screen)
            tree = view_trees[screen]
            activity = activity_class_name(screen)
            logic = logic_trees.get(activity, LogicTree(screen=activity))
            sources[self._source_key(project, activity)] = generate_source(
                logic,
                build_view_id_index(tree, referenced),
                activity,
                screen,
                project.metadata,
                project.libraries,
                project.files.activity(screen),
                resources=project.resources,
                indent=indent,
            )
        clear_context()
        return layouts, sources

    def decompile(self, input_data: DecompileInput) -> ServiceResult[DecompileOutput]:
        """Decompile a backup into layouts and sources.

        Args:
            input_data: Source path, screen restrictions and output mode

        Returns:
            ServiceResult containing DecompileOutput, or a failure for invalid
            arguments. Decoding errors propagate as their own exception types.
        """
        start_time = time.perf_counter()

        try:
            logger.info("Starting decompile", source=str(input_data.source))
            self._validate(input_data)

            project = parse_sections(decrypt_project(self._load(input_data.source)))
            layouts, sources = self.generate(project, input_data)

            for key, content in {**layouts, **sources}.items():
                self.storage.store_text(key, content)

            layout_screens, source_screens = self._select_screens(project, input_data)
            output = DecompileOutput(
                package_name=project.metadata.package_name,
                screens=[s for s in project.view.screens if s in layout_screens or s in source_screens],
                layout_keys=list(layouts),
                source_keys=list(sources),
            )

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Decompile completed",
                layouts=len(layouts),
                sources=len(sources),
                duration_ms=duration_ms,
            )
            return ServiceResult.ok(output, duration_ms=duration_ms)

        except ValidationError as e:
            return ServiceResult.fail(str(e))
        except SketchbackError:
            clear_context()
            raise
        except Exception as e:
            logger.error("Decompile failed", error=str(e))
            raise ServiceError(
                message=f"Decompile failed: {e}",
                service_name="decompile",
                operation="decompile",
                cause=e,
            ) from e
