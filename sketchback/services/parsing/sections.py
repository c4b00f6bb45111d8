"""
Record Parser.

Six independent parsers, one per section kind. Parsing is strict: a record with
the wrong field count or a malformed value is a MalformedSection naming the
section and line, never skipped.
"""

from __future__ import annotations

import re

from ...core.config import get_config
from ...core.exceptions import MalformedSection
from ...core.logging import get_logger
from ...models.logic import (
    ComponentDeclaration,
    LogicRecord,
    MoreBlockDeclaration,
    MoreBlockParameter,
    ScreenDeclarations,
    VariableDeclaration,
    VariableType,
)
from ...models.project import (
    ActivityFile,
    DecryptedProject,
    FileIndex,
    KeyboardSetting,
    LibraryIndex,
    LibraryRecord,
    LogicSection,
    Orientation,
    ProjectMetadata,
    ResourceIndex,
    ResourceKind,
    ResourceRecord,
    SketchProject,
    ViewSection,
)
from ...models.view import ViewRecord
from .cells import IDENTIFIER, parse_attributes, parse_parameters
from .framing import RawRecord, expect_fields, split_groups, unescape

logger = get_logger(__name__)

LOGIC_HEADER = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\.java_(.+)$")
VIEW_HEADER = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\.(xml(?:_[A-Za-z0-9_]+)?)$")
PACKAGE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)+$")
MORE_BLOCK_PARAMETER = re.compile(r"^%([sdbm])\.([A-Za-z_][A-Za-z0-9_]*)$")

DECLARATION_KEYS = ("var", "list", "components", "func")
LIST_TYPES = (VariableType.NUMBER, VariableType.STRING, VariableType.MAP)
REQUIRED_PROJECT_KEYS = ("package_name", "app_name", "version_code", "version_name")


def _identifier(value: str, what: str, section: str, record: RawRecord) -> str:
    value = unescape(value)
    if not IDENTIFIER.match(value):
        raise MalformedSection(message=f"invalid {what} {value!r}", section=section, line=record.line)
    return value


def _choice(value: str, enum_type, what: str, section: str, record: RawRecord):
    try:
        return enum_type(unescape(value))
    except ValueError:
        raise MalformedSection(message=f"invalid {what} {value!r}", section=section, line=record.line)


def _parse_more_block(name: str, spec: str, record: RawRecord) -> MoreBlockDeclaration:
    parameters = []
    for token in unescape(spec).split():
        match = MORE_BLOCK_PARAMETER.match(token)
        if not match:
            raise MalformedSection(
                message=f"invalid more block parameter {token!r}", section="logic", line=record.line
            )
        parameters.append(MoreBlockParameter(type_code=match.group(1), name=match.group(2)))
    return MoreBlockDeclaration(name=name, parameters=parameters)


def parse_logic(text: str) -> LogicSection:
    """Parse the logic section into flat block records and screen declarations."""
    section = "logic"
    result = LogicSection()
    seen: set[tuple[str, str]] = set()

    for group in split_groups(text, section):
        match = LOGIC_HEADER.match(group.header)
        if not match:
            raise MalformedSection(
                message=f"invalid logic header {group.header!r}", section=section, line=group.line
            )
        screen, key = match.group(1), match.group(2)
        if (screen, key) in seen:
            raise MalformedSection(
                message=f"duplicate logic header {group.header!r}", section=section, line=group.line
            )
        seen.add((screen, key))

        declarations = result.declarations.setdefault(screen, ScreenDeclarations())
        result.handler_keys.setdefault(screen, [])

        if key in ("var", "list"):
            for record in group.records:
                type_field, name_field = expect_fields(record, 2, section, key)
                var_type = _choice(type_field, VariableType, f"{key} type", section, record)
                if key == "list" and var_type not in LIST_TYPES:
                    raise MalformedSection(
                        message=f"invalid list type {type_field!r}", section=section, line=record.line
                    )
                declarations.variables.append(VariableDeclaration(
                    type=var_type,
                    name=_identifier(name_field, f"{key} name", section, record),
                    is_list=key == "list",
                ))

        elif key == "components":
            for record in group.records:
                type_field, name_field, extra = expect_fields(record, 3, section, key)
                declarations.components.append(ComponentDeclaration(
                    type=_identifier(type_field, "component type", section, record),
                    name=_identifier(name_field, "component name", section, record),
                    extra=unescape(extra),
                ))

        elif key == "func":
            for record in group.records:
                name_field, spec = expect_fields(record, 2, section, key)
                name = _identifier(name_field, "more block name", section, record)
                declarations.more_blocks.append(_parse_more_block(name, spec, record))

        else:
            result.handler_keys[screen].append(key)
            for record in group.records:
                block_id, depth, tag, params = expect_fields(record, 4, section, "block")
                if not re.match(r"^\d+$", depth):
                    raise MalformedSection(
                        message=f"invalid depth {depth!r}", section=section, line=record.line
                    )
                tag = unescape(tag).strip()
                if not tag:
                    raise MalformedSection(message="empty block tag", section=section, line=record.line)
                result.records.append(LogicRecord(
                    screen=screen,
                    handler=key,
                    line=record.line,
                    block_id=unescape(block_id),
                    depth=int(depth),
                    tag=tag,
                    params=parse_parameters(params, section, record.line),
                ))

    logger.debug("Parsed logic section", records=len(result.records), screens=len(result.declarations))
    return result


def parse_view(text: str, skipped_extensions: list[str] | None = None) -> ViewSection:
    """Parse the view section into flat view records grouped under screens."""
    section = "view"
    if skipped_extensions is None:
        skipped_extensions = get_config().decoding.skipped_view_extensions
    result = ViewSection()

    for group in split_groups(text, section):
        match = VIEW_HEADER.match(group.header)
        if not match:
            raise MalformedSection(
                message=f"invalid view header {group.header!r}", section=section, line=group.line
            )
        screen, extension = match.group(1), match.group(2)

        if extension in skipped_extensions:
            logger.debug("Skipping view group", screen=screen, extension=extension)
            continue
        if extension != "xml":
            raise MalformedSection(
                message=f"unknown view extension {extension!r}", section=section, line=group.line
            )
        if screen in result.screens:
            raise MalformedSection(
                message=f"duplicate view header {group.header!r}", section=section, line=group.line
            )
        result.screens.append(screen)

        for record in group.records:
            view_id, view_type, parent, attributes = expect_fields(record, 4, section, "view")
            parent = unescape(parent)
            result.records.append(ViewRecord(
                screen=screen,
                line=record.line,
                view_id=_identifier(view_id, "view id", section, record),
                type=_identifier(view_type, "view type", section, record),
                parent_id=_identifier(parent, "parent id", section, record) if parent else None,
                attributes=parse_attributes(attributes, section, record.line),
            ))

    logger.debug("Parsed view section", records=len(result.records), screens=len(result.screens))
    return result


def parse_resource(text: str) -> ResourceIndex:
    """Parse the resource section (images, sounds, fonts)."""
    section = "resource"
    result = ResourceIndex()
    for group in split_groups(text, section):
        try:
            kind = ResourceKind(group.header)
        except ValueError:
            raise MalformedSection(
                message=f"unknown resource group {group.header!r}", section=section, line=group.line
            )
        for record in group.records:
            name, filename = expect_fields(record, 2, section, group.header)
            result.records.append(ResourceRecord(
                kind=kind,
                name=_identifier(name, "resource name", section, record),
                filename=unescape(filename),
            ))
    return result


def parse_file(text: str) -> FileIndex:
    """Parse the file section (activities and custom views)."""
    section = "file"
    result = FileIndex()
    for group in split_groups(text, section):
        if group.header == "activity":
            for record in group.records:
                name, orientation, keyboard = expect_fields(record, 3, section, "activity")
                result.activities.append(ActivityFile(
                    name=_identifier(name, "activity name", section, record),
                    orientation=_choice(orientation, Orientation, "orientation", section, record),
                    keyboard=_choice(keyboard, KeyboardSetting, "keyboard setting", section, record),
                ))
        elif group.header == "customview":
            for record in group.records:
                (name,) = expect_fields(record, 1, section, "customview")
                result.custom_views.append(_identifier(name, "custom view name", section, record))
        else:
            raise MalformedSection(
                message=f"unknown file group {group.header!r}", section=section, line=group.line
            )
    return result


def parse_library(text: str) -> LibraryIndex:
    """Parse the library section (library toggles)."""
    section = "library"
    result = LibraryIndex()
    for group in split_groups(text, section):
        if group.header != "library":
            raise MalformedSection(
                message=f"unknown library group {group.header!r}", section=section, line=group.line
            )
        for record in group.records:
            name, enabled = expect_fields(record, 2, section, "library")
            if enabled not in ("Y", "N"):
                raise MalformedSection(
                    message=f"invalid library flag {enabled!r}", section=section, line=record.line
                )
            result.records.append(LibraryRecord(
                name=_identifier(name, "library name", section, record),
                enabled=enabled == "Y",
            ))
    return result


def parse_project(text: str) -> ProjectMetadata:
    """Parse the project section into ProjectMetadata."""
    section = "project"
    values: dict[str, str] = {}
    last_line = 0

    for group in split_groups(text, section):
        if group.header != "project":
            raise MalformedSection(
                message=f"unknown project group {group.header!r}", section=section, line=group.line
            )
        last_line = group.line
        for record in group.records:
            key, value = expect_fields(record, 2, section, "project")
            if key in values:
                raise MalformedSection(
                    message=f"duplicate project key {key!r}", section=section, line=record.line
                )
            values[key] = unescape(value)
            last_line = record.line

    for key in REQUIRED_PROJECT_KEYS:
        if key not in values:
            raise MalformedSection(
                message=f"missing project key {key!r}", section=section, line=last_line
            )
    if not PACKAGE_NAME.match(values["package_name"]):
        raise MalformedSection(
            message=f"invalid package name {values['package_name']!r}", section=section, line=last_line
        )
    if not re.match(r"^\d+$", values["version_code"]):
        raise MalformedSection(
            message=f"invalid version code {values['version_code']!r}", section=section, line=last_line
        )

    return ProjectMetadata(
        package_name=values["package_name"],
        app_name=values["app_name"],
        version_code=int(values["version_code"]),
        version_name=values["version_name"],
    )


def parse_sections(project: DecryptedProject) -> SketchProject:
    """Parse all six sections of a decrypted project."""
    parsed = SketchProject(
        metadata=parse_project(project["project"]),
        logic=parse_logic(project["logic"]),
        view=parse_view(project["view"]),
        resources=parse_resource(project["resource"]),
        files=parse_file(project["file"]),
        libraries=parse_library(project["library"]),
    )
    logger.info(
        "Sections parsed",
        package=parsed.metadata.package_name,
        layouts=len(parsed.view.screens),
        logic_records=len(parsed.logic.records),
    )
    return parsed
