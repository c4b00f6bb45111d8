"""
View Tree Builder.

Links flat view records into one component tree per screen by parent id and
derives the ViewIdIndex consumed by the source generator.
"""

from __future__ import annotations

from ...core.exceptions import MalformedViewTree, UnsupportedComponent
from ...core.logging import get_logger
from ...models.logic import HandlerKind, ReferenceNamespace, iter_references
from ...models.project import LogicSection
from ...models.view import ViewIdEntry, ViewIdIndex, ViewNode, ViewRecord, ViewTree
from .components import component
from .events import classify_handler

logger = get_logger(__name__)


def build_view_tree(screen: str, records: list[ViewRecord]) -> ViewTree:
    """Build the component tree of one screen.

    Args:
        screen: Layout name.
        records: The screen's view records in section order.

    Returns:
        The screen's ViewTree.

    Raises:
        MalformedViewTree: On duplicate ids, zero or several roots, parents
            that do not resolve, nodes unreachable from the root, or a
            single-child container holding more than one child.
    """
    nodes: dict[str, ViewNode] = {}
    for record in records:
        if record.view_id in nodes:
            raise MalformedViewTree(
                message="duplicate view id", screen=screen, view_id=record.view_id,
                context={"line": record.line},
            )
        nodes[record.view_id] = ViewNode(record=record)

    roots = [r for r in records if r.parent_id is None]
    if len(roots) != 1:
        raise MalformedViewTree(
            message=f"expected exactly one root view, found {len(roots)}",
            screen=screen,
            view_id=",".join(r.view_id for r in roots),
        )

    for record in records:
        if record.parent_id is None:
            continue
        parent = nodes.get(record.parent_id)
        if parent is None:
            raise MalformedViewTree(
                message=f"parent '{record.parent_id}' does not exist in this screen",
                screen=screen,
                view_id=record.view_id,
                context={"line": record.line},
            )
        parent.children.append(nodes[record.view_id])

    root = nodes[roots[0].view_id]
    reached = set()
    pending = [root]
    while pending:
        node = pending.pop()
        reached.add(node.view_id)
        pending.extend(node.children)

    unreachable = [r.view_id for r in records if r.view_id not in reached]
    if unreachable:
        raise MalformedViewTree(
            message="views are not reachable from the root (parent cycle)",
            screen=screen,
            view_id=unreachable[0],
            context={"unreachable": unreachable},
        )

    for node in root.walk():
        spec = component(node.record.type)
        if spec is not None and spec.max_children is not None and len(node.children) > spec.max_children:
            raise MalformedViewTree(
                message=f"{node.record.type} holds {len(node.children)} children, at most {spec.max_children} allowed",
                screen=screen,
                view_id=node.view_id,
            )

    return ViewTree(screen=screen, root=root)


def build_view_trees(records: list[ViewRecord], screens: list[str]) -> dict[str, ViewTree]:
    """Group view records by screen and build one tree per screen."""
    by_screen: dict[str, list[ViewRecord]] = {screen: [] for screen in screens}
    for record in records:
        by_screen.setdefault(record.screen, []).append(record)

    trees = {screen: build_view_tree(screen, screen_records) for screen, screen_records in by_screen.items()}
    logger.info("View trees built", screens=len(trees))
    return trees


def referenced_view_ids(logic: LogicSection) -> set[str]:
    """Every view id referenced by a logic block or bound by a view event, project-wide."""
    referenced = {
        reference.name
        for record in logic.records
        for reference in iter_references(record.params)
        if reference.namespace == ReferenceNamespace.VIEW
    }
    for keys in logic.handler_keys.values():
        for key in keys:
            binding = classify_handler(key)
            if binding is not None and binding.kind == HandlerKind.VIEW_EVENT:
                referenced.add(binding.target)
    return referenced


def build_view_id_index(tree: ViewTree, referenced: set[str]) -> ViewIdIndex:
    """Derive the id → (Java type, needs reference) index of a screen."""
    index = ViewIdIndex(screen=tree.screen)
    for node in tree.walk():
        spec = component(node.record.type)
        if spec is None:
            raise UnsupportedComponent(
                message="no component mapping for view type",
                tag=node.record.type,
                screen=tree.screen,
                context={"view_id": node.view_id},
            )
        index.entries[node.view_id] = ViewIdEntry(
            java_type=spec.java_type,
            needs_reference=node.view_id in referenced,
        )
    return index
