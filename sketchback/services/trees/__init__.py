"""Tree builders turning flat records into per-screen trees."""

from .logic import LogicTreeBuilder, build_logic_trees
from .view import build_view_id_index, build_view_tree, build_view_trees, referenced_view_ids

__all__ = [
    "LogicTreeBuilder",
    "build_logic_trees",
    "build_view_id_index",
    "build_view_tree",
    "build_view_trees",
    "referenced_view_ids",
]
