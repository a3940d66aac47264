"""Key-space tree construction, projection, and row formatting.

Defines the arena-backed ``KeyTree`` built from delimiter-structured keys and
the ``FlatNode`` rows the tree pane renders.
"""

from __future__ import annotations

from .build import build_key_tree, sort_tree, split_key
from .flatten import FlatNode, clamp_selection, flatten_tree, row_index_for_path
from .rendering import format_tree_row, tree_marker_for
from .types import InvalidTreePath, KeyTree, NodeSnapshot, SegmentPath, TreeNode, TreePath

__all__ = [
    "KeyTree",
    "TreeNode",
    "NodeSnapshot",
    "InvalidTreePath",
    "SegmentPath",
    "TreePath",
    "split_key",
    "sort_tree",
    "build_key_tree",
    "FlatNode",
    "flatten_tree",
    "clamp_selection",
    "row_index_for_path",
    "format_tree_row",
    "tree_marker_for",
]
