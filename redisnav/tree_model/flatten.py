"""Projection of a ``KeyTree`` into render-ready rows."""

from __future__ import annotations

from dataclasses import dataclass

from ..store.types import ValueKind
from .types import KeyTree, TreePath


@dataclass(frozen=True)
class FlatNode:
    """One visible tree row; a snapshot that does not track later tree edits."""

    depth: int
    path: TreePath
    name: str
    is_folder: bool
    expanded: bool
    child_count: int
    full_key: str | None = None
    value_kind: ValueKind | None = None

    @property
    def has_children(self) -> bool:
        return self.child_count > 0


def flatten_tree(tree: KeyTree) -> list[FlatNode]:
    """Pre-order rows, descending only into expanded nodes."""
    rows: list[FlatNode] = []

    def walk(node_ids: list[int], depth: int, prefix: TreePath) -> None:
        for index, node_id in enumerate(node_ids):
            node = tree.nodes[node_id]
            path = prefix + (index,)
            rows.append(
                FlatNode(
                    depth=depth,
                    path=path,
                    name=node.name,
                    is_folder=node.is_folder,
                    expanded=node.expanded,
                    child_count=node.child_count,
                    full_key=node.full_key,
                    value_kind=node.value_kind,
                )
            )
            if node.expanded:
                walk(node.children, depth + 1, path)

    walk(tree.roots, 0, ())
    return rows


def clamp_selection(previous: int | None, row_count: int) -> int | None:
    """Selected row after a reflatten.

    ``None`` when there are no rows, row 0 on first population, otherwise the
    previous index pulled back inside the new row range.
    """
    if row_count <= 0:
        return None
    if previous is None:
        return 0
    return max(0, min(previous, row_count - 1))


def row_index_for_path(rows: list[FlatNode], path: TreePath) -> int | None:
    for idx, row in enumerate(rows):
        if row.path == path:
            return idx
    return None
