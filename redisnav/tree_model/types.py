"""Key-space tree datatypes.

Nodes live in one flat arena (``KeyTree.nodes``) and refer to each other by
integer id. A *path* is the tuple of sibling indices from the top level down
to a node; it stays valid across expand/collapse and becomes stale once the
tree is rebuilt.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..store.types import ValueKind

SegmentPath = tuple[str, ...]
TreePath = tuple[int, ...]


class InvalidTreePath(LookupError):
    """A path does not address any node of this tree."""


@dataclass
class TreeNode:
    """One key segment. ``value_kind is None`` marks a pure folder."""

    name: str
    parent: int | None
    full_key: str | None = None
    value_kind: ValueKind | None = None
    children: list[int] = field(default_factory=list)
    expanded: bool = False

    @property
    def is_folder(self) -> bool:
        return self.full_key is None

    @property
    def is_hybrid(self) -> bool:
        return self.full_key is not None and bool(self.children)

    @property
    def child_count(self) -> int:
        return len(self.children)


@dataclass(frozen=True)
class NodeSnapshot:
    """Value-equality view of a subtree, independent of arena ids."""

    name: str
    full_key: str | None
    value_kind: ValueKind | None
    children: tuple["NodeSnapshot", ...] = ()


class KeyTree:
    """Arena of ``TreeNode`` with explicit parent/child links."""

    def __init__(self) -> None:
        self.nodes: list[TreeNode] = []
        self.roots: list[int] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self, name: str, parent: int | None) -> int:
        node_id = len(self.nodes)
        self.nodes.append(TreeNode(name=name, parent=parent))
        self.children_ids(parent).append(node_id)
        return node_id

    def children_ids(self, node_id: int | None) -> list[int]:
        """Child ids of ``node_id``; ``None`` addresses the top level."""
        if node_id is None:
            return self.roots
        return self.nodes[node_id].children

    def node_id_at(self, path: TreePath) -> int:
        if not path:
            raise InvalidTreePath("empty path")
        siblings = self.roots
        node_id = -1
        for depth, index in enumerate(path):
            if index < 0 or index >= len(siblings):
                raise InvalidTreePath(f"index {index} out of range at depth {depth} in {path!r}")
            node_id = siblings[index]
            siblings = self.nodes[node_id].children
        return node_id

    def node_at(self, path: TreePath) -> TreeNode:
        return self.nodes[self.node_id_at(path)]

    def path_of(self, node_id: int) -> TreePath:
        out: list[int] = []
        current: int | None = node_id
        while current is not None:
            parent = self.nodes[current].parent
            out.append(self.children_ids(parent).index(current))
            current = parent
        return tuple(reversed(out))

    def parent_path(self, path: TreePath) -> TreePath | None:
        node = self.node_at(path)
        if node.parent is None:
            return None
        return path[:-1]

    def toggle(self, path: TreePath) -> bool:
        """Flip only this node's ``expanded`` flag and return the new value."""
        node = self.node_at(path)
        node.expanded = not node.expanded
        return node.expanded

    def segment_path(self, node_id: int) -> SegmentPath:
        names: list[str] = []
        current: int | None = node_id
        while current is not None:
            node = self.nodes[current]
            names.append(node.name)
            current = node.parent
        return tuple(reversed(names))

    def expanded_segment_paths(self) -> set[SegmentPath]:
        return {self.segment_path(node_id) for node_id, node in enumerate(self.nodes) if node.expanded}

    def restore_expanded(self, expanded: set[SegmentPath]) -> None:
        """Re-open nodes whose segment path was open in a previous tree."""
        if not expanded:
            return
        for node_id, node in enumerate(self.nodes):
            if node.children and self.segment_path(node_id) in expanded:
                node.expanded = True

    def snapshot(self, node_ids: list[int] | None = None) -> tuple[NodeSnapshot, ...]:
        ids = self.roots if node_ids is None else node_ids
        return tuple(
            NodeSnapshot(
                name=self.nodes[node_id].name,
                full_key=self.nodes[node_id].full_key,
                value_kind=self.nodes[node_id].value_kind,
                children=self.snapshot(self.nodes[node_id].children),
            )
            for node_id in ids
        )
