"""Key-tree construction from a flat ``(key, kind)`` list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..store.types import ValueKind
from .types import KeyTree

logger = logging.getLogger(__name__)


def split_key(key: str, delimiters: Iterable[str]) -> list[str]:
    """Split ``key`` on any delimiter character, never yielding empty segments."""
    delimiter_set = frozenset(delimiters)
    segments: list[str] = []
    start = 0
    for idx, ch in enumerate(key):
        if ch in delimiter_set:
            if idx > start:
                segments.append(key[start:idx])
            start = idx + 1
    if start < len(key):
        segments.append(key[start:])
    return segments


def _sort_key(tree: KeyTree, node_id: int) -> tuple[bool, str]:
    node = tree.nodes[node_id]
    # Folders and hybrids (anything with children) first, then plain keys.
    return (not node.children, node.name)


def sort_tree(tree: KeyTree) -> None:
    """Sort every sibling list in place."""
    tree.roots.sort(key=lambda node_id: _sort_key(tree, node_id))
    for node in tree.nodes:
        node.children.sort(key=lambda node_id: _sort_key(tree, node_id))


def build_key_tree(keys: Iterable[tuple[str, ValueKind]], delimiters: Sequence[str]) -> KeyTree:
    """Build a sorted ``KeyTree`` from ``(key, kind)`` pairs.

    A key whose segment path lands on an existing node turns that node into an
    addressable key (a hybrid when it already has children). When two keys land
    on the same path the later one wins both ``full_key`` and ``value_kind``.
    """
    if not delimiters:
        raise ValueError("at least one delimiter is required")

    tree = KeyTree()
    # parent id (None for top level) -> {segment name -> node id}
    child_index: dict[int | None, dict[str, int]] = {None: {}}
    dropped = 0

    for key, kind in keys:
        segments = split_key(key, delimiters)
        if not segments:
            dropped += 1
            continue

        parent: int | None = None
        last = len(segments) - 1
        for depth, segment in enumerate(segments):
            siblings = child_index[parent]
            node_id = siblings.get(segment)
            if node_id is None:
                node_id = tree.add_node(segment, parent)
                siblings[segment] = node_id
                child_index[node_id] = {}
            if depth == last:
                node = tree.nodes[node_id]
                if node.full_key is not None and node.full_key != key:
                    logger.debug("key %r replaces %r at the same tree path", key, node.full_key)
                node.full_key = key
                node.value_kind = kind
            parent = node_id

    if dropped:
        logger.debug("dropped %d keys made only of delimiters", dropped)
    sort_tree(tree)
    return tree
