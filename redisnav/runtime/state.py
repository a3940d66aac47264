from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ..config import ProtectedNamespace
from ..store.types import TypedValue, ValueKind
from ..tree_model import FlatNode, KeyTree


class Focus(Enum):
    TREE = "tree"
    VALUE = "value"


class PendingAction(Enum):
    EDIT = "edit"
    DELETE = "delete"


@dataclass(frozen=True)
class HelpDialog:
    pass


@dataclass(frozen=True)
class ConfirmDeleteDialog:
    key: str


@dataclass(frozen=True)
class ProtectionDialog:
    key: str
    namespace: ProtectedNamespace
    action: PendingAction


@dataclass(frozen=True)
class DiffPreviewDialog:
    key: str
    old_text: str
    new_text: str
    payload: bytes


Dialog = Union[HelpDialog, ConfirmDeleteDialog, ProtectionDialog, DiffPreviewDialog]


@dataclass
class AppState:
    """View state owned by the interactive loop; the store worker never sees it."""

    tree: KeyTree = field(default_factory=KeyTree)
    rows: list[FlatNode] = field(default_factory=list)
    selected_idx: int | None = None
    tree_start: int = 0
    key_count: int = 0
    value_key: str | None = None
    value: TypedValue | None = None
    value_kind: ValueKind | None = None
    ttl: int | None = None
    value_scroll: int = 0
    focus: Focus = Focus.TREE
    dialog: Dialog | None = None
    status_message: str = "Loading keys..."
    dirty: bool = True
    should_quit: bool = False
