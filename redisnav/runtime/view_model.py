"""Browser view model: tree selection, value display, and dialog flows.

All store work leaves through ``CommandSink.submit`` (user-triggered, blocking)
or ``submit_nowait`` (automatic follow-ups that may be dropped). Results come
back as pipeline events through ``apply_event``. The tree and selection live
only here, on the interactive thread.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from ..config import ProtectedNamespace, ProtectionLevel, find_protection
from ..editor import EditorError
from ..pipeline.messages import (
    Command,
    DeleteKey,
    DeleteSucceeded,
    Event,
    GetValue,
    KeysLoaded,
    OperationFailed,
    ScanKeys,
    SetValue,
    ValueLoaded,
    WriteSucceeded,
)
from ..store.types import StringValue, ValueKind
from ..tree_model import (
    FlatNode,
    InvalidTreePath,
    TreePath,
    build_key_tree,
    clamp_selection,
    flatten_tree,
    row_index_for_path,
)
from .state import (
    AppState,
    ConfirmDeleteDialog,
    DiffPreviewDialog,
    Focus,
    HelpDialog,
    PendingAction,
    ProtectionDialog,
)

logger = logging.getLogger(__name__)

EditValueFn = Callable[[str, bytes], "bytes | None"]


class CommandSink(Protocol):
    def submit(self, command: Command) -> None: ...

    def submit_nowait(self, command: Command) -> bool: ...


class BrowserViewModel:
    def __init__(
        self,
        state: AppState,
        commands: CommandSink,
        *,
        delimiters: tuple[str, ...],
        readonly: bool = False,
        protected_namespaces: tuple[ProtectedNamespace, ...] = (),
        edit_value: EditValueFn | None = None,
    ) -> None:
        self.state = state
        self.commands = commands
        self.delimiters = delimiters
        self.readonly = readonly
        self.protected_namespaces = protected_namespaces
        self._edit_value = edit_value

    # -- selection -----------------------------------------------------

    def selected_row(self) -> FlatNode | None:
        idx = self.state.selected_idx
        if idx is None or not (0 <= idx < len(self.state.rows)):
            return None
        return self.state.rows[idx]

    def selected_key(self) -> str | None:
        row = self.selected_row()
        return row.full_key if row is not None else None

    def _set_status(self, message: str) -> None:
        self.state.status_message = message
        self.state.dirty = True

    def _clear_value(self, key: str | None) -> None:
        state = self.state
        state.value_key = key
        state.value = None
        state.value_kind = None
        state.ttl = None
        state.value_scroll = 0

    def request_selected_value(self, force: bool = False) -> None:
        """Ask the worker for the selected key's value, type, and TTL."""
        key = self.selected_key()
        if key is None:
            if self.state.value_key is not None:
                self._clear_value(None)
                self.state.dirty = True
            return
        if key != self.state.value_key:
            self._clear_value(key)
        elif not force and self.state.value is not None:
            return
        self.state.dirty = True
        self.commands.submit(GetValue(key))

    def select_index(self, idx: int) -> bool:
        state = self.state
        if not state.rows:
            return False
        target = max(0, min(idx, len(state.rows) - 1))
        if target == state.selected_idx:
            return False
        state.selected_idx = target
        state.dirty = True
        self.request_selected_value(force=True)
        return True

    def move_selection(self, delta: int) -> bool:
        current = self.state.selected_idx if self.state.selected_idx is not None else 0
        return self.select_index(current + delta)

    def select_first(self) -> bool:
        return self.select_index(0)

    def select_last(self) -> bool:
        return self.select_index(len(self.state.rows) - 1)

    # -- expand / collapse ---------------------------------------------

    def _reflatten(self, keep_path: TreePath | None = None) -> None:
        state = self.state
        previous = state.selected_idx
        state.rows = flatten_tree(state.tree)
        state.dirty = True
        if keep_path is not None:
            idx = row_index_for_path(state.rows, keep_path)
            if idx is not None:
                state.selected_idx = idx
                return
        state.selected_idx = clamp_selection(previous, len(state.rows))

    def toggle_path(self, path: TreePath) -> bool:
        """Flip one node's expansion and keep the selection on the same node."""
        row = self.selected_row()
        try:
            self.state.tree.toggle(path)
        except InvalidTreePath:
            logger.debug("ignoring toggle of stale path %r", path)
            return False
        self._reflatten(keep_path=row.path if row is not None else path)
        return True

    def activate_selected(self) -> bool:
        row = self.selected_row()
        if row is None:
            return False
        if row.has_children:
            return self.toggle_path(row.path)
        if row.full_key is not None:
            self.request_selected_value(force=True)
            return True
        return False

    def collapse_or_parent(self) -> bool:
        row = self.selected_row()
        if row is None:
            return False
        if row.has_children and row.expanded:
            return self.toggle_path(row.path)
        parent_path = self.state.tree.parent_path(row.path)
        if parent_path is None:
            return False
        parent_idx = row_index_for_path(self.state.rows, parent_path)
        if parent_idx is None:
            return False
        return self.select_index(parent_idx)

    # -- pane / dialog toggles -------------------------------------------

    def toggle_focus(self) -> None:
        self.state.focus = Focus.VALUE if self.state.focus is Focus.TREE else Focus.TREE
        self.state.dirty = True

    def open_help(self) -> None:
        self.state.dialog = HelpDialog()
        self.state.dirty = True

    def close_dialog(self) -> None:
        self.state.dialog = None
        self.state.dirty = True

    def scroll_value(self, delta: int) -> None:
        self.state.value_scroll = max(0, self.state.value_scroll + delta)
        self.state.dirty = True

    def reset_value_scroll(self) -> None:
        self.state.value_scroll = 0
        self.state.dirty = True

    # -- store actions ---------------------------------------------------

    def rescan(self) -> None:
        self._set_status("Rescanning...")
        self.commands.submit(ScanKeys())

    def begin_edit(self) -> None:
        self._begin_action(PendingAction.EDIT)

    def begin_delete(self) -> None:
        self._begin_action(PendingAction.DELETE)

    def _begin_action(self, action: PendingAction) -> None:
        if self.readonly:
            self._set_status("Read-only mode")
            return
        key = self.selected_key()
        if key is None:
            return
        namespace = find_protection(key, self.protected_namespaces)
        if namespace is not None:
            self.state.dialog = ProtectionDialog(key=key, namespace=namespace, action=action)
            self.state.dirty = True
            return
        self._continue_action(action, key)

    def _continue_action(self, action: PendingAction, key: str) -> None:
        if action is PendingAction.DELETE:
            self.state.dialog = ConfirmDeleteDialog(key)
            self.state.dirty = True
            return
        self._open_editor(key)

    def _open_editor(self, key: str) -> None:
        state = self.state
        value = state.value if state.value_key == key else None
        if not isinstance(value, StringValue):
            self._set_status("Only string values can be edited")
            return
        if self._edit_value is None:
            self._set_status("Editing is not available")
            return
        try:
            new_payload = self._edit_value(key, value.raw_bytes())
        except EditorError as exc:
            self._set_status(f"Error: {exc}")
            return
        if new_payload is None:
            self._set_status("No changes made")
            return
        state.dialog = DiffPreviewDialog(
            key=key,
            old_text=value.text,
            new_text=new_payload.decode("utf-8", errors="replace"),
            payload=new_payload,
        )
        state.dirty = True

    def handle_dialog_key(self, key: str) -> None:
        """Route one key to the open dialog."""
        dialog = self.state.dialog
        if dialog is None:
            return
        if isinstance(dialog, HelpDialog):
            if key in {"ESC", "ENTER", "q", "?"}:
                self.close_dialog()
            return
        if isinstance(dialog, ConfirmDeleteDialog):
            if key in {"y", "Y", "ENTER"}:
                self.close_dialog()
                self._set_status(f"Deleting {dialog.key}...")
                self.commands.submit(DeleteKey(dialog.key))
            elif key in {"n", "N", "ESC", "q"}:
                self.close_dialog()
                self._set_status("Delete cancelled")
            return
        if isinstance(dialog, ProtectionDialog):
            self._handle_protection_key(dialog, key)
            return
        if isinstance(dialog, DiffPreviewDialog):
            if key == "ENTER":
                self.close_dialog()
                if self.readonly:
                    self._set_status("Read-only mode")
                    return
                self._set_status(f"Saving {dialog.key}...")
                self.commands.submit(SetValue(dialog.key, dialog.payload))
            elif key in {"ESC", "q"}:
                self.close_dialog()
                self._set_status("Edit discarded")

    def _handle_protection_key(self, dialog: ProtectionDialog, key: str) -> None:
        level = dialog.namespace.level
        if level is ProtectionLevel.BLOCK:
            if key in {"ESC", "ENTER", "q"}:
                self.close_dialog()
                self._set_status(f"Blocked: {dialog.namespace.prefix} is protected")
            return
        if key in {"ESC", "n", "N"}:
            self.close_dialog()
            self._set_status(f"{dialog.action.value.capitalize()} cancelled")
            return
        if level is ProtectionLevel.CONFIRM and key not in {"y", "Y"}:
            return
        self.close_dialog()
        self._continue_action(dialog.action, dialog.key)

    # -- events ----------------------------------------------------------

    def apply_events(self, events: Iterable[Event]) -> None:
        for event in events:
            self.apply_event(event)

    def apply_event(self, event: Event) -> None:
        self.state.dirty = True
        if isinstance(event, KeysLoaded):
            self._load_keys(event.keys)
        elif isinstance(event, ValueLoaded):
            self._load_value(event)
        elif isinstance(event, OperationFailed):
            self._set_status(f"Error: {event.message}")
        elif isinstance(event, WriteSucceeded):
            self._set_status(f"Saved {event.key}")
            if self.selected_key() == event.key:
                self.commands.submit_nowait(GetValue(event.key))
        elif isinstance(event, DeleteSucceeded):
            self._set_status(f"Deleted {event.key}")
            if self.state.value_key == event.key:
                self._clear_value(None)
            self.commands.submit_nowait(ScanKeys())

    def _load_keys(self, keys: tuple[tuple[str, ValueKind], ...]) -> None:
        state = self.state
        expanded = state.tree.expanded_segment_paths()
        tree = build_key_tree(keys, self.delimiters)
        tree.restore_expanded(expanded)
        state.tree = tree
        state.key_count = len(keys)
        self._reflatten()
        self._set_status(f"Loaded {len(keys)} keys")

        key = self.selected_key()
        if key is None:
            self._clear_value(None)
        elif key != state.value_key:
            self._clear_value(key)
            self.commands.submit_nowait(GetValue(key))

    def _load_value(self, event: ValueLoaded) -> None:
        state = self.state
        if event.key != self.selected_key():
            logger.debug("discarding stale value for %r", event.key)
            return
        if state.value_key != event.key:
            state.value_scroll = 0
        state.value_key = event.key
        state.value = event.value
        state.value_kind = event.value_kind
        state.ttl = event.ttl
        self._set_status(f"Loaded {event.key}")
