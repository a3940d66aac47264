"""Keyboard dispatch for the browser.

Open dialogs get every key first. Otherwise global keys are checked, then
the bindings of the focused pane (tree or value).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .state import Focus
from .view_model import BrowserViewModel

VALUE_SCROLL_STEP = 10


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], object]


class KeyComboRegistry:
    """Small exact-match key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], object]] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register bindings, later combos overwriting earlier ones."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def dispatch(self, key: str) -> bool:
        """Invoke the handler bound to ``key``; ``False`` when none is bound."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler()
        return True


class KeyHandler:
    """Bind browser actions to key tokens for one ``BrowserViewModel``."""

    def __init__(self, view_model: BrowserViewModel, page_rows: Callable[[], int]) -> None:
        self.view_model = view_model
        self.page_rows = page_rows
        vm = view_model
        self._tree_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", "DOWN"), lambda: vm.move_selection(1)),
            KeyComboBinding(("k", "UP"), lambda: vm.move_selection(-1)),
            KeyComboBinding(("PAGE_DOWN", "CTRL_D"), lambda: vm.move_selection(self.page_rows())),
            KeyComboBinding(("PAGE_UP", "CTRL_U"), lambda: vm.move_selection(-self.page_rows())),
            KeyComboBinding(("l", "RIGHT", "ENTER"), vm.activate_selected),
            KeyComboBinding(("h", "LEFT"), vm.collapse_or_parent),
            KeyComboBinding(("g", "HOME"), vm.select_first),
            KeyComboBinding(("G", "END"), vm.select_last),
            KeyComboBinding(("r",), lambda: vm.request_selected_value(force=True)),
            KeyComboBinding(("R",), vm.rescan),
            KeyComboBinding(("e",), vm.begin_edit),
            KeyComboBinding(("d",), vm.begin_delete),
        )
        self._value_keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("j", "DOWN"), lambda: vm.scroll_value(1)),
            KeyComboBinding(("k", "UP"), lambda: vm.scroll_value(-1)),
            KeyComboBinding(("CTRL_D",), lambda: vm.scroll_value(VALUE_SCROLL_STEP)),
            KeyComboBinding(("CTRL_U",), lambda: vm.scroll_value(-VALUE_SCROLL_STEP)),
            KeyComboBinding(("PAGE_DOWN",), lambda: vm.scroll_value(self.page_rows())),
            KeyComboBinding(("PAGE_UP",), lambda: vm.scroll_value(-self.page_rows())),
            KeyComboBinding(("0", "g", "HOME"), vm.reset_value_scroll),
            KeyComboBinding(("e",), vm.begin_edit),
        )

    def handle(self, key: str) -> bool:
        """Handle one key and return ``True`` when the app should quit."""
        vm = self.view_model
        state = vm.state
        if state.dialog is not None:
            if key == "CTRL_C":
                return True
            vm.handle_dialog_key(key)
            return False
        if key in {"q", "ESC", "CTRL_C"}:
            return True
        if key == "?":
            vm.open_help()
            return False
        if key == "TAB":
            vm.toggle_focus()
            return False
        registry = self._tree_keys if state.focus is Focus.TREE else self._value_keys
        registry.dispatch(key)
        return False
