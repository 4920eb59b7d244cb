"""Keyboard navigation state machine over flattened rows.

Each key produces one ``NavigationResult``: a new focus index or a request
(expand, collapse, select, close) for the host to carry out. The engine keeps
no row state between calls; only the typeahead buffer persists.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..tree_model.navigation import clamp_focus_index, label_prefix_match_index, parent_row_index
from ..tree_model.types import FlatRow
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import (
    KEY_DOWN,
    KEY_END,
    KEY_ENTER,
    KEY_ESC,
    KEY_HOME,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_SPACE,
    KEY_TAB,
    KEY_UP,
    KeyEvent,
    normalize_key_name,
)
from .typeahead import TYPEAHEAD_RESET_SECONDS, TypeaheadBuffer

NAV_NONE = "none"
NAV_FOCUS = "focus"
NAV_EXPAND = "expand"
NAV_COLLAPSE = "collapse"
NAV_SELECT = "select"
NAV_CLOSE = "close"


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of one key press.

    ``focus_index`` is always the focus after the key (unchanged for
    requests). ``handled`` is ``False`` for keys whose default behavior the
    host should keep, such as Tab moving focus out of the widget.
    """

    action: str = NAV_NONE
    focus_index: int = -1
    node_id: str | None = None
    handled: bool = True


class NavigationEngine:
    """Translate key events into focus moves and host requests."""

    def __init__(
        self,
        typeahead_timeout: float = TYPEAHEAD_RESET_SECONDS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if clock is None:
            self.typeahead = TypeaheadBuffer(typeahead_timeout)
        else:
            self.typeahead = TypeaheadBuffer(typeahead_timeout, clock=clock)
        self._registry: KeyComboRegistry[NavigationResult] = KeyComboRegistry(normalize=normalize_key_name)
        self._registry.register_bindings(
            KeyComboBinding((KEY_UP,), self._move_up),
            KeyComboBinding((KEY_DOWN,), self._move_down),
            KeyComboBinding((KEY_HOME,), self._move_first),
            KeyComboBinding((KEY_END,), self._move_last),
            KeyComboBinding((KEY_RIGHT,), self._expand),
            KeyComboBinding((KEY_LEFT,), self._collapse_or_parent),
            KeyComboBinding((KEY_ENTER, KEY_SPACE), self._activate),
            KeyComboBinding((KEY_ESC,), self._dismiss),
            KeyComboBinding((KEY_TAB,), self._dismiss_tab),
        )

    def handle_key(self, event: KeyEvent, rows: Sequence[FlatRow], focus_index: int) -> NavigationResult:
        """Process one key against ``rows`` with the current ``focus_index``."""
        focus = clamp_focus_index(focus_index, len(rows)) if focus_index >= 0 else -1
        if not rows:
            focus = -1

        typeahead_key = event.is_printable and not event.has_modifier and not self._registry.handles(event.key)
        if not typeahead_key:
            self.typeahead.reset()

        result = self._registry.dispatch(event.key, rows, focus)
        if result is not None:
            return result
        if typeahead_key:
            return self._typeahead(event.key, rows, focus)
        return NavigationResult(focus_index=focus, handled=False)

    def close(self) -> None:
        """Cancel pending typeahead state; call when the widget goes away."""
        self.typeahead.cancel()

    # focus movement
    def _move_to(self, rows: Sequence[FlatRow], focus: int, target: int) -> NavigationResult:
        if not rows:
            return NavigationResult(focus_index=-1)
        return NavigationResult(action=NAV_FOCUS, focus_index=clamp_focus_index(target, len(rows)))

    def _move_up(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        return self._move_to(rows, focus, focus - 1)

    def _move_down(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        return self._move_to(rows, focus, focus + 1)

    def _move_first(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        return self._move_to(rows, focus, 0)

    def _move_last(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        return self._move_to(rows, focus, len(rows) - 1)

    # tree actions
    def _expand(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        if focus < 0:
            return NavigationResult(focus_index=focus)
        row = rows[focus]
        if not row.has_children:
            return NavigationResult(focus_index=focus)
        return NavigationResult(action=NAV_EXPAND, focus_index=focus, node_id=row.id)

    def _collapse_or_parent(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        if focus < 0:
            return NavigationResult(focus_index=focus)
        row = rows[focus]
        if row.is_expanded:
            return NavigationResult(action=NAV_COLLAPSE, focus_index=focus, node_id=row.id)
        parent_idx = parent_row_index(rows, focus)
        if parent_idx is None:
            return NavigationResult(focus_index=focus)
        return NavigationResult(action=NAV_FOCUS, focus_index=parent_idx)

    def _activate(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        if focus < 0:
            return NavigationResult(focus_index=focus)
        return NavigationResult(action=NAV_SELECT, focus_index=focus, node_id=rows[focus].id)

    def _dismiss(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        return NavigationResult(action=NAV_CLOSE, focus_index=focus)

    def _dismiss_tab(self, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        return NavigationResult(action=NAV_CLOSE, focus_index=focus, handled=False)

    # typeahead
    def _typeahead(self, char: str, rows: Sequence[FlatRow], focus: int) -> NavigationResult:
        if not rows:
            return NavigationResult(focus_index=-1)
        prefix = self.typeahead.push(char)
        match_idx = label_prefix_match_index(rows, prefix, focus)
        if match_idx is None:
            return NavigationResult(focus_index=focus)
        return NavigationResult(action=NAV_FOCUS, focus_index=match_idx)


__all__ = [
    "NAV_NONE",
    "NAV_FOCUS",
    "NAV_EXPAND",
    "NAV_COLLAPSE",
    "NAV_SELECT",
    "NAV_CLOSE",
    "NavigationResult",
    "NavigationEngine",
]
