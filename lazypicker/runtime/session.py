"""Per-widget picker session wiring loads, keys, search, and selection.

A ``PickerSession`` owns exactly one ``PickerState``, one ``NodeStore`` and
one ``NavigationEngine``. Loader work happens on the store's worker threads;
``poll`` applies finished loads and reflattens on the caller's thread.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future

from ..errors import NotFoundError
from ..input.keys import KeyEvent
from ..input.navigation import (
    NAV_CLOSE,
    NAV_COLLAPSE,
    NAV_EXPAND,
    NAV_FOCUS,
    NAV_SELECT,
    NavigationEngine,
    NavigationResult,
)
from ..selection import selected_rows, toggle_selection
from ..tree_model.flatten import flatten_tree
from ..tree_model.navigation import clamp_focus_index, next_index_after_subtree, row_index_for_id
from ..tree_model.store import LoadOutcome, NodeStore
from ..tree_model.types import FlatRow, TreeDataLoader, TreeNode
from ..window import (
    ViewportWindow,
    WindowConfig,
    clamp_scroll_offset,
    compute_window,
    scroll_offset_to_reveal,
)
from .state import PickerState

logger = logging.getLogger(__name__)

SelectionCallback = Callable[[list[str], list[FlatRow]], None]


class PickerSession:
    """Stateful controller for one hierarchical picker instance."""

    def __init__(
        self,
        loader: TreeDataLoader,
        *,
        multi_select: bool = False,
        window_config: WindowConfig | None = None,
        executor: Executor | None = None,
        clock: Callable[[], float] | None = None,
        max_search_results: int | None = None,
        on_selection_change: SelectionCallback | None = None,
        on_open_change: Callable[[bool], None] | None = None,
    ) -> None:
        self.state = PickerState(multi_select=multi_select)
        self.window_config = window_config if window_config is not None else WindowConfig()
        self.store = NodeStore(loader, executor=executor)
        self.navigator = NavigationEngine(clock=clock)
        self.max_search_results = max_search_results
        self.on_selection_change = on_selection_change
        self.on_open_change = on_open_change
        self._torn_down = False

    # lifecycle
    def start(self) -> Future[LoadOutcome]:
        """Request the root nodes."""
        future = self.store.request_children(None)
        self._sync_loading()
        return future

    def teardown(self) -> None:
        """Cancel typeahead state and release the loader pool."""
        if self._torn_down:
            return
        self._torn_down = True
        self.navigator.close()
        self.store.close()

    def __enter__(self) -> PickerSession:
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.teardown()

    def open(self) -> None:
        self._set_open(True)

    def close(self) -> None:
        self.navigator.typeahead.reset()
        self._set_open(False)

    def toggle_open(self) -> None:
        self._set_open(not self.state.is_open)

    def _set_open(self, is_open: bool) -> None:
        if self.state.is_open == is_open:
            return
        self.state.is_open = is_open
        self.state.dirty = True
        if self.on_open_change is not None:
            self.on_open_change(is_open)

    # loading
    def _sync_loading(self) -> None:
        self.state.is_loading = self.store.has_pending()

    def poll(self) -> list[LoadOutcome]:
        """Apply finished loads, update expansion/error state, and reflatten."""
        outcomes = self.store.drain_results()
        if not outcomes:
            self._sync_loading()
            return []

        focus_first = False
        for outcome in outcomes:
            if outcome.kind == "search":
                focus_first = True
                self.state.error = None if outcome.ok else outcome.error.message
                continue
            parent_id = outcome.parent_id
            if outcome.ok:
                self.state.error = None
                if parent_id in self.state.pending_expand:
                    self.state.pending_expand.discard(parent_id)
                    self.state.expanded.add(parent_id)
            else:
                self.state.pending_expand.discard(parent_id)
                self.state.error = outcome.error.message

        self._sync_loading()
        self.rebuild_rows(focus_first=focus_first)
        return outcomes

    def wait_for_loads(self, timeout: float | None = None) -> bool:
        """Block until in-flight loads settle, then ``poll``; ``False`` on timeout."""
        done = self.store.wait_for_pending(timeout)
        self.poll()
        return done

    # rows and focus
    def rebuild_rows(self, preferred_id: str | None = None, focus_first: bool = False) -> None:
        """Reflatten and keep focus on the same node when it is still visible."""
        previous = self.state.focused_row
        if preferred_id is None and previous is not None:
            preferred_id = previous.id

        server_results = self.store.search_results if self.state.search_term else None
        if server_results is not None:
            result_ids = {node.id for node in server_results}

            def result_children(node: TreeNode) -> Sequence[TreeNode]:
                # Matches already listed at top level are not repeated under
                # an expanded result.
                if node.id not in self.state.expanded:
                    return node.children
                return [child for child in self.store.children_of(node) if child.id not in result_ids]

            rows = flatten_tree(
                server_results,
                self.state.expanded,
                children_of=result_children,
                loading=self.store.loading_ids(),
                force_expand=True,
            )
        else:
            rows = flatten_tree(
                self.store.root_nodes(),
                self.state.expanded,
                self.state.search_term,
                children_of=self.store.children_of,
                loading=self.store.loading_ids(),
            )
        self.state.rows = rows

        if focus_first:
            self.state.focused_idx = 0 if rows else -1
        else:
            preferred_idx = row_index_for_id(rows, preferred_id)
            if preferred_idx is not None:
                self.state.focused_idx = preferred_idx
            else:
                self.state.focused_idx = clamp_focus_index(self.state.focused_idx, len(rows))
        self.state.scroll_offset = scroll_offset_to_reveal(
            self.state.focused_idx,
            self.state.scroll_offset,
            len(rows),
            self.window_config,
        )
        self.state.dirty = True

    def set_focus(self, index: int) -> None:
        """Move focus to ``index`` (clamped) and scroll it into view."""
        self.state.focused_idx = clamp_focus_index(index, len(self.state.rows))
        self.state.scroll_offset = scroll_offset_to_reveal(
            self.state.focused_idx,
            self.state.scroll_offset,
            len(self.state.rows),
            self.window_config,
        )
        self.state.dirty = True

    def row(self, node_id: str) -> FlatRow:
        """Return the visible row for ``node_id`` or raise ``NotFoundError``."""
        idx = row_index_for_id(self.state.rows, node_id)
        if idx is None:
            raise NotFoundError(node_id)
        return self.state.rows[idx]

    def _find_row(self, node_id: str) -> FlatRow | None:
        idx = row_index_for_id(self.state.rows, node_id)
        return None if idx is None else self.state.rows[idx]

    # expansion
    def expand(self, node_id: str) -> Future[LoadOutcome] | None:
        """Expand ``node_id``, loading its children first when needed.

        Returns the load future when a load is (or already was) in flight,
        otherwise ``None``. Unknown ids, leaves and expanded nodes are no-ops.
        """
        row = self._find_row(node_id)
        if row is None or node_id in self.state.expanded or not row.has_children:
            return None
        node = row.node
        if node is not None and self.store.has_loaded_children(node):
            self.state.expanded.add(node_id)
            self.rebuild_rows()
            return None

        self.state.pending_expand.add(node_id)
        future = self.store.request_children(node_id)
        logger.debug("loading children of %r", node_id)
        self._sync_loading()
        self.rebuild_rows()
        return future

    def collapse(self, node_id: str) -> None:
        """Collapse ``node_id``; focus inside its subtree moves to the node."""
        if node_id not in self.state.expanded and node_id not in self.state.pending_expand:
            return
        preferred_id: str | None = None
        node_idx = row_index_for_id(self.state.rows, node_id)
        if node_idx is not None:
            subtree_end = next_index_after_subtree(self.state.rows, node_idx)
            if subtree_end is None:
                subtree_end = len(self.state.rows)
            if node_idx < self.state.focused_idx < subtree_end:
                preferred_id = node_id
        self.state.expanded.discard(node_id)
        self.state.pending_expand.discard(node_id)
        self.rebuild_rows(preferred_id=preferred_id)

    def toggle_expansion(self, node_id: str) -> Future[LoadOutcome] | None:
        if node_id in self.state.expanded or node_id in self.state.pending_expand:
            self.collapse(node_id)
            return None
        return self.expand(node_id)

    # search
    def search(self, term: str) -> Future[LoadOutcome] | None:
        """Apply a search term and move focus to the first result.

        Uses the loader's ``search_nodes`` for non-blank terms when available;
        otherwise filters the already-loaded tree in place. A blank term
        clears the search.
        """
        if not term.strip():
            term = ""
        self.state.search_term = term
        self.store.clear_search()
        if term and self.store.supports_search:
            future = self.store.request_search(term, self.max_search_results)
            self._sync_loading()
            self.state.dirty = True
            return future
        self.rebuild_rows(focus_first=True)
        return None

    # selection
    def selected_rows(self) -> list[FlatRow]:
        return selected_rows(self.state.rows, self.state.selection)

    def selected_ids(self) -> list[str]:
        """Selected ids with visible rows first in display order, then the rest sorted."""
        visible = [row.id for row in self.selected_rows()]
        hidden = sorted(self.state.selection.selected.difference(visible))
        return visible + hidden

    def select(self, node_id: str) -> bool:
        """Toggle selection of ``node_id``; single-select closes the picker.

        Returns ``False`` when the id is not currently visible.
        """
        if self._find_row(node_id) is None:
            return False
        currently_selected = node_id in self.state.selection.selected
        self.state.selection = toggle_selection(
            node_id,
            not currently_selected,
            self.state.rows,
            self.state.selection,
            multi_select=self.state.multi_select,
        )
        self.state.dirty = True
        if self.on_selection_change is not None:
            self.on_selection_change(self.selected_ids(), self.selected_rows())
        if not self.state.multi_select:
            self.close()
        return True

    def remove_selected(self, node_id: str) -> bool:
        """Deselect ``node_id`` (tag removal); no-op unless it is selected."""
        if node_id not in self.state.selection.selected:
            return False
        return self.select(node_id)

    # keyboard
    def handle_key(self, event: KeyEvent) -> NavigationResult:
        """Run one key through the navigation engine and apply its request."""
        result = self.navigator.handle_key(event, self.state.rows, self.state.focused_idx)
        if result.action == NAV_FOCUS:
            self.set_focus(result.focus_index)
        elif result.action == NAV_EXPAND and result.node_id is not None:
            self.expand(result.node_id)
        elif result.action == NAV_COLLAPSE and result.node_id is not None:
            self.collapse(result.node_id)
        elif result.action == NAV_SELECT and result.node_id is not None:
            self.select(result.node_id)
        elif result.action == NAV_CLOSE:
            self.close()
        return result

    # windowing
    def window(self) -> ViewportWindow:
        return compute_window(len(self.state.rows), self.state.scroll_offset, self.window_config)

    def scroll_to(self, scroll_offset: float) -> ViewportWindow:
        """Record a native scroll position and return the resulting window."""
        self.state.scroll_offset = clamp_scroll_offset(scroll_offset, len(self.state.rows), self.window_config)
        self.state.dirty = True
        return self.window()
