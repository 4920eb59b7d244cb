"""Tri-state selection over flattened rows.

Parent state is recomputed one level up from the toggled row only, using
the siblings currently present in the rows. Grandparents are left as they
were; deeper cascades are a deliberate non-feature.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .tree_model.navigation import row_index_for_id
from .tree_model.types import FlatRow

SELECTED = "selected"
INDETERMINATE = "indeterminate"
UNSELECTED = "unselected"


@dataclass(frozen=True)
class SelectionState:
    """Immutable selected/indeterminate id sets; never overlapping."""

    selected: frozenset[str] = frozenset()
    indeterminate: frozenset[str] = frozenset()

    def is_selected(self, node_id: str) -> bool:
        return node_id in self.selected

    def is_indeterminate(self, node_id: str) -> bool:
        return node_id in self.indeterminate


EMPTY_SELECTION = SelectionState()


def toggle_selection(
    node_id: str,
    target_selected: bool,
    rows: Sequence[FlatRow],
    current: SelectionState,
    multi_select: bool = True,
) -> SelectionState:
    """Return the selection after setting ``node_id`` to ``target_selected``.

    Ids absent from ``rows`` leave ``current`` unchanged. Single-select keeps
    at most one id and never reports indeterminate parents.
    """
    row_idx = row_index_for_id(rows, node_id)
    if row_idx is None:
        return current

    if not multi_select:
        return SelectionState(selected=frozenset({node_id}) if target_selected else frozenset())

    selected = set(current.selected)
    indeterminate = set(current.indeterminate)
    if target_selected:
        selected.add(node_id)
        indeterminate.discard(node_id)
    else:
        selected.discard(node_id)

    parent_id = rows[row_idx].parent_id
    if parent_id is not None:
        siblings = [row.id for row in rows if row.parent_id == parent_id]
        selected_count = sum(1 for sibling_id in siblings if sibling_id in selected)
        if selected_count == 0:
            selected.discard(parent_id)
            indeterminate.discard(parent_id)
        elif selected_count == len(siblings):
            selected.add(parent_id)
            indeterminate.discard(parent_id)
        else:
            indeterminate.add(parent_id)
            selected.discard(parent_id)

    return SelectionState(selected=frozenset(selected), indeterminate=frozenset(indeterminate))


def selection_state_for(node_id: str, state: SelectionState) -> str:
    """Return ``"selected"``, ``"indeterminate"`` or ``"unselected"``."""
    if node_id in state.selected:
        return SELECTED
    if node_id in state.indeterminate:
        return INDETERMINATE
    return UNSELECTED


def selected_rows(rows: Sequence[FlatRow], state: SelectionState) -> list[FlatRow]:
    """Return visible selected rows in display order."""
    return [row for row in rows if row.id in state.selected]


__all__ = [
    "SELECTED",
    "INDETERMINATE",
    "UNSELECTED",
    "SelectionState",
    "EMPTY_SELECTION",
    "toggle_selection",
    "selection_state_for",
    "selected_rows",
]
