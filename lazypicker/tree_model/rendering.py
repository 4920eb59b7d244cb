"""Plain-text formatting for flattened picker rows."""

from __future__ import annotations

from ..selection import INDETERMINATE, SELECTED, SelectionState, selection_state_for
from .types import FlatRow

CHECKBOX_MARKS = {
    SELECTED: "[x]",
    INDETERMINATE: "[-]",
}
UNCHECKED_MARK = "[ ]"
FOCUS_MARKER = "> "
LOADING_SUFFIX = " (loading…)"


def highlight_substring(text: str, query: str) -> str:
    """Bracket the first case-insensitive match of ``query`` in ``text``."""
    if not query:
        return text
    idx = text.casefold().find(query.casefold())
    if idx < 0:
        return text
    end = idx + len(query)
    return f"{text[:idx]}[{text[idx:end]}]{text[end:]}"


def format_flat_row(
    row: FlatRow,
    selection: SelectionState,
    focused: bool = False,
    multi_select: bool = False,
    search_query: str = "",
) -> str:
    """Render one row as an indented line with tree, checkbox and focus markers."""
    indent = "  " * row.level
    if row.has_children:
        marker = "▾ " if row.is_expanded else "▸ "
    else:
        marker = "  "
    focus = FOCUS_MARKER if focused else "  "
    state = selection_state_for(row.id, selection)
    if multi_select:
        checkbox = CHECKBOX_MARKS.get(state, UNCHECKED_MARK) + " "
    else:
        checkbox = "* " if state == SELECTED else ""
    suffix = LOADING_SUFFIX if row.is_loading else ""
    label = highlight_substring(row.label, search_query)
    return f"{focus}{indent}{marker}{checkbox}{label}{suffix}"


__all__ = [
    "format_flat_row",
    "highlight_substring",
]
