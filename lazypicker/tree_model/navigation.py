"""Flat-row index navigation helpers."""

from __future__ import annotations

from collections.abc import Sequence

from .types import FlatRow


def row_index_for_id(rows: Sequence[FlatRow], node_id: str | None) -> int | None:
    """Return index of the row for ``node_id``, or ``None`` when not visible."""
    if node_id is None:
        return None
    for idx, row in enumerate(rows):
        if row.id == node_id:
            return idx
    return None


def parent_row_index(rows: Sequence[FlatRow], row_idx: int) -> int | None:
    """Return index of the visible parent row of ``rows[row_idx]``."""
    if row_idx < 0 or row_idx >= len(rows):
        return None
    parent_id = rows[row_idx].parent_id
    if parent_id is None:
        return None
    # Parents always precede their children, so scan backwards.
    idx = row_idx - 1
    while idx >= 0:
        if rows[idx].id == parent_id:
            return idx
        idx -= 1
    return None


def next_index_after_subtree(rows: Sequence[FlatRow], row_idx: int) -> int | None:
    """Return first index after the visible subtree rooted at ``row_idx``."""
    if not rows or row_idx < 0 or row_idx >= len(rows):
        return None
    level = rows[row_idx].level
    idx = row_idx + 1
    while idx < len(rows) and rows[idx].level > level:
        idx += 1
    if idx >= len(rows):
        return None
    return idx


def clamp_focus_index(focus_idx: int, row_count: int) -> int:
    """Clamp a focus index into ``[0, row_count - 1]``, or ``-1`` when empty."""
    if row_count <= 0:
        return -1
    return max(0, min(row_count - 1, focus_idx))


def label_prefix_match_index(rows: Sequence[FlatRow], prefix: str, after_idx: int) -> int | None:
    """Find the first row whose lowercased label starts with ``prefix``.

    Rows strictly after ``after_idx`` are scanned first; the scan then wraps
    to the start of the sequence.
    """
    if not rows or not prefix:
        return None
    start = max(-1, after_idx) + 1
    for idx in range(start, len(rows)):
        if rows[idx].label.lower().startswith(prefix):
            return idx
    for idx in range(0, min(start, len(rows))):
        if rows[idx].label.lower().startswith(prefix):
            return idx
    return None


__all__ = [
    "row_index_for_id",
    "parent_row_index",
    "next_index_after_subtree",
    "clamp_focus_index",
    "label_prefix_match_index",
]
