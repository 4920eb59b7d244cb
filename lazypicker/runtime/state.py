from __future__ import annotations

from dataclasses import dataclass, field

from ..selection import EMPTY_SELECTION, SelectionState
from ..tree_model.types import FlatRow


@dataclass
class PickerState:
    multi_select: bool = False
    is_open: bool = False
    search_term: str = ""
    focused_idx: int = -1
    expanded: set[str] = field(default_factory=set)
    pending_expand: set[str] = field(default_factory=set)
    selection: SelectionState = EMPTY_SELECTION
    rows: list[FlatRow] = field(default_factory=list)
    scroll_offset: float = 0.0
    is_loading: bool = False
    error: str | None = None
    dirty: bool = True

    @property
    def focused_row(self) -> FlatRow | None:
        if 0 <= self.focused_idx < len(self.rows):
            return self.rows[self.focused_idx]
        return None
