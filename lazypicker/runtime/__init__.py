"""Picker session orchestration and persisted preferences.

``PickerSession`` is the stateful entry point hosts drive; ``PickerState`` is
the plain data it mutates.
"""

from __future__ import annotations

from .session import PickerSession, SelectionCallback
from .state import PickerState

__all__ = ["PickerSession", "PickerState", "SelectionCallback"]
