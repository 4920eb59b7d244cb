"""Key events, key dispatch, typeahead, and the navigation state machine."""

from __future__ import annotations

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import KeyEvent, normalize_key_name, parse_key_tokens
from .navigation import (
    NAV_CLOSE,
    NAV_COLLAPSE,
    NAV_EXPAND,
    NAV_FOCUS,
    NAV_NONE,
    NAV_SELECT,
    NavigationEngine,
    NavigationResult,
)
from .typeahead import TYPEAHEAD_RESET_SECONDS, TypeaheadBuffer

__all__ = [
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyEvent",
    "normalize_key_name",
    "parse_key_tokens",
    "NAV_NONE",
    "NAV_FOCUS",
    "NAV_EXPAND",
    "NAV_COLLAPSE",
    "NAV_SELECT",
    "NAV_CLOSE",
    "NavigationEngine",
    "NavigationResult",
    "TYPEAHEAD_RESET_SECONDS",
    "TypeaheadBuffer",
]
