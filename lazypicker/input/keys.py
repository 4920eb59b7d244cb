"""Normalized key events for picker navigation.

Accepts terminal-style tokens (``UP``, ``ENTER_CR``, ``CTRL_P``, ``ALT_LEFT``)
as well as browser-style names (``ArrowUp``, ``Escape``) and maps both onto
one vocabulary of upper-case key names. Single characters pass through.
"""

from __future__ import annotations

from dataclasses import dataclass

KEY_UP = "UP"
KEY_DOWN = "DOWN"
KEY_LEFT = "LEFT"
KEY_RIGHT = "RIGHT"
KEY_HOME = "HOME"
KEY_END = "END"
KEY_ENTER = "ENTER"
KEY_SPACE = " "
KEY_ESC = "ESC"
KEY_TAB = "TAB"
KEY_BACKSPACE = "BACKSPACE"

_KEY_ALIASES: dict[str, str] = {
    "ARROWUP": KEY_UP,
    "ARROWDOWN": KEY_DOWN,
    "ARROWLEFT": KEY_LEFT,
    "ARROWRIGHT": KEY_RIGHT,
    "ENTER_CR": KEY_ENTER,
    "ENTER_LF": KEY_ENTER,
    "RETURN": KEY_ENTER,
    "ESCAPE": KEY_ESC,
    "SPACE": KEY_SPACE,
    "SPACEBAR": KEY_SPACE,
}

_MODIFIER_PREFIXES = ("CTRL_", "ALT_", "META_")


def normalize_key_name(key: str) -> str:
    """Return canonical key name; single characters are kept verbatim."""
    if len(key) == 1:
        return key
    upper = key.upper()
    return _KEY_ALIASES.get(upper, upper)


@dataclass(frozen=True)
class KeyEvent:
    """One key press plus the modifier keys held with it."""

    key: str
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", normalize_key_name(self.key))

    @property
    def has_modifier(self) -> bool:
        return self.ctrl or self.alt or self.meta

    @property
    def is_printable(self) -> bool:
        """True for a single printable character (space included)."""
        return len(self.key) == 1 and self.key.isprintable()

    @classmethod
    def from_token(cls, token: str) -> KeyEvent:
        """Parse a terminal-style token such as ``CTRL_P`` or ``ALT_LEFT``."""
        if len(token) > 1:
            for prefix in _MODIFIER_PREFIXES:
                if token.upper().startswith(prefix) and len(token) > len(prefix):
                    rest = token[len(prefix):]
                    return cls(
                        key=rest.lower() if len(rest) == 1 else rest,
                        ctrl=prefix == "CTRL_",
                        alt=prefix == "ALT_",
                        meta=prefix == "META_",
                    )
        return cls(key=token)


def parse_key_tokens(raw: str, separator: str = ",") -> list[KeyEvent]:
    """Split a scripted key sequence like ``"DOWN,RIGHT,a"`` into events.

    A doubled separator (``",,"``) stands for the separator character itself.
    """
    events: list[KeyEvent] = []
    placeholder = "\x00"
    escaped = raw.replace(separator * 2, separator + placeholder)
    for part in escaped.split(separator):
        if not part:
            continue
        token = separator if part == placeholder else part.replace(placeholder, separator)
        events.append(KeyEvent.from_token(token))
    return events


__all__ = [
    "KEY_UP",
    "KEY_DOWN",
    "KEY_LEFT",
    "KEY_RIGHT",
    "KEY_HOME",
    "KEY_END",
    "KEY_ENTER",
    "KEY_SPACE",
    "KEY_ESC",
    "KEY_TAB",
    "KEY_BACKSPACE",
    "normalize_key_name",
    "KeyEvent",
    "parse_key_tokens",
]
