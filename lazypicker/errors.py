"""Exception types shared by picker engines and the session host.

Only configuration mistakes raise at call time. Load failures are captured as
state and unknown node ids make engine operations no-ops; ``NotFoundError`` is
raised solely by strict lookups that callers opt into.
"""

from __future__ import annotations


class PickerError(Exception):
    """Base class for all lazypicker errors."""


class LoadError(PickerError):
    """Loader failed to produce children (or search results) for a parent."""

    def __init__(self, message: str, parent_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.parent_id = parent_id

    @classmethod
    def from_exception(cls, exc: BaseException, parent_id: str | None = None) -> LoadError:
        """Normalize any loader exception into a ``LoadError``."""
        if isinstance(exc, LoadError):
            if exc.parent_id is None and parent_id is not None:
                return cls(exc.message, parent_id=parent_id)
            return exc
        message = str(exc).strip() or "Failed to load data"
        return cls(message, parent_id=parent_id)


class NotFoundError(PickerError, KeyError):
    """Node id is not present in the current flattened rows."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"node not found: {self.node_id!r}"


class ConfigError(PickerError, ValueError):
    """Viewport configuration that makes window math undefined."""


__all__ = [
    "PickerError",
    "LoadError",
    "NotFoundError",
    "ConfigError",
]
