"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class KeyComboBinding(Generic[R]):
    """Mapping from one or more key names to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[..., R]


class KeyComboRegistry(Generic[R]):
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        """Initialize empty registry with optional key normalizer."""
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, Callable[..., R]] = {}

    @staticmethod
    def _identity(key: str) -> str:
        """Return key unchanged for exact-match dispatch registries."""
        return key

    def register_binding(self, binding: KeyComboBinding[R]) -> KeyComboRegistry[R]:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding[R]) -> KeyComboRegistry[R]:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def handles(self, key: str) -> bool:
        return self._normalize(key) in self._handlers

    def dispatch(self, key: str, *args, **kwargs) -> R | None:
        """Invoke bound handler for ``key`` with extra arguments; ``None`` if unbound."""
        handler = self._handlers.get(self._normalize(key))
        if handler is None:
            return None
        return handler(*args, **kwargs)
