"""Public package surface for lazypicker.

Exports ``PickerSession`` for hosts embedding the picker and ``main`` for
programmatic CLI invocation. Engines live in submodules under ``lazypicker``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runtime.session import PickerSession


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "PickerSession":
        from .runtime.session import PickerSession

        return PickerSession
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PickerSession", "main"]
