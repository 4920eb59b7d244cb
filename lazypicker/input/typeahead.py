"""Typeahead buffer with an idle-reset deadline."""

from __future__ import annotations

import time
from collections.abc import Callable

TYPEAHEAD_RESET_SECONDS = 1.0


class TypeaheadBuffer:
    """Accumulate lowercase characters until the user pauses.

    The idle reset is a deadline rather than a timer thread: each keystroke
    pushes the deadline out, reads past the deadline see an empty buffer, and
    ``cancel`` drops both the text and the pending reset.
    """

    def __init__(
        self,
        timeout_seconds: float = TYPEAHEAD_RESET_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout_seconds = max(0.0, timeout_seconds)
        self._clock = clock
        self._text = ""
        self._reset_at: float | None = None

    @property
    def reset_at(self) -> float | None:
        """Monotonic time at which the buffer clears, or ``None`` when idle."""
        return self._reset_at

    def expire(self) -> bool:
        """Clear the buffer when its deadline has passed; return whether it did."""
        if self._reset_at is None or self._clock() < self._reset_at:
            return False
        self.cancel()
        return True

    @property
    def text(self) -> str:
        self.expire()
        return self._text

    def push(self, char: str) -> str:
        """Append ``char`` (lowercased), restart the idle deadline, return buffer."""
        self.expire()
        self._text += char.lower()
        self._reset_at = self._clock() + self.timeout_seconds
        return self._text

    def cancel(self) -> None:
        """Empty the buffer and drop the pending reset."""
        self._text = ""
        self._reset_at = None

    reset = cancel
