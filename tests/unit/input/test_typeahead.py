"""Tests for the typeahead buffer deadline."""

from __future__ import annotations

import unittest

from lazypicker.input.typeahead import TYPEAHEAD_RESET_SECONDS, TypeaheadBuffer


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TypeaheadBufferTests(unittest.TestCase):
    def test_push_accumulates_lowercase_text(self) -> None:
        clock = FakeClock()
        buffer = TypeaheadBuffer(clock=clock)

        buffer.push("A")
        self.assertEqual(buffer.push("v"), "av")
        self.assertEqual(buffer.text, "av")
        self.assertEqual(buffer.reset_at, 100.0 + TYPEAHEAD_RESET_SECONDS)

    def test_idle_timeout_clears_buffer(self) -> None:
        clock = FakeClock()
        buffer = TypeaheadBuffer(clock=clock)
        buffer.push("a")

        clock.now += 1.0

        self.assertEqual(buffer.text, "")
        self.assertIsNone(buffer.reset_at)

    def test_each_keystroke_pushes_deadline_out(self) -> None:
        clock = FakeClock()
        buffer = TypeaheadBuffer(clock=clock)
        buffer.push("a")
        clock.now += 0.9
        buffer.push("b")
        clock.now += 0.9

        self.assertEqual(buffer.text, "ab")

    def test_push_after_timeout_starts_fresh(self) -> None:
        clock = FakeClock()
        buffer = TypeaheadBuffer(clock=clock)
        buffer.push("a")
        clock.now += 5

        self.assertEqual(buffer.push("b"), "b")

    def test_cancel_drops_text_and_deadline(self) -> None:
        buffer = TypeaheadBuffer(clock=FakeClock())
        buffer.push("a")

        buffer.cancel()

        self.assertEqual(buffer.text, "")
        self.assertIsNone(buffer.reset_at)
        self.assertFalse(buffer.expire())


if __name__ == "__main__":
    unittest.main()
