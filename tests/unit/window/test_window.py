"""Tests for fixed-height windowing math."""

from __future__ import annotations

import math
import unittest

from lazypicker.errors import ConfigError
from lazypicker.window import (
    WindowConfig,
    clamp_scroll_offset,
    compute_window,
    max_scroll_offset,
    scroll_offset_to_reveal,
    total_height,
)


class WindowConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = WindowConfig()

        self.assertEqual(config.item_height, 32)
        self.assertEqual(config.container_height, 300)
        self.assertEqual(config.overscan, 5)
        self.assertEqual(config.visible_count, 10)

    def test_invalid_geometry_raises_config_error(self) -> None:
        for kwargs in (
            {"item_height": 0},
            {"item_height": -1},
            {"container_height": 0},
            {"overscan": -1},
            {"overscan": 1.5},
            {"item_height": float("nan")},
            {"item_height": True},
        ):
            with self.subTest(kwargs=kwargs), self.assertRaises(ConfigError):
                WindowConfig(**kwargs)

    def test_config_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            WindowConfig(item_height=0)


class ComputeWindowTests(unittest.TestCase):
    def test_empty_list_has_no_items(self) -> None:
        window = compute_window(0, 500, WindowConfig())

        self.assertEqual((window.visible_start, window.visible_end), (0, 0))
        self.assertEqual(window.items, ())
        self.assertEqual(window.total_height, 0)
        self.assertEqual(window.scroll_offset, 0)

    def test_top_of_list_includes_overscan_below(self) -> None:
        window = compute_window(1000, 0, WindowConfig())

        self.assertEqual(window.visible_start, 0)
        self.assertEqual(window.visible_end, 20)
        self.assertEqual(window.total_height, 32000)

    def test_scrolled_window_backs_off_by_overscan(self) -> None:
        window = compute_window(1000, 3200, WindowConfig())

        self.assertEqual(window.visible_start, 95)
        self.assertEqual(window.visible_end, 115)
        self.assertEqual(window.offsets[95], 95 * 32)
        self.assertEqual([item.index for item in window.items], list(range(95, 116)))

    def test_short_list_is_fully_materialized(self) -> None:
        window = compute_window(3, 0, WindowConfig())

        self.assertEqual((window.visible_start, window.visible_end), (0, 2))
        self.assertEqual(len(window.items), 3)

    def test_scroll_past_end_is_clamped(self) -> None:
        config = WindowConfig()

        window = compute_window(100, 1_000_000, config)

        self.assertEqual(window.scroll_offset, max_scroll_offset(100, config))
        self.assertEqual(window.visible_end, 99)

    def test_bounds_hold_across_counts_and_offsets(self) -> None:
        config = WindowConfig(item_height=20, container_height=110, overscan=2)
        for item_count in (0, 1, 5, 6, 7, 50):
            for scroll_offset in (0, 10, 95, 400, 5000, -30):
                with self.subTest(item_count=item_count, scroll_offset=scroll_offset):
                    window = compute_window(item_count, scroll_offset, config)
                    self.assertLessEqual(0, window.visible_start)
                    self.assertLessEqual(window.visible_start, window.visible_end)
                    self.assertLessEqual(window.visible_end, max(item_count - 1, 0))
                    if item_count >= config.visible_count:
                        span = window.visible_end - window.visible_start + 1
                        self.assertGreaterEqual(span, math.ceil(110 / 20))


class ScrollHelperTests(unittest.TestCase):
    def test_total_and_max_scroll(self) -> None:
        config = WindowConfig()

        self.assertEqual(total_height(5, config), 160)
        self.assertEqual(max_scroll_offset(5, config), 0)
        self.assertEqual(max_scroll_offset(100, config), 3200 - 300)
        self.assertEqual(clamp_scroll_offset(-10, 100, config), 0)

    def test_reveal_scrolls_down_just_enough(self) -> None:
        config = WindowConfig()

        offset = scroll_offset_to_reveal(20, 0, 100, config)

        self.assertEqual(offset, 21 * 32 - 300)

    def test_reveal_scrolls_up_to_row_top(self) -> None:
        config = WindowConfig()

        self.assertEqual(scroll_offset_to_reveal(3, 640, 100, config), 96)

    def test_reveal_keeps_offset_when_row_visible(self) -> None:
        config = WindowConfig()

        self.assertEqual(scroll_offset_to_reveal(5, 64, 100, config), 64)
        self.assertEqual(scroll_offset_to_reveal(-1, 64, 100, config), 64)


if __name__ == "__main__":
    unittest.main()
