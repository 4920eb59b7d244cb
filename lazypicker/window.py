"""Fixed-row-height windowing math for virtualized row lists.

Maps a scroll offset to the contiguous row range worth materializing (the
visible rows plus ``overscan`` rows on each side) and to each row's absolute
top offset inside a ``total_height`` tall scroll container.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_ITEM_HEIGHT = 32
DEFAULT_CONTAINER_HEIGHT = 300
DEFAULT_OVERSCAN = 5


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class WindowConfig:
    """Viewport geometry in pixels; validated on construction."""

    item_height: float = DEFAULT_ITEM_HEIGHT
    container_height: float = DEFAULT_CONTAINER_HEIGHT
    overscan: int = DEFAULT_OVERSCAN

    def __post_init__(self) -> None:
        if not _is_number(self.item_height) or self.item_height <= 0:
            raise ConfigError(f"item_height must be a positive number, got {self.item_height!r}")
        if not _is_number(self.container_height) or self.container_height <= 0:
            raise ConfigError(f"container_height must be a positive number, got {self.container_height!r}")
        if isinstance(self.overscan, bool) or not isinstance(self.overscan, int) or self.overscan < 0:
            raise ConfigError(f"overscan must be a non-negative integer, got {self.overscan!r}")

    @property
    def visible_count(self) -> int:
        """Rows needed to cover the container height."""
        return math.ceil(self.container_height / self.item_height)


@dataclass(frozen=True)
class VirtualItem:
    """One materialized row and its absolute placement."""

    index: int
    start: float
    size: float


@dataclass(frozen=True)
class ViewportWindow:
    """Materialized row range for one scroll position (inclusive bounds)."""

    scroll_offset: float
    visible_start: int
    visible_end: int
    items: tuple[VirtualItem, ...]
    total_height: float

    @property
    def offsets(self) -> dict[int, float]:
        """Return ``{row_index: top_offset}`` for the materialized rows."""
        return {item.index: item.start for item in self.items}


def total_height(item_count: int, config: WindowConfig) -> float:
    return max(0, item_count) * config.item_height


def max_scroll_offset(item_count: int, config: WindowConfig) -> float:
    """Largest scroll offset a native container of this size allows."""
    return max(0, total_height(item_count, config) - config.container_height)


def clamp_scroll_offset(scroll_offset: float, item_count: int, config: WindowConfig) -> float:
    return max(0, min(scroll_offset, max_scroll_offset(item_count, config)))


def compute_window(item_count: int, scroll_offset: float, config: WindowConfig) -> ViewportWindow:
    """Return the rows to materialize for ``scroll_offset``.

    ``visible_start`` backs off ``overscan`` rows from the first visible row
    and ``visible_end`` extends ``visible_count + 2 * overscan`` past it. An
    empty list yields ``visible_start == visible_end == 0`` and no items.
    """
    item_count = max(0, item_count)
    offset = clamp_scroll_offset(scroll_offset, item_count, config)
    height = total_height(item_count, config)
    if item_count == 0:
        return ViewportWindow(scroll_offset=offset, visible_start=0, visible_end=0, items=(), total_height=height)

    start = max(0, math.floor(offset / config.item_height) - config.overscan)
    start = min(start, item_count - 1)
    end = min(item_count - 1, start + config.visible_count + 2 * config.overscan)
    items = tuple(
        VirtualItem(index=idx, start=idx * config.item_height, size=config.item_height)
        for idx in range(start, end + 1)
    )
    return ViewportWindow(
        scroll_offset=offset,
        visible_start=start,
        visible_end=end,
        items=items,
        total_height=height,
    )


def scroll_offset_to_reveal(
    index: int,
    scroll_offset: float,
    item_count: int,
    config: WindowConfig,
) -> float:
    """Return the smallest scroll change that keeps row ``index`` fully visible."""
    offset = clamp_scroll_offset(scroll_offset, item_count, config)
    if index < 0 or index >= item_count:
        return offset
    top = index * config.item_height
    bottom = top + config.item_height
    if top < offset:
        offset = top
    elif bottom > offset + config.container_height:
        offset = bottom - config.container_height
    return clamp_scroll_offset(offset, item_count, config)


__all__ = [
    "DEFAULT_ITEM_HEIGHT",
    "DEFAULT_CONTAINER_HEIGHT",
    "DEFAULT_OVERSCAN",
    "WindowConfig",
    "VirtualItem",
    "ViewportWindow",
    "total_height",
    "max_scroll_offset",
    "clamp_scroll_offset",
    "compute_window",
    "scroll_offset_to_reveal",
]
