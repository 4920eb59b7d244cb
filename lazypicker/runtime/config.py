"""Persistent JSON config helpers.

Stores viewport geometry, accessibility flags, and picker preferences.
Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import ConfigError
from ..window import DEFAULT_CONTAINER_HEIGHT, DEFAULT_ITEM_HEIGHT, DEFAULT_OVERSCAN, WindowConfig

logger = logging.getLogger(__name__)

APP_NAME = "lazypicker"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class AccessibilityConfig:
    """Which state changes a host should announce to assistive technology."""

    announce_selections: bool = True
    announce_expansions: bool = True
    announce_loading: bool = True


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and ignored to keep runtime
    behavior non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.debug("could not write config %s: %s", CONFIG_PATH, exc)


def _positive_number(value: object, default: float) -> float:
    """Accept finite positive ints/floats; booleans and others fall back."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


def _nonnegative_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def load_window_config() -> WindowConfig:
    """Load viewport geometry, falling back per key to the defaults."""
    data = load_config()
    section = data.get("window")
    if not isinstance(section, dict):
        section = {}
    try:
        return WindowConfig(
            item_height=_positive_number(section.get("item_height"), DEFAULT_ITEM_HEIGHT),
            container_height=_positive_number(section.get("container_height"), DEFAULT_CONTAINER_HEIGHT),
            overscan=_nonnegative_int(section.get("overscan"), DEFAULT_OVERSCAN),
        )
    except ConfigError as exc:
        logger.debug("falling back to default window config: %s", exc)
        return WindowConfig()


def save_window_config(window_config: WindowConfig) -> None:
    """Persist viewport geometry under the ``window`` key."""
    config = load_config()
    config["window"] = {
        "item_height": window_config.item_height,
        "container_height": window_config.container_height,
        "overscan": window_config.overscan,
    }
    save_config(config)


def load_accessibility_config() -> AccessibilityConfig:
    """Load announcement flags; only explicit booleans override defaults."""
    section = load_config().get("accessibility")
    if not isinstance(section, dict):
        return AccessibilityConfig()
    defaults = AccessibilityConfig()

    def flag(key: str, default: bool) -> bool:
        value = section.get(key)
        return value if isinstance(value, bool) else default

    return AccessibilityConfig(
        announce_selections=flag("announce_selections", defaults.announce_selections),
        announce_expansions=flag("announce_expansions", defaults.announce_expansions),
        announce_loading=flag("announce_loading", defaults.announce_loading),
    )


def load_multi_select() -> bool:
    """Return persisted multi-select preference (``False`` unless set to true)."""
    value = load_config().get("multi_select")
    return bool(value) if isinstance(value, bool) else False


def save_multi_select(multi_select: bool) -> None:
    config = load_config()
    config["multi_select"] = bool(multi_select)
    save_config(config)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference for directory trees.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)
