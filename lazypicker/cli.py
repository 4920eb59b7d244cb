"""Command-line front door for lazypicker.

Builds a picker session over a directory or a JSON tree file, replays a
scripted key sequence against it, and prints the materialized window.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .errors import ConfigError, LoadError, NotFoundError
from .input.keys import parse_key_tokens
from .loaders.fs import DirectoryLoader
from .loaders.json_tree import DictTreeLoader, SearchableDictTreeLoader
from .runtime.config import (
    AccessibilityConfig,
    load_accessibility_config,
    load_multi_select,
    load_show_hidden,
    load_window_config,
)
from .runtime.session import PickerSession
from .tree_model.rendering import format_flat_row
from .tree_model.types import TreeDataLoader
from .window import WindowConfig

LOAD_TIMEOUT_SECONDS = 30.0


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _nonnegative_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if not parsed >= 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse a lazily loaded tree and print the visible picker rows."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory or .json tree file. Defaults to current directory.",
    )
    parser.add_argument("--search", default=None, help="Filter rows by a case-insensitive label substring.")
    parser.add_argument(
        "--server-search",
        action="store_true",
        help="Let the JSON loader answer --search itself instead of filtering loaded rows.",
    )
    parser.add_argument(
        "--expand",
        action="append",
        default=[],
        metavar="ID",
        help="Expand a node before applying keys (repeatable; paths may be relative to PATH).",
    )
    parser.add_argument(
        "--keys",
        default="",
        help="Comma-separated key tokens to replay, e.g. 'DOWN,RIGHT,ENTER'.",
    )
    parser.add_argument("--multi", action="store_true", help="Enable multi-select with tri-state checkboxes.")
    parser.add_argument("--show-hidden", action="store_true", help="Include dotfiles in directory trees.")
    parser.add_argument("--item-height", type=_positive_int, default=None, help="Row height in pixels.")
    parser.add_argument("--container-height", type=_positive_int, default=None, help="Viewport height in pixels.")
    parser.add_argument("--overscan", type=_nonnegative_int, default=None, help="Extra rows rendered per side.")
    parser.add_argument("--scroll", type=_nonnegative_float, default=None, help="Scroll offset in pixels.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log loader activity to stderr.")
    return parser


def _window_config(args: argparse.Namespace) -> WindowConfig:
    base = load_window_config()
    try:
        return WindowConfig(
            item_height=args.item_height if args.item_height is not None else base.item_height,
            container_height=args.container_height if args.container_height is not None else base.container_height,
            overscan=args.overscan if args.overscan is not None else base.overscan,
        )
    except ConfigError as exc:
        raise SystemExit(f"Invalid window configuration: {exc}") from exc


def _build_loader(path: Path, show_hidden: bool, server_search: bool) -> TreeDataLoader:
    if path.is_dir():
        return DirectoryLoader(path, show_hidden=show_hidden)
    if path.suffix.lower() != ".json":
        raise SystemExit(f"Expected a directory or a .json tree file: {path}")
    loader_cls = SearchableDictTreeLoader if server_search else DictTreeLoader
    try:
        return loader_cls.from_path(path)
    except LoadError as exc:
        raise SystemExit(str(exc)) from exc


def _node_id_for(loader: TreeDataLoader, raw_id: str) -> str:
    """Map a CLI-supplied id to a node id; directory ids may be relative paths."""
    if isinstance(loader, DirectoryLoader):
        return str((loader.root / raw_id).resolve())
    return raw_id


def render_session(
    session: PickerSession,
    accessibility: AccessibilityConfig | None = None,
) -> list[str]:
    """Return the window rows followed by status lines."""
    state = session.state
    accessibility = accessibility or AccessibilityConfig()
    window = session.window()
    lines = [
        format_flat_row(
            state.rows[item.index],
            state.selection,
            focused=item.index == state.focused_idx,
            multi_select=state.multi_select,
            search_query=state.search_term,
        )
        for item in window.items
    ]
    if not state.rows:
        lines.append("(no matches)" if state.search_term else "(empty)")

    if state.error:
        lines.append(f"error: {state.error}")
    if accessibility.announce_loading and state.is_loading:
        lines.append("loading…")
    if accessibility.announce_expansions:
        lines.append(
            f"rows {window.visible_start}-{window.visible_end} of {len(state.rows)}, "
            f"{len(state.expanded)} expanded"
        )
    if accessibility.announce_selections:
        selected = session.selected_ids()
        lines.append(f"selected: {', '.join(selected) if selected else '(none)'}")
    if not state.is_open:
        lines.append("picker closed")
    return lines


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments, drive a picker session, and print its window.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    window_config = _window_config(args)
    multi_select = args.multi or load_multi_select()
    show_hidden = args.show_hidden or load_show_hidden()
    loader = _build_loader(path, show_hidden, args.server_search)

    with PickerSession(loader, multi_select=multi_select, window_config=window_config) as session:
        session.start()
        session.open()
        session.wait_for_loads(LOAD_TIMEOUT_SECONDS)

        for raw_id in args.expand:
            node_id = _node_id_for(loader, raw_id)
            try:
                session.row(node_id)
            except NotFoundError as exc:
                raise SystemExit(f"Unknown node id: {raw_id}") from exc
            session.expand(node_id)
            session.wait_for_loads(LOAD_TIMEOUT_SECONDS)

        if args.search is not None:
            session.search(args.search)
            session.wait_for_loads(LOAD_TIMEOUT_SECONDS)

        for event in parse_key_tokens(args.keys):
            session.handle_key(event)
            session.wait_for_loads(LOAD_TIMEOUT_SECONDS)

        if args.scroll is not None:
            session.scroll_to(args.scroll)

        lines = render_session(session, load_accessibility_config())

    sys.stdout.write("\n".join(lines) + "\n")


if __name__ == "__main__":
    main()
