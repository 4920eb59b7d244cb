"""Filesystem directory loader: one level of a directory per load."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..errors import LoadError
from ..tree_model.types import TreeNode


@dataclass(frozen=True)
class DirectoryChild:
    """One visible directory entry."""

    name: str
    path: Path
    is_dir: bool


def list_directory_children(directory: Path, show_hidden: bool) -> tuple[list[DirectoryChild], OSError | None]:
    """List visible children, directories first then case-insensitive by name.

    Returns ``(children, scan_error)``; ``scan_error`` is set when the
    directory cannot be scanned.
    """
    children: list[DirectoryChild] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                children.append(DirectoryChild(name=name, path=Path(child.path), is_dir=is_dir))
    except OSError as exc:
        return [], exc

    children.sort(key=lambda item: (not item.is_dir, item.name.lower()))
    return children, None


class DirectoryLoader:
    """Lazy loader over a directory tree.

    Node ids are absolute path strings; the roots are the entries of ``root``.
    Directories report ``has_children`` without being scanned.
    """

    def __init__(self, root: Path | str, show_hidden: bool = False) -> None:
        self.root = Path(root).resolve()
        self.show_hidden = show_hidden

    def _directory_for(self, parent_id: str | None) -> Path:
        if parent_id is None:
            return self.root
        # Collapse ".." lexically; symlinked directories listed under root
        # stay browsable.
        directory = Path(os.path.normpath(parent_id))
        if directory != self.root and self.root not in directory.parents:
            raise LoadError(f"{parent_id} is outside {self.root}", parent_id=parent_id)
        return directory

    def load_children(self, parent_id: str | None, search_term: str | None = None) -> list[TreeNode]:
        directory = self._directory_for(parent_id)
        children, scan_error = list_directory_children(directory, self.show_hidden)
        if scan_error is not None:
            raise LoadError(f"cannot read {directory}: {scan_error.strerror or scan_error}", parent_id=parent_id)
        level = 0 if parent_id is None else len(directory.relative_to(self.root).parts)
        return [
            TreeNode(
                id=str(child.path),
                label=child.name + ("/" if child.is_dir else ""),
                value=child.path,
                parent_id=parent_id,
                has_children=child.is_dir,
                level=level,
            )
            for child in children
        ]


__all__ = [
    "DirectoryChild",
    "DirectoryLoader",
    "list_directory_children",
]
