"""Loaders over nested dict trees, such as a parsed JSON document.

The whole tree is held in memory but handed out one level at a time, so
sessions exercise the same lazy path they would against a remote source.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from ..errors import LoadError
from ..tree_model.types import TreeNode


def _root_entries(data: object) -> list[Mapping[str, object]]:
    if isinstance(data, Mapping):
        if "id" in data:
            return [data]
        data = data.get("nodes", data.get("children", ()))
    if not isinstance(data, list):
        raise LoadError("tree document must be a list of nodes or an object with a 'nodes' list")
    return [entry for entry in data if isinstance(entry, Mapping)]


class DictTreeLoader:
    """Serve children of an in-memory tree built from nested mappings.

    Each mapping needs an ``id``; ``label``, ``value``, ``children`` and
    ``hasChildren``/``has_children`` are optional. Nodes are returned without
    their subtrees so every expansion goes through ``load_children``.
    """

    def __init__(self, entries: Iterable[Mapping[str, object]]) -> None:
        self._roots = tuple(TreeNode.from_dict(entry) for entry in entries)
        self._by_id: dict[str, TreeNode] = {}
        self._index(self._roots)

    def _index(self, nodes: Iterable[TreeNode]) -> None:
        for node in nodes:
            if node.id in self._by_id:
                raise LoadError(f"duplicate node id {node.id!r}", parent_id=node.parent_id)
            self._by_id[node.id] = node
            self._index(node.children)

    @classmethod
    def from_data(cls, data: object) -> DictTreeLoader:
        return cls(_root_entries(data))

    @classmethod
    def from_path(cls, path: Path | str) -> DictTreeLoader:
        """Read a JSON tree file; unreadable or malformed files raise ``LoadError``."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise LoadError(f"cannot read tree file {path}: {exc}") from exc
        return cls.from_data(data)

    def node(self, node_id: str) -> TreeNode | None:
        return self._by_id.get(node_id)

    def iter_nodes(self) -> Iterable[TreeNode]:
        """Yield every node in pre-order."""
        stack = list(reversed(self._roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def load_children(self, parent_id: str | None, search_term: str | None = None) -> list[TreeNode]:
        if parent_id is None:
            return [node.without_children() for node in self._roots]
        parent = self._by_id.get(parent_id)
        if parent is None:
            raise LoadError(f"unknown node {parent_id!r}", parent_id=parent_id)
        return [child.without_children() for child in parent.children]


class SearchableDictTreeLoader(DictTreeLoader):
    """``DictTreeLoader`` that also answers label searches itself.

    Matches come back as a flat list of nodes, in tree order, without their
    subtrees.
    """

    def search_nodes(self, term: str, max_results: int | None = None) -> list[TreeNode]:
        folded = term.casefold()
        matches: list[TreeNode] = []
        for node in self.iter_nodes():
            if folded not in node.label.casefold():
                continue
            matches.append(node.without_children())
            if max_results is not None and len(matches) >= max_results:
                break
        return matches


__all__ = [
    "DictTreeLoader",
    "SearchableDictTreeLoader",
]
