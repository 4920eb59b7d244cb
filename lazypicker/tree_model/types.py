"""Tree node and flattened-row datatypes used across picker modules."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class TreeNode:
    """One loader-supplied node with an optional already-loaded subtree."""

    id: str
    label: str
    value: object = None
    parent_id: str | None = None
    has_children: bool = False
    children: tuple["TreeNode", ...] = ()
    level: int = 0

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        parent_id: str | None = None,
        level: int = 0,
    ) -> TreeNode:
        """Build a node (and its nested children) from a plain mapping.

        Accepts both ``parentId``/``hasChildren`` and snake_case keys. Levels
        and parent ids of nested children are derived from nesting, not read.
        """
        node_id = str(data["id"])
        label = str(data.get("label", node_id))
        if parent_id is None:
            raw_parent = data.get("parent_id", data.get("parentId"))
            parent_id = None if raw_parent is None else str(raw_parent)
        raw_children = data.get("children") or ()
        children: tuple[TreeNode, ...] = ()
        if isinstance(raw_children, Sequence) and not isinstance(raw_children, (str, bytes)):
            children = tuple(
                cls.from_dict(child, parent_id=node_id, level=level + 1)
                for child in raw_children
                if isinstance(child, Mapping)
            )
        raw_has_children = data.get("has_children", data.get("hasChildren"))
        return cls(
            id=node_id,
            label=label,
            value=data.get("value"),
            parent_id=parent_id,
            has_children=raw_has_children is True or bool(children),
            children=children,
            level=level,
        )

    def without_children(self) -> TreeNode:
        """Return a copy with the loaded subtree stripped (lazy loader shape)."""
        if not self.children:
            return self
        return TreeNode(
            id=self.id,
            label=self.label,
            value=self.value,
            parent_id=self.parent_id,
            has_children=True,
            children=(),
            level=self.level,
        )


@dataclass(frozen=True)
class FlatRow:
    """One visible row of the flattened tree.

    ``index`` is only meaningful until the next flatten. ``path`` holds the
    ancestor ids from the root down to this row's node, inclusive.
    """

    id: str
    label: str
    level: int
    index: int
    path: tuple[str, ...]
    parent_id: str | None = None
    has_children: bool = False
    is_expanded: bool = False
    is_loading: bool = False
    value: object = None
    node: TreeNode | None = field(default=None, compare=False, repr=False)


class TreeDataLoader(Protocol):
    """Host-supplied source of tree nodes.

    ``load_children`` is called on a worker thread and may block. Raising any
    exception (preferably ``LoadError``) marks the load as failed. Loaders may
    additionally define ``search_nodes(term, max_results=None)`` for
    server-side search.
    """

    def load_children(self, parent_id: str | None, search_term: str | None = None) -> Sequence[TreeNode]:
        ...


__all__ = [
    "TreeNode",
    "FlatRow",
    "TreeDataLoader",
]
