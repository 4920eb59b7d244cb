"""Flatten a partially-loaded tree into ordered visible rows."""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Sequence

from .types import FlatRow, TreeNode

ChildrenOf = Callable[[TreeNode], Sequence[TreeNode]]


def embedded_children(node: TreeNode) -> Sequence[TreeNode]:
    """Return the subtree loaded inline on ``node``."""
    return node.children


def label_matches(label: str, folded_term: str) -> bool:
    """Case-insensitive substring test against an already-folded term."""
    return folded_term in label.casefold()


def flatten_tree(
    root_nodes: Iterable[TreeNode],
    expanded: Collection[str],
    search_term: str = "",
    children_of: ChildrenOf | None = None,
    loading: Collection[str] = frozenset(),
    force_expand: bool = False,
) -> list[FlatRow]:
    """Project loaded tree nodes into pre-order visible rows.

    Without a search term every traversed node is visible and children are
    walked only for ids in ``expanded``. With a search term every loaded
    subtree is walked and a node stays visible when its own label matches,
    an ancestor matched, or some descendant is visible, so each match keeps
    its ancestry. ``force_expand`` walks every loaded subtree unfiltered, for
    result trees a server-side search has already narrowed. ``expanded`` is
    never mutated.
    """
    folded_term = search_term.casefold() if search_term else ""
    get_children = children_of if children_of is not None else embedded_children
    pending: list[tuple[TreeNode, int, tuple[str, ...], str | None]] = []

    def walk(
        nodes: Iterable[TreeNode],
        level: int,
        parent_path: tuple[str, ...],
        parent_id: str | None,
        ancestor_matched: bool,
    ) -> None:
        for node in nodes:
            if node.id in parent_path:
                continue
            path = parent_path + (node.id,)
            visible = not folded_term or ancestor_matched or label_matches(node.label, folded_term)
            mark = len(pending)
            pending.append((node, level, path, parent_id))
            if force_expand or folded_term or node.id in expanded:
                children = get_children(node)
                if children:
                    walk(children, level + 1, path, node.id, visible)
            if not visible and len(pending) == mark + 1:
                # Neither this node nor anything below it matched.
                pending.pop()

    walk(root_nodes, 0, (), None, False)

    rows: list[FlatRow] = []
    for index, (node, level, path, parent_id) in enumerate(pending):
        rows.append(
            FlatRow(
                id=node.id,
                label=node.label,
                level=level,
                index=index,
                path=path,
                parent_id=parent_id if parent_id is not None else node.parent_id,
                has_children=node.has_children or bool(node.children),
                is_expanded=node.id in expanded,
                is_loading=node.id in loading,
                value=node.value,
                node=node,
            )
        )
    return rows


__all__ = [
    "ChildrenOf",
    "embedded_children",
    "label_matches",
    "flatten_tree",
]
