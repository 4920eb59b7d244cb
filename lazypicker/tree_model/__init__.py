"""Tree-model datatypes, node cache, flattening, and row navigation.

Defines ``TreeNode``/``FlatRow`` and the pure helpers that turn a lazily
loaded hierarchy into the ordered rows consumed by selection, windowing and
keyboard navigation.
"""

from __future__ import annotations

from .flatten import ChildrenOf, embedded_children, flatten_tree, label_matches
from .navigation import (
    clamp_focus_index,
    label_prefix_match_index,
    next_index_after_subtree,
    parent_row_index,
    row_index_for_id,
)
from .store import LoadOutcome, NodeStore
from .types import FlatRow, TreeDataLoader, TreeNode

__all__ = [
    "TreeNode",
    "FlatRow",
    "TreeDataLoader",
    "ChildrenOf",
    "embedded_children",
    "label_matches",
    "flatten_tree",
    "LoadOutcome",
    "NodeStore",
    "row_index_for_id",
    "parent_row_index",
    "next_index_after_subtree",
    "clamp_focus_index",
    "label_prefix_match_index",
]
