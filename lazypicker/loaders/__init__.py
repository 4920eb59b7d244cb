"""Ready-made ``TreeDataLoader`` implementations."""

from __future__ import annotations

from .fs import DirectoryLoader, list_directory_children
from .json_tree import DictTreeLoader, SearchableDictTreeLoader

__all__ = [
    "DirectoryLoader",
    "DictTreeLoader",
    "SearchableDictTreeLoader",
    "list_directory_children",
]
