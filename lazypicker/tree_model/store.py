"""Per-session cache of loaded tree fragments plus the background load channel.

Loader calls run on worker threads. Their outcomes are queued and applied to
the cache only when the owning thread calls ``drain_results``, so every cache
mutation happens on one thread.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from queue import Empty, Queue

from ..errors import LoadError
from .types import TreeDataLoader, TreeNode

logger = logging.getLogger(__name__)

DEFAULT_LOAD_WORKERS = 4


@dataclass(frozen=True)
class LoadOutcome:
    """Result of one loader call: nodes on success, ``error`` on failure."""

    parent_id: str | None
    nodes: tuple[TreeNode, ...] = ()
    error: LoadError | None = None
    kind: str = "children"
    search_term: str | None = None
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _adopt_children(parent_id: str | None, nodes: Sequence[TreeNode]) -> tuple[TreeNode, ...]:
    """Fill in ``parent_id`` on loaded nodes that omit it."""
    if parent_id is None:
        return tuple(nodes)
    return tuple(
        node if node.parent_id is not None else dataclasses.replace(node, parent_id=parent_id)
        for node in nodes
    )


class NodeStore:
    """Loaded-children cache keyed by parent id (``None`` for the roots).

    Only one load per parent id is ever outstanding; repeated requests while
    one is in flight get the same future back and never reach the loader.
    Not thread-safe apart from the worker-to-owner result queue: call every
    method from the owning thread.
    """

    def __init__(
        self,
        loader: TreeDataLoader,
        executor: Executor | None = None,
        max_workers: int = DEFAULT_LOAD_WORKERS,
    ) -> None:
        self._loader = loader
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="lazypicker-load",
        )
        self._cache: dict[str | None, tuple[TreeNode, ...]] = {}
        self._in_flight: dict[str | None, Future[LoadOutcome]] = {}
        self._errors: dict[str | None, LoadError] = {}
        self._results: Queue[LoadOutcome] = Queue()
        self._search_generation = 0
        self._search_future: Future[LoadOutcome] | None = None
        self.search_results: tuple[TreeNode, ...] | None = None
        self.search_error: LoadError | None = None
        self._closed = False

    # cache
    def get_cached_children(self, parent_id: str | None) -> tuple[TreeNode, ...] | None:
        """Return last successfully loaded children, or ``None`` if never loaded."""
        return self._cache.get(parent_id)

    def set_cached_children(self, parent_id: str | None, nodes: Sequence[TreeNode]) -> None:
        """Overwrite the cache entry for ``parent_id``."""
        self._cache[parent_id] = tuple(nodes)

    def root_nodes(self) -> tuple[TreeNode, ...]:
        return self._cache.get(None, ())

    def children_of(self, node: TreeNode) -> tuple[TreeNode, ...]:
        """Return cached children for ``node``, falling back to its inline subtree."""
        cached = self._cache.get(node.id)
        if cached is not None:
            return cached
        return node.children

    def has_loaded_children(self, node: TreeNode) -> bool:
        return node.id in self._cache or bool(node.children)

    # loading
    def is_loading(self, parent_id: str | None) -> bool:
        return parent_id in self._in_flight

    def loading_ids(self) -> frozenset[str]:
        """Return non-root parent ids with a load in flight."""
        return frozenset(key for key in self._in_flight if key is not None)

    def has_pending(self) -> bool:
        return bool(self._in_flight) or self._search_future is not None

    def error_for(self, parent_id: str | None) -> LoadError | None:
        return self._errors.get(parent_id)

    def _run_load(self, parent_id: str | None, search_term: str | None) -> LoadOutcome:
        """Worker-thread body: call the loader and queue a normalized outcome."""
        try:
            nodes = self._loader.load_children(parent_id, search_term)
            outcome = LoadOutcome(parent_id=parent_id, nodes=_adopt_children(parent_id, nodes))
        except Exception as exc:
            outcome = LoadOutcome(parent_id=parent_id, error=LoadError.from_exception(exc, parent_id))
        self._results.put(outcome)
        return outcome

    def request_children(self, parent_id: str | None, search_term: str | None = None) -> Future[LoadOutcome]:
        """Start loading children of ``parent_id`` unless a load is already in flight."""
        pending = self._in_flight.get(parent_id)
        if pending is not None:
            logger.debug("load for %r already in flight; coalescing", parent_id)
            return pending
        future = self._executor.submit(self._run_load, parent_id, search_term)
        self._in_flight[parent_id] = future
        return future

    @property
    def supports_search(self) -> bool:
        return callable(getattr(self._loader, "search_nodes", None))

    def _run_search(self, term: str, max_results: int | None, generation: int) -> LoadOutcome:
        try:
            search_nodes = getattr(self._loader, "search_nodes")
            if max_results is None:
                nodes = search_nodes(term)
            else:
                nodes = search_nodes(term, max_results)
            outcome = LoadOutcome(
                parent_id=None,
                nodes=tuple(nodes),
                kind="search",
                search_term=term,
                generation=generation,
            )
        except Exception as exc:
            outcome = LoadOutcome(
                parent_id=None,
                error=LoadError.from_exception(exc),
                kind="search",
                search_term=term,
                generation=generation,
            )
        self._results.put(outcome)
        return outcome

    def request_search(self, term: str, max_results: int | None = None) -> Future[LoadOutcome] | None:
        """Start a server-side search; results of older searches get dropped.

        Returns ``None`` when the loader has no ``search_nodes``.
        """
        if not self.supports_search:
            return None
        self._search_generation += 1
        future = self._executor.submit(self._run_search, term, max_results, self._search_generation)
        self._search_future = future
        return future

    def clear_search(self) -> None:
        """Forget search results and invalidate any search still running."""
        self._search_generation += 1
        self._search_future = None
        self.search_results = None
        self.search_error = None

    def drain_results(self) -> list[LoadOutcome]:
        """Apply every completed load to the cache and return the applied outcomes.

        Failed loads leave the cache untouched and are recorded per parent.
        Search outcomes from superseded generations are discarded.
        """
        applied: list[LoadOutcome] = []
        while True:
            try:
                outcome = self._results.get_nowait()
            except Empty:
                break

            if outcome.kind == "search":
                if outcome.generation != self._search_generation:
                    logger.debug("dropping stale search results for %r", outcome.search_term)
                    continue
                self._search_future = None
                if outcome.ok:
                    self.search_results = outcome.nodes
                    self.search_error = None
                else:
                    logger.warning("search for %r failed: %s", outcome.search_term, outcome.error)
                    self.search_error = outcome.error
                applied.append(outcome)
                continue

            self._in_flight.pop(outcome.parent_id, None)
            if outcome.ok:
                self.set_cached_children(outcome.parent_id, outcome.nodes)
                self._errors.pop(outcome.parent_id, None)
            else:
                logger.warning("loading children of %r failed: %s", outcome.parent_id, outcome.error)
                self._errors[outcome.parent_id] = outcome.error
            applied.append(outcome)
        return applied

    def wait_for_pending(self, timeout: float | None = None) -> bool:
        """Block until in-flight loads finish; return ``False`` on timeout."""
        futures = list(self._in_flight.values())
        if self._search_future is not None:
            futures.append(self._search_future)
        if not futures:
            return True
        _done, not_done = wait(futures, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Stop accepting work and release the worker pool when owned."""
        if self._closed:
            return
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "DEFAULT_LOAD_WORKERS",
    "LoadOutcome",
    "NodeStore",
]
