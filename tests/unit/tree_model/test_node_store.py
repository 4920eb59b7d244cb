"""Tests for the node cache and its background load channel."""

from __future__ import annotations

import threading
import time
import unittest

from lazypicker.errors import LoadError
from lazypicker.tree_model.store import LoadOutcome, NodeStore
from lazypicker.tree_model.types import TreeNode


def _wait_for_results(store: NodeStore, *, expected_count: int, timeout_seconds: float = 2.0) -> list[LoadOutcome]:
    deadline = time.monotonic() + timeout_seconds
    out: list[LoadOutcome] = []
    while time.monotonic() < deadline:
        out.extend(store.drain_results())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


class RecordingLoader:
    def __init__(self, tree: dict[str | None, list[TreeNode]], gate: threading.Event | None = None) -> None:
        self.tree = tree
        self.gate = gate
        self.calls: list[str | None] = []
        self.started = threading.Event()
        self._lock = threading.Lock()

    def load_children(self, parent_id: str | None, search_term: str | None = None) -> list[TreeNode]:
        with self._lock:
            self.calls.append(parent_id)
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=2.0)
        if parent_id not in self.tree:
            raise LoadError(f"no children for {parent_id}")
        return self.tree[parent_id]


class FailingLoader:
    def load_children(self, parent_id: str | None, search_term: str | None = None) -> list[TreeNode]:
        raise RuntimeError("backend unavailable")


class SearchingLoader(RecordingLoader):
    def __init__(self, tree, results: dict[str, list[TreeNode]]) -> None:
        super().__init__(tree)
        self.results = results
        self.release: dict[str, threading.Event] = {}

    def search_nodes(self, term: str, max_results: int | None = None) -> list[TreeNode]:
        gate = self.release.get(term)
        if gate is not None:
            gate.wait(timeout=2.0)
        found = self.results.get(term, [])
        return found if max_results is None else found[:max_results]


ROOTS = [TreeNode(id="1", label="Documents", has_children=True)]
CHILDREN = [TreeNode(id="1-1", label="Work Documents")]


class NodeStoreCacheTests(unittest.TestCase):
    def test_cache_is_empty_until_set(self) -> None:
        store = NodeStore(RecordingLoader({}))
        self.addCleanup(store.close)

        self.assertIsNone(store.get_cached_children(None))
        self.assertEqual(store.root_nodes(), ())

        store.set_cached_children(None, ROOTS)
        self.assertEqual(store.get_cached_children(None), tuple(ROOTS))
        self.assertEqual(store.root_nodes(), tuple(ROOTS))

    def test_children_of_prefers_cache_and_falls_back_to_inline_children(self) -> None:
        store = NodeStore(RecordingLoader({}))
        self.addCleanup(store.close)
        inline = TreeNode.from_dict({"id": "p", "children": [{"id": "c"}]})

        self.assertEqual([node.id for node in store.children_of(inline)], ["c"])
        self.assertTrue(store.has_loaded_children(inline))

        store.set_cached_children("p", [TreeNode(id="other", label="Other")])
        self.assertEqual([node.id for node in store.children_of(inline)], ["other"])


class NodeStoreLoadTests(unittest.TestCase):
    def test_successful_load_is_applied_only_on_drain(self) -> None:
        loader = RecordingLoader({None: ROOTS, "1": CHILDREN})
        store = NodeStore(loader)
        self.addCleanup(store.close)

        future = store.request_children("1")
        outcome = future.result(timeout=2.0)

        self.assertTrue(outcome.ok)
        self.assertIsNone(store.get_cached_children("1"))
        self.assertTrue(store.is_loading("1"))

        applied = store.drain_results()
        self.assertEqual(len(applied), 1)
        self.assertFalse(store.is_loading("1"))
        self.assertEqual([node.id for node in store.get_cached_children("1")], ["1-1"])

    def test_loaded_children_adopt_requested_parent_id(self) -> None:
        loader = RecordingLoader({"1": [TreeNode(id="1-1", label="Work Documents")]})
        store = NodeStore(loader)
        self.addCleanup(store.close)

        store.request_children("1").result(timeout=2.0)
        store.drain_results()

        self.assertEqual(store.get_cached_children("1")[0].parent_id, "1")

    def test_repeated_request_while_in_flight_is_coalesced(self) -> None:
        gate = threading.Event()
        loader = RecordingLoader({"1": CHILDREN}, gate=gate)
        store = NodeStore(loader)
        self.addCleanup(store.close)
        self.addCleanup(gate.set)

        first = store.request_children("1")
        self.assertTrue(loader.started.wait(timeout=2.0))
        second = store.request_children("1")

        self.assertIs(first, second)
        self.assertEqual(store.loading_ids(), frozenset({"1"}))
        gate.set()
        results = _wait_for_results(store, expected_count=1)

        self.assertEqual(len(results), 1)
        self.assertEqual(loader.calls, ["1"])

    def test_request_after_completion_reloads(self) -> None:
        loader = RecordingLoader({"1": CHILDREN})
        store = NodeStore(loader)
        self.addCleanup(store.close)

        store.request_children("1").result(timeout=2.0)
        store.drain_results()
        store.request_children("1").result(timeout=2.0)
        store.drain_results()

        self.assertEqual(loader.calls, ["1", "1"])

    def test_failure_keeps_previous_cache_and_records_error(self) -> None:
        store = NodeStore(FailingLoader())
        self.addCleanup(store.close)
        store.set_cached_children("1", CHILDREN)

        with self.assertLogs("lazypicker.tree_model.store", level="WARNING"):
            outcome = store.request_children("1").result(timeout=2.0)
            store.drain_results()

        self.assertFalse(outcome.ok)
        self.assertIsInstance(outcome.error, LoadError)
        self.assertEqual(outcome.error.message, "backend unavailable")
        self.assertEqual(outcome.error.parent_id, "1")
        self.assertEqual(store.get_cached_children("1"), tuple(CHILDREN))
        self.assertIs(store.error_for("1"), outcome.error)
        self.assertFalse(store.is_loading("1"))

    def test_success_clears_a_recorded_error(self) -> None:
        loader = RecordingLoader({})
        store = NodeStore(loader)
        self.addCleanup(store.close)

        with self.assertLogs("lazypicker.tree_model.store", level="WARNING"):
            store.request_children("1").result(timeout=2.0)
            store.drain_results()
        self.assertIsNotNone(store.error_for("1"))

        loader.tree["1"] = CHILDREN
        store.request_children("1").result(timeout=2.0)
        store.drain_results()
        self.assertIsNone(store.error_for("1"))

    def test_wait_for_pending_returns_true_when_idle(self) -> None:
        store = NodeStore(RecordingLoader({}))
        self.addCleanup(store.close)

        self.assertTrue(store.wait_for_pending(timeout=0.1))
        self.assertFalse(store.has_pending())


class NodeStoreSearchTests(unittest.TestCase):
    def test_loader_without_search_nodes_gets_no_search(self) -> None:
        store = NodeStore(RecordingLoader({}))
        self.addCleanup(store.close)

        self.assertFalse(store.supports_search)
        self.assertIsNone(store.request_search("doc"))

    def test_search_results_are_applied_on_drain(self) -> None:
        loader = SearchingLoader({}, {"doc": [TreeNode(id="1", label="Documents")]})
        store = NodeStore(loader)
        self.addCleanup(store.close)

        store.request_search("doc").result(timeout=2.0)
        applied = store.drain_results()

        self.assertEqual([outcome.kind for outcome in applied], ["search"])
        self.assertEqual([node.id for node in store.search_results], ["1"])

    def test_max_results_is_forwarded(self) -> None:
        found = [TreeNode(id=str(idx), label=f"doc {idx}") for idx in range(5)]
        store = NodeStore(SearchingLoader({}, {"doc": found}))
        self.addCleanup(store.close)

        store.request_search("doc", max_results=2).result(timeout=2.0)
        store.drain_results()

        self.assertEqual(len(store.search_results), 2)

    def test_superseded_search_is_dropped(self) -> None:
        loader = SearchingLoader(
            {},
            {"d": [TreeNode(id="old", label="Old")], "doc": [TreeNode(id="new", label="New")]},
        )
        loader.release["d"] = threading.Event()
        store = NodeStore(loader)
        self.addCleanup(store.close)
        self.addCleanup(loader.release["d"].set)

        stale = store.request_search("d")
        fresh = store.request_search("doc")
        fresh.result(timeout=2.0)
        loader.release["d"].set()
        stale.result(timeout=2.0)

        with self.assertLogs("lazypicker.tree_model.store", level="DEBUG"):
            applied = store.drain_results()

        self.assertEqual([outcome.search_term for outcome in applied], ["doc"])
        self.assertEqual([node.id for node in store.search_results], ["new"])

    def test_clear_search_discards_results(self) -> None:
        store = NodeStore(SearchingLoader({}, {"doc": [TreeNode(id="1", label="Documents")]}))
        self.addCleanup(store.close)
        store.request_search("doc").result(timeout=2.0)
        store.drain_results()

        store.clear_search()

        self.assertIsNone(store.search_results)
        self.assertFalse(store.has_pending())


if __name__ == "__main__":
    unittest.main()
