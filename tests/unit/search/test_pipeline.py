"""Search pipeline tests.

Covers local filtering, creatable decoration, multi-select pinning, and
latest-request-wins behavior for asynchronous providers.
"""

from __future__ import annotations

import asyncio
import unittest

from lazyselect.errors import ProviderFailure
from lazyselect.option_tree import CREATABLE, Group, Leaf
from lazyselect.search import SearchPipeline, SearchResult, report_provider_failure

SCENARIO_TREE = (
    Leaf("A", 1),
    Group("Group", (Leaf("B", 2),)),
)


class _Recorder:
    def __init__(self) -> None:
        self.results: list[SearchResult] = []
        self.loading: list[bool] = []
        self.errors: list[ProviderFailure] = []


def _pipeline(source, recorder: _Recorder, **kwargs) -> SearchPipeline:
    return SearchPipeline(
        source,
        on_results=recorder.results.append,
        on_loading=recorder.loading.append,
        on_error=recorder.errors.append,
        **kwargs,
    )


class LocalSearchTests(unittest.TestCase):
    def test_local_search_publishes_synchronously(self) -> None:
        recorder = _Recorder()
        pipeline = _pipeline(SCENARIO_TREE, recorder)

        self.assertIsNone(pipeline.search("b"))

        self.assertEqual(recorder.loading, [True])
        self.assertEqual(len(recorder.results), 1)
        result = recorder.results[0]
        self.assertEqual(result.generation, 1)
        self.assertEqual(result.query, "b")
        self.assertEqual(result.tree, (Group("Group", (Leaf("B", 2),)),))
        self.assertFalse(pipeline.is_remote)

    def test_each_search_bumps_the_generation(self) -> None:
        recorder = _Recorder()
        pipeline = _pipeline(SCENARIO_TREE, recorder)
        pipeline.search("")
        pipeline.search("a")
        self.assertEqual(pipeline.generation, 2)
        self.assertEqual([r.generation for r in recorder.results], [1, 2])

    def test_creatable_sentinel_follows_results_when_text_typed(self) -> None:
        recorder = _Recorder()
        pipeline = _pipeline(SCENARIO_TREE, recorder, is_creatable=True)
        pipeline.search("zzz")
        pipeline.search("")
        self.assertEqual(recorder.results[0].tree, (CREATABLE,))
        self.assertEqual(recorder.results[1].tree, SCENARIO_TREE)

    def test_multi_select_pins_current_selection(self) -> None:
        recorder = _Recorder()
        picked = [Leaf("B", 2)]
        pipeline = _pipeline(SCENARIO_TREE, recorder, is_multi=True, selected=lambda: picked)
        pipeline.search("")
        result = recorder.results[0]
        self.assertEqual(result.tree, (Leaf("B", 2), Leaf("A", 1)))
        self.assertEqual(result.pinned_count, 1)
        self.assertEqual(result.base_tree, SCENARIO_TREE)

    def test_set_source_accepts_option_data(self) -> None:
        recorder = _Recorder()
        pipeline = _pipeline(SCENARIO_TREE, recorder)
        pipeline.set_source([{"label": "C", "value": 3}])
        pipeline.search("")
        self.assertEqual(recorder.results[0].tree, (Leaf("C", 3),))
        self.assertEqual(pipeline.static_tree, (Leaf("C", 3),))

    def test_synchronous_provider_result_is_published_directly(self) -> None:
        recorder = _Recorder()
        pipeline = _pipeline(lambda query: [{"label": query.upper(), "value": query}], recorder)
        self.assertIsNone(pipeline.search("x"))
        self.assertEqual(recorder.results[0].tree, (Leaf("X", "x"),))
        self.assertTrue(pipeline.is_remote)

    def test_provider_raising_synchronously_reports_failure(self) -> None:
        recorder = _Recorder()
        boom = RuntimeError("down")

        def provider(query: str):
            raise boom

        pipeline = _pipeline(provider, recorder)
        pipeline.search("x")
        self.assertEqual(recorder.loading, [True, False])
        self.assertEqual(len(recorder.errors), 1)
        self.assertIs(recorder.errors[0].original, boom)
        self.assertEqual(recorder.errors[0].query, "x")
        self.assertEqual(recorder.results, [])

    def test_malformed_provider_data_is_reported_as_failure(self) -> None:
        recorder = _Recorder()
        pipeline = _pipeline(lambda query: ["not an option"], recorder)
        pipeline.search("x")
        self.assertEqual(len(recorder.errors), 1)
        self.assertIsInstance(recorder.errors[0].original, ValueError)

    def test_unhandled_failure_without_loop_is_raised(self) -> None:
        failure = ProviderFailure("q", RuntimeError("down"))
        with self.assertRaises(ProviderFailure) as exc_info:
            report_provider_failure(failure, None)
        self.assertIs(exc_info.exception, failure)


class RemoteSearchTests(unittest.IsolatedAsyncioTestCase):
    def _gated_provider(self, gates: dict[str, asyncio.Event], calls: list[str]):
        async def provider(query: str):
            calls.append(query)
            await gates[query].wait()
            return [{"label": f"result {query}", "value": query}]

        return provider

    async def test_latest_request_wins(self) -> None:
        recorder = _Recorder()
        calls: list[str] = []
        gates = {"a": asyncio.Event(), "ab": asyncio.Event()}
        pipeline = _pipeline(self._gated_provider(gates, calls), recorder)

        first = pipeline.search("a")
        second = pipeline.search("ab")
        self.assertTrue(first.cancelled)
        self.assertTrue(pipeline.in_flight)

        gates["a"].set()
        gates["ab"].set()
        await second
        await asyncio.sleep(0)

        self.assertEqual([r.query for r in recorder.results], ["ab"])
        self.assertEqual(recorder.results[0].tree, (Leaf("result ab", "ab"),))
        self.assertEqual(recorder.results[0].generation, 2)
        self.assertFalse(pipeline.in_flight)
        self.assertEqual(recorder.errors, [])

    async def test_cancel_prevents_publication(self) -> None:
        recorder = _Recorder()
        gates = {"a": asyncio.Event()}
        pipeline = _pipeline(self._gated_provider(gates, []), recorder)
        task = pipeline.search("a")
        pipeline.cancel()
        gates["a"].set()
        await asyncio.sleep(0.01)
        self.assertTrue(task.cancelled)
        self.assertEqual(recorder.results, [])
        self.assertEqual(recorder.errors, [])

    async def test_rejection_of_current_search_reaches_error_hook(self) -> None:
        recorder = _Recorder()
        boom = LookupError("no backend")

        async def provider(query: str):
            await asyncio.sleep(0)
            raise boom

        pipeline = _pipeline(provider, recorder)
        task = pipeline.search("q")
        with self.assertRaises(LookupError):
            await task
        await asyncio.sleep(0)

        self.assertEqual(recorder.loading, [True, False])
        self.assertEqual(len(recorder.errors), 1)
        self.assertIs(recorder.errors[0].original, boom)
        self.assertIs(recorder.errors[0].__cause__, boom)

    async def test_superseded_failure_is_never_reported(self) -> None:
        recorder = _Recorder()
        gate = asyncio.Event()

        async def provider(query: str):
            await gate.wait()
            if query == "old":
                raise RuntimeError("stale")
            return [{"label": "fresh", "value": 1}]

        pipeline = _pipeline(provider, recorder)
        pipeline.search("old")
        latest = pipeline.search("new")
        gate.set()
        await latest
        await asyncio.sleep(0)

        self.assertEqual(recorder.errors, [])
        self.assertEqual([r.query for r in recorder.results], ["new"])

    async def test_unhandled_failure_goes_to_loop_exception_handler(self) -> None:
        contexts: list[dict] = []
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda _loop, context: contexts.append(context))
        try:
            async def provider(query: str):
                await asyncio.sleep(0)
                raise RuntimeError("down")

            pipeline = SearchPipeline(provider, on_results=lambda result: None)
            task = pipeline.search("q")
            with self.assertRaises(RuntimeError):
                await task
            await asyncio.sleep(0)
        finally:
            loop.set_exception_handler(None)

        self.assertEqual(len(contexts), 1)
        self.assertIsInstance(contexts[0]["exception"], ProviderFailure)


if __name__ == "__main__":
    unittest.main()
