"""Single entry point for local and remote option searches.

Every call bumps a generation counter and cancels the previous in-flight
request, so only the newest search can ever publish a tree.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Union

from ..errors import ProviderFailure, TaskCancelled
from ..option_tree import Leaf, OptionNode, OptionTree, append_creatable, options_from_data, pin_selected, search_local
from ..runtime.cancellable import CancellableTask

logger = logging.getLogger(__name__)

OptionsProvider = Callable[[str], Union[Awaitable[Iterable[object]], Iterable[object]]]
OptionsSource = Union[Sequence[OptionNode], Sequence[object], OptionsProvider]


@dataclass(frozen=True)
class SearchResult:
    """One published search outcome."""

    generation: int
    query: str
    tree: OptionTree
    pinned_count: int = 0
    # Result before the multi-select head was pinned; reseeding starts here.
    base_tree: OptionTree = ()


def _no_selection() -> Sequence[Leaf]:
    return ()


class SearchPipeline:
    """Runs searches against a static tree or an async options provider."""

    def __init__(
        self,
        source: OptionsSource,
        *,
        on_results: Callable[[SearchResult], None],
        on_loading: Callable[[bool], None] | None = None,
        on_error: Callable[[ProviderFailure], None] | None = None,
        is_creatable: bool = False,
        is_multi: bool = False,
        selected: Callable[[], Sequence[Leaf]] = _no_selection,
    ) -> None:
        self._on_results = on_results
        self._on_loading = on_loading
        self._on_error = on_error
        self.is_creatable = is_creatable
        self.is_multi = is_multi
        self._selected = selected
        self._generation = 0
        self._task: CancellableTask[Iterable[object]] | None = None
        self._provider: OptionsProvider | None = None
        self._static: OptionTree = ()
        self.set_source(source)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_remote(self) -> bool:
        return self._provider is not None

    @property
    def static_tree(self) -> OptionTree:
        return self._static

    def set_source(self, source: OptionsSource) -> None:
        """Swap the static tree or provider; does not search by itself."""
        if callable(source):
            self._provider = source
            self._static = ()
        else:
            self._provider = None
            self._static = options_from_data(source)

    def cancel(self) -> None:
        """Cancel the in-flight provider call, if any."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _set_loading(self, loading: bool) -> None:
        if self._on_loading is not None:
            self._on_loading(loading)

    def search(self, query: str) -> CancellableTask[Iterable[object]] | None:
        """Start a search for ``query``.

        Local searches publish synchronously and return ``None``. Remote
        searches return the cancellable task wrapping the provider call.
        """
        self._generation += 1
        generation = self._generation
        self._set_loading(True)
        self.cancel()

        if self._provider is None:
            self._publish(generation, query, search_local(self._static, query))
            return None

        try:
            outcome = self._provider(query)
        except Exception as exc:
            self._fail(query, exc)
            return None
        if not inspect.isawaitable(outcome):
            self._settle_tree(generation, query, outcome)
            return None

        task: CancellableTask[Iterable[object]] = CancellableTask(outcome)
        self._task = task
        task.add_done_callback(partial(self._on_settled, generation, query))
        return task

    def _on_settled(self, generation: int, query: str, task: CancellableTask[Iterable[object]]) -> None:
        try:
            raw = task.result()
        except TaskCancelled:
            logger.debug("search %d for %r cancelled", generation, query)
            return
        except Exception as exc:
            if generation != self._generation:
                logger.debug("dropping failure of stale search %d for %r", generation, query)
                return
            self._task = None
            self._fail(query, exc)
            return
        if generation != self._generation:
            logger.debug("dropping stale search %d for %r", generation, query)
            return
        self._task = None
        self._settle_tree(generation, query, raw)

    def _settle_tree(self, generation: int, query: str, raw: Iterable[object]) -> None:
        try:
            tree = options_from_data(raw)
        except (TypeError, ValueError) as exc:
            self._fail(query, exc)
            return
        self._publish(generation, query, tree)

    def _publish(self, generation: int, query: str, results: OptionTree) -> None:
        base_tree = append_creatable(results, query, self.is_creatable)
        selected: tuple[Leaf, ...] = tuple(self._selected()) if self.is_multi else ()
        tree = pin_selected(base_tree, selected)
        logger.debug("search %d for %r published %d top-level rows", generation, query, len(tree))
        self._on_results(
            SearchResult(
                generation=generation,
                query=query,
                tree=tree,
                pinned_count=len(selected),
                base_tree=base_tree,
            )
        )

    def _fail(self, query: str, exc: BaseException) -> None:
        self._set_loading(False)
        report_provider_failure(ProviderFailure(query, exc), self._on_error)


def report_provider_failure(
    failure: ProviderFailure,
    on_error: Callable[[ProviderFailure], None] | None,
) -> None:
    """Hand ``failure`` to the host hook, or surface it as unhandled.

    Without a hook the failure goes to the running loop's exception handler,
    or is raised when no loop is running.
    """
    failure.__cause__ = failure.original
    if on_error is not None:
        on_error(failure)
        return
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        raise failure from failure.original
    loop.call_exception_handler(
        {
            "message": "Unhandled options provider failure",
            "exception": failure,
        }
    )


__all__ = [
    "OptionsProvider",
    "OptionsSource",
    "SearchPipeline",
    "SearchResult",
    "report_provider_failure",
]
