"""Cancellable wrapper around one asynchronous operation.

Settlement and cancellation are mutually exclusive: whichever happens first
wins, and the other becomes a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Generic, TypeVar

from ..errors import TaskCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellableTask(Generic[T]):
    """Handle exposing ``cancel()`` and an awaitable result channel."""

    def __init__(
        self,
        awaitable: Awaitable[T],
        on_cancel: Callable[[], None] | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._loop = loop if loop is not None else asyncio.get_running_loop()
        self._on_cancel = on_cancel
        self._cancelled = False
        self._settled = False
        self._result: asyncio.Future[T] = self._loop.create_future()
        self._inner: asyncio.Future[T] = asyncio.ensure_future(awaitable, loop=self._loop)
        self._inner.add_done_callback(self._settle)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def settled(self) -> bool:
        """Whether the wrapped operation finished before any cancellation."""
        return self._settled

    def done(self) -> bool:
        return self._result.done()

    def _settle(self, inner: asyncio.Future[T]) -> None:
        if self._result.done():
            # Cancelled first; the late outcome is discarded.
            if not inner.cancelled():
                inner.exception()
            return
        self._settled = True
        if inner.cancelled():
            self._reject_cancelled()
            return
        exc = inner.exception()
        if exc is not None:
            self._result.set_exception(exc)
        else:
            self._result.set_result(inner.result())

    def _reject_cancelled(self) -> None:
        self._result.set_exception(TaskCancelled("Task cancelled", True))
        # Mark retrieved: nobody is required to observe a cancellation.
        self._result.exception()

    def cancel(self) -> None:
        """Cancel an in-flight operation; no-op once settled or cancelled."""
        if self._cancelled or self._settled:
            return
        self._cancelled = True
        logger.debug("cancelling in-flight task %r", self)
        if self._on_cancel is not None:
            self._on_cancel()
        self._inner.cancel()
        if not self._result.done():
            self._reject_cancelled()

    def result(self) -> T:
        """Return the settled value, raising the failure or ``TaskCancelled``."""
        return self._result.result()

    def add_done_callback(self, callback: Callable[[CancellableTask[T]], Any]) -> None:
        self._result.add_done_callback(lambda _future: callback(self))

    def __await__(self) -> Generator[Any, None, T]:
        return self._result.__await__()


__all__ = ["CancellableTask"]
