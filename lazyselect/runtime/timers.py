"""Timer seam used for debouncing, blur grace delays, and deferred refocus."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timers(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class _FiredHandle:
    """Handle for a callback that already ran; cancelling does nothing."""

    def cancel(self) -> None:
        return None


class ImmediateTimers:
    """Run every scheduled callback synchronously (scripts and CLI replay)."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        callback()
        return _FiredHandle()


class LoopTimers:
    """Schedule callbacks on the running asyncio loop.

    Without a running loop the callback runs immediately, so synchronous
    hosts with static option trees still work.
    """

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running loop; running timer callback immediately")
            callback()
            return _FiredHandle()
        return loop.call_later(max(0.0, delay), callback)


class Debouncer:
    """Trailing-edge debounce: only the last call in a burst fires."""

    def __init__(self, callback: Callable[..., Any], delay: float, timers: Timers) -> None:
        self._callback = callback
        self._delay = delay
        self._timers = timers
        self._handle: TimerHandle | None = None
        self._pending_args: tuple[Any, ...] | None = None

    @property
    def pending(self) -> bool:
        return self._pending_args is not None

    def __call__(self, *args: Any) -> None:
        self.cancel()
        self._pending_args = args
        if self._delay <= 0:
            self._fire()
            return
        self._handle = self._timers.call_later(self._delay, self._fire)

    def _fire(self) -> None:
        args = self._pending_args
        self._pending_args = None
        self._handle = None
        if args is None:
            return
        self._callback(*args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_args = None

    def flush(self) -> None:
        """Run the pending call now, if any."""
        if self._handle is not None:
            self._handle.cancel()
        self._fire()


__all__ = ["Debouncer", "ImmediateTimers", "LoopTimers", "TimerHandle", "Timers"]
