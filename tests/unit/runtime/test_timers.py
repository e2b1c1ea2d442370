"""Tests for the debounce helper and timer seams."""

from __future__ import annotations

import asyncio
import unittest

from lazyselect.runtime import Debouncer, ImmediateTimers, LoopTimers


class _ManualHandle:
    def __init__(self, when: float, callback) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimers:
    """Deterministic clock advanced explicitly by tests."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[_ManualHandle] = []

    def call_later(self, delay: float, callback) -> _ManualHandle:
        handle = _ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        self.now += seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.when <= self.now]
            if not due:
                return
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            handle.callback()


class DebouncerTests(unittest.TestCase):
    def test_only_last_call_of_a_burst_fires(self) -> None:
        timers = ManualTimers()
        calls: list[str] = []
        debounced = Debouncer(calls.append, 0.5, timers)

        debounced("a")
        timers.advance(0.3)
        debounced("ab")
        timers.advance(0.3)
        self.assertEqual(calls, [])
        self.assertTrue(debounced.pending)

        timers.advance(0.2)
        self.assertEqual(calls, ["ab"])
        self.assertFalse(debounced.pending)

    def test_cancel_drops_pending_call(self) -> None:
        timers = ManualTimers()
        calls: list[str] = []
        debounced = Debouncer(calls.append, 0.5, timers)
        debounced("a")
        debounced.cancel()
        timers.advance(1.0)
        self.assertEqual(calls, [])

    def test_flush_runs_pending_call_immediately(self) -> None:
        timers = ManualTimers()
        calls: list[str] = []
        debounced = Debouncer(calls.append, 0.5, timers)
        debounced("a")
        debounced.flush()
        self.assertEqual(calls, ["a"])
        timers.advance(1.0)
        self.assertEqual(calls, ["a"])

    def test_flush_without_pending_call_does_nothing(self) -> None:
        calls: list[str] = []
        Debouncer(calls.append, 0.5, ManualTimers()).flush()
        self.assertEqual(calls, [])

    def test_zero_delay_fires_synchronously(self) -> None:
        calls: list[str] = []
        debounced = Debouncer(calls.append, 0, ManualTimers())
        debounced("now")
        self.assertEqual(calls, ["now"])


class TimerSeamTests(unittest.TestCase):
    def test_immediate_timers_run_callback_in_place(self) -> None:
        calls: list[int] = []
        handle = ImmediateTimers().call_later(5, lambda: calls.append(1))
        handle.cancel()
        self.assertEqual(calls, [1])

    def test_loop_timers_without_running_loop_run_immediately(self) -> None:
        calls: list[int] = []
        LoopTimers().call_later(5, lambda: calls.append(1))
        self.assertEqual(calls, [1])


class LoopTimersAsyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_loop_timers_schedule_on_running_loop(self) -> None:
        calls: list[int] = []
        LoopTimers().call_later(0.01, lambda: calls.append(1))
        self.assertEqual(calls, [])
        await asyncio.sleep(0.05)
        self.assertEqual(calls, [1])

    async def test_loop_timer_handle_cancels(self) -> None:
        calls: list[int] = []
        handle = LoopTimers().call_later(0.01, lambda: calls.append(1))
        handle.cancel()
        await asyncio.sleep(0.05)
        self.assertEqual(calls, [])


if __name__ == "__main__":
    unittest.main()
