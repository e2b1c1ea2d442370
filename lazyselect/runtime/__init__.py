"""Runtime primitives: cancellable tasks, timers, persisted config, session state."""

from __future__ import annotations

from .cancellable import CancellableTask
from .state import SessionState
from .timers import Debouncer, ImmediateTimers, LoopTimers, TimerHandle, Timers

__all__ = [
    "CancellableTask",
    "Debouncer",
    "ImmediateTimers",
    "LoopTimers",
    "SessionState",
    "TimerHandle",
    "Timers",
]
