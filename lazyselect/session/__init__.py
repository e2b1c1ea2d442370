"""Selection session: configuration, state machine, and keyboard contract."""

from __future__ import annotations

from .controller import SelectSession
from .keys import DEFAULT_KEY_MAP, KeyBinding, KeyMap, dispatch_key, normalize_key
from .settings import CreateHandler, SelectConfig, SelectValue

__all__ = [
    "CreateHandler",
    "DEFAULT_KEY_MAP",
    "KeyBinding",
    "KeyMap",
    "SelectConfig",
    "SelectSession",
    "SelectValue",
    "dispatch_key",
    "normalize_key",
]
