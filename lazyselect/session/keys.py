"""Keyboard contract for a selection session.

Key tokens follow the terminal-style names (``UP``, ``PAGE_DOWN``...);
browser ``KeyboardEvent.key`` names are accepted as aliases.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .controller import SelectSession

KEY_ALIASES = {
    "ARROWUP": "UP",
    "ARROWDOWN": "DOWN",
    "PAGEUP": "PAGE_UP",
    "PAGEDOWN": "PAGE_DOWN",
    "RETURN": "ENTER",
}

SessionAction = Callable[["SelectSession"], object]


def normalize_key(key: str) -> str:
    """Upper-case named keys and fold browser aliases; characters pass through."""
    if len(key) == 1:
        return key
    upper = key.upper()
    return KEY_ALIASES.get(upper, upper)


@dataclass(frozen=True)
class KeyBinding:
    """Key tokens that all trigger one session action."""

    keys: tuple[str, ...]
    action: SessionAction


class KeyMap:
    """Normalized key token -> session action table."""

    def __init__(self, bindings: Iterable[KeyBinding] = ()) -> None:
        self._actions: dict[str, SessionAction] = {}
        for binding in bindings:
            self.bind(binding)

    def bind(self, binding: KeyBinding) -> None:
        """Later bindings replace earlier ones for the same token."""
        for key in binding.keys:
            self._actions[normalize_key(key)] = binding.action

    def __contains__(self, key: str) -> bool:
        return normalize_key(key) in self._actions

    def lookup(self, key: str) -> SessionAction | None:
        return self._actions.get(normalize_key(key))


def _backspace(session: SelectSession) -> None:
    text = session.state.input_text
    if text:
        session.input_change(text[:-1])
        return
    session.backspace()


def _page(direction: int) -> SessionAction:
    def action(session: SelectSession) -> None:
        session.move(direction * session.page_size)

    return action


DEFAULT_KEY_MAP = KeyMap(
    [
        KeyBinding(("UP",), lambda session: session.move(-1)),
        KeyBinding(("DOWN",), lambda session: session.move(1)),
        KeyBinding(("PAGE_UP",), _page(-1)),
        KeyBinding(("PAGE_DOWN",), _page(1)),
        KeyBinding(("HOME",), lambda session: session.home()),
        KeyBinding(("END",), lambda session: session.end()),
        KeyBinding(("ENTER",), lambda session: session.enter()),
        KeyBinding(("BACKSPACE",), _backspace),
    ]
)


def dispatch_key(session: SelectSession, key: str, key_map: KeyMap = DEFAULT_KEY_MAP) -> bool:
    """Handle one key; printable characters extend the input and reopen."""
    action = key_map.lookup(key)
    if action is not None:
        action(session)
        return True
    if len(key) == 1 and key.isprintable():
        session.input_change(session.state.input_text + key)
        return True
    return False
