"""Inbound configuration for one selection session."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Union

from ..errors import ProviderFailure
from ..option_tree import Leaf
from ..runtime.config import load_blur_grace_seconds, load_debounce_seconds, load_page_size
from ..search import OptionsSource

SelectValue = Union[None, Leaf, list[Leaf]]
CreateResult = Union[str, int, float, bool, Leaf, dict]
CreateHandler = Callable[[str], Union[Awaitable[CreateResult], CreateResult]]


def _noop_change(_value: SelectValue) -> None:
    return None


@dataclass
class SelectConfig:
    """Options, flags, and callbacks a host passes to ``SelectSession``.

    ``value`` is owned by the host: every committed change goes out through
    ``on_change`` and comes back through ``SelectSession.set_value``.
    Delay/page fields left as ``None`` resolve through persisted defaults.
    """

    options: OptionsSource
    value: SelectValue = None
    on_change: Callable[[SelectValue], None] = _noop_change
    is_multi: bool = False
    is_clearable: bool = False
    is_creatable: bool = False
    is_searchable: bool = True
    close_on_select: bool | None = None
    clear_search_on_select: bool = True
    clear_search_on_close: bool = True
    default_options: bool = False
    disabled: bool = False
    open: bool = False
    auto_focus: bool = False
    on_create: CreateHandler | None = None
    no_options_message: Callable[[str], str] | None = None
    create_option_message: Callable[[str], str] | None = None
    on_enter: Callable[[], None] | None = None
    on_focus: Callable[[], None] | None = None
    on_blur: Callable[[], None] | None = None
    on_error: Callable[[ProviderFailure], None] | None = None
    request_focus: Callable[[], None] | None = None
    request_blur: Callable[[], None] | None = None
    debounce_seconds: float | None = None
    blur_grace_seconds: float | None = None
    page_size: int | None = None

    def effective_close_on_select(self) -> bool:
        """Explicit flag wins; otherwise single-select closes and multi stays open."""
        if self.close_on_select is not None:
            return self.close_on_select
        return not self.is_multi

    def effective_debounce_seconds(self) -> float:
        if self.debounce_seconds is not None:
            return max(0.0, self.debounce_seconds)
        return load_debounce_seconds()

    def effective_blur_grace_seconds(self) -> float:
        if self.blur_grace_seconds is not None:
            return max(0.0, self.blur_grace_seconds)
        return load_blur_grace_seconds()

    def effective_page_size(self) -> int:
        if self.page_size is not None and self.page_size > 0:
            return self.page_size
        return load_page_size()
