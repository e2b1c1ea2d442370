"""Selection state machine with explicit methods (no mixins).

Owns the open/closed session, the typed input, the highlight address, and
the pinned multi-select head. The committed value itself belongs to the
host; changes go out through ``on_change`` and come back via ``set_value``.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Sequence
from functools import partial

from ..errors import InvalidAddressError, ProviderFailure, TaskCancelled
from ..option_tree import (
    EMPTY_ADDRESS,
    Address,
    Leaf,
    MenuView,
    OptionNode,
    OptionTree,
    as_address,
    build_menu_view,
    first_address,
    flatten,
    is_creatable,
    is_group,
    is_leaf,
    is_valid_address,
    last_address,
    leaf_from_created,
    locate_value,
    options_from_data,
    pin_selected,
    resolve_path,
    same_value,
)
from ..option_tree import move as move_address
from ..runtime.cancellable import CancellableTask
from ..runtime.state import DEFAULT_NO_OPTIONS_MESSAGE, SessionState
from ..runtime.timers import Debouncer, LoopTimers, TimerHandle, Timers
from ..search import OptionsSource, SearchPipeline, SearchResult, report_provider_failure
from .keys import DEFAULT_KEY_MAP, KeyMap, dispatch_key
from .settings import SelectConfig, SelectValue

logger = logging.getLogger(__name__)


class SelectSession:
    """State-bound selection operations used by presentation layers."""

    def __init__(
        self,
        config: SelectConfig,
        *,
        timers: Timers | None = None,
        key_map: KeyMap | None = None,
    ) -> None:
        self.config = config
        self.timers: Timers = timers if timers is not None else LoopTimers()
        self.value: SelectValue = self._normalize_value(config.value)
        self.state = SessionState(
            is_open=bool(config.open),
            auto_focus=bool(config.auto_focus),
            no_options_message=self._no_options_text(""),
        )
        self._base_tree: OptionTree = ()
        self._pinned_count = 0
        self._blur_grace_seconds = config.effective_blur_grace_seconds()
        self._page_size = config.effective_page_size()
        self._blur_handle: TimerHandle | None = None
        self._focus_handle: TimerHandle | None = None
        self._creation: CancellableTask[object] | None = None
        self.pipeline = SearchPipeline(
            config.options,
            on_results=self._apply_results,
            on_loading=self._set_loading,
            on_error=config.on_error,
            is_creatable=config.is_creatable,
            is_multi=config.is_multi,
            selected=self._selected_leaves,
        )
        self._search_debounce = Debouncer(
            self._run_search,
            config.effective_debounce_seconds(),
            self.timers,
        )
        self._key_map = key_map if key_map is not None else DEFAULT_KEY_MAP

        self._base_tree = self.pipeline.static_tree
        self._pin_selection()
        self.state.first_load = not self._base_tree

    # value helpers
    def _normalize_value(self, value: SelectValue) -> SelectValue:
        if self.config.is_multi:
            if isinstance(value, (list, tuple)):
                return list(value)
            if isinstance(value, Leaf):
                return [value]
            return []
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return value

    def _selected_leaves(self) -> list[Leaf]:
        if not self.config.is_multi or not isinstance(self.value, list):
            return []
        return list(self.value)

    def _no_options_text(self, text: str) -> str:
        if self.config.no_options_message is not None:
            return self.config.no_options_message(text)
        return DEFAULT_NO_OPTIONS_MESSAGE

    def _emit(self, value: SelectValue) -> None:
        logger.debug("emitting change %r", value)
        self.config.on_change(value)

    # presentation contract
    @property
    def tree(self) -> OptionTree:
        return self.state.current_tree

    @property
    def highlight(self) -> Address:
        return self.state.highlight_address

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def pinned_count(self) -> int:
        return self._pinned_count

    @property
    def page_size(self) -> int:
        """Rows moved by PageUp/PageDown, resolved once at construction."""
        return self._page_size

    @property
    def needs_repaint(self) -> bool:
        """Whether state changed since the last ``view()`` snapshot."""
        return self.state.dirty

    def addresses(self) -> list[Address]:
        """Flattened pre-order addresses of the current tree."""
        return flatten(self.state.current_tree)

    def create_option_message(self) -> str:
        if self.config.create_option_message is not None:
            return self.config.create_option_message(self.state.input_text)
        return f'Create "{self.state.input_text}"'

    def view(self) -> MenuView:
        """Snapshot of rows, highlight, and menu flags for one paint."""
        self.state.dirty = False
        return build_menu_view(
            tree=self.state.current_tree,
            highlight=self.state.highlight_address,
            value=self.value,
            is_open=self.state.is_open and not self.config.disabled,
            is_loading=self.state.is_loading,
            first_load=self.state.first_load,
            is_multi=self.config.is_multi,
            is_creatable=self.config.is_creatable,
            pinned_count=self._pinned_count,
            no_options_message=self.state.no_options_message,
            create_option_message=self.create_option_message(),
            input_text=self.state.input_text,
        )

    # lifecycle
    def mount(self) -> CancellableTask[object] | None:
        """Eagerly load options when ``default_options`` is set."""
        if self.config.default_options:
            return self._run_search("")
        return None

    def dispose(self) -> None:
        """Cancel timers and in-flight work; later settlements are no-ops."""
        self._search_debounce.cancel()
        self._cancel_blur()
        if self._focus_handle is not None:
            self._focus_handle.cancel()
            self._focus_handle = None
        self.pipeline.cancel()
        if self._creation is not None:
            self._creation.cancel()
            self._creation = None

    # searching
    def _run_search(self, query: str) -> CancellableTask[object] | None:
        return self.pipeline.search(query)  # type: ignore[return-value]

    def _set_loading(self, loading: bool) -> None:
        self.state.is_loading = loading
        self.state.dirty = True

    def _apply_results(self, result: SearchResult) -> None:
        was_first_load = self.state.first_load
        self._base_tree = result.base_tree
        self.state.current_tree = result.tree
        self._pinned_count = result.pinned_count
        self.state.is_loading = False
        self.state.first_load = False
        self.state.highlight_address = EMPTY_ADDRESS
        if was_first_load and not self.config.is_multi and isinstance(self.value, Leaf):
            located = locate_value(result.tree, self.value.value)
            if located is not None:
                self.state.highlight_address = located
        self.state.dirty = True

    def _reset_search(self) -> None:
        """Clear input and tree, then run the empty search immediately."""
        self.state.input_text = ""
        self._base_tree = ()
        self.state.current_tree = ()
        self._pinned_count = 0
        self.state.is_loading = True
        self.state.no_options_message = self._no_options_text("")
        self._search_debounce.cancel()
        self._run_search("")

    def set_options(self, source: OptionsSource) -> CancellableTask[object] | None:
        """Swap the option source and re-run the search for the current input."""
        if callable(source):
            if self.pipeline.is_remote:
                self.pipeline.set_source(source)
                return None
        elif not self.pipeline.is_remote and options_from_data(source) == self.pipeline.static_tree:
            return None
        self.pipeline.set_source(source)
        return self._run_search(self.state.input_text)

    def set_value(self, value: SelectValue) -> None:
        """Echo the host-owned value back into the session."""
        self.value = self._normalize_value(value)
        if self.config.is_multi and self.state.is_open:
            self._reseed_pinned()
        self.state.dirty = True

    def _pin_selection(self) -> None:
        """Rebuild the current tree as the live selection over the last result."""
        selected = self._selected_leaves()
        self.state.current_tree = pin_selected(self._base_tree, selected)
        self._pinned_count = len(selected)

    def _reseed_pinned(self) -> None:
        previous = self._highlighted_node()
        self._pin_selection()
        highlight = EMPTY_ADDRESS
        if self.state.highlight_address and is_leaf(previous):
            highlight = locate_value(self.state.current_tree, previous.value) or EMPTY_ADDRESS  # type: ignore[union-attr]
        self.state.highlight_address = highlight

    def _highlighted_node(self) -> OptionNode | None:
        address = self.state.highlight_address
        if not address:
            return None
        try:
            return resolve_path(self.state.current_tree, address)[-1]
        except InvalidAddressError:
            return None

    # open/close transitions
    def _open(self) -> None:
        if self.state.is_open:
            return
        logger.debug("session opened")
        self.state.is_open = True
        self._on_opened()

    def _on_opened(self) -> None:
        self.state.highlight_address = EMPTY_ADDRESS
        if self.config.is_multi:
            self._pin_selection()
        self.state.dirty = True

    def open(self) -> None:
        if self.config.disabled:
            return
        self._open()

    def close(self) -> None:
        """Close the session, optionally clearing input and re-searching."""
        self._cancel_blur()
        was_open = self.state.is_open
        self.state.is_open = False
        self.state.dirty = True
        if was_open:
            logger.debug("session closed")
        if self.state.input_text and self.config.clear_search_on_close:
            self._reset_search()
        if self.config.request_blur is not None:
            self.config.request_blur()

    def focus(self) -> None:
        """Input gained focus; the automatic initial focus leaves the menu closed."""
        if self.config.on_focus is not None:
            self.config.on_focus()
        self._cancel_blur()
        if self.state.auto_focus:
            self.state.auto_focus = False
            self.state.is_open = False
            self.state.dirty = True
            return
        if self.config.disabled:
            return
        self._open()

    def blur(self) -> None:
        """Input lost focus; close after the grace delay unless cancelled."""
        if self.config.on_blur is not None:
            self.config.on_blur()
        self._cancel_blur()
        self.state.blur_pending = True
        self._blur_handle = self.timers.call_later(
            self._blur_grace_seconds,
            self._close_after_blur,
        )

    def _close_after_blur(self) -> None:
        self._blur_handle = None
        if not self.state.blur_pending:
            return
        self.state.blur_pending = False
        self.close()

    def _cancel_blur(self) -> None:
        if self._blur_handle is not None:
            self._blur_handle.cancel()
            self._blur_handle = None
        self.state.blur_pending = False

    def pointer_down(self, *, inside: bool) -> None:
        """A press inside the widget keeps a pending blur from closing it."""
        if inside:
            self._cancel_blur()

    def pointer_up(self, *, inside: bool, on_option: bool = False) -> None:
        """A release outside closes; inside but off an option refocuses input."""
        if not inside:
            self.close()
        elif not on_option and self.config.request_focus is not None:
            self.config.request_focus()

    def input_change(self, text: str) -> None:
        """Typed text changed; reopen and schedule a debounced search."""
        if not self.config.is_searchable:
            return
        stored = text
        if not self.state.is_open:
            # Only the stored input is trimmed; the query goes out as typed.
            stored = text.strip()
            self.state.is_open = True
            self._on_opened()
        self.state.input_text = stored
        self.state.is_loading = True
        self.state.no_options_message = self._no_options_text(stored)
        self.state.dirty = True
        self._search_debounce(text)

    def flush_search(self) -> None:
        """Run a pending debounced search now."""
        self._search_debounce.flush()

    # highlight movement
    def move(self, amount: int) -> None:
        if not self.state.is_open:
            return
        self.state.highlight_address = move_address(
            self.state.current_tree,
            self.state.highlight_address,
            amount,
        )
        self.state.dirty = True

    def home(self) -> None:
        self.state.highlight_address = first_address(self.state.current_tree)
        self.state.dirty = True

    def end(self) -> None:
        self.state.highlight_address = last_address(self.state.current_tree)
        self.state.dirty = True

    def set_highlight(self, address: Sequence[int]) -> None:
        """Pointer hover; unresolvable addresses are ignored."""
        target = as_address(address)
        if target and not is_valid_address(self.state.current_tree, target):
            logger.debug("ignoring highlight of stale address %r", target)
            return
        self.state.highlight_address = target
        self.state.dirty = True

    # selection
    def select(self, node: OptionNode) -> CancellableTask[object] | None:
        """Commit ``node``; creatable rows go through the creation handler first.

        Returns the creation task when the handler is asynchronous.
        """
        if self.config.disabled:
            return None
        if is_creatable(node) and self.config.on_create is not None:
            text = self.state.input_text
            created = self.config.on_create(text)
            if inspect.isawaitable(created):
                if self._creation is not None:
                    self._creation.cancel()
                task: CancellableTask[object] = CancellableTask(created)
                self._creation = task
                task.add_done_callback(partial(self._on_created, text))
                return task
            node = leaf_from_created(created, text)
        self._commit(node)
        return None

    def _on_created(self, text: str, task: CancellableTask[object]) -> None:
        if self._creation is task:
            self._creation = None
        try:
            created = task.result()
        except TaskCancelled:
            logger.debug("creation of %r cancelled", text)
            return
        except Exception as exc:
            report_provider_failure(ProviderFailure(text, exc), self.config.on_error)
            return
        try:
            leaf = leaf_from_created(created, text)
        except ValueError as exc:
            report_provider_failure(ProviderFailure(text, exc), self.config.on_error)
            return
        self._commit(leaf)

    def _commit(self, node: OptionNode) -> None:
        if is_leaf(node):
            if self.config.is_multi:
                updated: list[Leaf] = []
                found = False
                for entry in self._selected_leaves():
                    if same_value(entry.value, node.value):  # type: ignore[union-attr]
                        found = True
                    else:
                        updated.append(copy.deepcopy(entry))
                if not found:
                    updated.append(copy.deepcopy(node))  # type: ignore[arg-type]
                self._emit(updated)
            else:
                self._emit(copy.deepcopy(node))  # type: ignore[arg-type]

        if self.config.effective_close_on_select():
            self.close()
            return
        if self.state.input_text and self.config.clear_search_on_select:
            self.state.first_load = True
            self._reset_search()
        self._schedule_refocus()

    def _schedule_refocus(self) -> None:
        if self.config.request_focus is None:
            return
        if self._focus_handle is not None:
            self._focus_handle.cancel()
        self._focus_handle = self.timers.call_later(0.0, self._refocus)

    def _refocus(self) -> None:
        self._focus_handle = None
        if self.config.request_focus is not None:
            self.config.request_focus()

    def enter(self) -> CancellableTask[object] | None:
        """Open a closed session, or commit the node at the highlight."""
        if self.config.disabled:
            return None
        if not self.state.is_open:
            self._open()
            self._notify_enter()
            return None
        address = self.state.highlight_address
        if not address:
            self._notify_enter()
            return None
        try:
            node = resolve_path(self.state.current_tree, address)[-1]
        except InvalidAddressError:
            logger.debug("enter on stale address %r ignored", address)
            return None
        if is_group(node):
            return None
        return self.select(node)

    def _notify_enter(self) -> None:
        if self.config.on_enter is not None:
            self.config.on_enter()

    def backspace(self) -> None:
        """Empty-input backspace removes the last multi entry or clears single."""
        if self.state.input_text or not self.config.is_clearable:
            return
        if self.config.is_multi:
            selected = self._selected_leaves()
            if selected:
                self.remove(len(selected) - 1)
        elif self.value is not None:
            self._emit(None)

    def remove(self, index: int) -> None:
        """Remove one multi-select entry by position."""
        if self.config.disabled or not self.config.is_multi:
            return
        selected = self._selected_leaves()
        if not 0 <= index < len(selected):
            return
        self._emit(selected[:index] + selected[index + 1 :])

    def clear(self) -> None:
        """Clear-button behavior: close and emit the empty value."""
        self.close()
        self._emit([] if self.config.is_multi else None)

    def handle_key(self, key: str) -> bool:
        """Dispatch one key through the keyboard contract."""
        return dispatch_key(self, key, self._key_map)


__all__ = ["SelectSession"]
