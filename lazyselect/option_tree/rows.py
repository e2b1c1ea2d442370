"""Flat row projection handed to renderers and virtualization layers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .navigation import iter_addresses, locate_value, resolve_address
from .types import Address, Leaf, OptionNode, OptionTree, is_creatable, is_group, is_leaf, same_value

# Pinned multi-select rows stay hidden while fewer unpinned rows than this exist.
MAX_HIDE_MULTI_VALUES = 10


@dataclass(frozen=True)
class OptionRow:
    """One navigable row of the menu."""

    address: Address
    node: OptionNode
    kind: str
    selected: bool = False
    highlighted: bool = False

    @property
    def depth(self) -> int:
        return len(self.address) - 1


def node_kind(node: OptionNode) -> str:
    if is_group(node):
        return "group"
    if is_creatable(node):
        return "creatable"
    return "option"


def is_node_selected(node: OptionNode, value: object) -> bool:
    """Return whether ``node`` is part of the committed ``value``."""
    if not is_leaf(node) or value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(same_value(entry.value, node.value) for entry in value)  # type: ignore[union-attr]
    return isinstance(value, Leaf) and same_value(value.value, node.value)  # type: ignore[union-attr]


def build_option_rows(tree: OptionTree, highlight: Address, value: object = None) -> list[OptionRow]:
    """Build one row per node in pre-order with selection/highlight flags."""
    rows: list[OptionRow] = []
    for address in iter_addresses(tree):
        node = resolve_address(tree, address)
        rows.append(
            OptionRow(
                address=address,
                node=node,
                kind=node_kind(node),
                selected=is_node_selected(node, value),
                highlighted=address == highlight,
            )
        )
    return rows


@dataclass(frozen=True)
class MenuView:
    """Read-only snapshot of everything a renderer needs for one paint."""

    tree: OptionTree
    rows: tuple[OptionRow, ...]
    highlight: Address
    is_open: bool
    is_loading: bool
    show_loading: bool
    show_no_options: bool
    no_options_message: str
    create_option_message: str
    input_text: str
    scroll_address: Address | None = None
    pinned_offset: int = 0

    @property
    def addresses(self) -> list[Address]:
        return [row.address for row in self.rows]

    @property
    def visible_rows(self) -> tuple[OptionRow, ...]:
        """Rows after hiding the leading pinned multi-select entries."""
        return self.rows[self.pinned_offset :]

    def row_for_index(self, index: int) -> OptionRow | None:
        rows = self.visible_rows
        if 0 <= index < len(rows):
            return rows[index]
        return None


def pinned_layout(tree: Sequence[OptionNode], row_count: int, pinned_count: int) -> tuple[int, int]:
    """Return ``(pinned_offset, unpinned_top_level_count)`` for multi-select menus."""
    removed = row_count - pinned_count
    option_count = len(tree) - pinned_count
    if removed < MAX_HIDE_MULTI_VALUES and (removed > 0 or not pinned_count):
        return pinned_count, option_count
    return 0, option_count


def build_menu_view(
    *,
    tree: OptionTree,
    highlight: Address,
    value: object,
    is_open: bool,
    is_loading: bool,
    first_load: bool,
    is_multi: bool,
    is_creatable: bool,
    pinned_count: int,
    no_options_message: str,
    create_option_message: str,
    input_text: str,
) -> MenuView:
    rows = tuple(build_option_rows(tree, highlight, value))
    pinned_offset = 0
    option_count = len(tree)
    if is_multi:
        pinned_offset, option_count = pinned_layout(tree, len(rows), pinned_count)

    show_loading = is_loading and first_load
    scroll_address = None
    if not is_multi and isinstance(value, Leaf):
        scroll_address = locate_value(tree, value.value)
    return MenuView(
        tree=tree,
        rows=rows,
        highlight=highlight,
        is_open=is_open,
        is_loading=is_loading,
        show_loading=show_loading,
        show_no_options=not is_creatable and option_count <= 0 and not show_loading,
        no_options_message=no_options_message,
        create_option_message=create_option_message,
        input_text=input_text,
        scroll_address=scroll_address,
        pinned_offset=pinned_offset,
    )
