"""Option-tree model, navigation, filtering, and row projection.

Defines the ``Leaf``/``Group``/``CreatableSentinel`` node kinds and the
integer-path ``Address`` used to point at them.
"""

from __future__ import annotations

from .build import (
    leaf_from_created,
    option_from_data,
    option_to_data,
    options_from_data,
    options_to_data,
)
from .filtering import append_creatable, normalize_query, pin_selected, search_local
from .navigation import (
    count_nodes,
    first_address,
    flatten,
    is_valid_address,
    iter_addresses,
    last_address,
    locate_value,
    move,
    move_step,
    resolve_address,
    resolve_path,
)
from .rows import MAX_HIDE_MULTI_VALUES, MenuView, OptionRow, build_menu_view, build_option_rows
from .types import (
    CREATABLE,
    EMPTY_ADDRESS,
    Address,
    CreatableSentinel,
    Group,
    Leaf,
    OptionNode,
    OptionTree,
    OptionValue,
    as_address,
    is_creatable,
    is_group,
    is_leaf,
    same_value,
)

__all__ = [
    "Address",
    "CREATABLE",
    "CreatableSentinel",
    "EMPTY_ADDRESS",
    "Group",
    "Leaf",
    "MAX_HIDE_MULTI_VALUES",
    "MenuView",
    "OptionNode",
    "OptionRow",
    "OptionTree",
    "OptionValue",
    "append_creatable",
    "as_address",
    "build_menu_view",
    "build_option_rows",
    "count_nodes",
    "first_address",
    "flatten",
    "is_creatable",
    "is_group",
    "is_leaf",
    "is_valid_address",
    "iter_addresses",
    "last_address",
    "leaf_from_created",
    "locate_value",
    "move",
    "move_step",
    "normalize_query",
    "option_from_data",
    "option_to_data",
    "options_from_data",
    "options_to_data",
    "pin_selected",
    "resolve_address",
    "resolve_path",
    "same_value",
    "search_local",
]
