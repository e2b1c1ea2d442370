"""Address-based navigation over nested option trees.

Addresses are tuples of child indices. Every node (leaf, group header, or
creatable sentinel) is one navigable row, visited in pre-order.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from ..errors import InvalidAddressError
from .types import (
    EMPTY_ADDRESS,
    Address,
    OptionNode,
    OptionValue,
    as_address,
    is_group,
    is_leaf,
    same_value,
)


def iter_addresses(tree: Sequence[OptionNode], prefix: Address = EMPTY_ADDRESS) -> Iterator[Address]:
    """Yield the address of every node in pre-order."""
    for idx, node in enumerate(tree):
        address = (*prefix, idx)
        yield address
        if is_group(node):
            yield from iter_addresses(node.options, address)  # type: ignore[union-attr]


def flatten(tree: Sequence[OptionNode]) -> list[Address]:
    """Return the full pre-order address list for ``tree``."""
    return list(iter_addresses(tree))


def resolve_path(tree: Sequence[OptionNode], address: Sequence[int]) -> list[OptionNode]:
    """Return the nodes visited while following ``address`` from the root.

    Raises ``InvalidAddressError`` when an index is out of range or a
    non-final step is not a group.
    """
    path: list[OptionNode] = []
    layer: Sequence[OptionNode] = tree
    for depth, index in enumerate(address):
        if not 0 <= index < len(layer):
            raise InvalidAddressError(as_address(address))
        node = layer[index]
        path.append(node)
        if depth < len(address) - 1:
            if not is_group(node):
                raise InvalidAddressError(as_address(address))
            layer = node.options  # type: ignore[union-attr]
    return path


def resolve_address(tree: Sequence[OptionNode], address: Sequence[int]) -> OptionNode:
    """Return the node at ``address``; the empty address never resolves."""
    if not address:
        raise InvalidAddressError(EMPTY_ADDRESS)
    return resolve_path(tree, address)[-1]


def is_valid_address(tree: Sequence[OptionNode], address: Sequence[int]) -> bool:
    if not address:
        return False
    try:
        resolve_path(tree, address)
    except InvalidAddressError:
        return False
    return True


def _last_descendant(node: OptionNode, index: int) -> Address:
    """Address of the deepest last row inside ``node`` (or ``node`` itself)."""
    address: Address = (index,)
    while is_group(node) and node.options:  # type: ignore[union-attr]
        last = len(node.options) - 1  # type: ignore[union-attr]
        address = (*address, last)
        node = node.options[last]  # type: ignore[union-attr]
    return address


def move_step(layer: Sequence[OptionNode], address: Address, direction: int) -> Address | None:
    """Move one row forward or backward within ``layer``.

    Returns ``None`` when there is no further room at this level, letting the
    caller continue scanning its own siblings. ``address`` must be valid.
    """
    size = len(layer)
    if not size or direction == 0:
        return None
    step = 1 if direction > 0 else -1

    if not address:
        if step > 0:
            return (0,)
        return _last_descendant(layer[size - 1], size - 1)

    head, remaining = address[0], address[1:]
    node = layer[head]
    if remaining:
        child = move_step(node.options, remaining, step)  # type: ignore[union-attr]
        if child is not None:
            return (head, *child)
        # Deeper range exhausted: drop the remainder and keep scanning here.
        if step < 0:
            return (head,)
        index = head + 1
    elif step > 0 and is_group(node) and node.options:  # type: ignore[union-attr]
        return (head, 0)
    else:
        index = head + step

    if not 0 <= index < size:
        return None
    if step > 0:
        return (index,)
    return _last_descendant(layer[index], index)


def move(tree: Sequence[OptionNode], address: Sequence[int], amount: int) -> Address:
    """Move the highlight ``amount`` rows, saturating at the first/last row.

    Unresolvable addresses and empty trees return ``address`` unchanged.
    """
    current = as_address(address)
    if not tree or amount == 0:
        return current
    if current and not is_valid_address(tree, current):
        return current
    step = 1 if amount > 0 else -1
    for _ in range(abs(amount)):
        moved = move_step(tree, current, step)
        if moved is None:
            break
        current = moved
    return current


def first_address(tree: Sequence[OptionNode]) -> Address:
    return move(tree, EMPTY_ADDRESS, 1)


def last_address(tree: Sequence[OptionNode]) -> Address:
    return move(tree, EMPTY_ADDRESS, -1)


def locate_value(tree: Sequence[OptionNode], value: OptionValue) -> Address | None:
    """Return the pre-order first address of a leaf whose value equals ``value``."""
    for idx, node in enumerate(tree):
        if is_group(node):
            child = locate_value(node.options, value)  # type: ignore[union-attr]
            if child is not None:
                return (idx, *child)
        elif is_leaf(node) and same_value(node.value, value):  # type: ignore[union-attr]
            return (idx,)
    return None


def count_nodes(tree: Sequence[OptionNode]) -> int:
    total = 0
    for node in tree:
        total += 1
        if is_group(node):
            total += count_nodes(node.options)  # type: ignore[union-attr]
    return total
