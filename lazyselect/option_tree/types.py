"""Option node datatypes shared across the engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

OptionValue = Union[str, int, float, bool, None]
Address = tuple[int, ...]

EMPTY_ADDRESS: Address = ()


@dataclass(frozen=True)
class Leaf:
    """One selectable option."""

    label: object
    value: OptionValue
    additional: Mapping[str, object] | None = field(default=None, hash=False)


@dataclass(frozen=True)
class Group:
    """Non-selectable container of child nodes; may nest and may be empty."""

    label: object
    options: tuple[OptionNode, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))


@dataclass(frozen=True)
class CreatableSentinel:
    """Placeholder row offering to create a value from the typed text."""

    creatable: bool = True


CREATABLE = CreatableSentinel()

OptionNode = Union[Leaf, Group, CreatableSentinel]
OptionTree = tuple[OptionNode, ...]


def is_group(node: object) -> bool:
    return isinstance(node, Group)


def is_creatable(node: object) -> bool:
    return isinstance(node, CreatableSentinel)


def is_leaf(node: object) -> bool:
    return isinstance(node, Leaf)


def as_address(raw: object) -> Address:
    """Normalize any integer sequence into a tuple address."""
    if isinstance(raw, tuple):
        return raw
    return tuple(int(part) for part in raw)  # type: ignore[union-attr]


def same_value(left: object, right: object) -> bool:
    """Strict value equality: booleans never equal numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    return left == right
