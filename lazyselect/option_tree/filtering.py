"""Filtered and decorated projections of option trees.

Every function returns a new tree; input trees are never mutated.
"""

from __future__ import annotations

from collections.abc import Sequence

from .types import CREATABLE, Group, Leaf, OptionNode, OptionTree, OptionValue, is_group, is_leaf, same_value


def normalize_query(query: str) -> str:
    return query.strip().lower()


def _filter_layer(layer: Sequence[OptionNode], needle: str) -> OptionTree:
    results: list[OptionNode] = []
    for node in layer:
        if is_group(node):
            children = _filter_layer(node.options, needle)  # type: ignore[union-attr]
            if children:
                results.append(Group(label=node.label, options=children))  # type: ignore[union-attr]
            continue
        label = getattr(node, "label", None)
        if isinstance(label, str) and needle in label.lower():
            results.append(node)
    return tuple(results)


def search_local(tree: OptionTree, query: str) -> OptionTree:
    """Case-insensitive substring filter over leaf labels.

    An empty (or blank) query returns ``tree`` itself. Groups survive only
    with at least one matching descendant; non-text labels never match.
    """
    needle = normalize_query(query)
    if not needle:
        return tree
    return _filter_layer(tree, needle)


def append_creatable(tree: OptionTree, query: str, enabled: bool) -> OptionTree:
    """Append the creatable sentinel when creation is enabled and text was typed."""
    if not enabled or not query:
        return tree
    return (*tree, CREATABLE)


def _contains_value(values: Sequence[OptionValue], value: OptionValue) -> bool:
    return any(same_value(candidate, value) for candidate in values)


def _without_values(layer: Sequence[OptionNode], values: Sequence[OptionValue]) -> OptionTree:
    results: list[OptionNode] = []
    for node in layer:
        if is_group(node):
            children = _without_values(node.options, values)  # type: ignore[union-attr]
            if node.options and not children:  # type: ignore[union-attr]
                continue
            if len(children) != len(node.options):  # type: ignore[union-attr]
                node = Group(label=node.label, options=children)  # type: ignore[union-attr]
            results.append(node)
            continue
        if is_leaf(node) and _contains_value(values, node.value):  # type: ignore[union-attr]
            continue
        results.append(node)
    return tuple(results)


def pin_selected(tree: OptionTree, selected: Sequence[Leaf]) -> OptionTree:
    """Prepend ``selected`` leaves and drop their duplicates from ``tree``.

    Groups emptied only by the removal are dropped too.
    """
    if not selected:
        return tree
    values = [leaf.value for leaf in selected]
    return (*selected, *_without_values(tree, values))

