"""Conversion between JSON-like option data and option nodes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .types import CREATABLE, Group, Leaf, OptionNode, OptionTree, is_creatable, is_group

_SCALAR_TYPES = (str, int, float, bool)


def _coerce_value(raw: object) -> object:
    if raw is None or isinstance(raw, _SCALAR_TYPES):
        return raw
    raise ValueError(f"option value must be a scalar, got {type(raw).__name__}")


def option_from_data(raw: object) -> OptionNode:
    """Build one node from a mapping (or pass an existing node through)."""
    if isinstance(raw, (Leaf, Group)) or is_creatable(raw):
        return raw  # type: ignore[return-value]
    if not isinstance(raw, Mapping):
        raise ValueError(f"option entry must be an object, got {type(raw).__name__}")
    if raw.get("creatable") is True:
        return CREATABLE
    if "options" in raw:
        children = raw["options"]
        if not isinstance(children, (list, tuple)):
            raise ValueError("group 'options' must be a list")
        return Group(label=raw.get("label", ""), options=options_from_data(children))
    if "value" not in raw:
        raise ValueError("option entry needs 'value' or 'options'")
    additional = raw.get("additional")
    if additional is not None and not isinstance(additional, Mapping):
        raise ValueError("option 'additional' must be an object")
    return Leaf(
        label=raw.get("label", ""),
        value=_coerce_value(raw["value"]),  # type: ignore[arg-type]
        additional=dict(additional) if additional is not None else None,
    )


def options_from_data(raw: Iterable[object]) -> OptionTree:
    """Build an option tree from a JSON-like list."""
    return tuple(option_from_data(item) for item in raw)


def option_to_data(node: OptionNode) -> dict[str, object]:
    """Serialize one node back into plain JSON-compatible data."""
    if is_creatable(node):
        return {"creatable": True}
    if is_group(node):
        return {"label": node.label, "options": options_to_data(node.options)}  # type: ignore[union-attr]
    data: dict[str, object] = {"label": node.label, "value": node.value}  # type: ignore[union-attr]
    if node.additional is not None:  # type: ignore[union-attr]
        data["additional"] = dict(node.additional)  # type: ignore[union-attr]
    return data


def options_to_data(tree: Iterable[OptionNode]) -> list[dict[str, object]]:
    return [option_to_data(node) for node in tree]


def leaf_from_created(created: object, input_text: str) -> Leaf:
    """Wrap a creation-handler result into a leaf.

    Bare identifiers become ``Leaf(label=input_text, value=created)``.
    """
    if isinstance(created, Leaf):
        return created
    if isinstance(created, Mapping):
        node = option_from_data(created)
        if not isinstance(node, Leaf):
            raise ValueError("creation handler must return a leaf option")
        return node
    return Leaf(label=input_text, value=_coerce_value(created))  # type: ignore[arg-type]
