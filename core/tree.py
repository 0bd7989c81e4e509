# =============================================================================
# core/tree.py  —  Tree Extractor (UI tree → candidate fields)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Walks a declarative UI tree (core.models.Node) and pulls out the tool
#   parameters it implies:
#
#     element("input", name="email", type="email", required=True)
#         → FieldDefinition(name="email", type="email", required=True)
#
#     element("select", {"name": "priority"},
#             element("option", {"value": "low"}, "Low"), ...)
#         → FieldDefinition(name="priority",
#                           enum_values=["low", ...],
#                           one_of=[OptionPair("low", "Low"), ...])
#
# WHERE NAMES COME FROM (first hit wins):
#   1. props["name"]                       — plain inputs
#   2. props["inputProps"]["name"]         — wrapper components
#   3. props["slotProps"]["input"]["name"] — slot-based components
#
# A named node is a LEAF: we never look for more fields inside it, only for
# options.  Unnamed nodes are containers and are recursed into.
#
# BEST EFFORT:
#   Extraction never raises.  Text, None, nodes with broken props, numeric
#   props that don't parse — all are skipped.  Consistency problems are the
#   validator's job, not the extractor's.
# =============================================================================

import logging
import math
from collections.abc import Iterator, Mapping
from typing import Any, Optional

from core.models import FieldDefinition, Node, OptionPair, Primitive

logger = logging.getLogger(__name__)

# UI prop name → (FieldDefinition attribute, coercion kind)
_CONSTRAINT_PROPS: tuple[tuple[str, str, str], ...] = (
    ("type", "type", "raw"),
    ("required", "required", "bool"),
    ("min", "min", "number"),
    ("max", "max", "number"),
    ("minLength", "min_length", "number"),
    ("maxLength", "max_length", "number"),
    ("pattern", "pattern", "raw"),
)


def _iter_children(content: Any) -> Iterator[Any]:
    """Flatten a fragment: nested lists/tuples unrolled, None and bools dropped."""
    stack = [content]
    while stack:
        item = stack.pop()
        if item is None or isinstance(item, bool):
            continue
        if isinstance(item, (list, tuple)):
            stack.extend(reversed(item))
            continue
        yield item


def _elements(content: Any) -> Iterator[Node]:
    """Yield only well-formed Nodes from `content`."""
    for child in _iter_children(content):
        if isinstance(child, Node) and isinstance(child.props, Mapping):
            yield child


def _pending(content: Any) -> list[Node]:
    """Elements of `content` as a stack, so pop() walks them left to right."""
    return list(_elements(content))[::-1]


def _field_name(props: Mapping[str, Any]) -> Optional[str]:
    name = props.get("name")
    if name is None:
        input_props = props.get("inputProps")
        if isinstance(input_props, Mapping):
            name = input_props.get("name")
    if name is None:
        slot_props = props.get("slotProps")
        slot_input = slot_props.get("input") if isinstance(slot_props, Mapping) else None
        if isinstance(slot_input, Mapping):
            name = slot_input.get("name")
    if isinstance(name, str) and name:
        return name
    return None


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
    else:
        return None
    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def _text_content(node: Node) -> Optional[str]:
    """The node's literal text, if its only child is a single string."""
    children = node.children
    if isinstance(children, str):
        return children
    if isinstance(children, (list, tuple)) and len(children) == 1 and isinstance(children[0], str):
        return children[0]
    return None


def option_label(value: Primitive) -> str:
    """String form of an option value, rendered the way a browser would."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# =============================================================================
# PUBLIC API
# =============================================================================
def extract_options(content: Any) -> list[OptionPair]:
    """Collect {value, label} pairs from every value-bearing descendant.

    A node carrying a non-None "value" prop yields one pair.  We keep
    descending either way, so a value-bearing node that contains more
    value-bearing nodes reports all of them, in encounter order.
    """
    options: list[OptionPair] = []
    stack = _pending(content)
    while stack:
        node = stack.pop()
        value = node.props.get("value")
        if value is not None:
            label = _text_content(node)
            options.append(OptionPair(value=value, label=label if label is not None else option_label(value)))
        if node.children:
            stack.extend(_pending(node.children))
    return options


def _build_field(name: str, node: Node) -> FieldDefinition:
    attrs: dict[str, Any] = {}
    for prop, attr, kind in _CONSTRAINT_PROPS:
        raw = node.props.get(prop)
        if raw is None:
            continue
        if kind == "number":
            number = _to_number(raw)
            if number is None:
                logger.debug("Ignoring non-numeric %s=%r on field %r", prop, raw, name)
                continue
            attrs[attr] = number
        elif kind == "bool":
            attrs[attr] = bool(raw)
        else:
            attrs[attr] = raw

    if node.children:
        options = extract_options(node.children)
        if options:
            attrs["enum_values"] = [o.value for o in options]
            attrs["one_of"] = options

    return FieldDefinition(name=name, **attrs)


def extract_fields(content: Any) -> list[FieldDefinition]:
    """Extract field definitions from a UI tree, depth-first, pre-order.

    Args:
        content: A Node, a string, None, or any nesting of lists of those.

    Returns:
        Fields in discovery order (left-to-right siblings).  Duplicate names
        are kept here; the merge engine and validator deal with them.
    """
    fields: list[FieldDefinition] = []
    stack = _pending(content)
    while stack:
        node = stack.pop()
        name = _field_name(node.props)
        if name:
            fields.append(_build_field(name, node))
        elif node.children:
            stack.extend(_pending(node.children))
    return fields


def declare_field(name: str, *children: Any, **attrs: Any) -> FieldDefinition:
    """Declare a field explicitly, for components the walk can't see into.

    Options are auto-detected from `children` unless `enum_values` or
    `one_of` is given:

        declare_field("priority", select_node, description="Urgency")
    """
    field_def = FieldDefinition(name=name, **attrs)
    if field_def.enum_values is None and field_def.one_of is None:
        options = extract_options(list(children))
        if options:
            field_def.enum_values = [o.value for o in options]
            field_def.one_of = options
    return field_def
