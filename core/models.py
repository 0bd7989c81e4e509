# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the schema engine)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows through the engine:
#
#   Node             → one element of a declarative UI tree (the input)
#   OptionPair       → one {value, label} choice found under a select-like node
#   FieldDefinition  → one tool parameter, before it becomes JSON Schema
#
# The compiled schema itself is a plain dict: it leaves this package as JSON,
# so there is no reason to wrap it in a class.
#
# "UNSET" IS None:
#   Every FieldDefinition attribute except `name` defaults to None.  The merge
#   engine relies on this: a None in an override never clobbers a value that
#   a lower-priority source already set.  `required` is Optional[bool] for
#   the same reason: False is an answer, None is "no opinion".
# =============================================================================

from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, Optional, Union

# A primitive that can appear in `enum_values` / OptionPair.value.
Primitive = Union[str, int, float, bool]


class ToolformError(Exception):
    """Base class for errors raised by this package."""


class SchemaValidationError(ToolformError, ValueError):
    """Raised by the validator in strict mode on the first schema issue."""


# -----------------------------------------------------------------------------
# Node — the abstract UI tree the extractor walks
# -----------------------------------------------------------------------------
# Hosts (a template engine, a widget toolkit, a parsed HTML form) adapt their
# native tree into this shape.  `children` holds Nodes and plain strings
# (text content), mirroring how most component trees look.
# -----------------------------------------------------------------------------
@dataclass
class Node:
    """One element of a declarative UI tree."""

    type: str                                  # Tag / component name, informational only
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)


def element(tag: str, props: Optional[dict[str, Any]] = None, /, *children: Any, **kwargs: Any) -> Node:
    """Build a Node the way a component tree would.

    Props may be passed as a dict, as keyword arguments, or both (keywords
    win).  Children are positional:

        element("select", {"name": "priority"},
                element("option", {"value": "low"}, "Low"),
                element("option", {"value": "high"}, "High"))
    """
    if props is not None and not isinstance(props, dict):
        # element("div", child, ...) — the first positional arg is a child.
        children = (props,) + children
        props = None
    merged = dict(props or {})
    merged.update(kwargs)
    return Node(type=tag, props=merged, children=list(children))


# -----------------------------------------------------------------------------
# OptionPair — a labelled choice
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class OptionPair:
    """A {value, label} pair discovered under an enumerable control."""

    value: Primitive
    label: str


# -----------------------------------------------------------------------------
# FieldDefinition — one tool parameter
# -----------------------------------------------------------------------------
@dataclass
class FieldDefinition:
    """Metadata for a single tool parameter.

    `type` is a UI-level hint ("email", "number", "checkbox", ...), mapped to
    a JSON Schema primitive only at compile time.  If both `one_of` and
    `enum_values` come from the same source, `enum_values` is the projection
    of the option values in the same order.
    """

    name: str
    type: Optional[str] = None
    required: Optional[bool] = None
    title: Optional[str] = None
    description: Optional[str] = None
    min: Optional[float] = None                # → JSON Schema `minimum`
    max: Optional[float] = None                # → JSON Schema `maximum`
    min_length: Optional[int] = None           # → JSON Schema `minLength`
    max_length: Optional[int] = None           # → JSON Schema `maxLength`
    pattern: Optional[str] = None
    enum_values: Optional[list[Primitive]] = None
    one_of: Optional[list[OptionPair]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("FieldDefinition.name must be a non-empty string")
        if self.one_of is not None:
            # Accept {"value": ..., "label": ...} dicts as a convenience.
            self.one_of = [
                OptionPair(value=o["value"], label=o["label"]) if isinstance(o, dict) else o
                for o in self.one_of
            ]

    def set_attributes(self) -> dict[str, Any]:
        """Return every attribute that is set (not None), `name` included."""
        return {
            f.name: getattr(self, f.name)
            for f in dataclass_fields(self)
            if getattr(self, f.name) is not None
        }


# Attribute names, in declaration order.  Override keys are checked against
# this tuple.
FIELD_ATTRIBUTES: tuple[str, ...] = tuple(f.name for f in dataclass_fields(FieldDefinition))


# -----------------------------------------------------------------------------
# FlightOption — one row of the demo flight-search tool's results
# -----------------------------------------------------------------------------
@dataclass
class FlightOption:
    """One bookable flight in the demo catalogue."""

    airline: str                       # "British Airways"
    airline_code: str                  # "BA"
    origin: str                        # Airport IATA code, e.g. "LHR"
    destination: str                   # Airport IATA code, e.g. "JFK"
    departure_time: str                # "09:00"
    arrival_time: str                  # "12:30"
    duration: str                      # "8h 30m"
    stops: int                         # 0 = direct
    price_usd: int


# -----------------------------------------------------------------------------
# DemoForm — a UI tree plus the metadata that turns it into a tool
# -----------------------------------------------------------------------------
@dataclass
class DemoForm:
    """A form the demo server exposes as a tool."""

    tool_name: str
    description: str
    tree: Node
    overrides: dict[str, dict[str, Any]] = field(default_factory=dict)
    # Fields declared explicitly (registered), for controls the walk can't see.
    declared: list[FieldDefinition] = field(default_factory=list)
