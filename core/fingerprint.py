# =============================================================================
# core/fingerprint.py  —  Change-detection keys
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns fields, field lists, override maps and tool definitions into
#   strings that are equal exactly when the things they describe are equal.
#   The collector compares these strings to decide whether anything needs
#   recomputing; the tool binding compares them to decide whether to
#   re-register with the sink.
#
# HOW:
#   Every tracked attribute goes through a canonical JSON encoder (sorted
#   keys, compact separators).  A field is the JSON array of its attributes
#   in a fixed order; a list of fields joins those arrays with "\n", which
#   compact JSON never emits unescaped.  Two option lists with the same
#   contents therefore fingerprint the same no matter which objects hold
#   them.
#
#   A tool's `execute` callable is never part of a fingerprint.
# =============================================================================

import json
from collections.abc import Iterable, Mapping
from dataclasses import asdict, is_dataclass
from typing import Any, Optional, Union

from core.models import FieldDefinition, OptionPair

_LIST_SEPARATOR = "\n"


def _jsonable(value: Any) -> Any:
    if isinstance(value, OptionPair):
        return [value.value, value.label]
    if isinstance(value, FieldDefinition):
        return value.set_attributes()
    if hasattr(value, "model_dump"):
        return value.model_dump(exclude_none=True)
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return repr(value)


def canonical_json(value: Any) -> str:
    """Compact JSON with sorted keys; the building block of every fingerprint."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=_jsonable)


def _field_fingerprint(field_def: FieldDefinition) -> str:
    return canonical_json([
        field_def.name,
        field_def.type,
        field_def.required,
        field_def.title,
        field_def.description,
        field_def.enum_values,
        field_def.one_of,
        field_def.min,
        field_def.max,
        field_def.min_length,
        field_def.max_length,
        field_def.pattern,
    ])


def fingerprint(value: Union[FieldDefinition, Iterable[FieldDefinition]]) -> str:
    """Fingerprint one field, or a list of fields (order-sensitive)."""
    if isinstance(value, FieldDefinition):
        return _field_fingerprint(value)
    return _LIST_SEPARATOR.join(_field_fingerprint(f) for f in value)


def fingerprint_overrides(overrides: Optional[Mapping[str, Any]]) -> str:
    """Fingerprint an override map; its insertion order does not matter."""
    if not overrides:
        return ""
    normalized = {}
    for name, partial in overrides.items():
        if isinstance(partial, FieldDefinition):
            partial = partial.set_attributes()
        normalized[name] = {k: v for k, v in dict(partial).items() if v is not None}
    return canonical_json(normalized)


def fingerprint_tool(definition: Any) -> str:
    """Fingerprint a tool definition, leaving its `execute` handler out."""
    return canonical_json([
        definition.name,
        definition.description,
        definition.input_schema,
        definition.output_schema,
        definition.annotations,
    ])
