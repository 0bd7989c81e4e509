# =============================================================================
# core/compiler.py  —  Schema Compiler (merged fields → JSON Schema)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Renders merged FieldDefinitions as the `inputSchema` of a tool:
#
#     {"type": "object",
#      "properties": {"age": {...}, "email": {...}},   ← alphabetical
#      "required": ["email"]}                          ← sorted, omitted if empty
#
# DETERMINISM:
#   Compiling the same fields in any order produces byte-identical JSON.
#   Properties are inserted in sorted order (dicts keep insertion order) and
#   every property's keys are emitted in a fixed order.  A name that appears
#   more than once (only possible when compiling a raw list) is rendered from
#   the copy with the greatest fingerprint, so input order never picks it.
#
# The compiler never raises: it renders whatever it is given, validated or
# not.
# =============================================================================

import json
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any, Union

from core.fingerprint import fingerprint
from core.models import FieldDefinition

# UI type hint → JSON Schema primitive.  Anything not listed is a string.
_TYPE_MAP: dict[str, str] = {
    "number": "number",
    "range": "number",
    "checkbox": "boolean",
}


def schema_type(type_hint: Any) -> str:
    """Map a UI type hint ("number", "email", None, ...) to a schema type."""
    if isinstance(type_hint, str):
        return _TYPE_MAP.get(type_hint, "string")
    return "string"


def _collation_key(name: str) -> tuple[str, str, str]:
    # Accent- and case-insensitive first, then accents, then lowercase before
    # uppercase.
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), name.casefold(), name.swapcase())


def _property(field_def: FieldDefinition) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": schema_type(field_def.type)}

    if field_def.title:
        prop["title"] = field_def.title
    if field_def.description:
        prop["description"] = field_def.description
    if field_def.min is not None:
        prop["minimum"] = field_def.min
    if field_def.max is not None:
        prop["maximum"] = field_def.max
    if field_def.min_length is not None:
        prop["minLength"] = field_def.min_length
    if field_def.max_length is not None:
        prop["maxLength"] = field_def.max_length
    if field_def.pattern:
        prop["pattern"] = field_def.pattern
    if field_def.enum_values:
        prop["enum"] = list(field_def.enum_values)
    if field_def.one_of:
        prop["oneOf"] = [{"const": option.value, "title": option.label} for option in field_def.one_of]

    return prop


def compile_schema(fields: Union[Iterable[FieldDefinition], Mapping[str, FieldDefinition]]) -> dict[str, Any]:
    """Build a deterministic JSON Schema object from field definitions.

    Args:
        fields: A list of FieldDefinitions, or a merged name → field map.

    Returns:
        {"type": "object", "properties": {...}} plus a sorted "required"
        list when at least one field is required.
    """
    items = fields.values() if isinstance(fields, Mapping) else fields
    ordered = sorted(items, key=lambda f: (_collation_key(f.name), fingerprint(f)))

    chosen: dict[str, FieldDefinition] = {}
    for field_def in ordered:
        chosen[field_def.name] = field_def

    properties = {name: _property(field_def) for name, field_def in chosen.items()}
    required = sorted(name for name, field_def in chosen.items() if field_def.required)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def dumps_schema(schema: Mapping[str, Any]) -> str:
    """Serialize a compiled schema as compact JSON (key order preserved)."""
    return json.dumps(schema, separators=(",", ":"), ensure_ascii=False)
