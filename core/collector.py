# =============================================================================
# core/collector.py  —  SchemaCollector (one tool's schema, kept up to date)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Ties the engine together for ONE tool:
#
#     UI tree ──extract──▶ tree fields ─┐
#     override map ─────────────────────┼─merge─▶ merged ─validate (side channel)
#     registry (register/unregister) ───┘            └──compile──▶ inputSchema
#
# FINGERPRINT GATING:
#   Hosts call collect() on every render/update, usually with freshly built
#   objects that mean the same thing as last time.  collect() fingerprints
#   the three sources and only re-merges (and re-validates) when that triple
#   changes; the compiled schema is cached on the merged fingerprint.  When
#   nothing changed, the very same schema dict comes back.
#
# LIFETIME:
#   The collector owns its FieldRegistry.  close() (or leaving a `with`
#   block) drops every registration, so a torn-down tool leaks nothing.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Any, Optional

from core.compiler import compile_schema
from core.config import strict_by_default
from core.fingerprint import fingerprint, fingerprint_overrides
from core.merge import FieldRegistry, Partial, compute_merged
from core.models import FieldDefinition
from core.tree import extract_fields
from core.validator import validate_fields

logger = logging.getLogger(__name__)


def _tree_repeats(tree_fields: list[FieldDefinition]) -> list[FieldDefinition]:
    """Name-only stand-ins for every repeated name in the tree extraction.

    The merged map keeps one field per name, so without these the validator
    would never see two form controls sharing a name.
    """
    seen: set[str] = set()
    repeats = []
    for field_def in tree_fields:
        if field_def.name in seen:
            repeats.append(FieldDefinition(name=field_def.name))
        seen.add(field_def.name)
    return repeats


class SchemaCollector:
    """Collects, merges, validates and compiles the input schema of one tool."""

    def __init__(self, overrides: Optional[Mapping[str, Partial]] = None, strict: Optional[bool] = None):
        self.registry = FieldRegistry()
        self.overrides: Mapping[str, Partial] = overrides or {}
        self.strict = strict_by_default() if strict is None else strict

        self._merge_key: Optional[tuple[str, str, str, bool]] = None
        self._merged: list[FieldDefinition] = []
        self._schema_key: Optional[str] = None
        self._schema: dict[str, Any] = compile_schema([])
        self.recomputations = 0

    # --- registration API handed to dynamic field owners -------------------
    def register_field(self, field_def: FieldDefinition) -> None:
        self.registry.register(field_def)

    def unregister_field(self, name: str) -> None:
        self.registry.unregister(name)

    def set_overrides(self, overrides: Optional[Mapping[str, Partial]]) -> None:
        self.overrides = overrides or {}

    # --- engine ------------------------------------------------------------
    @property
    def merged(self) -> list[FieldDefinition]:
        """Merged fields from the last recompute."""
        return list(self._merged)

    def collect(self, tree: Any = None) -> dict[str, Any]:
        """Return the compiled input schema for `tree` plus overrides and registrations.

        Raises:
            SchemaValidationError: in strict mode, when the merged fields have
                an issue.  The cache is left untouched, so the next call
                checks again.
        """
        tree_fields = extract_fields(tree)
        registered = self.registry.fields()
        key = (
            fingerprint(tree_fields),
            fingerprint_overrides(self.overrides),
            fingerprint(registered),
            self.strict,
        )

        if key != self._merge_key:
            merged = list(compute_merged(tree_fields, self.overrides, registered).values())
            validate_fields(merged + _tree_repeats(tree_fields), strict=self.strict)
            self._merged = merged
            self._merge_key = key
            self.recomputations += 1
            logger.debug("Recomputed merged fields: %s", [f.name for f in merged])

        merged_key = fingerprint(self._merged)
        if merged_key != self._schema_key:
            self._schema = compile_schema(self._merged)
            self._schema_key = merged_key
        return self._schema

    # --- teardown ----------------------------------------------------------
    def close(self) -> None:
        """Unregister every field still held by this scope."""
        self.registry.clear()

    def __enter__(self) -> "SchemaCollector":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
