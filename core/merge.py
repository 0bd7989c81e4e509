# =============================================================================
# core/merge.py  —  Merge Engine (three sources → one field per name)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Combines the three places a tool parameter can be described:
#
#     1. tree-extracted fields     (lowest priority — implicit)
#     2. the override map          (a static {name: partial} dict)
#     3. registered fields         (explicit register/unregister calls)
#
#   Later sources win ATTRIBUTE BY ATTRIBUTE: an override that only sets
#   `description` keeps the tree's `type` and `required`.  An attribute set
#   to None never clobbers a defined one.  Lists (`enum_values`, `one_of`)
#   are replaced wholesale, never concatenated.
#
# OWNERSHIP:
#   A FieldRegistry belongs to exactly one tool scope (one SchemaCollector).
#   It is never a module-level singleton; callers are handed the instance.
# =============================================================================

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Optional, Union

from core.config import LOG_PREFIX, is_production
from core.models import FIELD_ATTRIBUTES, FieldDefinition

logger = logging.getLogger(__name__)

# A partial field: a dict of attributes, or a FieldDefinition whose set
# attributes are used.
Partial = Union[Mapping[str, Any], FieldDefinition]


def _partial_attributes(partial: Partial) -> dict[str, Any]:
    if isinstance(partial, FieldDefinition):
        return partial.set_attributes()
    return dict(partial)


def merge_field(base: FieldDefinition, override: Partial) -> FieldDefinition:
    """Apply `override` on top of `base`, returning a new FieldDefinition.

    `name` is the identity key and is never changed by an override.
    """
    updates: dict[str, Any] = {}
    for key, value in _partial_attributes(override).items():
        if value is None or key == "name":
            continue
        if key not in FIELD_ATTRIBUTES:
            logger.warning("%s Ignoring unknown attribute %r in override for field %r.", LOG_PREFIX, key, base.name)
            continue
        updates[key] = value
    return replace(base, **updates)


def _apply(field_map: dict[str, FieldDefinition], name: str, partial: Partial) -> None:
    existing = field_map.get(name)
    if existing is None:
        existing = FieldDefinition(name=name)
    field_map[name] = merge_field(existing, partial)


def compute_merged(
    tree_fields: Iterable[FieldDefinition],
    overrides: Optional[Mapping[str, Partial]] = None,
    registered: Union[Mapping[str, FieldDefinition], Iterable[FieldDefinition], None] = None,
) -> dict[str, FieldDefinition]:
    """Merge the three sources into a name → FieldDefinition map.

    Pure function: the same inputs always give the same content, whatever
    order the override map or registered fields were built in.  Iteration
    order of the result is not meaningful; the compiler sorts.
    """
    field_map: dict[str, FieldDefinition] = {}

    # 1. Tree-extracted fields (a repeated name keeps the last one seen).
    for field_def in tree_fields:
        field_map[field_def.name] = field_def

    # 2. Override map.
    for name, partial in (overrides or {}).items():
        _apply(field_map, name, partial)

    # 3. Registered fields — always win.
    if registered is not None:
        items = registered.values() if isinstance(registered, Mapping) else registered
        for field_def in items:
            _apply(field_map, field_def.name, field_def)

    return field_map


# =============================================================================
# FieldRegistry — the dynamic source
# =============================================================================
class FieldRegistry:
    """Name-keyed table of explicitly registered fields for one tool scope."""

    def __init__(self) -> None:
        self._fields: dict[str, FieldDefinition] = {}
        self.version = 0

    def register(self, field_def: FieldDefinition) -> None:
        """Add or replace the field with this name."""
        self._fields[field_def.name] = field_def
        self.version += 1

    def unregister(self, name: str) -> None:
        """Remove a field.  Unknown names are a no-op."""
        if self._fields.pop(name, None) is not None:
            self.version += 1

    def clear(self) -> None:
        if self._fields:
            self._fields.clear()
            self.version += 1

    def get(self, name: str) -> Optional[FieldDefinition]:
        return self._fields.get(name)

    def fields(self) -> list[FieldDefinition]:
        """Snapshot of the registered fields, sorted by name."""
        return [self._fields[name] for name in sorted(self._fields)]

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields


@contextmanager
def registered_fields(registry: Optional[FieldRegistry], *fields: FieldDefinition) -> Iterator[None]:
    """Keep `fields` registered for the duration of a `with` block.

    Every field registered on entry is unregistered on exit, error or not.
    Without a registry the block still runs, the fields just contribute
    nothing (and development builds log a warning).
    """
    if registry is None:
        if not is_production():
            for field_def in fields:
                logger.warning(
                    "%s registered_fields: no field registry for field %r. "
                    "Register fields through a SchemaCollector.",
                    LOG_PREFIX,
                    field_def.name,
                )
        yield
        return

    for field_def in fields:
        registry.register(field_def)
    try:
        yield
    finally:
        for field_def in fields:
            registry.unregister(field_def.name)
