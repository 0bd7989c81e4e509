# =============================================================================
# core/validator.py  —  Development-time schema checks
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Looks at merged fields for mistakes that would produce a misleading
#   schema — a `pattern` on a number, `min` on an email, a numeric field
#   whose enum holds strings, two fields with the same name.
#
#   It checks the SHAPE of the schema only.  Values an agent later submits
#   are not validated anywhere in this package.
#
# REPORTING:
#   default      → every issue logged as a WARNING, processing continues
#   strict=True  → SchemaValidationError on the first issue
#   production   → returns immediately, before scanning anything
#                  (TOOLFORM_ENV=production, see core/config.py)
# =============================================================================

import json
import logging
from collections.abc import Iterable

from core.compiler import schema_type
from core.config import LOG_PREFIX, is_production
from core.models import FieldDefinition, SchemaValidationError

logger = logging.getLogger(__name__)


def _matches(value: object, expected: str) -> bool:
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, str)


def find_issues(fields: Iterable[FieldDefinition]) -> list[str]:
    """Return every consistency issue in `fields`, in discovery order."""
    issues: list[str] = []
    seen: set[str] = set()

    for field_def in fields:
        name = field_def.name
        if name in seen:
            issues.append(f'Duplicate field name "{name}".')
        seen.add(name)

        expected = schema_type(field_def.type)

        if field_def.pattern is not None and expected != "string":
            issues.append(
                f'Field "{name}": pattern is only valid for string types, but type is "{expected}".'
            )

        if (field_def.min is not None or field_def.max is not None) and expected != "number":
            issues.append(
                f'Field "{name}": min/max are only valid for number types, but type is "{expected}".'
            )

        if (field_def.min_length is not None or field_def.max_length is not None) and expected != "string":
            issues.append(
                f'Field "{name}": minLength/maxLength are only valid for string types, but type is "{expected}".'
            )

        for value in field_def.enum_values or ():
            if not _matches(value, expected):
                issues.append(
                    f'Field "{name}": enum value {json.dumps(value, default=repr)} is not a {expected}.'
                )

    return issues


def validate_fields(fields: Iterable[FieldDefinition], strict: bool = False) -> list[str]:
    """Check merged fields and report issues.

    Returns:
        The issues found (empty in production builds).

    Raises:
        SchemaValidationError: in strict mode, for the first issue found.
    """
    if is_production():
        return []

    issues = find_issues(fields)
    for issue in issues:
        if strict:
            raise SchemaValidationError(f"{LOG_PREFIX} {issue}")
        logger.warning("%s %s", LOG_PREFIX, issue)
    return issues
