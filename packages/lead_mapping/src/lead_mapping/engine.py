"""Declarative field-mapping engine.

Turns a nested webhook document into a flat CRM field map using a table of
FieldSpec entries, one per target field:

- plain dotted path: value is looked up in the document
- "static": value is the literal stored on the spec
- "multiple": value is computed by the transform from the whole document

A field that fails to resolve is skipped and reported; the rest of the
table is still applied.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("lead-relay-mapping")

# =============================================================================
# Constants
# =============================================================================

STATIC = "static"
MULTIPLE = "multiple"

RESERVED_SOURCES = frozenset({STATIC, MULTIPLE})

Transform = Callable[[Any, Mapping[str, Any]], Any]


# =============================================================================
# Field Specification
# =============================================================================


@dataclass(frozen=True)
class FieldSpec:
    """Rule describing how to derive one output field from the document."""

    source: str
    value: Any = None
    transform: Transform | None = None
    default: Any = None

    def __post_init__(self):
        if not self.source:
            raise ValueError("FieldSpec.source must be a dotted path, 'static' or 'multiple'")
        if self.source == STATIC and self.transform is not None:
            raise ValueError("A 'static' FieldSpec cannot carry a transform")

    @property
    def is_static(self) -> bool:
        return self.source == STATIC

    @property
    def is_multiple(self) -> bool:
        return self.source == MULTIPLE


MappingTable = Mapping[str, FieldSpec]


@dataclass
class MappingResult:
    """Output record plus per-field diagnostics."""

    fields: dict[str, Any] = field(default_factory=dict)
    skipped: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.fields


# =============================================================================
# Path Resolver
# =============================================================================


def get_value_by_path(document: Any, path: str | None) -> Any:
    """Return the value at a dotted path, or None if any segment is missing.

    Reserved sources and empty paths always resolve to None. Array indexes
    are not supported.
    """
    if not path or path in RESERVED_SOURCES:
        return None

    current = document
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def is_empty_value(value: Any) -> bool:
    """Values that never make it into the output record."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


# =============================================================================
# Engine
# =============================================================================


def resolve_field(document: Mapping[str, Any], spec: FieldSpec) -> Any:
    """Resolve a single spec against the document. May raise from a transform."""
    if spec.is_static:
        value = spec.value
    elif spec.is_multiple:
        value = spec.transform(None, document) if spec.transform else None
    else:
        raw_value = get_value_by_path(document, spec.source)
        value = spec.transform(raw_value, document) if spec.transform else raw_value

    if is_empty_value(value) and spec.default is not None:
        return spec.default
    return value


def apply_mapping_with_report(
    document: Mapping[str, Any],
    table: MappingTable,
) -> MappingResult:
    """Apply every spec in the table and collect skipped fields.

    Args:
        document: Parsed webhook payload.
        table: Target-field name to FieldSpec.

    Returns:
        MappingResult with the flat field map (table order) and the reason
        each failed field was skipped.
    """
    result = MappingResult()

    for target_field, spec in table.items():
        try:
            value = resolve_field(document, spec)
        except Exception as e:
            logger.warning(f"Skipping field {target_field}: {type(e).__name__}: {e}")
            result.skipped[target_field] = f"{type(e).__name__}: {e}"
            continue

        if not is_empty_value(value):
            result.fields[target_field] = value

    return result


def apply_mapping(document: Mapping[str, Any], table: MappingTable) -> dict[str, Any]:
    """Apply the table and return only the flat output record."""
    return apply_mapping_with_report(document, table).fields
