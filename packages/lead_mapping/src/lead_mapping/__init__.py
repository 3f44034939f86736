"""Declarative mapping from call-center webhook payloads to CRM fields."""

from lead_mapping.engine import (
    MULTIPLE,
    STATIC,
    FieldSpec,
    MappingResult,
    apply_mapping,
    apply_mapping_with_report,
    get_value_by_path,
    is_empty_value,
)
from lead_mapping.tables import LEAD_MAPPING
from lead_mapping.transforms import (
    PLACEHOLDER,
    lead_comments,
    lead_name,
    lead_phone,
)

__all__ = [
    "LEAD_MAPPING",
    "MULTIPLE",
    "PLACEHOLDER",
    "STATIC",
    "FieldSpec",
    "MappingResult",
    "apply_mapping",
    "apply_mapping_with_report",
    "get_value_by_path",
    "is_empty_value",
    "lead_comments",
    "lead_name",
    "lead_phone",
]
