"""Schema and governance validation of the tools registry."""

from .base import ValidationReport, Violation, tool_label
from .governance import (
    check_population,
    check_sort_order,
    unused_tokens,
    validate_category,
    validate_registry,
    validate_tool,
)
from .schema import SchemaViolation, check_tool, validate_tool_schema

__all__ = [
    "SchemaViolation",
    "ValidationReport",
    "Violation",
    "check_population",
    "check_sort_order",
    "check_tool",
    "tool_label",
    "unused_tokens",
    "validate_category",
    "validate_registry",
    "validate_tool",
    "validate_tool_schema",
]
