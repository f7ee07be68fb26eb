"""Structural validation of a single tool record.

Checks only the shape of the record. Membership in the taxonomy vocabularies
is the governance validator's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from toolsreg.models import ToolRecord


@dataclass(frozen=True)
class SchemaViolation:
    field: str
    message: str

    def describe(self) -> str:
        if not self.field:
            return f"Schema error: {self.message}"
        return f"Schema error at '{self.field}': {self.message}"


def check_tool(record: Any) -> Tuple[Optional[ToolRecord], List[SchemaViolation]]:
    """Parse a raw record, returning the model or every structural defect found."""
    if not isinstance(record, Mapping):
        return None, [SchemaViolation("", f"tool must be an object, got {json_type_name(record)}")]
    try:
        return ToolRecord.model_validate(dict(record)), []
    except ValidationError as exc:
        violations = [
            SchemaViolation(format_location(error.get("loc", ())), error.get("msg", "invalid value"))
            for error in exc.errors()
        ]
        return None, violations


def validate_tool_schema(record: Any) -> List[SchemaViolation]:
    _, violations = check_tool(record)
    return violations


def format_location(location: Sequence[Union[str, int]]) -> str:
    parts: List[str] = []
    for item in location:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts)


def json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__
