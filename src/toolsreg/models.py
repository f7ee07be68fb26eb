"""Tool record schema and snapshot models."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictStr, StringConstraints, field_validator

NonEmptyStr = Annotated[str, StringConstraints(strict=True, min_length=1)]


def _finite_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a number")
    if not math.isfinite(value):
        raise ValueError("Input should be a finite number")
    return value


Number = Annotated[Any, AfterValidator(_finite_number)]


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 date or timestamp, accepting a trailing ``Z``."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


class Pricing(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    model: StrictStr
    min_monthly_usd: Optional[Number] = Field(default=None, alias="minMonthlyUSD")
    max_monthly_usd: Optional[Number] = Field(default=None, alias="maxMonthlyUSD")


class ToolMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    last_verified_at: Optional[StrictStr] = Field(default=None, alias="lastVerifiedAt")

    @field_validator("last_verified_at")
    @classmethod
    def validate_last_verified_at(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            parse_timestamp(value)
        except ValueError as exc:
            raise ValueError(f"must be an ISO-8601 date, got {value!r}") from exc
        return value


class ToolRecord(BaseModel):
    """Structural shape of one catalog entry as authored in a category file."""

    model_config = ConfigDict(extra="allow")

    id: NonEmptyStr
    name: NonEmptyStr
    category: NonEmptyStr
    capabilities: List[StrictStr]
    pricing: Pricing
    compliance: Optional[Dict[str, Any]] = None
    vendor: Optional[StrictStr] = None
    website: Optional[StrictStr] = None
    description: Optional[StrictStr] = None
    metadata: Optional[ToolMetadata] = None


class SnapshotCounts(BaseModel):
    tools: int
    categories: int
    capabilities: int


class Integrity(BaseModel):
    hash: str
    counts: SnapshotCounts


class SnapshotIndexes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    by_category: Dict[str, List[str]] = Field(alias="byCategory")
    by_capability: Dict[str, List[str]] = Field(alias="byCapability")


class Snapshot(BaseModel):
    """The aggregated registry artifact consumed by clients."""

    model_config = ConfigDict(populate_by_name=True)

    version: Any
    schema_version: Any = Field(alias="schemaVersion")
    generated_at: str = Field(alias="generatedAt")
    categories: Dict[str, Dict[str, Any]]
    tools: List[Dict[str, Any]]
    indexes: SnapshotIndexes
    integrity: Integrity

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def hashable_document(self) -> Dict[str, Any]:
        """Return the document that the integrity hash covers."""
        return hashable_document(self.to_document())


def hashable_document(document: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in document.items() if key not in {"generatedAt", "integrity"}}
