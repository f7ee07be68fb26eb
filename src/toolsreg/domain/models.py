"""Domain models for browsing a published snapshot."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SortMode(str, Enum):
    name = "name"
    price_asc = "price-asc"
    price_desc = "price-desc"
    recent = "recent"


class ToolQuery(BaseModel):
    category: Optional[str] = None
    capabilities: List[str] = Field(default_factory=list)
    q: str = ""
    sort: SortMode = SortMode.name


class LiveCategory(BaseModel):
    slug: str
    name: str
    count: int


class ToolSummary(BaseModel):
    id: str
    name: str
    category: str
    vendor: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    capabilities: List[str] = Field(default_factory=list)
    pricing: Optional[Dict[str, Any]] = None
    compliance: Optional[Dict[str, Any]] = None
    last_verified_at: Optional[str] = None
