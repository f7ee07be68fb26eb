"""Taxonomy Store: category registry and controlled vocabularies."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from toolsreg.errors import TaxonomyError
from toolsreg.io.json_files import read_json
from toolsreg.logging import get_logger
from toolsreg.paths import capabilities_path, compliance_path, config_document_path, pricing_models_path

LIVE_STATUS = "live"

logger = get_logger("taxonomy")

_DocumentT = TypeVar("_DocumentT", bound=BaseModel)


class CategoryMeta(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    status: str
    min_tools: Optional[int] = Field(default=None, alias="minTools", ge=0)


class RegistryConfigDocument(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: Any
    schema_version: Any = Field(alias="schemaVersion")
    min_tools_per_live_category: Optional[int] = Field(default=None, alias="minToolsPerLiveCategory", ge=0)
    categories: Dict[str, CategoryMeta]


class CapabilityEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    slug: str
    label: Optional[str] = None


class CapabilitiesDocument(BaseModel):
    capabilities: List[CapabilityEntry]


class PricingModelsDocument(BaseModel):
    models: List[str]


class ComplianceFlag(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: str
    label: Optional[str] = None


class ComplianceDocument(BaseModel):
    flags: List[ComplianceFlag]


@dataclass(frozen=True)
class TaxonomyStore:
    """Read-only reference data shared by the validator and the aggregator."""

    version: Any
    schema_version: Any
    categories: Dict[str, CategoryMeta]
    capabilities: FrozenSet[str]
    pricing_models: FrozenSet[str]
    compliance_flags: FrozenSet[str]
    min_tools_per_live_category: Optional[int] = None
    raw_categories: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def category_slugs(self) -> List[str]:
        return list(self.categories)

    def is_live(self, slug: str) -> bool:
        meta = self.categories.get(slug)
        return meta is not None and meta.status == LIVE_STATUS

    def effective_min_tools(self, slug: str, default: int) -> int:
        meta = self.categories[slug]
        if meta.min_tools is not None:
            return meta.min_tools
        if self.min_tools_per_live_category is not None:
            return self.min_tools_per_live_category
        return default

    def categories_document(self) -> Dict[str, Dict[str, Any]]:
        """Return a deep copy of the category registry as authored."""
        return copy.deepcopy(self.raw_categories)


def build_taxonomy(
    config: Dict[str, Any],
    capabilities: Dict[str, Any],
    pricing_models: Dict[str, Any],
    compliance: Dict[str, Any],
) -> TaxonomyStore:
    """Build a store from already-parsed documents."""
    config_doc = _parse(RegistryConfigDocument, config, "_meta/config.json")
    capabilities_doc = _parse(CapabilitiesDocument, capabilities, "_meta/taxonomy/capabilities.json")
    pricing_doc = _parse(PricingModelsDocument, pricing_models, "_meta/taxonomy/pricing-models.json")
    compliance_doc = _parse(ComplianceDocument, compliance, "_meta/taxonomy/compliance.json")

    raw_categories = config.get("categories") or {}
    return TaxonomyStore(
        version=config_doc.version,
        schema_version=config_doc.schema_version,
        categories=dict(config_doc.categories),
        capabilities=frozenset(entry.slug for entry in capabilities_doc.capabilities),
        pricing_models=frozenset(pricing_doc.models),
        compliance_flags=frozenset(flag.key for flag in compliance_doc.flags),
        min_tools_per_live_category=config_doc.min_tools_per_live_category,
        raw_categories=copy.deepcopy(dict(raw_categories)),
    )


def load_taxonomy(registry_root: Path) -> TaxonomyStore:
    paths = {
        "config": config_document_path(registry_root),
        "capabilities": capabilities_path(registry_root),
        "pricing_models": pricing_models_path(registry_root),
        "compliance": compliance_path(registry_root),
    }
    documents = {}
    for key, path in paths.items():
        logger.debug("Reading taxonomy document %s", path)
        document = read_json(path)
        if not isinstance(document, dict):
            raise TaxonomyError(f"{path}: expected a JSON object at the root")
        documents[key] = document
    try:
        store = build_taxonomy(**documents)
    except TaxonomyError as exc:
        raise TaxonomyError(f"{registry_root}: {exc}") from exc
    logger.debug(
        "Loaded taxonomy: %d categories, %d capabilities, %d pricing models, %d compliance flags",
        len(store.categories),
        len(store.capabilities),
        len(store.pricing_models),
        len(store.compliance_flags),
    )
    return store


def _parse(model: Type[_DocumentT], payload: Dict[str, Any], label: str) -> _DocumentT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise TaxonomyError(f"invalid taxonomy document {label}: {exc}") from exc
