from __future__ import annotations

import pytest

from tests._fixtures.registry_builder import SAMPLE_REGISTRY, RegistryBuilder, make_taxonomy
from toolsreg.errors import RegistryFileError, TaxonomyError
from toolsreg.taxonomy import load_taxonomy


def test_load_taxonomy_from_sample_registry():
    taxonomy = load_taxonomy(SAMPLE_REGISTRY)
    assert taxonomy.schema_version == 1
    assert taxonomy.category_slugs() == ["writing", "analytics", "design"]
    assert "drafting" in taxonomy.capabilities
    assert "usage-based" in taxonomy.pricing_models
    assert taxonomy.compliance_flags == frozenset({"gdpr", "soc2", "hipaa"})
    assert taxonomy.is_live("writing")
    assert not taxonomy.is_live("design")


def test_effective_min_tools_precedence():
    taxonomy = make_taxonomy(
        {
            "writing": {"name": "Writing", "status": "live", "minTools": 1},
            "analytics": {"name": "Analytics", "status": "live"},
        },
        min_tools=5,
    )
    assert taxonomy.effective_min_tools("writing", 3) == 1
    assert taxonomy.effective_min_tools("analytics", 3) == 5

    fallback = make_taxonomy({"analytics": {"name": "Analytics", "status": "live"}})
    assert fallback.effective_min_tools("analytics", 3) == 3


def test_min_tools_zero_is_respected():
    taxonomy = make_taxonomy({"writing": {"name": "Writing", "status": "live", "minTools": 0}}, min_tools=4)
    assert taxonomy.effective_min_tools("writing", 3) == 0


def test_categories_document_is_a_copy():
    taxonomy = make_taxonomy({"writing": {"name": "Writing", "status": "live", "icon": "pen"}})
    document = taxonomy.categories_document()
    assert document == {"writing": {"name": "Writing", "status": "live", "icon": "pen"}}
    document["writing"]["name"] = "Changed"
    assert taxonomy.categories_document()["writing"]["name"] == "Writing"


def test_load_taxonomy_missing_document(registry_builder: RegistryBuilder):
    registry_builder.write_taxonomy({"writing": {"name": "Writing", "status": "live"}})
    (registry_builder.root / "_meta" / "taxonomy" / "compliance.json").unlink()
    with pytest.raises(RegistryFileError) as excinfo:
        load_taxonomy(registry_builder.root)
    assert excinfo.value.path.name == "compliance.json"


def test_load_taxonomy_rejects_malformed_vocabulary(registry_builder: RegistryBuilder):
    registry_builder.write_taxonomy({"writing": {"name": "Writing", "status": "live"}})
    registry_builder.write_json("_meta/taxonomy/pricing-models.json", {"models": "free"})
    with pytest.raises(TaxonomyError, match="pricing-models.json"):
        load_taxonomy(registry_builder.root)
