from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.registry_builder import RegistryBuilder


@pytest.fixture
def registry_builder(tmp_path: Path) -> RegistryBuilder:
    """Provide a registry builder rooted at the pytest tmp_path."""
    return RegistryBuilder(tmp_path)


@pytest.fixture
def writing_registry(registry_builder: RegistryBuilder) -> RegistryBuilder:
    """The single-category registry used by the pipeline scenarios."""
    registry_builder.write_taxonomy({"writing": {"name": "Writing", "status": "live", "minTools": 1}})
    return registry_builder
