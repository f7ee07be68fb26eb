"""Path helpers for config-driven paths and the registry directory layout."""

from __future__ import annotations

from pathlib import Path

META_DIR = "_meta"
TAXONOMY_DIR = "taxonomy"
CATEGORY_TOOLS_FILENAME = "tools.json"


def is_absolute_like(path: str) -> bool:
    return Path(path).is_absolute() or path.startswith("~")


def resolve_path(base_dir: Path, path: str) -> Path:
    if is_absolute_like(path):
        return Path(path).expanduser().resolve()
    return (base_dir / path).resolve()


def config_document_path(registry_root: Path) -> Path:
    return registry_root / META_DIR / "config.json"


def capabilities_path(registry_root: Path) -> Path:
    return registry_root / META_DIR / TAXONOMY_DIR / "capabilities.json"


def pricing_models_path(registry_root: Path) -> Path:
    return registry_root / META_DIR / TAXONOMY_DIR / "pricing-models.json"


def compliance_path(registry_root: Path) -> Path:
    return registry_root / META_DIR / TAXONOMY_DIR / "compliance.json"


def category_tools_path(registry_root: Path, slug: str) -> Path:
    return registry_root / slug / CATEGORY_TOOLS_FILENAME
