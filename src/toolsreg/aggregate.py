"""Aggregate category files into a single versioned snapshot."""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from toolsreg.collation import CollationKey, collation_key
from toolsreg.errors import RegistryFileError
from toolsreg.hashing import hash_payload
from toolsreg.io.json_files import read_json
from toolsreg.logging import get_logger
from toolsreg.models import Integrity, Snapshot, SnapshotCounts, SnapshotIndexes, hashable_document
from toolsreg.paths import category_tools_path
from toolsreg.taxonomy import TaxonomyStore

Clock = Callable[[], datetime]

logger = get_logger("aggregate")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render an ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def load_category_tools(registry_root: Path, category: str) -> List[Dict[str, Any]]:
    """Load one category file; a missing file contributes no tools."""
    path = category_tools_path(registry_root, category)
    if not path.exists():
        logger.debug("No tools file for category %s, skipping", category)
        return []
    payload = read_json(path)
    if not isinstance(payload, list):
        raise RegistryFileError(path, "expected a JSON array of tools")
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise RegistryFileError(path, f"entry #{index} is not a JSON object")
        if not isinstance(record.get("id"), str):
            raise RegistryFileError(path, f"entry #{index} has no string id")
    logger.debug("Loaded %d tools from %s", len(payload), path)
    return payload


def collect_tools(taxonomy: TaxonomyStore, registry_root: Path) -> List[Dict[str, Any]]:
    tools: List[Dict[str, Any]] = []
    for category in taxonomy.category_slugs():
        tools.extend(load_category_tools(registry_root, category))
    return tools


def tool_sort_key(tool: Mapping[str, Any]) -> Tuple[CollationKey, str]:
    # Ties on name fall back to id so the order never depends on category order.
    return collation_key(str(tool.get("name", ""))), str(tool.get("id", ""))


def sort_tools(tools: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(tools, key=tool_sort_key)


def build_indexes(tools: Sequence[Mapping[str, Any]]) -> SnapshotIndexes:
    """Derive category and capability indexes preserving the order of ``tools``."""
    by_category: Dict[str, List[str]] = OrderedDict()
    by_capability: Dict[str, List[str]] = OrderedDict()
    for tool in tools:
        tool_id = tool["id"]
        category = tool.get("category")
        if isinstance(category, str):
            by_category.setdefault(category, []).append(tool_id)
        capabilities = tool.get("capabilities")
        if not isinstance(capabilities, list):
            continue
        for capability in dict.fromkeys(item for item in capabilities if isinstance(item, str)):
            by_capability.setdefault(capability, []).append(tool_id)
    return SnapshotIndexes(by_category=dict(by_category), by_capability=dict(by_capability))


def compute_integrity(document: Mapping[str, Any]) -> Integrity:
    """Hash everything except ``generatedAt`` and summarise cardinalities."""
    digest = hash_payload(hashable_document(dict(document)))
    return Integrity(
        hash=digest,
        counts=SnapshotCounts(
            tools=len(document["tools"]),
            categories=len(document["categories"]),
            capabilities=len(document["indexes"]["byCapability"]),
        ),
    )


def build_snapshot(
    taxonomy: TaxonomyStore,
    tools: Sequence[Dict[str, Any]],
    *,
    generated_at: datetime,
) -> Snapshot:
    ordered = sort_tools(tools)
    indexes = build_indexes(ordered)
    document: Dict[str, Any] = {
        "version": taxonomy.version,
        "schemaVersion": taxonomy.schema_version,
        "generatedAt": format_timestamp(generated_at),
        "categories": taxonomy.categories_document(),
        "tools": ordered,
        "indexes": indexes.model_dump(by_alias=True),
    }
    integrity = compute_integrity(document)
    return Snapshot.model_validate({**document, "integrity": integrity.model_dump()})


def aggregate(
    taxonomy: TaxonomyStore,
    registry_root: Path,
    *,
    clock: Optional[Clock] = None,
) -> Snapshot:
    """Merge every declared category into one snapshot.

    Raises :class:`RegistryFileError` when a declared category file exists but
    cannot be read or parsed.
    """
    tools = collect_tools(taxonomy, registry_root)
    snapshot = build_snapshot(taxonomy, tools, generated_at=(clock or utc_now)())
    logger.debug(
        "Aggregated %d tools across %d categories (hash %s)",
        snapshot.integrity.counts.tools,
        snapshot.integrity.counts.categories,
        snapshot.integrity.hash,
    )
    return snapshot
