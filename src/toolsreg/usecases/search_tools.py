"""Search tools use-case."""

from __future__ import annotations

import re
from datetime import timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from toolsreg.collation import collation_key
from toolsreg.domain.models import SortMode, ToolQuery, ToolSummary
from toolsreg.models import Snapshot, parse_timestamp
from toolsreg.usecases.list_categories import live_category_slugs

_WHITESPACE_RE = re.compile(r"\s+")


def search_tools(snapshot: Snapshot, query: ToolQuery) -> List[ToolSummary]:
    """Filter and sort tools the way the catalog browser does.

    Without a category, tools from every live category are considered. Selected
    capabilities must all be present on a tool.
    """
    tool_ids = category_tool_ids(snapshot, query.category)
    if query.capabilities:
        wanted = set(capability_tool_ids(snapshot, query.capabilities))
        tool_ids = [tool_id for tool_id in tool_ids if tool_id in wanted]

    by_id = {tool.get("id"): tool for tool in snapshot.tools}
    summaries = [summarize_tool(by_id[tool_id]) for tool_id in tool_ids if tool_id in by_id]

    needle = normalize_query(query.q)
    matched = [summary for summary in summaries if _matches(summary, needle)]
    return sort_summaries(matched, query.sort)


def category_tool_ids(snapshot: Snapshot, category: Optional[str] = None) -> List[str]:
    if category:
        return list(snapshot.indexes.by_category.get(category, []))
    ids: Dict[str, None] = {}
    for slug in live_category_slugs(snapshot):
        for tool_id in snapshot.indexes.by_category.get(slug, []):
            ids.setdefault(tool_id, None)
    return list(ids)


def capability_tool_ids(snapshot: Snapshot, capabilities: List[str]) -> List[str]:
    """Return ids of tools declaring every capability in ``capabilities``."""
    if not capabilities:
        return []
    first, *rest = capabilities
    ids = list(snapshot.indexes.by_capability.get(first, []))
    for capability in rest:
        allowed = set(snapshot.indexes.by_capability.get(capability, []))
        ids = [tool_id for tool_id in ids if tool_id in allowed]
    return ids


def available_capabilities(snapshot: Snapshot) -> List[str]:
    """Capabilities used by at least one tool in a live category."""
    by_id = {tool.get("id"): tool for tool in snapshot.tools}
    found = set()
    for slug in live_category_slugs(snapshot):
        for tool_id in snapshot.indexes.by_category.get(slug, []):
            tool = by_id.get(tool_id)
            if tool:
                found.update(str(capability) for capability in tool.get("capabilities") or [])
    return sorted(found)


def summarize_tool(tool: Mapping[str, Any]) -> ToolSummary:
    metadata = tool.get("metadata") or {}
    return ToolSummary(
        id=str(tool.get("id")),
        name=str(tool.get("name", "")),
        category=str(tool.get("category", "")),
        vendor=tool.get("vendor"),
        website=tool.get("website"),
        description=tool.get("description"),
        capabilities=list(tool.get("capabilities") or []),
        pricing=tool.get("pricing"),
        compliance=tool.get("compliance"),
        last_verified_at=metadata.get("lastVerifiedAt") if isinstance(metadata, Mapping) else None,
    )


def normalize_query(query: str) -> str:
    return _WHITESPACE_RE.sub(" ", query.strip()).lower()


def _matches(tool: ToolSummary, needle: str) -> bool:
    if not needle:
        return True
    haystack = " ".join(part for part in (tool.name, tool.vendor, tool.description) if part).lower()
    return needle in haystack


def sort_summaries(tools: List[ToolSummary], mode: SortMode) -> List[ToolSummary]:
    if mode == SortMode.price_asc:
        return sorted(tools, key=_price_ascending_key)
    if mode == SortMode.price_desc:
        return sorted(tools, key=_price_descending_key)
    if mode == SortMode.recent:
        return sorted(tools, key=_recent_key)
    return sorted(tools, key=lambda tool: collation_key(tool.name))


def _price(tool: ToolSummary, field: str) -> Optional[float]:
    value = (tool.pricing or {}).get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _price_ascending_key(tool: ToolSummary) -> Tuple[Any, ...]:
    # Unpriced tools go last; equal minimums compare by maximum, then name.
    minimum = _price(tool, "minMonthlyUSD")
    maximum = _price(tool, "maxMonthlyUSD")
    return (
        minimum is None,
        minimum or 0.0,
        maximum is None,
        maximum or 0.0,
        collation_key(tool.name),
    )


def _price_descending_key(tool: ToolSummary) -> Tuple[Any, ...]:
    maximum = _price(tool, "maxMonthlyUSD")
    if maximum is None:
        maximum = _price(tool, "minMonthlyUSD")
    return maximum is None, -(maximum or 0.0), collation_key(tool.name)


def _recent_key(tool: ToolSummary) -> Tuple[Any, ...]:
    verified = _timestamp(tool.last_verified_at)
    return verified is None, -(verified or 0.0), collation_key(tool.name)


def _timestamp(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        moment = parse_timestamp(value)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()
