"""List live categories use-case."""

from __future__ import annotations

from typing import List

from toolsreg.collation import collation_key
from toolsreg.domain.models import LiveCategory
from toolsreg.models import Snapshot
from toolsreg.taxonomy import LIVE_STATUS


def live_category_slugs(snapshot: Snapshot) -> List[str]:
    return [slug for slug, meta in snapshot.categories.items() if meta.get("status") == LIVE_STATUS]


def list_live_categories(snapshot: Snapshot) -> List[LiveCategory]:
    categories = [
        LiveCategory(
            slug=slug,
            name=str(snapshot.categories[slug].get("name", slug)),
            count=len(snapshot.indexes.by_category.get(slug, [])),
        )
        for slug in live_category_slugs(snapshot)
    ]
    return sorted(categories, key=lambda category: collation_key(category.name))
