"""Hashing utilities."""

from __future__ import annotations

import hashlib
import json
from typing import Any

DEFAULT_HASH_ALGO = "sha256"


def canonical_json(payload: Any) -> str:
    """Serialize with sorted keys and compact separators so equal data hashes equally."""
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def hash_payload(payload: Any) -> str:
    """Compute a deterministic SHA-256 hex digest of a JSON-compatible payload."""
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()
