"""JSON file readers and text writers that report the offending path."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from toolsreg.errors import RegistryFileError


class _NonFiniteNumber(ValueError):
    pass


def _reject_constant(token: str) -> Any:
    raise _NonFiniteNumber(token)


def read_json(path: Path) -> Any:
    """Parse a strict JSON document; ``NaN`` and ``Infinity`` are rejected."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RegistryFileError(path, "file not found") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise RegistryFileError(path, f"cannot read file: {exc}") from exc
    try:
        return json.loads(content, parse_constant=_reject_constant)
    except _NonFiniteNumber as exc:
        raise RegistryFileError(path, f"invalid JSON: non-finite number {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RegistryFileError(path, f"invalid JSON: {exc}") from exc


def write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise RegistryFileError(path, f"cannot write file: {exc}") from exc
