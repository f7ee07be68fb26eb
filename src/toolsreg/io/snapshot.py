"""Snapshot writer and reader."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from toolsreg.errors import RegistryFileError
from toolsreg.io.json_files import read_json, write_text
from toolsreg.models import Snapshot

DEFAULT_SNAPSHOT_FILENAME = "tools.snapshot.v{schema_version}.json"
DEFAULT_HASH_FILENAME = "tools.snapshot.v{schema_version}.hash"


@dataclass(frozen=True)
class SnapshotPaths:
    snapshot: Path
    hash: Path


def snapshot_paths(
    out_dir: Path,
    schema_version: Any,
    *,
    snapshot_filename: str = DEFAULT_SNAPSHOT_FILENAME,
    hash_filename: str = DEFAULT_HASH_FILENAME,
) -> SnapshotPaths:
    return SnapshotPaths(
        snapshot=out_dir / snapshot_filename.format(schema_version=schema_version),
        hash=out_dir / hash_filename.format(schema_version=schema_version),
    )


def write_snapshot(
    snapshot: Snapshot,
    out_dir: Path,
    *,
    snapshot_filename: str = DEFAULT_SNAPSHOT_FILENAME,
    hash_filename: str = DEFAULT_HASH_FILENAME,
) -> SnapshotPaths:
    """Overwrite the latest snapshot and its hash sidecar in ``out_dir``."""
    paths = snapshot_paths(
        out_dir,
        snapshot.schema_version,
        snapshot_filename=snapshot_filename,
        hash_filename=hash_filename,
    )
    content = json.dumps(snapshot.to_document(), indent=2, ensure_ascii=False)
    write_text(paths.snapshot, content + "\n")
    write_text(paths.hash, snapshot.integrity.hash)
    return paths


def read_snapshot(path: Path) -> Snapshot:
    payload = read_json(path)
    try:
        return Snapshot.model_validate(payload)
    except ValidationError as exc:
        raise RegistryFileError(path, f"not a valid snapshot: {exc}") from exc


def read_hash_sidecar(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as exc:
        raise RegistryFileError(path, "file not found") from exc
    except OSError as exc:
        raise RegistryFileError(path, f"cannot read file: {exc}") from exc
