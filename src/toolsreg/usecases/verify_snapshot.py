"""Verify a written snapshot against its integrity hash."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from toolsreg.errors import SnapshotIntegrityError
from toolsreg.hashing import hash_payload
from toolsreg.io.snapshot import read_hash_sidecar, read_snapshot
from toolsreg.models import Snapshot


@dataclass
class VerificationResult:
    snapshot_path: Path
    embedded_hash: str
    computed_hash: str
    sidecar_hash: Optional[str] = None
    problems: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems

    def raise_for_status(self) -> None:
        if self.problems:
            raise SnapshotIntegrityError(f"{self.snapshot_path}: " + "; ".join(self.problems))


def check_snapshot(snapshot: Snapshot, snapshot_path: Path, sidecar_hash: Optional[str] = None) -> VerificationResult:
    computed = hash_payload(snapshot.hashable_document())
    result = VerificationResult(
        snapshot_path=snapshot_path,
        embedded_hash=snapshot.integrity.hash,
        computed_hash=computed,
        sidecar_hash=sidecar_hash,
    )
    if computed != snapshot.integrity.hash:
        result.problems.append(f"embedded hash {snapshot.integrity.hash} does not match content hash {computed}")
    if sidecar_hash is not None and sidecar_hash != computed:
        result.problems.append(f"sidecar hash {sidecar_hash} does not match content hash {computed}")
    counts = snapshot.integrity.counts
    if counts.tools != len(snapshot.tools):
        result.problems.append(f"counts.tools is {counts.tools} but snapshot holds {len(snapshot.tools)} tools")
    return result


def verify_snapshot(snapshot_path: Path, hash_path: Optional[Path] = None) -> VerificationResult:
    snapshot = read_snapshot(snapshot_path)
    sidecar = read_hash_sidecar(hash_path) if hash_path is not None else None
    return check_snapshot(snapshot, snapshot_path, sidecar)


def load_snapshot(snapshot_path: Path) -> Snapshot:
    return read_snapshot(snapshot_path)


def load_verified_snapshot(snapshot_path: Path) -> Snapshot:
    """Read a snapshot and refuse it when its content no longer matches its hash."""
    snapshot = read_snapshot(snapshot_path)
    check_snapshot(snapshot, snapshot_path).raise_for_status()
    return snapshot
