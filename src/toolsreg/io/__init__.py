"""File I/O for registry inputs and snapshot artifacts."""

from toolsreg.io.json_files import read_json, write_text
from toolsreg.io.snapshot import SnapshotPaths, read_hash_sidecar, read_snapshot, snapshot_paths, write_snapshot

__all__ = [
    "SnapshotPaths",
    "read_hash_sidecar",
    "read_json",
    "read_snapshot",
    "snapshot_paths",
    "write_snapshot",
    "write_text",
]
