from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from tests._fixtures.registry_builder import make_taxonomy, make_tool
from toolsreg.aggregate import build_snapshot
from toolsreg.errors import RegistryFileError, SnapshotIntegrityError
from toolsreg.io.snapshot import read_hash_sidecar, read_snapshot, snapshot_paths, write_snapshot
from toolsreg.usecases.verify_snapshot import load_snapshot, load_verified_snapshot, verify_snapshot

GENERATED_AT = datetime(2024, 1, 2, tzinfo=timezone.utc)


@pytest.fixture
def snapshot():
    taxonomy = make_taxonomy(
        {"writing": {"name": "Writing", "status": "live"}},
        capabilities=["drafting", "editing"],
        schema_version=2,
    )
    tools = [
        make_tool("t2", "Zeta", capabilities=["editing"]),
        make_tool("t1", "Café", capabilities=["drafting", "editing"]),
    ]
    return build_snapshot(taxonomy, tools, generated_at=GENERATED_AT)


def test_file_names_follow_schema_version(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path / "public" / "data")
    assert paths.snapshot.name == "tools.snapshot.v2.json"
    assert paths.hash.name == "tools.snapshot.v2.hash"
    assert paths.snapshot.parent.is_dir()


def test_sidecar_holds_only_the_hash(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    assert paths.hash.read_text(encoding="utf-8") == snapshot.integrity.hash
    assert read_hash_sidecar(paths.hash) == snapshot.integrity.hash


def test_snapshot_is_pretty_printed_and_unescaped(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    content = paths.snapshot.read_text(encoding="utf-8")
    assert content.endswith("}\n")
    assert '\n  "schemaVersion": 2,' in content
    assert "Café" in content
    assert json.loads(content)["integrity"]["hash"] == snapshot.integrity.hash


def test_written_snapshot_reads_back(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    assert read_snapshot(paths.snapshot) == snapshot


def test_rewrite_overwrites_previous_snapshot(tmp_path: Path, snapshot):
    write_snapshot(snapshot, tmp_path)
    newer = snapshot.model_copy(update={"generated_at": "2030-01-01T00:00:00.000Z"})
    paths = write_snapshot(newer, tmp_path)
    assert read_snapshot(paths.snapshot).generated_at == "2030-01-01T00:00:00.000Z"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["tools.snapshot.v2.hash", "tools.snapshot.v2.json"]


def test_custom_filename_templates(tmp_path: Path, snapshot):
    paths = write_snapshot(
        snapshot,
        tmp_path,
        snapshot_filename="registry-{schema_version}.json",
        hash_filename="registry-{schema_version}.sha256",
    )
    assert paths == snapshot_paths(
        tmp_path,
        2,
        snapshot_filename="registry-{schema_version}.json",
        hash_filename="registry-{schema_version}.sha256",
    )
    assert paths.snapshot.name == "registry-2.json"


def test_verify_accepts_untouched_snapshot(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    result = verify_snapshot(paths.snapshot, paths.hash)
    assert result.ok
    assert result.computed_hash == result.embedded_hash == result.sidecar_hash


def test_verify_detects_tampered_tool_data(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    document = json.loads(paths.snapshot.read_text(encoding="utf-8"))
    document["tools"][0]["name"] = "Tampered"
    paths.snapshot.write_text(json.dumps(document), encoding="utf-8")

    result = verify_snapshot(paths.snapshot, paths.hash)
    assert not result.ok
    assert any(problem.startswith("embedded hash") for problem in result.problems)
    assert any(problem.startswith("sidecar hash") for problem in result.problems)


def test_verify_ignores_generated_at_edits(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    document = json.loads(paths.snapshot.read_text(encoding="utf-8"))
    document["generatedAt"] = "1999-12-31T23:59:59.999Z"
    paths.snapshot.write_text(json.dumps(document), encoding="utf-8")
    assert verify_snapshot(paths.snapshot, paths.hash).ok


def test_verify_detects_stale_sidecar(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    paths.hash.write_text("0" * 64, encoding="utf-8")
    result = verify_snapshot(paths.snapshot, paths.hash)
    assert result.problems == [f"sidecar hash {'0' * 64} does not match content hash {snapshot.integrity.hash}"]


def test_load_verified_snapshot_refuses_tampered_file(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    document = json.loads(paths.snapshot.read_text(encoding="utf-8"))
    document["indexes"]["byCapability"]["drafting"] = []
    paths.snapshot.write_text(json.dumps(document), encoding="utf-8")
    with pytest.raises(SnapshotIntegrityError, match="does not match content hash"):
        load_verified_snapshot(paths.snapshot)


def test_read_snapshot_rejects_other_json(tmp_path: Path):
    path = tmp_path / "tools.snapshot.v1.json"
    path.write_text('{"tools": []}', encoding="utf-8")
    with pytest.raises(RegistryFileError, match="not a valid snapshot"):
        read_snapshot(path)


def test_missing_sidecar_is_reported(tmp_path: Path):
    with pytest.raises(RegistryFileError, match="file not found"):
        read_hash_sidecar(tmp_path / "missing.hash")


def test_load_snapshot_skips_hash_check(tmp_path: Path, snapshot):
    paths = write_snapshot(snapshot, tmp_path)
    document = json.loads(paths.snapshot.read_text(encoding="utf-8"))
    document["tools"] = []
    paths.snapshot.write_text(json.dumps(document), encoding="utf-8")
    assert load_snapshot(paths.snapshot).tools == []
