"""CLI for the tools registry pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer

from toolsreg.aggregate import aggregate
from toolsreg.config import PipelineSettings, resolve_settings
from toolsreg.domain.models import SortMode, ToolQuery
from toolsreg.errors import RegistryError
from toolsreg.io.snapshot import SnapshotPaths, snapshot_paths, write_snapshot
from toolsreg.logging import configure_logging, get_logger
from toolsreg.taxonomy import TaxonomyStore, load_taxonomy
from toolsreg.usecases.list_categories import list_live_categories
from toolsreg.usecases.search_tools import search_tools
from toolsreg.usecases.verify_snapshot import load_verified_snapshot, verify_snapshot
from toolsreg.validation import ValidationReport, validate_registry

EXIT_VALIDATION_FAILED = 1
EXIT_FATAL = 2

app = typer.Typer(help="Tools registry validation and snapshot pipeline")
logger = get_logger("cli")

ConfigOption = typer.Option(None, "--config", help="Path to toolsreg.yml")
RegistryOption = typer.Option(None, "--registry", help="Registry root directory (overrides config)")
OutOption = typer.Option(None, "--out", help="Snapshot output directory (overrides config)")
SnapshotOption = typer.Option(None, "--snapshot", help="Snapshot file (default: derived from the taxonomy)")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    configure_logging(verbose=verbose)


@app.command()
def validate(
    config: Optional[Path] = ConfigOption,
    registry: Optional[Path] = RegistryOption,
    show_unused: bool = typer.Option(False, "--show-unused", help="Report vocabulary tokens no tool references"),
) -> None:
    """Check every category file against the schema and the taxonomy."""
    with _fatal_errors():
        settings = resolve_settings(config, registry=registry)
        taxonomy = load_taxonomy(settings.registry_root)
        report = _run_validation(settings, taxonomy)
    if show_unused:
        for kind, tokens in report.unused_tokens.items():
            for token in tokens:
                typer.echo(f"WARNING unused {kind} token: {token}", err=True)
    if not report.ok:
        raise typer.Exit(EXIT_VALIDATION_FAILED)


@app.command(name="aggregate")
def aggregate_command(
    config: Optional[Path] = ConfigOption,
    registry: Optional[Path] = RegistryOption,
    out: Optional[Path] = OutOption,
    strict: bool = typer.Option(False, "--strict", help="Refuse to aggregate when validation fails"),
) -> None:
    """Merge all category files into the snapshot and its hash sidecar."""
    _aggregate(config, registry, out, strict=strict)


@app.command()
def build(
    config: Optional[Path] = ConfigOption,
    registry: Optional[Path] = RegistryOption,
    out: Optional[Path] = OutOption,
) -> None:
    """Validate, then aggregate only if validation passes."""
    _aggregate(config, registry, out, strict=True)


@app.command()
def verify(
    config: Optional[Path] = ConfigOption,
    registry: Optional[Path] = RegistryOption,
    out: Optional[Path] = OutOption,
    snapshot: Optional[Path] = SnapshotOption,
) -> None:
    """Recompute a written snapshot's hash and compare it with the recorded ones."""
    with _fatal_errors():
        paths = _resolve_snapshot_paths(config, registry, out, snapshot)
        hash_path = paths.hash if paths.hash.exists() else None
        result = verify_snapshot(paths.snapshot, hash_path)
    if not result.ok:
        for problem in result.problems:
            typer.echo(f"ERROR: {problem}", err=True)
        typer.echo("Snapshot verification failed!", err=True)
        raise typer.Exit(EXIT_VALIDATION_FAILED)
    typer.echo(f"Snapshot {paths.snapshot} verified (hash {result.computed_hash})")
    if hash_path is None:
        typer.echo(f"No hash sidecar found at {paths.hash}")


@app.command()
def tools(
    config: Optional[Path] = ConfigOption,
    registry: Optional[Path] = RegistryOption,
    out: Optional[Path] = OutOption,
    snapshot: Optional[Path] = SnapshotOption,
    category: Optional[str] = typer.Option(None, "--category", help="Only tools in this category"),
    capability: Optional[List[str]] = typer.Option(None, "--capability", help="Require a capability (repeatable)"),
    query: str = typer.Option("", "--query", "-q", help="Search name, vendor and description"),
    sort: SortMode = typer.Option(SortMode.name, "--sort", help="Sort order"),
) -> None:
    """List tools from the written snapshot."""
    with _fatal_errors():
        paths = _resolve_snapshot_paths(config, registry, out, snapshot)
        loaded = load_verified_snapshot(paths.snapshot)
    tool_query = ToolQuery(category=category, capabilities=list(capability or []), q=query, sort=sort)
    for tool in search_tools(loaded, tool_query):
        typer.echo(f"{tool.name} ({tool.id}) [{tool.category}]")


@app.command()
def categories(
    config: Optional[Path] = ConfigOption,
    registry: Optional[Path] = RegistryOption,
    out: Optional[Path] = OutOption,
    snapshot: Optional[Path] = SnapshotOption,
) -> None:
    """List live categories with their tool counts."""
    with _fatal_errors():
        paths = _resolve_snapshot_paths(config, registry, out, snapshot)
        loaded = load_verified_snapshot(paths.snapshot)
    for category in list_live_categories(loaded):
        typer.echo(f"{category.slug}: {category.name} ({category.count})")


def _aggregate(config: Optional[Path], registry: Optional[Path], out: Optional[Path], *, strict: bool) -> None:
    with _fatal_errors():
        settings = resolve_settings(config, registry=registry, out=out)
        taxonomy = load_taxonomy(settings.registry_root)
        if strict:
            report = _run_validation(settings, taxonomy)
            if not report.ok:
                typer.echo("Snapshot not written: validation failed.", err=True)
                raise typer.Exit(EXIT_VALIDATION_FAILED)
        typer.echo("Generating tools registry snapshot...")
        snapshot = aggregate(taxonomy, settings.registry_root)
        paths = write_snapshot(
            snapshot,
            settings.output_dir,
            snapshot_filename=settings.snapshot_filename,
            hash_filename=settings.hash_filename,
        )
    counts = snapshot.integrity.counts
    typer.echo(f"Snapshot written to {paths.snapshot}")
    typer.echo(f"Hash written to {paths.hash}")
    typer.echo(f"Tools: {counts.tools}")
    typer.echo(f"Categories: {counts.categories}")
    typer.echo(f"Capabilities: {counts.capabilities}")


def _run_validation(settings: PipelineSettings, taxonomy: TaxonomyStore) -> ValidationReport:
    typer.echo("Validating tools registry...")
    report = validate_registry(
        taxonomy,
        settings.registry_root,
        default_min_tools=settings.default_min_tools,
        global_unique_ids=settings.global_unique_ids,
    )
    for violation in report.violations:
        typer.echo(violation.render(), err=True)
    if report.ok:
        typer.echo("Validation passed!")
    else:
        typer.echo(f"\nValidation failed! ({len(report.violations)} errors)", err=True)
    return report


def _resolve_snapshot_paths(
    config: Optional[Path],
    registry: Optional[Path],
    out: Optional[Path],
    snapshot: Optional[Path],
) -> SnapshotPaths:
    settings = resolve_settings(config, registry=registry, out=out)
    if snapshot is not None:
        return SnapshotPaths(snapshot=snapshot, hash=snapshot.with_suffix(".hash"))
    taxonomy = load_taxonomy(settings.registry_root)
    return snapshot_paths(
        settings.output_dir,
        taxonomy.schema_version,
        snapshot_filename=settings.snapshot_filename,
        hash_filename=settings.hash_filename,
    )


@contextmanager
def _fatal_errors() -> Iterator[None]:
    try:
        yield
    except RegistryError as exc:
        logger.debug("Fatal pipeline error", exc_info=True)
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(EXIT_FATAL) from exc


if __name__ == "__main__":
    app()
