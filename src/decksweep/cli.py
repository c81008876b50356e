"""CLI interface for decksweep."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path

import click

from decksweep.core.choices import Operator
from decksweep.core.discovery import discover_roots, find_mounts
from decksweep.core.duplicates import DuplicateResolver
from decksweep.core.index import InstallationIndex
from decksweep.core.orphans import OrphanResolver
from decksweep.models.deletion_result import DeletionResult, DeletionStatus
from decksweep.models.findings import DuplicateFinding, OrphanFinding
from decksweep.models.library import RootKind, StorageRoot
from decksweep.settings import Settings
from decksweep.utils import bytes_to_human, dir_size, format_elapsed


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@dataclass(slots=True)
class _Locations:
    mount_parents: list[Path]
    internal_root: Path

    def mounts(self) -> list[Path]:
        return find_mounts(self.mount_parents)

    def roots(self, require_installations: bool = True) -> list[StorageRoot]:
        return discover_roots(self.mount_parents, self.internal_root, require_installations)


class ClickOperator(Operator):
    """Numbered terminal menu answered on stdin."""

    def choose(self, question: str, options: list[str]) -> str:
        click.echo()
        click.echo(question)
        for i, label in enumerate(options, 1):
            click.echo(f"  ({i}) {label}")
        click.echo("  (0) Skip")
        click.echo()
        return click.prompt(f"Enter your choice (0-{len(options)})", default="", show_default=False)


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: $XDG_CONFIG_HOME/decksweep/settings.json)",
)
@click.option(
    "--mount-parent",
    "mount_parents",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory whose subdirectories are external drives (repeatable)",
)
@click.option(
    "--internal-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Internal Steam directory (default: ~/.local/share/Steam)",
)
@click.version_option(package_name="decksweep")
@click.pass_context
def main(
    ctx: click.Context,
    verbose: int,
    config_path: Path | None,
    mount_parents: tuple[Path, ...],
    internal_root: Path | None,
) -> None:
    """decksweep: find duplicate Steam installs and orphaned manifests across drives."""
    _setup_logging(verbose)
    settings = Settings(config_path)
    ctx.obj = _Locations(
        mount_parents=list(mount_parents) or settings.mount_parents(),
        internal_root=internal_root or settings.internal_root(),
    )


def _echo_discovery(locations: _Locations, roots: list[StorageRoot]) -> None:
    mounts = locations.mounts()
    if not mounts:
        parents = " or ".join(str(p) for p in locations.mount_parents) or "(none configured)"
        click.echo(f"No external disks found under {parents}")
        click.echo("Proceeding with internal storage scan only...")
    else:
        click.echo(f"Found {len(mounts)} disk(s):")
        for mount in mounts:
            click.echo(f"  - {mount}")
    click.echo()

    for root in roots:
        label = "internal storage" if root.kind is RootKind.INTERNAL else f"external disk: {root.name}"
        click.echo(f"Scanning {label} (at {root.base_path})")
    if not any(r.kind is RootKind.INTERNAL for r in roots):
        click.echo(f"Internal Steam folder not found at: {locations.internal_root}")


def _finish(started: float) -> None:
    click.echo(f"\nScan complete in {format_elapsed(time.monotonic() - started)}.")


# ── roots ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def roots(locations: _Locations, as_json: bool) -> None:
    """List drives and which of them host a Steam library."""
    found = locations.roots()

    if as_json:
        data = [
            {
                "name": r.name,
                "kind": r.kind.value,
                "base_path": str(r.base_path),
                "installations_path": str(r.installations_path),
            }
            for r in found
        ]
        click.echo(json.dumps(data, indent=2))
        return

    library_bases = {r.base_path for r in found}
    for mount in locations.mounts():
        if mount in library_bases:
            click.echo(f"  {click.style('✓', fg='green')} {mount.name:25s} {mount}")
        else:
            click.echo(f"  {click.style('·', fg='bright_black')} {mount.name:25s} {click.style('no Steam library', fg='bright_black')}")

    internal = next((r for r in found if r.kind is RootKind.INTERNAL), None)
    if internal:
        click.echo(f"  {click.style('✓', fg='green')} {'internal':25s} {internal.base_path}")
    else:
        click.echo(f"  {click.style('✗', fg='bright_black')} {'internal':25s} {click.style('not found at ' + str(locations.internal_root), fg='bright_black')}")


# ── duplicates ───────────────────────────────────────────────────────────

def _format_duplicate(finding: DuplicateFinding) -> str:
    parts = []
    for loc in finding.locations:
        if loc.size_bytes is None:
            parts.append(f"({loc.root_name})")
        else:
            parts.append(f"({loc.root_name}) - {bytes_to_human(loc.size_bytes)}")
    return f"DUPLICATE: '{finding.name}' found on {finding.count} disk(s): " + ", ".join(parts)


def _echo_installation_result(result: DeletionResult) -> None:
    where = f" from {result.root_name}" if result.root_name else ""
    ok = click.style("✓", fg="green")
    bad = click.style("✗", fg="red")

    match result.status:
        case DeletionStatus.DRY_RUN:
            click.echo(f"  Would delete '{result.name}'{where}: {result.path}")
        case DeletionStatus.DIRECTORY_FAILED:
            click.echo(f"  {bad} Failed to delete '{result.name}'{where}: {'; '.join(result.errors)}")
        case _:
            click.echo(f"  {ok} Successfully deleted '{result.name}'{where}")
            if result.status is DeletionStatus.DELETED:
                click.echo(f"  {ok} Removed manifest {result.manifest_path}")
            elif result.status is DeletionStatus.MANIFEST_FAILED:
                click.echo(f"  {bad} Failed to delete manifest: {'; '.join(result.errors)}")
            else:
                click.echo(
                    f"  {click.style('!', fg='yellow')} No manifest with installdir '{result.name}' found; "
                    "the library may need manual correction"
                )


def _result_json(result: DeletionResult) -> dict:
    return {
        "name": result.name,
        "root": result.root_name,
        "path": str(result.path),
        "status": result.status.value,
        "manifest_path": str(result.manifest_path) if result.manifest_path else None,
        "freed_bytes": result.freed_bytes,
        "errors": result.errors,
    }


@main.command()
@click.option("--delete", is_flag=True, help="Interactively delete duplicate installations")
@click.option("--no-sizes", is_flag=True, help="Skip size calculation for faster scanning")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def duplicates(locations: _Locations, delete: bool, no_sizes: bool, dry_run: bool, as_json: bool) -> None:
    """Find games installed on more than one drive."""
    if as_json and delete and not dry_run:
        raise click.UsageError("--json cannot be combined with --delete (use --dry-run)")

    started = time.monotonic()
    found = locations.roots()
    if not as_json:
        click.echo("Scanning for duplicate game installations across disks and internal storage...")
        click.echo("=" * 74)
        _echo_discovery(locations, found)

    index = InstallationIndex.build(found, measure=None if no_sizes else dir_size)
    resolver = DuplicateResolver(index)

    if as_json:
        report = resolver.resolve(dry_run=dry_run)
        data = {
            "status": "dry_run" if dry_run else "scanned",
            "findings": [
                {
                    "name": f.name,
                    "locations": [
                        {"root": loc.root_name, "path": str(loc.path), "size_bytes": loc.size_bytes}
                        for loc in f.locations
                    ],
                }
                for f in report.findings
            ],
            "results": [_result_json(r) for r in report.results],
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("\nResults:")
    click.echo("========")

    def on_skip(name: str, reason: str) -> None:
        if reason == "invalid":
            click.echo(f"Invalid choice. Skipping deletion of '{name}'")
        else:
            click.echo(f"Skipped deletion of '{name}'")

    report = resolver.resolve(
        operator=ClickOperator() if delete and not dry_run else None,
        dry_run=dry_run,
        on_finding=lambda f: click.echo(_format_duplicate(f)),
        on_result=_echo_installation_result,
        on_skip=on_skip,
    )

    if not report.findings:
        click.echo("No duplicate game installations found.")
    elif dry_run:
        click.echo("\n(dry run, nothing was deleted)")
    elif report.results:
        click.echo(
            f"\nDeleted {report.deleted_count} installation(s), "
            f"freed {click.style(bytes_to_human(report.freed_bytes), fg='green', bold=True)}"
        )
    _finish(started)


# ── orphans ──────────────────────────────────────────────────────────────

def _echo_orphan(finding: OrphanFinding) -> None:
    name = finding.display_name or ""
    click.echo(f"ORPHANED: '{name}' (App ID: {finding.app_id}) on {finding.root_name}")
    click.echo(f"  File: {finding.file_path}")


def _echo_orphan_result(result: DeletionResult) -> None:
    match result.status:
        case DeletionStatus.DRY_RUN:
            click.echo(f"  Would delete orphaned .acf file: {result.path}")
        case DeletionStatus.DELETED:
            click.echo(f"    {click.style('✓', fg='green')} Orphaned .acf file deleted successfully")
        case _:
            click.echo(f"    {click.style('✗', fg='red')} Failed to delete orphaned .acf file: {'; '.join(result.errors)}")


@main.command()
@click.option("--delete", is_flag=True, help="Interactively delete orphaned .acf files")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def orphans(locations: _Locations, delete: bool, dry_run: bool, as_json: bool) -> None:
    """Find app manifests whose game directory no longer exists."""
    if as_json and delete and not dry_run:
        raise click.UsageError("--json cannot be combined with --delete (use --dry-run)")

    started = time.monotonic()
    found = locations.roots(require_installations=False)
    resolver = OrphanResolver(found)

    if as_json:
        report = resolver.resolve(dry_run=dry_run)
        data = {
            "status": "dry_run" if dry_run else "scanned",
            "manifests_checked": report.manifests_checked,
            "findings": [
                {
                    "app_id": f.app_id,
                    "name": f.display_name,
                    "root": f.root_name,
                    "file": str(f.file_path),
                }
                for f in report.findings
            ],
            "results": [_result_json(r) for r in report.results],
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("Scanning for orphaned Steam .acf files...")
    click.echo("=" * 41)
    _echo_discovery(locations, found)
    click.echo()

    def on_skip(finding: OrphanFinding, reason: str) -> None:
        prefix = "Invalid choice. Skipping" if reason == "invalid" else "Skipped"
        click.echo(f"{prefix} deletion of orphaned .acf file for '{finding.display_name or finding.app_id}'")

    report = resolver.resolve(
        operator=ClickOperator() if delete and not dry_run else None,
        dry_run=dry_run,
        on_finding=_echo_orphan,
        on_result=_echo_orphan_result,
        on_skip=on_skip,
    )

    if not report.findings:
        click.echo(f"No orphaned .acf files found ({report.manifests_checked} manifest(s) checked).")
    else:
        click.echo(f"\nFound {len(report.findings)} orphaned .acf file(s), deleted {report.deleted_count}.")
    _finish(started)
