"""Paired deletion of installation directories and their manifests."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from decksweep.core.manifest import iter_manifest_files, read_install_dir
from decksweep.models.deletion_result import DeletionResult, DeletionStatus

log = logging.getLogger(__name__)


def find_paired_manifest(installation_path: Path, name: str) -> Path | None:
    """Find the manifest whose ``installdir`` is *name*.

    Manifests sit in the parent of the installations directory
    (``steamapps/`` for ``steamapps/common/<name>``).  If several
    manifests declare the same install directory, the first one in
    sorted filename order wins.
    """
    manifest_dir = installation_path.parent.parent
    for manifest in iter_manifest_files(manifest_dir):
        try:
            install_dir = read_install_dir(manifest)
        except OSError as exc:
            log.warning("Cannot read manifest %s: %s", manifest, exc)
            continue
        if install_dir == name:
            return manifest
    return None


def delete_installation(
    installation_path: Path,
    name: str,
    size_bytes: int | None = None,
    root_name: str = "",
) -> DeletionResult:
    """Delete an installation directory and then its paired manifest.

    The manifest is looked up before anything is removed.  A failed
    directory removal stops here and the manifest is left alone.
    """
    manifest = find_paired_manifest(installation_path, name)
    result = DeletionResult(
        name=name,
        path=installation_path,
        status=DeletionStatus.DELETED,
        root_name=root_name,
        manifest_path=manifest,
    )

    try:
        # Linked game folders lose the link, never the target
        if installation_path.is_symlink():
            installation_path.unlink()
        else:
            shutil.rmtree(installation_path)
    except OSError as e:
        log.warning("Failed to delete %s: %s", installation_path, e)
        result.status = DeletionStatus.DIRECTORY_FAILED
        result.errors.append(f"{installation_path}: {e}")
        return result

    result.freed_bytes = size_bytes or 0
    log.info("Deleted installation directory %s", installation_path)

    if manifest is None:
        log.warning("No manifest with installdir %r next to %s", name, installation_path)
        result.status = DeletionStatus.MANIFEST_NOT_FOUND
        return result

    try:
        manifest.unlink()
    except OSError as e:
        log.warning("Failed to delete manifest %s: %s", manifest, e)
        result.status = DeletionStatus.MANIFEST_FAILED
        result.errors.append(f"{manifest}: {e}")
        return result

    log.info("Deleted manifest %s", manifest)
    return result


def delete_manifest(manifest_path: Path, name: str = "", root_name: str = "") -> DeletionResult:
    """Delete a single manifest file that has no installation behind it."""
    result = DeletionResult(
        name=name,
        path=manifest_path,
        status=DeletionStatus.DELETED,
        root_name=root_name,
        manifest_path=manifest_path,
    )
    try:
        manifest_path.unlink()
    except OSError as e:
        log.warning("Failed to delete manifest %s: %s", manifest_path, e)
        result.status = DeletionStatus.MANIFEST_FAILED
        result.errors.append(f"{manifest_path}: {e}")
        return result

    log.info("Deleted orphaned manifest %s", manifest_path)
    return result
