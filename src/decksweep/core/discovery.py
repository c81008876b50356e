"""Storage root discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from decksweep.models.library import RootKind, StorageRoot

log = logging.getLogger(__name__)

INTERNAL_ROOT_NAME = "internal"


def find_mounts(mount_parents: Iterable[Path]) -> list[Path]:
    """List immediate subdirectories of each mount parent, in declared order."""
    mounts: list[Path] = []
    for parent in mount_parents:
        if not parent.is_dir():
            log.info("Mount parent not present: %s", parent)
            continue
        try:
            children = sorted(parent.iterdir())
        except OSError as exc:
            log.info("Cannot list mount parent %s: %s", parent, exc)
            continue
        mounts.extend(child for child in children if child.is_dir())
    return mounts


def _library_marker(root: StorageRoot, require_installations: bool) -> Path:
    return root.installations_path if require_installations else root.library_path


def discover_roots(
    mount_parents: Iterable[Path],
    internal_base: Path | None,
    require_installations: bool = True,
) -> list[StorageRoot]:
    """Find every storage root that hosts a Steam library.

    Searches in order: each mount parent's subdirectories (external
    roots), then the internal Steam directory.

    Args:
        mount_parents: Directories whose children are external drives.
        internal_base: Internal Steam directory, or None to skip it.
        require_installations: Only keep roots with ``steamapps/common``.
            Pass False to keep any root with ``steamapps``, so manifests
            on a library whose installations directory is gone can still
            be checked.
    """
    candidates = [StorageRoot(mount.name, mount, RootKind.EXTERNAL) for mount in find_mounts(mount_parents)]
    if internal_base is not None:
        candidates.append(StorageRoot(INTERNAL_ROOT_NAME, internal_base, RootKind.INTERNAL))

    roots: list[StorageRoot] = []
    for root in candidates:
        marker = _library_marker(root, require_installations)
        try:
            present = marker.is_dir()
        except OSError:
            present = False
        if present:
            roots.append(root)
            log.debug("Found library on %s (%s)", root.name, root.base_path)
        else:
            log.info("No Steam library on %s: %s not found", root.name, marker)

    log.info("Discovered %d storage root(s)", len(roots))
    return roots
