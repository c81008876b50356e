"""Steam app manifest reading."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

from decksweep.models.library import ManifestRecord, StorageRoot

log = logging.getLogger(__name__)

MANIFEST_GLOB = "appmanifest_*.acf"

_FILENAME_RE = re.compile(r"^appmanifest_(\d+)\.acf$")
_PREFIX = "appmanifest_"


def _field_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf'"{re.escape(key)}"\s*"([^"]*)"')


_NAME_RE = _field_pattern("name")
_INSTALLDIR_RE = _field_pattern("installdir")


def app_id_from_filename(path: Path) -> str:
    """Extract the app id from ``appmanifest_<digits>.acf``.

    Names that don't follow the pattern keep whatever sits between the
    prefix and the extension.
    """
    match = _FILENAME_RE.match(path.name)
    if match:
        return match.group(1)
    stem = path.stem
    return stem[len(_PREFIX):] if stem.startswith(_PREFIX) else stem


def extract_field(text: str, key: str) -> str | None:
    """Return the value of the first ``"key" "value"`` pair, or None.

    An empty value is treated the same as a missing key.
    """
    pattern = {"name": _NAME_RE, "installdir": _INSTALLDIR_RE}.get(key) or _field_pattern(key)
    match = pattern.search(text)
    if match is None or not match.group(1):
        return None
    return match.group(1)


def read_manifest(path: Path, root: StorageRoot) -> ManifestRecord:
    """Parse one manifest file.

    Raises:
        OSError: The file could not be read.
    """
    text = path.read_text(encoding="utf-8", errors="replace")
    install_dir = extract_field(text, "installdir")
    display_name = extract_field(text, "name") or install_dir
    return ManifestRecord(
        app_id=app_id_from_filename(path),
        display_name=display_name,
        install_dir=install_dir,
        source_root=root,
        file_path=path,
    )


def read_install_dir(path: Path) -> str | None:
    """Read only the ``installdir`` field of a manifest.

    Raises:
        OSError: The file could not be read.
    """
    return extract_field(path.read_text(encoding="utf-8", errors="replace"), "installdir")


def iter_manifest_files(library_path: Path) -> Iterator[Path]:
    """Yield manifest files in a library directory, sorted by name."""
    try:
        candidates = sorted(library_path.glob(MANIFEST_GLOB))
    except OSError:
        log.warning("Cannot list manifests in %s", library_path)
        return
    for path in candidates:
        if path.is_file():
            yield path
