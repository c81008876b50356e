"""Storage roots and the things found on them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

LIBRARY_DIR = "steamapps"
INSTALLATIONS_DIR = "common"


class RootKind(enum.Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass(frozen=True, slots=True)
class StorageRoot:
    """One storage location hosting a Steam library.

    ``base_path`` is the mount (or the internal Steam directory); the
    manifests live in ``library_path`` and the installed titles in
    ``installations_path``.
    """

    name: str
    base_path: Path
    kind: RootKind = RootKind.EXTERNAL

    @property
    def library_path(self) -> Path:
        return self.base_path / LIBRARY_DIR

    @property
    def installations_path(self) -> Path:
        return self.library_path / INSTALLATIONS_DIR


@dataclass(frozen=True, slots=True)
class InstallationEntry:
    """Single installation directory found under a root."""

    name: str
    root: StorageRoot
    path: Path
    size_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class ManifestRecord:
    """Fields read from one ``appmanifest_<id>.acf`` file."""

    app_id: str
    display_name: str | None
    install_dir: str | None
    source_root: StorageRoot
    file_path: Path

    @property
    def is_resolvable(self) -> bool:
        """Whether the manifest names an install directory at all."""
        return self.install_dir is not None
