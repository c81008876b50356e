"""Deletion result dataclass."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path


class DeletionStatus(enum.Enum):
    DELETED = "deleted"
    MANIFEST_NOT_FOUND = "manifest_not_found"
    MANIFEST_FAILED = "manifest_failed"
    DIRECTORY_FAILED = "directory_failed"
    DRY_RUN = "dry_run"


@dataclass(slots=True)
class DeletionResult:
    """Outcome of removing an installation and/or its manifest.

    ``path`` is the installation directory for duplicate deletions and
    the manifest file for orphan deletions.
    """

    name: str
    path: Path
    status: DeletionStatus
    root_name: str = ""
    manifest_path: Path | None = None
    freed_bytes: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (
            DeletionStatus.DELETED,
            DeletionStatus.MANIFEST_NOT_FOUND,
            DeletionStatus.DRY_RUN,
        )

    @property
    def directory_removed(self) -> bool:
        """True when the installation directory is gone after this deletion."""
        return self.status in (
            DeletionStatus.DELETED,
            DeletionStatus.MANIFEST_NOT_FOUND,
            DeletionStatus.MANIFEST_FAILED,
        )
