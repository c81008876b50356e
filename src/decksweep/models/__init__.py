"""decksweep data models."""

from decksweep.models.library import InstallationEntry, ManifestRecord, RootKind, StorageRoot
from decksweep.models.findings import DuplicateFinding, DuplicateLocation, OrphanFinding
from decksweep.models.deletion_result import DeletionResult, DeletionStatus

__all__ = [
    "DeletionResult",
    "DeletionStatus",
    "DuplicateFinding",
    "DuplicateLocation",
    "InstallationEntry",
    "ManifestRecord",
    "OrphanFinding",
    "RootKind",
    "StorageRoot",
]
