"""Finding dataclasses emitted by the resolvers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class DuplicateLocation:
    root_name: str
    path: Path
    size_bytes: int | None = None


@dataclass(slots=True)
class DuplicateFinding:
    """An installation name present under two or more roots.

    ``locations`` is in root discovery order; its position + 1 is the
    number the operator sees in the deletion menu.
    """

    name: str
    locations: list[DuplicateLocation] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.locations)


@dataclass(frozen=True, slots=True)
class OrphanFinding:
    """A manifest whose install directory does not exist."""

    app_id: str
    display_name: str | None
    file_path: Path
    root_name: str
