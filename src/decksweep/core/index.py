"""Installation index: installation name to locations across roots."""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Iterator

from decksweep.models.library import InstallationEntry, StorageRoot
from decksweep.models.findings import DuplicateFinding, DuplicateLocation

log = logging.getLogger(__name__)

SizeFunction = Callable[[Path], "int | None"]

_MAX_WORKERS = 4


class InstallationIndex:
    """Maps installation names to their locations in root discovery order.

    Built once per scan by :meth:`build`.  After that the only way to
    change it is :meth:`remove`, which the duplicate deletion flow calls
    after an installation directory has been deleted.
    """

    def __init__(self, entries: Iterable[InstallationEntry] = ()) -> None:
        self._entries: dict[str, list[InstallationEntry]] = {}
        for entry in entries:
            self._entries.setdefault(entry.name, []).append(entry)

    @classmethod
    def build(cls, roots: Iterable[StorageRoot], measure: SizeFunction | None = None) -> InstallationIndex:
        """Index every installation directory under the given roots.

        Args:
            roots: Storage roots in discovery order.
            measure: Optional size function.  Only duplicated
                installations are measured since nothing else is ever
                reported.
        """
        index = cls(entry for root in roots for entry in _list_installations(root))
        if measure is not None:
            index._measure_duplicates(measure)
        log.info("Indexed %d installation name(s), %d duplicated", len(index), len(index.duplicates()))
        return index

    def get(self, name: str) -> tuple[InstallationEntry, ...]:
        """Locations of an installation, empty if the name is unknown."""
        return tuple(self._entries.get(name, ()))

    def names(self) -> list[str]:
        return list(self._entries)

    def duplicates(self) -> list[str]:
        """Names present under two or more roots, sorted."""
        return sorted(name for name, entries in self._entries.items() if len(entries) >= 2)

    def finding(self, name: str) -> DuplicateFinding:
        """Snapshot of the current locations of *name*."""
        return DuplicateFinding(
            name=name,
            locations=[DuplicateLocation(e.root.name, e.path, e.size_bytes) for e in self._entries.get(name, ())],
        )

    def remove(self, entry: InstallationEntry) -> None:
        """Drop one location; the name disappears with its last location."""
        entries = self._entries.get(entry.name)
        if not entries or entry not in entries:
            raise KeyError(f"{entry.name!r} is not indexed at {entry.path}")
        entries.remove(entry)
        if not entries:
            del self._entries[entry.name]

    def _measure_duplicates(self, measure: SizeFunction) -> None:
        """Fill in sizes for duplicated entries using a small thread pool.

        Results are written back by position so ordering is unchanged.
        """
        pending = [(name, i, entry) for name in self.duplicates() for i, entry in enumerate(self._entries[name])]
        if not pending:
            return

        def _measure(entry: InstallationEntry) -> int | None:
            try:
                return measure(entry.path)
            except OSError as exc:
                log.debug("Cannot measure %s: %s", entry.path, exc)
                return None

        with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(pending))) as executor:
            futures = [executor.submit(_measure, entry) for _, _, entry in pending]
            sizes = [future.result() for future in futures]

        for (name, i, entry), size in zip(pending, sizes):
            self._entries[name][i] = dataclasses.replace(entry, size_bytes=size)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries


def _list_installations(root: StorageRoot) -> list[InstallationEntry]:
    """Immediate subdirectories of a root's installations directory, sorted."""
    try:
        children = sorted(root.installations_path.iterdir())
    except OSError as exc:
        log.warning("Cannot list installations on %s: %s", root.name, exc)
        return []
    return [InstallationEntry(child.name, root, child) for child in children if child.is_dir()]
