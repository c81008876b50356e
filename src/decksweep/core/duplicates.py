"""Duplicate installation detection and resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from decksweep.core.choices import Choice, Operator, decode_choice
from decksweep.core.deletion import delete_installation
from decksweep.core.index import InstallationIndex
from decksweep.models.deletion_result import DeletionResult, DeletionStatus
from decksweep.models.findings import DuplicateFinding
from decksweep.models.library import InstallationEntry
from decksweep.utils import bytes_to_human

log = logging.getLogger(__name__)

FindingCallback = Callable[[DuplicateFinding], None]
ResultCallback = Callable[[DeletionResult], None]
SkipCallback = Callable[[str, str], None]  # (name, reason)
InstallationDeleter = Callable[[Path, str, "int | None", str], DeletionResult]


@dataclass(slots=True)
class DuplicateReport:
    """Everything a duplicate run found and did.

    ``findings`` holds one snapshot per duplicated name, taken before any
    deletion.  Reduced location lists after a partial deletion are only
    passed to ``on_finding``.
    """

    findings: list[DuplicateFinding] = field(default_factory=list)
    results: list[DeletionResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def freed_bytes(self) -> int:
        return sum(r.freed_bytes for r in self.results if r.directory_removed)

    @property
    def deleted_count(self) -> int:
        return sum(1 for r in self.results if r.directory_removed)


def location_label(entry: InstallationEntry) -> str:
    """Menu text for one location, e.g. ``SD - 10.0 GB``."""
    if entry.size_bytes is None:
        return entry.root.name
    return f"{entry.root.name} - {bytes_to_human(entry.size_bytes)}"


class DuplicateResolver:
    """Reports duplicated installations and optionally removes copies.

    Three modes share one traversal:

    * report only (no operator): findings are emitted, nothing changes;
    * dry run: every location gets a ``DRY_RUN`` result, the deleter is
      never called and no operator is consulted;
    * interactive: the operator picks copies to delete one at a time
      until a single copy remains or they skip.
    """

    def __init__(self, index: InstallationIndex, deleter: InstallationDeleter = delete_installation) -> None:
        self.index = index
        self._deleter = deleter

    def findings(self) -> list[DuplicateFinding]:
        """Current duplicate findings without resolving anything."""
        return [self.index.finding(name) for name in self.index.duplicates()]

    def resolve(
        self,
        operator: Operator | None = None,
        dry_run: bool = False,
        on_finding: FindingCallback | None = None,
        on_result: ResultCallback | None = None,
        on_skip: SkipCallback | None = None,
    ) -> DuplicateReport:
        """Walk every duplicated name in sorted order.

        Args:
            operator: Answers deletion prompts.  None means report only.
            dry_run: Report what would be deleted instead of deleting.
            on_finding: Fired for each finding, and again with the reduced
                location list after a deletion that leaves two or more copies.
            on_result: Fired after every (real or dry-run) deletion.
            on_skip: Fired when the operator skips a name or gives
                invalid input; reason is ``"skip"`` or ``"invalid"``.
        """
        report = DuplicateReport()

        for name in self.index.duplicates():
            finding = self.index.finding(name)
            report.findings.append(finding)
            if on_finding:
                on_finding(finding)

            if dry_run:
                self._dry_run(name, report, on_result)
            elif operator is not None:
                self._resolve_interactively(name, operator, report, on_finding, on_result, on_skip)

        return report

    def _dry_run(self, name: str, report: DuplicateReport, on_result: ResultCallback | None) -> None:
        for entry in self.index.get(name):
            result = DeletionResult(
                name=name,
                path=entry.path,
                status=DeletionStatus.DRY_RUN,
                root_name=entry.root.name,
                freed_bytes=entry.size_bytes or 0,
            )
            report.results.append(result)
            if on_result:
                on_result(result)

    def _resolve_interactively(
        self,
        name: str,
        operator: Operator,
        report: DuplicateReport,
        on_finding: FindingCallback | None,
        on_result: ResultCallback | None,
        on_skip: SkipCallback | None,
    ) -> None:
        while True:
            entries = self.index.get(name)
            if len(entries) < 2:
                return

            raw = operator.choose(
                f"Would you like to delete '{name}' on disk:",
                [location_label(e) for e in entries],
            )
            choice = decode_choice(raw, len(entries))
            if isinstance(choice, Choice):
                if choice is Choice.INVALID:
                    log.info("Invalid choice %r for '%s', leaving it alone", raw, name)
                report.skipped.append(name)
                if on_skip:
                    on_skip(name, choice.value)
                return

            entry = entries[choice]
            result = self._deleter(entry.path, name, entry.size_bytes, entry.root.name)
            report.results.append(result)
            if on_result:
                on_result(result)

            # A failed directory removal keeps the location in the menu
            if not result.directory_removed:
                continue

            self.index.remove(entry)
            if len(self.index.get(name)) >= 2 and on_finding:
                on_finding(self.index.finding(name))
