"""Orphaned manifest detection and resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator

from decksweep.core.choices import Choice, Operator, decode_choice
from decksweep.core.deletion import delete_manifest
from decksweep.core.manifest import iter_manifest_files, read_manifest
from decksweep.models.deletion_result import DeletionResult, DeletionStatus
from decksweep.models.findings import OrphanFinding
from decksweep.models.library import ManifestRecord, StorageRoot

log = logging.getLogger(__name__)

FindingCallback = Callable[[OrphanFinding], None]
ResultCallback = Callable[[DeletionResult], None]
SkipCallback = Callable[[OrphanFinding, str], None]  # (finding, reason)
ManifestDeleter = Callable[[Path, str, str], DeletionResult]


@dataclass(slots=True)
class OrphanReport:
    """Everything an orphan run found and did."""

    findings: list[OrphanFinding] = field(default_factory=list)
    results: list[DeletionResult] = field(default_factory=list)
    skipped: list[OrphanFinding] = field(default_factory=list)
    manifests_checked: int = 0

    @property
    def deleted_count(self) -> int:
        return sum(1 for r in self.results if r.status is DeletionStatus.DELETED)


def is_orphaned(record: ManifestRecord) -> bool:
    """A manifest is orphaned when its install directory is missing or undeclared."""
    if record.install_dir is None:
        return True
    return not (record.source_root.installations_path / record.install_dir).is_dir()


def _finding_for(record: ManifestRecord) -> OrphanFinding:
    return OrphanFinding(
        app_id=record.app_id,
        display_name=record.display_name,
        file_path=record.file_path,
        root_name=record.source_root.name,
    )


class OrphanResolver:
    """Finds manifests without an installation and optionally deletes them.

    Findings are independent of each other, so deleting one never changes
    whether another is orphaned and nothing has to be re-scanned.
    """

    def __init__(self, roots: Iterable[StorageRoot], deleter: ManifestDeleter = delete_manifest) -> None:
        self.roots = list(roots)
        self._deleter = deleter

    def records(self) -> Iterator[ManifestRecord]:
        """Read every manifest on every root, in root then filename order.

        Unreadable manifests are logged and skipped.
        """
        for root in self.roots:
            for path in iter_manifest_files(root.library_path):
                try:
                    yield read_manifest(path, root)
                except OSError as exc:
                    log.warning("Cannot read manifest %s: %s", path, exc)

    def find(self) -> list[OrphanFinding]:
        """All orphan findings without resolving anything."""
        return [_finding_for(r) for r in self.records() if is_orphaned(r)]

    def resolve(
        self,
        operator: Operator | None = None,
        dry_run: bool = False,
        on_finding: FindingCallback | None = None,
        on_result: ResultCallback | None = None,
        on_skip: SkipCallback | None = None,
    ) -> OrphanReport:
        """Report each orphan and, if asked, delete it right away.

        Args:
            operator: Answers delete/skip prompts.  None means report only.
            dry_run: Report what would be deleted instead of deleting.
            on_finding: Fired for each orphan, before any prompt for it.
            on_result: Fired after every (real or dry-run) deletion.
            on_skip: Fired when the operator skips or gives invalid input.
        """
        report = OrphanReport()

        for record in self.records():
            report.manifests_checked += 1
            if not is_orphaned(record):
                continue

            finding = _finding_for(record)
            report.findings.append(finding)
            if on_finding:
                on_finding(finding)

            if dry_run:
                result = DeletionResult(
                    name=finding.display_name or finding.app_id,
                    path=finding.file_path,
                    status=DeletionStatus.DRY_RUN,
                    root_name=finding.root_name,
                    manifest_path=finding.file_path,
                )
            elif operator is not None:
                result = self._ask(finding, operator, report, on_skip)
            else:
                continue

            if result is not None:
                report.results.append(result)
                if on_result:
                    on_result(result)

        return report

    def _ask(
        self,
        finding: OrphanFinding,
        operator: Operator,
        report: OrphanReport,
        on_skip: SkipCallback | None,
    ) -> DeletionResult | None:
        raw = operator.choose("Would you like to delete this orphaned .acf file?", ["Delete"])
        choice = decode_choice(raw, 1)
        if isinstance(choice, Choice):
            if choice is Choice.INVALID:
                log.info("Invalid choice %r for %s, leaving it alone", raw, finding.file_path)
            report.skipped.append(finding)
            if on_skip:
                on_skip(finding, choice.value)
            return None
        return self._deleter(finding.file_path, finding.display_name or finding.app_id, finding.root_name)
