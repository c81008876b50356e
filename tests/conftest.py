"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from decksweep.core.choices import Operator
from decksweep.models.library import RootKind, StorageRoot

ACF_TEMPLATE = """"AppState"
{{
\t"appid"\t\t"{app_id}"
\t"Universe"\t\t"1"
{fields}\t"StateFlags"\t\t"4"
\t"LastUpdated"\t\t"1700000000"
}}
"""


def write_manifest(
    base: Path,
    app_id: str,
    installdir: str | None = None,
    name: str | None = None,
) -> Path:
    """Write ``steamapps/appmanifest_<app_id>.acf`` under a Steam base directory."""
    library = base / "steamapps"
    library.mkdir(parents=True, exist_ok=True)
    fields = ""
    if name is not None:
        fields += f'\t"name"\t\t"{name}"\n'
    if installdir is not None:
        fields += f'\t"installdir"\t\t"{installdir}"\n'
    path = library / f"appmanifest_{app_id}.acf"
    path.write_text(ACF_TEMPLATE.format(app_id=app_id, fields=fields), encoding="utf-8")
    return path


def add_game(base: Path, name: str, size: int = 64) -> Path:
    """Create ``steamapps/common/<name>`` with one data file of *size* bytes."""
    game = base / "steamapps" / "common" / name
    game.mkdir(parents=True, exist_ok=True)
    (game / "data.pak").write_bytes(b"x" * size)
    return game


@dataclass
class SteamLayout:
    """A fake machine: a mount parent with drives plus an internal Steam dir."""

    mount_parent: Path
    internal_base: Path

    def drive(self, name: str, library: bool = True) -> Path:
        base = self.mount_parent / name
        base.mkdir(parents=True, exist_ok=True)
        if library:
            (base / "steamapps" / "common").mkdir(parents=True, exist_ok=True)
        return base

    def internal(self) -> Path:
        (self.internal_base / "steamapps" / "common").mkdir(parents=True, exist_ok=True)
        return self.internal_base

    def root(self, name: str) -> StorageRoot:
        if name == "internal":
            return StorageRoot("internal", self.internal_base, RootKind.INTERNAL)
        return StorageRoot(name, self.mount_parent / name, RootKind.EXTERNAL)


@pytest.fixture
def layout(tmp_path):
    """Empty fake machine rooted in tmp_path."""
    mount_parent = tmp_path / "run" / "media" / "deck"
    mount_parent.mkdir(parents=True)
    return SteamLayout(mount_parent=mount_parent, internal_base=tmp_path / "home" / ".local" / "share" / "Steam")


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    """Keep tests away from the real settings file and data dirs."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


@dataclass
class ScriptedOperator(Operator):
    """Operator that replays canned answers and records every question."""

    answers: list[str]
    questions: list[tuple[str, list[str]]] = field(default_factory=list)

    def choose(self, question: str, options: list[str]) -> str:
        self.questions.append((question, list(options)))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {question}")
        return self.answers.pop(0)


@pytest.fixture
def scripted():
    """Factory for ScriptedOperator instances."""
    return lambda *answers: ScriptedOperator(list(answers))
