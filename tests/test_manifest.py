"""Tests for manifest reading."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_manifest
from decksweep.core.manifest import (
    app_id_from_filename,
    extract_field,
    iter_manifest_files,
    read_install_dir,
    read_manifest,
)
from decksweep.models.library import RootKind, StorageRoot


@pytest.fixture
def root(tmp_path):
    return StorageRoot("SD", tmp_path, RootKind.EXTERNAL)


class TestAppId:
    def test_digits_from_filename(self):
        assert app_id_from_filename(Path("appmanifest_1091500.acf")) == "1091500"

    def test_leading_zeros_kept_verbatim(self):
        assert app_id_from_filename(Path("appmanifest_007.acf")) == "007"

    def test_non_numeric_falls_back_to_stem(self):
        assert app_id_from_filename(Path("appmanifest_beta.acf")) == "beta"


class TestExtractField:
    def test_first_match_wins(self):
        text = '"name"  "First"\n"UserConfig" { "name" "Second" }'
        assert extract_field(text, "name") == "First"

    def test_tab_separated(self):
        assert extract_field('\t"installdir"\t\t"Hades"\n', "installdir") == "Hades"

    def test_missing_key(self):
        assert extract_field('"appid" "10"', "installdir") is None

    def test_empty_value_is_absent(self):
        assert extract_field('"installdir" ""', "installdir") is None

    def test_keys_are_case_sensitive(self):
        assert extract_field('"InstallDir" "Hades"', "installdir") is None


class TestReadManifest:
    def test_full_record(self, tmp_path, root):
        path = write_manifest(tmp_path, "1145360", installdir="Hades", name="Hades")
        record = read_manifest(path, root)

        assert record.app_id == "1145360"
        assert record.display_name == "Hades"
        assert record.install_dir == "Hades"
        assert record.source_root is root
        assert record.file_path == path
        assert record.is_resolvable

    def test_display_name_falls_back_to_installdir(self, tmp_path, root):
        path = write_manifest(tmp_path, "500", installdir="GhostGame")
        record = read_manifest(path, root)
        assert record.display_name == "GhostGame"

    def test_missing_installdir(self, tmp_path, root):
        path = write_manifest(tmp_path, "501", name="Broken")
        record = read_manifest(path, root)
        assert record.install_dir is None
        assert record.display_name == "Broken"
        assert not record.is_resolvable

    def test_no_fields_at_all(self, tmp_path, root):
        path = write_manifest(tmp_path, "502")
        record = read_manifest(path, root)
        assert record.display_name is None
        assert record.install_dir is None

    def test_invalid_utf8_is_tolerated(self, tmp_path, root):
        path = tmp_path / "appmanifest_9.acf"
        path.write_bytes(b'"name" "Caf\xe9"\n"installdir" "Cafe"\n')
        record = read_manifest(path, root)
        assert record.install_dir == "Cafe"

    def test_missing_file_raises_oserror(self, tmp_path, root):
        with pytest.raises(OSError):
            read_manifest(tmp_path / "appmanifest_1.acf", root)

    def test_read_install_dir(self, tmp_path):
        path = write_manifest(tmp_path, "3", installdir="Celeste", name="Celeste")
        assert read_install_dir(path) == "Celeste"


class TestIterManifestFiles:
    def test_sorted_and_filtered(self, tmp_path):
        write_manifest(tmp_path, "20", installdir="B")
        write_manifest(tmp_path, "100", installdir="A")
        library = tmp_path / "steamapps"
        (library / "libraryfolders.vdf").write_text("{}")
        (library / "appmanifest_5.acf.tmp").write_text("")

        names = [p.name for p in iter_manifest_files(library)]
        assert names == ["appmanifest_100.acf", "appmanifest_20.acf"]

    def test_missing_directory_yields_nothing(self, tmp_path):
        assert list(iter_manifest_files(tmp_path / "nope")) == []

    def test_directories_are_skipped(self, tmp_path):
        library = tmp_path / "steamapps"
        (library / "appmanifest_1.acf").mkdir(parents=True)
        assert list(iter_manifest_files(library)) == []
