from __future__ import annotations

from pathlib import Path

import pytest

from depbump.core.locator import locate_manifest
from depbump.exceptions import ManifestNotFoundError


@pytest.mark.unit
class TestLocateManifest:
    """Tests for locate_manifest."""

    def test_explicit_file(self, tmp_path: Path) -> None:
        manifest = tmp_path / "custom.json"
        manifest.write_text("{}")

        assert locate_manifest(manifest) == manifest.resolve()

    def test_explicit_file_as_string(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text("{}")

        assert locate_manifest(str(manifest)) == manifest.resolve()

    def test_directory_containing_manifest(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text("{}")

        assert locate_manifest(tmp_path) == manifest.resolve()

    def test_searches_parent_directories(self, tmp_path: Path) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text("{}")
        nested = tmp_path / "src" / "components"
        nested.mkdir(parents=True)

        assert locate_manifest(nested) == manifest.resolve()

    def test_closest_manifest_wins(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")
        inner = tmp_path / "packages" / "web"
        inner.mkdir(parents=True)
        (inner / "package.json").write_text("{}")

        assert locate_manifest(inner) == (inner / "package.json").resolve()

    def test_defaults_to_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        manifest = tmp_path / "package.json"
        manifest.write_text("{}")
        monkeypatch.chdir(tmp_path)

        assert locate_manifest() == manifest.resolve()

    def test_missing_start_path(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope.json"

        with pytest.raises(ManifestNotFoundError) as exc_info:
            locate_manifest(missing)

        assert exc_info.value.message == f"Unable to find {missing}"
        assert exc_info.value.search_root == str(missing)

    def test_nothing_found(self, tmp_path: Path) -> None:
        file_name = "depbump-locator-test.json"

        with pytest.raises(ManifestNotFoundError) as exc_info:
            locate_manifest(tmp_path, file_name=file_name)

        message = exc_info.value.message
        assert message.startswith(f"Unable to find {file_name} in {tmp_path.resolve()}")
        assert message.endswith("or any of its parent directories")

    def test_directory_named_like_manifest_is_skipped(self, tmp_path: Path) -> None:
        file_name = "depbump-locator-dir.json"
        (tmp_path / file_name).mkdir()

        with pytest.raises(ManifestNotFoundError):
            locate_manifest(tmp_path, file_name=file_name)
