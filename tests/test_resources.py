"""
Tests for ghdeps.mirror.resources — placing mirrored resources in a project.

The mirror itself is mocked; these tests only cover what is copied where.
"""

from pathlib import Path
from unittest import mock

import pytest

from ghdeps.config.project import ResourcesConfig
from ghdeps.errors import ConfigurationError
from ghdeps.mirror.resources import ResourceSync, copy_directory


def _fill_mirror(cache_root: Path, subpath: str = "") -> Path:
    """Lay out a mirror for acme/assets with a `main/` tree."""
    mirror = cache_root / "resources" / "acme-assets"
    base = mirror / subpath if subpath else mirror
    (base / "main" / "lang").mkdir(parents=True)
    (base / "main" / "lang" / "en.json").write_text('{"hi": "hello"}')
    (base / "main" / ".gitignore").write_text("*.tmp\n")
    (mirror / ".git").mkdir(exist_ok=True)
    return mirror


@pytest.fixture
def fake_mirror():
    mirror = mock.MagicMock()
    return mirror


class TestPlace:

    def test_replaces_source_resources(self, tmp_path, cache_root, fake_mirror):
        _fill_mirror(cache_root)
        project = tmp_path / "app"
        stale = project / "src" / "main" / "resources" / "old.txt"
        stale.parent.mkdir(parents=True)
        stale.write_text("old")

        config = ResourcesConfig(repo_url="https://github.com/acme/assets")
        written = ResourceSync(fake_mirror, cache_root).place(project, config)

        dest = project / "src" / "main" / "resources"
        assert written == [dest]
        assert (dest / "lang" / "en.json").exists()
        assert not stale.exists()
        assert not (dest / ".gitignore").exists()

        path, ref = fake_mirror.synchronize.call_args.args
        assert path == cache_root / "resources" / "acme-assets"
        assert (ref.owner, ref.name, ref.branch) == ("acme", "assets", "main")

    def test_build_only_leaves_sources_alone(self, tmp_path, cache_root, fake_mirror):
        _fill_mirror(cache_root)
        project = tmp_path / "app"
        src = project / "src" / "main" / "resources"
        src.mkdir(parents=True)
        (src / "keep.txt").write_text("keep")

        config = ResourcesConfig(repo_url="https://github.com/acme/assets", build_only=True)
        written = ResourceSync(fake_mirror, cache_root).place(project, config)

        assert written == [project / "build" / "resources"]
        assert (project / "build" / "resources" / "lang" / "en.json").exists()
        assert (src / "keep.txt").exists()

    def test_subpath(self, tmp_path, cache_root, fake_mirror):
        _fill_mirror(cache_root, subpath="game/data")
        config = ResourcesConfig(repo_url="https://github.com/acme/assets", path="/game/data/")

        ResourceSync(fake_mirror, cache_root).place(tmp_path / "app", config)

        assert (tmp_path / "app" / "src" / "main" / "resources" / "lang" / "en.json").exists()

    def test_synchronizes_once_for_several_dirs(self, tmp_path, cache_root, fake_mirror):
        mirror = _fill_mirror(cache_root)
        (mirror / "test").mkdir()
        config = ResourcesConfig(
            repo_url="https://github.com/acme/assets",
            resource_dirs=["src/main/resources", "src/test/resources"],
        )

        written = ResourceSync(fake_mirror, cache_root).place(tmp_path / "app", config)

        assert len(written) == 2
        assert fake_mirror.synchronize.call_count == 1

    def test_unconfigured_repository(self, tmp_path, cache_root, fake_mirror):
        with pytest.raises(ConfigurationError):
            ResourceSync(fake_mirror, cache_root).place(tmp_path, ResourcesConfig())
        fake_mirror.synchronize.assert_not_called()

    def test_missing_source_directory(self, tmp_path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            copy_directory(tmp_path / "missing", tmp_path / "dest")

    def test_missing_source_keeps_existing_resources(self, tmp_path, cache_root, fake_mirror):
        _fill_mirror(cache_root)
        project = tmp_path / "app"
        existing = project / "src" / "main" / "resources" / "app.properties"
        existing.parent.mkdir(parents=True)
        existing.write_text("name=app")

        config = ResourcesConfig(repo_url="https://github.com/acme/assets", path="/wrong")
        with pytest.raises(ConfigurationError, match="does not exist"):
            ResourceSync(fake_mirror, cache_root).place(project, config)

        assert existing.read_text() == "name=app"

    def test_build_only_merges_several_dirs(self, tmp_path, cache_root, fake_mirror):
        mirror = _fill_mirror(cache_root)
        (mirror / "test").mkdir()
        (mirror / "test" / "fixture.txt").write_text("fixture")
        config = ResourcesConfig(
            repo_url="https://github.com/acme/assets",
            resource_dirs=["src/main/resources", "src/test/resources"],
            build_only=True,
        )
        project = tmp_path / "app"

        written = ResourceSync(fake_mirror, cache_root).place(project, config)

        build = project / "build" / "resources"
        assert written == [build]
        assert (build / "lang" / "en.json").exists()
        assert (build / "fixture.txt").read_text() == "fixture"
