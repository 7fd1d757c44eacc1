"""
Tests for ghdeps.models — repository references and dependency coordinates.
"""

from pathlib import Path

import pytest

from ghdeps.errors import ConfigurationError
from ghdeps.models.dependency import DependencyDescriptor, PlannedUpdate
from ghdeps.models.repository import RepositoryRef, parse_owner_and_name


class TestRepositoryRef:
    """Owner/name parsing for HTTPS and SSH URL forms."""

    def test_https_url(self):
        ref = RepositoryRef.parse("https://github.com/acme/tools", "main")
        assert (ref.owner, ref.name, ref.branch) == ("acme", "tools", "main")
        assert ref.source_url == "https://github.com/acme/tools"

    def test_ssh_url(self):
        ref = RepositoryRef.parse("git@github.com:acme/tools.git")
        assert (ref.owner, ref.name) == ("acme", "tools")

    @pytest.mark.parametrize("url", [
        "https://github.com/acme/tools.git",
        "https://github.com/acme/tools/",
        "ssh://git@github.com/acme/tools.git",
    ])
    def test_variants(self, url):
        assert parse_owner_and_name(url) == ("acme", "tools")

    @pytest.mark.parametrize("url", [None, "", "https://github.com/acme", "git@github.com:"])
    def test_unconfigured(self, url):
        with pytest.raises(ConfigurationError, match="not configured properly"):
            RepositoryRef.parse(url)

    def test_mirror_path(self, tmp_path: Path):
        ref = RepositoryRef(owner="acme", name="tools")
        assert ref.mirror_path(tmp_path) == tmp_path / "resources" / "acme-tools"
        assert ref.slug == "acme/tools"

    def test_empty_branch_means_current(self):
        assert RepositoryRef.parse("https://github.com/acme/tools", "").branch is None


class TestDependencyDescriptor:
    def test_parse_with_version(self):
        dep = DependencyDescriptor.parse("acme:tools:1.2.0")
        assert dep == DependencyDescriptor("acme", "tools", "1.2.0")
        assert dep.owner == "acme"
        assert str(dep) == "acme:tools:1.2.0"

    def test_parse_without_version(self):
        dep = DependencyDescriptor.parse("acme:tools")
        assert dep.version is None
        assert dep.coordinate == "acme:tools"

    @pytest.mark.parametrize("coordinate", ["acme", "acme::1.0", "a:b:c:d", ""])
    def test_parse_invalid(self, coordinate):
        with pytest.raises(ConfigurationError):
            DependencyDescriptor.parse(coordinate)

    def test_planned_update_strings(self):
        update = PlannedUpdate(DependencyDescriptor("acme", "tools", "1.2.0"), "1.2.0", "1.3.0")
        assert update.search == "acme:tools:1.2.0"
        assert update.replacement == "acme:tools:1.3.0"
