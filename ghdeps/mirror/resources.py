"""
Resource Sync — Copy content from a mirrored repository into a project.

For every resource directory of the project (e.g. `src/main/resources`)
the mirror's `<path>/<parent dir name>` subtree (e.g. `<path>/main`) is
copied into it, replacing what was there. With `build_only` the copy goes
to `<project>/build/resources` instead and the sources stay untouched.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from ..config.project import ResourcesConfig
from ..errors import ConfigurationError
from ..models.repository import RepositoryRef
from .repository import RepositoryMirror, SyncResult

logger = logging.getLogger(__name__)


def delete_directory(path: Path) -> None:
    """Remove a directory tree if it exists."""
    if path.is_dir():
        shutil.rmtree(path)


def copy_directory(source: Path, dest: Path) -> None:
    """Copy a directory tree, skipping git metadata."""
    if not source.is_dir():
        raise ConfigurationError(
            "Source directory does not exist or is not a directory", source=str(source),
        )
    shutil.copytree(
        source,
        dest,
        ignore=shutil.ignore_patterns(".git", ".gitattributes", ".gitignore"),
        dirs_exist_ok=True,
    )


class ResourceSync:
    """Synchronizes a resource mirror and places its content."""

    def __init__(self, mirror: RepositoryMirror, cache_root: Path):
        self.mirror = mirror
        self.cache_root = Path(cache_root)

    def place(self, project_dir: Path, resources: ResourcesConfig) -> List[Path]:
        """
        Sync the configured repository and copy resources into the project.

        Returns:
            The destination directories that were written
        """
        project_dir = Path(project_dir)
        ref = RepositoryRef.parse(resources.repo_url, resources.branch)
        mirror_path = ref.mirror_path(self.cache_root)

        result: SyncResult = self.mirror.synchronize(mirror_path, ref)
        logger.debug(f"Mirror sync for {ref.slug}: {result.state.value} -> {result.action}")

        pairs = []
        for resource_dir in resources.resource_dirs:
            source_dir = project_dir / resource_dir
            dest = project_dir / "build" / "resources" if resources.build_only else source_dir
            source = mirror_path / resources.path.strip("/") / source_dir.parent.name
            if not source.is_dir():
                raise ConfigurationError(
                    "Source directory does not exist or is not a directory",
                    source=str(source), repo=ref.slug,
                )
            pairs.append((source, dest))

        # Every source is checked before any destination is cleared
        written: List[Path] = []
        for source, dest in pairs:
            if dest not in written:
                delete_directory(dest)
                dest.mkdir(parents=True, exist_ok=True)
                written.append(dest)
            logger.debug(f"Copying resources from {source} to {dest}")
            copy_directory(source, dest)

        logger.info(f"[resources] Placed {len(written)} resource dir(s) from {ref.slug}")
        return written
