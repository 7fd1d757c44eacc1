"""
Release Asset Cache — Resolve (owner, repo, version) to a local artifact.

Layout:

    <cacheDir>/<owner>/<repo>-<version>.<ext>

The filesystem is the index: if the file exists the version is resolved
and is returned without any network access (release tags are treated as
immutable upstream). There is no in-memory index and no eviction unless
`prune()` is called explicitly.

## Usage

    cache = ReleaseAssetCache(settings.assets_dir, client)
    jar = cache.resolve("acme", "tools", "v2.0.0")
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError, NotFoundError
from ..fileutil import atomic_write_bytes
from ..models.dependency import DependencyDescriptor
from .client import GitHubClient

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "jar"


@dataclass
class CachedAsset:
    """A file found in the cache directory."""

    owner: str
    file_name: str
    path: Path
    size: int
    modified: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "file": self.file_name,
            "path": str(self.path),
            "size": self.size,
            "modified": self.modified,
        }


class ReleaseAssetCache:
    """Filesystem-backed cache of release assets."""

    def __init__(
        self,
        cache_dir: Path,
        client: Optional[GitHubClient] = None,
        extension: str = DEFAULT_EXTENSION,
    ):
        self.cache_dir = Path(cache_dir)
        self.client = client
        self.extension = extension.lstrip(".")

    def _api(self) -> GitHubClient:
        if self.client is None:
            raise ConfigurationError("Release cache was opened without an API client")
        return self.client

    def asset_name(self, repo: str) -> str:
        """Name of the release asset to select: `<repo>.<ext>`."""
        return f"{repo}.{self.extension}"

    def path_for(self, owner: str, repo: str, version: str) -> Path:
        """
        Cache location of an asset.

        Raises:
            ConfigurationError: If a part would leave `<cacheDir>/<owner>/`
        """
        for value in (owner, repo, version):
            if not value or value in (".", "..") or "/" in value or "\\" in value:
                raise ConfigurationError(
                    "Invalid owner, repository or version for the asset cache",
                    owner=owner, repo=repo, version=version,
                )
        return self.cache_dir / owner / f"{repo}-{version}.{self.extension}"

    def is_cached(self, owner: str, repo: str, version: str) -> bool:
        return self.path_for(owner, repo, version).is_file()

    def resolve(self, owner: str, repo: str, version: str) -> Path:
        """
        Return the local path of the asset, downloading it on a miss.

        Raises:
            NotFoundError: If the release or the `<repo>.<ext>` asset is missing
            NetworkError: If the API call or the download fails
        """
        target = self.path_for(owner, repo, version)
        logger.debug(f"Expected asset file location: {target}")

        if target.is_file():
            logger.debug(f"Asset already cached: {target.name}")
            return target

        logger.debug("Asset not found in cache, fetching from GitHub API")
        release = self._api().get_release_by_tag(owner, repo, version)
        asset = self._select_asset(release, owner, repo, version)

        download_url = self._download_url(asset)
        logger.info(
            f"[releases] Downloading {owner}/{repo} {version}",
            extra={"owner": owner, "repo": repo, "version": version},
        )
        content = self._api().download(download_url)

        atomic_write_bytes(target, content)
        logger.info(
            f"[releases] Cached {owner}/{repo} {version} → {target}",
            extra={"owner": owner, "repo": repo, "version": version},
        )
        return target

    def resolve_dependency(self, dep: DependencyDescriptor) -> Path:
        if dep.version is None:
            raise ConfigurationError("Dependency has no version", dependency=dep.coordinate)
        return self.resolve(dep.owner, dep.name, dep.version)

    def _select_asset(
        self, release: Dict[str, Any], owner: str, repo: str, version: str,
    ) -> Dict[str, Any]:
        wanted = self.asset_name(repo)
        assets = release.get("assets") or []
        for asset in assets:
            name = asset.get("name")
            logger.debug(f"Checking asset: '{name}'")
            if name == wanted:
                return asset
        raise NotFoundError(
            f"No asset named {wanted} in release",
            owner=owner, repo=repo, version=version,
        )

    def _download_url(self, asset: Dict[str, Any]) -> str:
        # The API asset URL works for private repositories but needs a token
        if self._api().authenticated and asset.get("url"):
            return asset["url"]
        url = asset.get("browser_download_url") or asset.get("url")
        if not url:
            raise NotFoundError("Asset has no download URL", asset=asset.get("name"))
        return url

    def latest_version(self, owner: str, repo: str) -> Optional[str]:
        """Tag of the latest release, or None when there are no releases."""
        release = self._api().get_latest_release(owner, repo)
        version = release.get("tag_name") if release else None
        logger.debug(f"Latest version of {owner}/{repo} resolved to: {version!r}")
        return version

    # ─── Maintenance ────────────────────────────────────────

    def entries(self) -> List[CachedAsset]:
        """All cached asset files, sorted by path."""
        if not self.cache_dir.is_dir():
            return []
        found: List[CachedAsset] = []
        for owner_dir in sorted(p for p in self.cache_dir.iterdir() if p.is_dir()):
            for file in sorted(owner_dir.glob(f"*.{self.extension}")):
                stat = file.stat()
                found.append(CachedAsset(
                    owner=owner_dir.name,
                    file_name=file.name,
                    path=file,
                    size=stat.st_size,
                    modified=stat.st_mtime,
                ))
        return found

    def prune(self, max_age_days: float, now: Optional[float] = None) -> List[Path]:
        """
        Delete cached assets not modified within `max_age_days`.

        Never called implicitly. Returns the removed paths.
        """
        cutoff = (now if now is not None else time.time()) - max_age_days * 86400
        removed: List[Path] = []
        for entry in self.entries():
            if entry.modified < cutoff:
                entry.path.unlink()
                removed.append(entry.path)
                logger.info(f"[releases] Pruned {entry.owner}/{entry.file_name}")
        return removed
