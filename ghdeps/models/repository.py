"""
Repository Model — Remote repository references and mirror states.

Supported URL forms:

    https://github.com/acme/tools
    https://github.com/acme/tools.git
    git@github.com:acme/tools.git
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


class MirrorState(str, Enum):
    """State of a local mirror relative to its remote."""
    ABSENT = "absent"          # No local .git metadata
    UP_TO_DATE = "up-to-date"  # Local branch head == origin/<branch>
    STALE = "stale"            # Differs, or could not be verified


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.endswith(".git") else name


def parse_owner_and_name(url: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract (owner, name) from a repository URL.

    Returns (None, None) for an empty URL. Either part may be None or
    empty when the URL is malformed; callers decide what to do about it.
    """
    if url is None or not url.strip():
        return None, None

    url = url.strip().rstrip("/")

    # SSH form: git@host:owner/name.git
    if url.startswith("git@"):
        _, _, path = url.partition(":")
        parts = [p for p in path.split("/") if p]
        owner = parts[0] if len(parts) > 0 else None
        name = _strip_git_suffix(parts[-1]) if len(parts) > 1 else None
        return owner, name

    parsed = urlparse(url)
    parts = [p for p in parsed.path.split("/") if p]
    owner = parts[0] if len(parts) > 0 else None
    name = _strip_git_suffix(parts[1]) if len(parts) > 1 else None
    return owner, name


@dataclass(frozen=True)
class RepositoryRef:
    """An owner/name pair on the hosting provider, plus the branch to track."""

    owner: str
    name: str
    branch: Optional[str] = "main"
    source_url: Optional[str] = None

    @classmethod
    def parse(cls, url: Optional[str], branch: Optional[str] = "main") -> "RepositoryRef":
        """
        Build a reference from a repository URL.

        Raises:
            ConfigurationError: If owner or name cannot be parsed
        """
        owner, name = parse_owner_and_name(url)
        logger.debug(f"Parsed repository URL {url!r}: owner={owner!r} name={name!r}")
        if not owner or not name:
            raise ConfigurationError(
                "Repository URL is not configured properly", repo_url=url,
            )
        return cls(owner=owner, name=name, branch=branch or None, source_url=url)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"

    def mirror_path(self, cache_root: Path) -> Path:
        """Local mirror location: <cacheRoot>/resources/<owner>-<name>/."""
        return Path(cache_root) / "resources" / f"{self.owner}-{self.name}"
