"""
Settings — Process-level configuration read from GHDEPS_* env vars.

## Environment Variables

- GHDEPS_ACCESS_TOKEN: PAT, PEM private key, or a path to a file with one
- GHDEPS_CACHE_ROOT: cache root (default: ~/.cache/ghdeps)
- GHDEPS_API_URL: REST API base (default: https://api.github.com)
- GHDEPS_GIT_HOST: git host (default: github.com)
- GHDEPS_KNOWN_HOSTS: known_hosts file; enables SSH host-key checking
- GHDEPS_HTTP_TIMEOUT: HTTP timeout in seconds (default: 60)
- GHDEPS_DEBUG: true/1/yes for debug output

A `.env` file in the working directory is loaded by the CLI before these
are read.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..auth.credentials import CredentialResolver
from ..auth.transport import DEFAULT_GIT_HOST, TransportSelector
from ..errors import ConfigurationError
from ..models.credential import Credential

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT = 60.0


def _default_cache_root() -> Path:
    return Path.home() / ".cache" / "ghdeps"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


@dataclass
class Settings:
    """Configuration for one run. Owns the memoized credential."""

    access_token: Optional[str] = None
    cache_root: Path = field(default_factory=_default_cache_root)
    api_url: str = DEFAULT_API_URL
    git_host: str = DEFAULT_GIT_HOST
    known_hosts: Optional[Path] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    debug: bool = False

    def __post_init__(self) -> None:
        self.cache_root = Path(self.cache_root).expanduser()
        self._resolver = CredentialResolver(self.access_token)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from GHDEPS_* environment variables."""
        timeout_raw = os.environ.get("GHDEPS_HTTP_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_HTTP_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                "GHDEPS_HTTP_TIMEOUT must be a number", value=timeout_raw,
            )

        known_hosts = os.environ.get("GHDEPS_KNOWN_HOSTS")
        cache_root = os.environ.get("GHDEPS_CACHE_ROOT")

        return cls(
            access_token=os.environ.get("GHDEPS_ACCESS_TOKEN") or None,
            cache_root=Path(cache_root) if cache_root else _default_cache_root(),
            api_url=os.environ.get("GHDEPS_API_URL", DEFAULT_API_URL),
            git_host=os.environ.get("GHDEPS_GIT_HOST", DEFAULT_GIT_HOST),
            known_hosts=Path(known_hosts).expanduser() if known_hosts else None,
            http_timeout=timeout,
            debug=_env_flag("GHDEPS_DEBUG"),
        )

    @property
    def credential(self) -> Credential:
        """Resolved credential, computed on first access."""
        return self._resolver.resolve()

    @property
    def assets_dir(self) -> Path:
        """Release asset cache: <cacheRoot>/github."""
        return self.cache_root / "github"

    @property
    def resources_dir(self) -> Path:
        """Mirror root: <cacheRoot>/resources."""
        return self.cache_root / "resources"

    def transport(self) -> TransportSelector:
        return TransportSelector(
            self.credential, host=self.git_host, known_hosts=self.known_hosts,
        )
