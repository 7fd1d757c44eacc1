"""
Credential Resolver — Turn a configured value into a usable credential.

The configured value is either the secret itself or a path to a file
holding it. Classification:

1. Token prefix (`ghp_`, `github_pat_`, ...)  → TOKEN
2. PEM private key header/footer             → PRIVATE_KEY
3. Anything else                              → ConfigurationError

A malformed value is never silently downgraded to anonymous access.

## Usage

    from ghdeps.auth.credentials import CredentialResolver

    resolver = CredentialResolver(os.environ.get("GHDEPS_ACCESS_TOKEN"))
    credential = resolver.resolve()  # computed once, then memoized
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError
from ..models.credential import Credential

logger = logging.getLogger(__name__)

TOKEN_PREFIXES = ("ghp_", "github_pat_", "gho_", "ghu_", "ghs_", "ghr_")

PEM_BEGIN_MARKER = "-----BEGIN"
PEM_KEY_MARKER = "PRIVATE KEY"

# Longer values cannot be a path on any common filesystem
_MAX_PATH_LENGTH = 4096


def is_token(value: Optional[str]) -> bool:
    return value is not None and value.startswith(TOKEN_PREFIXES)


def is_private_key(value: Optional[str]) -> bool:
    return value is not None and PEM_BEGIN_MARKER in value and PEM_KEY_MARKER in value


def _as_existing_file(value: str) -> Optional[Path]:
    """Return the path if `value` names an existing regular file."""
    if "\n" in value or len(value) > _MAX_PATH_LENGTH:
        return None
    try:
        path = Path(value).expanduser()
        return path if path.is_file() else None
    except (OSError, ValueError):
        return None


def read_credential_file(path: Path) -> str:
    """Read and trim a credential file."""
    logger.debug(f"Credential value is a file path, reading {path.resolve()}")
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Failed to read credential file: {e}", path=str(path),
        ) from e


def resolve_credential(raw_value: Optional[str]) -> Credential:
    """
    Classify a raw configured value.

    Args:
        raw_value: Literal secret, path to a file containing one, or None

    Returns:
        The classified Credential

    Raises:
        ConfigurationError: If the file cannot be read or the value is
            neither a token nor a private key
    """
    if raw_value is None or not raw_value.strip():
        logger.debug("No credential configured, using anonymous access")
        return Credential.none()

    value = raw_value.strip()
    path = _as_existing_file(value)
    if path is not None:
        value = read_credential_file(path)

    if is_token(value):
        logger.debug("Credential is a personal access token")
        return Credential.from_token(value)

    if is_private_key(value):
        logger.debug("Credential is an SSH private key")
        return Credential.from_private_key(value.encode("utf-8"))

    logger.error("Credential format is invalid: not a token and not a private key")
    raise ConfigurationError("Invalid credential format")


class CredentialResolver:
    """
    Single-assignment credential cache for one configuration object.

    Each configuration owns its own resolver, so two repositories with
    different credentials never see each other's secret.
    """

    def __init__(self, raw_value: Optional[str]):
        self._raw_value = raw_value
        self._resolved: Optional[Credential] = None

    @property
    def raw_value(self) -> Optional[str]:
        return self._raw_value

    def resolve(self) -> Credential:
        if self._resolved is None:
            logger.debug("Credential not cached, resolving")
            self._resolved = resolve_credential(self._raw_value)
        return self._resolved
