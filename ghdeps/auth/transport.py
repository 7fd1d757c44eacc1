"""
Transport Selector — Pick the remote URL and git auth for a credential.

| Credential   | URL                             | Auth                          |
|--------------|---------------------------------|-------------------------------|
| PRIVATE_KEY  | git@<host>:<owner>/<name>.git   | in-memory key via ssh-agent   |
| TOKEN        | https://<host>/<owner>/<name>   | basic auth owner:token header |
| NONE         | https://<host>/<owner>/<name>   | none                          |

SSH host-key verification is disabled unless a known_hosts file is
configured; CI runs against throwaway remotes rely on that default.

Secrets are passed to git through environment variables
(GIT_CONFIG_COUNT / GIT_CONFIG_KEY_n / GIT_CONFIG_VALUE_n), so they never
appear on a command line or in the mirror's .git/config.
"""

from __future__ import annotations

import base64
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from ..models.credential import Credential
from ..models.repository import RepositoryRef
from .ssh_agent import SSH_IDENTITY_NAME, ssh_agent

logger = logging.getLogger(__name__)

DEFAULT_GIT_HOST = "github.com"


@dataclass
class AuthConfig:
    """Git transport configuration for one credential."""

    scheme: str  # "https" or "ssh"
    config_entries: List[Tuple[str, str]] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    private_key: Optional[bytes] = field(default=None, repr=False)

    def to_env(self) -> Dict[str, str]:
        """Flatten into the environment handed to git."""
        result = dict(self.env)
        if self.config_entries:
            result["GIT_CONFIG_COUNT"] = str(len(self.config_entries))
            for i, (key, value) in enumerate(self.config_entries):
                result[f"GIT_CONFIG_KEY_{i}"] = key
                result[f"GIT_CONFIG_VALUE_{i}"] = value
        return result


class TransportSelector:
    """Maps a credential to a remote URL form and git auth settings."""

    def __init__(
        self,
        credential: Credential,
        host: str = DEFAULT_GIT_HOST,
        known_hosts: Optional[Path] = None,
    ):
        self.credential = credential
        self.host = host
        self.known_hosts = Path(known_hosts) if known_hosts else None

    def url_for(self, ref: RepositoryRef) -> str:
        """Remote URL to clone/fetch `ref` with this credential."""
        if self.credential.is_private_key:
            url = f"git@{self.host}:{ref.owner}/{ref.name}.git"
            logger.debug(f"Private key configured, using SSH URL: {url}")
            return url
        url = f"https://{self.host}/{ref.owner}/{ref.name}"
        logger.debug(f"Using HTTPS URL: {url}")
        return url

    def auth_config(self, owner: str) -> AuthConfig:
        """Git auth settings; `owner` is the basic-auth username for tokens."""
        base_env = {"GIT_TERMINAL_PROMPT": "0"}

        if self.credential.is_token:
            userpass = f"{owner}:{self.credential.token}".encode("utf-8")
            header = "Authorization: Basic " + base64.b64encode(userpass).decode("ascii")
            return AuthConfig(
                scheme="https",
                config_entries=[("http.extraHeader", header)],
                env=base_env,
            )

        if self.credential.is_private_key:
            return AuthConfig(
                scheme="ssh",
                env={**base_env, "GIT_SSH_COMMAND": self._ssh_command()},
                private_key=self.credential.private_key,
            )

        return AuthConfig(scheme="https", env=base_env)

    def _ssh_command(self) -> str:
        if self.known_hosts is not None:
            return (
                "ssh -o BatchMode=yes -o StrictHostKeyChecking=yes "
                f"-o UserKnownHostsFile={self.known_hosts}"
            )
        return (
            "ssh -o BatchMode=yes -o StrictHostKeyChecking=no "
            "-o UserKnownHostsFile=/dev/null -o LogLevel=ERROR"
        )

    @contextmanager
    def session(self, owner: str) -> Iterator[Dict[str, str]]:
        """
        Environment for a single git network operation.

        For SSH credentials this starts an ssh-agent holding the key and
        stops it on exit.
        """
        auth = self.auth_config(owner)
        env = auth.to_env()
        if auth.private_key is None:
            yield env
            return

        with ssh_agent(auth.private_key, identity=SSH_IDENTITY_NAME) as agent_env:
            yield {**env, **agent_env}

    def api_headers(self) -> Dict[str, str]:
        """Auth header for the REST API. Only tokens authenticate API calls."""
        if self.credential.is_token:
            return {"Authorization": f"Bearer {self.credential.token}"}
        return {}
