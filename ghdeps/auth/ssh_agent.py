"""
SSH Agent — Hand an in-memory private key to git without touching disk.

A throwaway `ssh-agent` is started per git network operation, the key is
piped into `ssh-add -` on stdin, and the agent is killed afterwards.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from contextlib import contextmanager
from typing import Dict, Iterator

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

# Identity label used in log output for the configured key
SSH_IDENTITY_NAME = "deploy-key"

_AGENT_VAR_RE = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;\s]+);")


def parse_agent_output(output: str) -> Dict[str, str]:
    """Extract SSH_AUTH_SOCK / SSH_AGENT_PID from `ssh-agent -s` output."""
    env = dict(_AGENT_VAR_RE.findall(output))
    if "SSH_AUTH_SOCK" not in env or "SSH_AGENT_PID" not in env:
        raise ConfigurationError("Could not parse ssh-agent output")
    return env


def _run(cmd: list, env: Dict[str, str], **kwargs) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            cmd,
            env={**os.environ, **env},
            capture_output=True,
            timeout=10,
            **kwargs,
        )
    except FileNotFoundError as e:
        raise ConfigurationError(f"{cmd[0]} is not installed", command=cmd[0]) from e


@contextmanager
def ssh_agent(private_key: bytes, identity: str = SSH_IDENTITY_NAME) -> Iterator[Dict[str, str]]:
    """
    Run a private ssh-agent holding `private_key`.

    Yields:
        Environment entries (SSH_AUTH_SOCK, SSH_AGENT_PID) for git/ssh
    """
    result = _run(["ssh-agent", "-s"], env={})
    if result.returncode != 0:
        raise ConfigurationError(
            "Failed to start ssh-agent",
            stderr=result.stderr.decode(errors="replace").strip(),
        )
    agent_env = parse_agent_output(result.stdout.decode(errors="replace"))
    logger.debug(f"Started ssh-agent pid={agent_env['SSH_AGENT_PID']}")

    try:
        key = private_key if private_key.endswith(b"\n") else private_key + b"\n"
        added = _run(
            ["ssh-add", "-"],
            env={**agent_env, "SSH_ASKPASS_REQUIRE": "never"},
            input=key,
        )
        if added.returncode != 0:
            raise ConfigurationError(
                "ssh-add rejected the private key",
                identity=identity,
                stderr=added.stderr.decode(errors="replace").strip(),
            )
        logger.debug(f"Added private key identity '{identity}' to ssh-agent")
        yield agent_env
    finally:
        _run(["ssh-agent", "-k"], env=agent_env)
        logger.debug(f"Stopped ssh-agent pid={agent_env['SSH_AGENT_PID']}")
