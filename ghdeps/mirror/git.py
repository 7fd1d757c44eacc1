"""
Git helpers — Thin subprocess wrappers around the git CLI.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, Optional

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

# Timeout for local, non-network queries (rev-parse, branch lookup)
LOCAL_TIMEOUT = 30


def _git(
    repo: Optional[Path],
    *args: str,
    env: Optional[Dict[str, str]] = None,
    timeout: Optional[int] = LOCAL_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run a git command, in `repo` when given."""
    cmd = ["git"] + list(args)
    logger.debug(f"[git] {' '.join(cmd)}" + (f" (cwd={repo})" if repo else ""))
    try:
        return subprocess.run(
            cmd,
            cwd=str(repo) if repo else None,
            env={**os.environ, **env} if env else None,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ConfigurationError("git is not installed or not on PATH") from e


def _git_output(repo: Path, *args: str) -> Optional[str]:
    """Run a git command and return stripped stdout, or None on failure."""
    result = _git(repo, *args)
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def _error_text(result: subprocess.CompletedProcess) -> str:
    return (result.stderr or "").strip() or (result.stdout or "").strip() or "unknown error"
