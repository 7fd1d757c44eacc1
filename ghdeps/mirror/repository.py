"""
Repository Mirror — Keep one local working copy in sync with its remote.

## State machine

    ABSENT      --clone-->           UP_TO_DATE
    STALE       --pull-->            UP_TO_DATE
    UP_TO_DATE  --ensure_branch-->   UP_TO_DATE (on the configured branch)

`synchronize()` runs exactly one transition per call, checking staleness
before the branch: a stale mirror is pulled before any checkout happens.

The state is recomputed on every call; only a fetch can tell whether the
mirror is stale. Nothing is cached between calls and there is no locking:
callers must not synchronize the same path from two threads at once.

## Usage

    mirror = RepositoryMirror(transport)
    result = mirror.synchronize(ref.mirror_path(cache_root), ref)
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..auth.transport import TransportSelector
from ..errors import GhDepsError, LocalStateError, NetworkError
from ..models.repository import MirrorState, RepositoryRef
from .git import _error_text, _git, _git_output

logger = logging.getLogger(__name__)

# Actions reported by synchronize()
ACTION_CLONED = "cloned"
ACTION_PULLED = "pulled"
ACTION_CHECKED_OUT = "checked_out"
ACTION_NONE = "none"

# Merge statuses reported on a failed pull
MERGE_CONFLICTING = "CONFLICTING"
MERGE_NOT_FAST_FORWARD = "NOT_FAST_FORWARD"
MERGE_FAILED = "FAILED"

_CONFLICT_MARKERS = ("conflict", "automatic merge failed")
_NOT_FAST_FORWARD_MARKERS = (
    "not possible to fast-forward",
    "non-fast-forward",
    "divergent branches",
    "need to specify how to reconcile",
    "refusing to merge unrelated histories",
)
_LOCAL_FAILURE_MARKERS = (
    "would be overwritten",
    "uncommitted changes",
    "unmerged files",
    "you have not concluded your merge",
)


def classify_pull_failure(output: str) -> Optional[str]:
    """
    Map git pull output to a merge status.

    Returns None when the failure is not a local merge problem (e.g. the
    remote could not be reached).
    """
    text = output.lower()
    if any(m in text for m in _CONFLICT_MARKERS):
        return MERGE_CONFLICTING
    if any(m in text for m in _NOT_FAST_FORWARD_MARKERS):
        return MERGE_NOT_FAST_FORWARD
    if any(m in text for m in _LOCAL_FAILURE_MARKERS):
        return MERGE_FAILED
    return None


@dataclass
class SyncResult:
    """Outcome of one synchronize() call."""

    path: Path
    state: MirrorState  # state observed before acting
    action: str
    branch: Optional[str] = None
    commit: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.action != ACTION_NONE


class RepositoryMirror:
    """
    Owns the local mirror of one remote repository.

    `remote_url` overrides the URL chosen by the transport selector, e.g.
    to mirror from a local bare repository.
    """

    def __init__(self, transport: TransportSelector, remote_url: Optional[str] = None):
        self.transport = transport
        self.remote_url = remote_url

    # ─── State queries ──────────────────────────────────────

    def exists(self, path: Path) -> bool:
        """True when `path` holds git metadata with an object database."""
        exists = (Path(path) / ".git" / "objects").is_dir()
        logger.debug(f"Repository existence check at {path}: {exists}")
        return exists

    def current_branch(self, path: Path) -> Optional[str]:
        branch = _git_output(path, "rev-parse", "--abbrev-ref", "HEAD")
        if not branch or branch == "HEAD":
            return None
        return branch

    def head_commit(self, path: Path) -> Optional[str]:
        head = _git_output(path, "rev-parse", "HEAD")
        return head[:12] if head else None

    def is_up_to_date(self, path: Path, ref: RepositoryRef) -> bool:
        """
        Fetch and compare the current branch with its remote-tracking ref.

        Any failure while fetching or resolving refs counts as "not up to
        date" so that the caller re-syncs instead of trusting a stale copy.
        """
        path = Path(path)
        logger.debug(f"Checking if repository is up to date at {path}")
        try:
            with self.transport.session(ref.owner) as env:
                result = _git(path, "fetch", "origin", env=env, timeout=None)
            if result.returncode != 0:
                logger.error(f"[mirror] Fetch failed for {ref.slug}: {_error_text(result)}")
                return False

            branch = self.current_branch(path)
            if branch is None:
                logger.debug("Detached HEAD, treating mirror as stale")
                return False

            local = _git_output(path, "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}")
            remote = _git_output(
                path, "rev-parse", "--verify", "--quiet", f"refs/remotes/origin/{branch}"
            )
            logger.debug(f"Local commit for '{branch}': {local}")
            logger.debug(f"Remote commit for 'origin/{branch}': {remote}")
            up_to_date = local is not None and local == remote
            logger.debug(f"Repository up-to-date check result: {up_to_date}")
            return up_to_date
        except (GhDepsError, OSError, subprocess.SubprocessError) as e:
            logger.error(f"[mirror] Up-to-date check failed for {ref.slug}, assuming stale: {e}")
            return False

    def state(self, path: Path, ref: RepositoryRef) -> MirrorState:
        """Compute the current MirrorState (performs a fetch)."""
        if not self.exists(path):
            return MirrorState.ABSENT
        if self.is_up_to_date(path, ref):
            return MirrorState.UP_TO_DATE
        return MirrorState.STALE

    # ─── Transitions ────────────────────────────────────────

    def clone(self, path: Path, ref: RepositoryRef) -> None:
        """
        Clone `ref` into `path`.

        Raises:
            NetworkError: If authentication is rejected or the remote is
                unreachable. A partial clone is left in place.
        """
        path = Path(path)
        url = self.remote_url or self.transport.url_for(ref)
        logger.info(f"[mirror] Cloning repository ({url}) into {path.resolve()}")

        args = ["clone"]
        if ref.branch:
            args += ["--branch", ref.branch]
        args += [url, str(path)]

        path.parent.mkdir(parents=True, exist_ok=True)
        with self.transport.session(ref.owner) as env:
            result = _git(None, *args, env=env, timeout=None)

        if result.returncode != 0:
            error = _error_text(result)
            logger.error(f"[mirror] Failed to clone {ref.slug}: {error}")
            raise NetworkError(
                f"Failed to clone repository: {error}",
                repo=ref.slug, path=str(path),
            )
        logger.info(
            "[mirror] Repository cloned successfully",
            extra={"owner": ref.owner, "repo": ref.name},
        )

    def pull(self, path: Path, ref: RepositoryRef, branch: Optional[str] = None) -> None:
        """
        Fetch and merge `branch` (default: the checked-out branch) from origin.

        Raises:
            NetworkError: If fetching from the remote fails
            LocalStateError: If the merge conflicts or cannot fast-forward;
                the working copy is left as git left it
        """
        path = Path(path)
        logger.debug(f"Attempting to pull repository at {path}")

        with self.transport.session(ref.owner) as env:
            fetched = _git(path, "fetch", "origin", env=env, timeout=None)
            if fetched.returncode != 0:
                raise NetworkError(
                    f"Fetch before pull failed: {_error_text(fetched)}",
                    repo=ref.slug, path=str(path),
                )

            if branch is None:
                branch = self.current_branch(path)
                logger.debug(f"Branch not specified, using current branch: {branch}")
            if branch is None:
                raise LocalStateError(
                    "Cannot pull with a detached HEAD and no branch configured",
                    merge_status=MERGE_FAILED, repo=ref.slug, path=str(path),
                )

            logger.info(f"[mirror] Pulling repository branch {branch}")
            result = _git(
                path, "pull", "--no-rebase", "--no-edit", "origin", branch,
                env=env, timeout=None,
            )

        if result.returncode == 0:
            logger.info(
                f"[mirror] Successfully pulled {branch}",
                extra={"owner": ref.owner, "repo": ref.name},
            )
            return

        output = f"{result.stdout}\n{result.stderr}"
        merge_status = classify_pull_failure(output)
        if merge_status is not None:
            logger.error(f"[mirror] Pull failed: {branch}. Merge status: {merge_status}")
            raise LocalStateError(
                f"Pull failed: {_error_text(result)}",
                branch=branch, merge_status=merge_status,
                repo=ref.slug, path=str(path),
            )

        logger.error(f"[mirror] Pull failed for {ref.slug}: {_error_text(result)}")
        raise NetworkError(
            f"Pull failed: {_error_text(result)}",
            repo=ref.slug, branch=branch, path=str(path),
        )

    def ensure_branch(self, path: Path, branch: Optional[str]) -> bool:
        """
        Check out `branch` if it is not the current one.

        Creates a local branch tracking origin/<branch> when needed.
        Returns True if a checkout happened.

        Raises:
            LocalStateError: If the checkout fails
        """
        if branch is None:
            return False

        path = Path(path)
        current = self.current_branch(path)
        if current == branch:
            return False

        logger.info(
            f"[mirror] Current branch '{current}' is not the desired branch "
            f"'{branch}'. Checking out '{branch}'..."
        )
        exists = _git(path, "show-ref", "--verify", "--quiet", f"refs/heads/{branch}")
        if exists.returncode == 0:
            result = _git(path, "checkout", branch)
        else:
            result = _git(path, "checkout", "-b", branch, "--track", f"origin/{branch}")

        if result.returncode != 0:
            error = _error_text(result)
            logger.error(f"[mirror] Failed to checkout branch '{branch}': {error}")
            raise LocalStateError(
                f"Failed to checkout branch: {error}",
                branch=branch, path=str(path),
            )

        logger.info(f"[mirror] Successfully checked out branch '{branch}'")
        return True

    # ─── Composite ──────────────────────────────────────────

    def synchronize(self, path: Path, ref: RepositoryRef) -> SyncResult:
        """
        Bring the mirror at `path` in line with `ref`.

        Absent → clone; otherwise stale → pull; otherwise → ensure branch.
        """
        path = Path(path)
        logger.debug(f"Synchronizing {ref.slug} at {path}")

        if not self.exists(path):
            logger.debug("Repository does not exist, cloning...")
            self.clone(path, ref)
            return SyncResult(
                path=path, state=MirrorState.ABSENT, action=ACTION_CLONED,
                branch=self.current_branch(path), commit=self.head_commit(path),
            )

        if not self.is_up_to_date(path, ref):
            logger.debug("Repository not up to date, pulling...")
            self.pull(path, ref, ref.branch)
            return SyncResult(
                path=path, state=MirrorState.STALE, action=ACTION_PULLED,
                branch=self.current_branch(path), commit=self.head_commit(path),
            )

        logger.info(
            f"[mirror] Repository {ref.slug} is up to date",
            extra={"owner": ref.owner, "repo": ref.name},
        )
        switched = self.ensure_branch(path, ref.branch)
        return SyncResult(
            path=path,
            state=MirrorState.UP_TO_DATE,
            action=ACTION_CHECKED_OUT if switched else ACTION_NONE,
            branch=self.current_branch(path),
            commit=self.head_commit(path),
        )
