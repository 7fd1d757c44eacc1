"""
Errors — Exception types raised by the sync and resolution engine.

Every error carries the context needed to act on it from a log line
(owner, repository, version, path, ...). None of them trigger cleanup of
on-disk state; a half-cloned mirror or a stray temp file is left for the
operator.

## Hierarchy

    GhDepsError
    ├── ConfigurationError   missing/malformed repository ref, bad credential
    ├── NetworkError         clone/fetch/pull/download, non-2xx HTTP
    ├── NotFoundError        no such release or asset
    └── LocalStateError      pull not fast-forwardable, checkout failed
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GhDepsError(Exception):
    """Base class for all ghdeps errors."""

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} ({details})"


class ConfigurationError(GhDepsError):
    """Raised when configuration is missing or invalid. Never retried."""


class NetworkError(GhDepsError):
    """Raised when a remote operation fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, **context: Any):
        self.status_code = status_code
        super().__init__(message, status=status_code, **context)


class NotFoundError(GhDepsError):
    """Raised when a release or asset does not exist upstream."""


class LocalStateError(GhDepsError):
    """Raised when the local working copy cannot be moved to the wanted state."""

    def __init__(
        self,
        message: str,
        branch: Optional[str] = None,
        merge_status: Optional[str] = None,
        **context: Any,
    ):
        self.branch = branch
        self.merge_status = merge_status
        super().__init__(message, branch=branch, merge_status=merge_status, **context)
