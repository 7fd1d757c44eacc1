"""
Shared CLI helpers — error reporting and access to run context.

`ctx.obj` is filled by the `ghdeps` group:

- root: project directory (Path)
- project: ProjectConfig from ghdeps.yaml
- settings: Settings with the project's github section applied
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable

import click

from ..config.settings import Settings
from ..errors import GhDepsError
from ..releases.cache import ReleaseAssetCache
from ..releases.client import GitHubClient

logger = logging.getLogger(__name__)


def reports_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn a GhDepsError raised by a command into a red message and exit 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GhDepsError as e:
            logger.debug("Command failed", exc_info=True)
            click.secho(f"❌ {e}", fg="red", err=True)
            raise SystemExit(1)

    return wrapper


def open_client(settings: Settings) -> GitHubClient:
    return GitHubClient(
        auth_headers=settings.transport().api_headers(),
        api_url=settings.api_url,
        timeout=settings.http_timeout,
    )


def release_cache(settings: Settings, client: GitHubClient) -> ReleaseAssetCache:
    return ReleaseAssetCache(settings.assets_dir, client)
