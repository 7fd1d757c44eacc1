"""
GitHub Release Client — Read-only access to the releases REST API.

Endpoints used:

- GET /repos/{owner}/{repo}/releases/tags/{tag}
- GET /repos/{owner}/{repo}/releases/latest
- GET <asset url>   (binary download, redirects followed)

No retries: a failed call raises and the caller may re-run the whole
operation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from ..errors import NetworkError, NotFoundError

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = "ghdeps/1.0"


class GitHubClient:
    """Minimal GitHub releases client on top of httpx."""

    def __init__(
        self,
        auth_headers: Optional[Dict[str, str]] = None,
        api_url: str = "https://api.github.com",
        timeout: float = 60.0,
        client: Optional[httpx.Client] = None,
    ):
        self.auth_headers = dict(auth_headers or {})
        self.api_base = api_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self.auth_headers

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _repo_url(self, owner: str, repo: str) -> str:
        # owner and repo are single path segments
        return f"{self.api_base}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def _get_headers(self, accept: str = "application/vnd.github+json") -> Dict[str, str]:
        return {
            "Accept": accept,
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": API_VERSION,
            **self.auth_headers,
        }

    def _get(self, url: str, accept: str = "application/vnd.github+json") -> httpx.Response:
        try:
            return self._client.get(url, headers=self._get_headers(accept))
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {e}", url=url) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Request failed: {e}", url=url) from e

    def _json(self, resp: httpx.Response, url: str) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise NetworkError("Response is not valid JSON", url=url) from e
        if not isinstance(data, dict):
            raise NetworkError("Unexpected response shape", url=url)
        return data

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Dict[str, Any]:
        """
        Fetch release metadata for `tag`.

        Raises:
            NotFoundError: If no release has that tag
            NetworkError: On any other non-success response
        """
        url = f"{self._repo_url(owner, repo)}/releases/tags/{quote(tag, safe='')}"
        logger.debug(f"Fetching release from: {url}")
        resp = self._get(url)

        if resp.status_code == 404:
            raise NotFoundError("Release not found", owner=owner, repo=repo, version=tag)
        if not resp.is_success:
            raise NetworkError(
                f"Failed to fetch release: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code, owner=owner, repo=repo, version=tag,
            )
        return self._json(resp, url)

    def get_latest_release(self, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the latest release, or None if the repository has none.

        Raises:
            NetworkError: On a non-success response other than 404
        """
        url = f"{self._repo_url(owner, repo)}/releases/latest"
        logger.debug(f"Fetching latest release for {owner}/{repo}")
        resp = self._get(url)

        if resp.status_code == 404:
            logger.debug(f"No releases found for {owner}/{repo}")
            return None
        if not resp.is_success:
            raise NetworkError(
                f"Failed to fetch latest release: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code, owner=owner, repo=repo,
            )
        release = self._json(resp, url)
        logger.debug(f"Found latest release with tag: {release.get('tag_name')}")
        return release

    def download(self, url: str) -> bytes:
        """
        Download an asset body.

        Raises:
            NetworkError: On a non-success status or an empty body
        """
        logger.debug(f"Asset download URL: {url}")
        resp = self._get(url, accept="application/octet-stream")
        logger.debug(f"HTTP response: {resp.status_code} {resp.reason_phrase}")
        if not resp.is_success:
            raise NetworkError(
                f"Failed to download asset: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code, url=url,
            )
        if not resp.content:
            raise NetworkError("Downloaded asset is empty", url=url)
        logger.debug(f"Download size: {len(resp.content)} bytes")
        return resp.content
