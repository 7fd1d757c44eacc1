"""Release lookup and the local asset cache."""

from .cache import ReleaseAssetCache
from .client import GitHubClient

__all__ = ["GitHubClient", "ReleaseAssetCache"]
