"""
Caching layer for GitHub responses.

=============================================================================
WHAT WE CACHE
=============================================================================

1. REPOSITORY DISCOVERY (10 minutes)
   - Key: hash of (language, name query, page, page size)
   - Popular repositories barely change within minutes

2. ISSUE LISTINGS (5 minutes)
   - Key: hash of (repo, state, sort, direction, page, page size)
   - Issues get new comments and labels often, so keep this short
   - Difficulty and label filters are applied AFTER the cache, so
     changing a filter never costs an API call

AI analyses are NOT cached: every "analyze" request asks the model again.

Values are plain dicts (dataclasses are converted by the client), which
diskcache can pickle safely across versions of our code.
=============================================================================
"""

import hashlib
import os
from pathlib import Path
from typing import Optional

from diskcache import Cache

from .config import (
    CACHE_DIR,
    DISCOVER_CACHE_TTL_MINUTES,
    ISSUES_CACHE_TTL_MINUTES
)


class CacheManager:
    """
    Manages caching of GitHub API responses.

    Uses diskcache, which stores data on disk (not just memory).
    This means cache persists between program runs!
    """

    def __init__(self, cache_dir: str = None):
        """
        Initialize the cache.

        Args:
            cache_dir: Directory to store cache files.
                      Defaults to .cache/ in project root.
        """
        self.cache_dir = str(cache_dir or CACHE_DIR)

        # Separate caches so each can be cleared on its own. diskcache keeps
        # the hit/miss counters in the cache database, so they survive
        # between runs of the CLI.
        self.discover_cache = Cache(os.path.join(self.cache_dir, "discover"), statistics=True)
        self.issues_cache = Cache(os.path.join(self.cache_dir, "issues"), statistics=True)

    @staticmethod
    def _make_key(*parts) -> str:
        """Same parameters = same hash = cache hit."""
        key_data = ":".join(str(p) for p in parts)
        return hashlib.md5(key_data.encode()).hexdigest()

    # =========================================================================
    # REPOSITORY DISCOVERY
    # =========================================================================

    def get_discover(self, language: str, query: str, page: int, per_page: int) -> Optional[dict]:
        key = self._make_key("discover", language, query, page, per_page)
        return self.discover_cache.get(key)

    def set_discover(self, language: str, query: str, page: int, per_page: int, data: dict):
        key = self._make_key("discover", language, query, page, per_page)
        self.discover_cache.set(key, data, expire=DISCOVER_CACHE_TTL_MINUTES * 60)

    # =========================================================================
    # ISSUE LISTINGS
    # =========================================================================

    def get_issues(
        self,
        repo_name: str,
        state: str,
        sort: str,
        direction: str,
        page: int,
        per_page: int
    ) -> Optional[dict]:
        key = self._make_key("issues", repo_name, state, sort, direction, page, per_page)
        return self.issues_cache.get(key)

    def set_issues(
        self,
        repo_name: str,
        state: str,
        sort: str,
        direction: str,
        page: int,
        per_page: int,
        data: dict
    ):
        key = self._make_key("issues", repo_name, state, sort, direction, page, per_page)
        self.issues_cache.set(key, data, expire=ISSUES_CACHE_TTL_MINUTES * 60)

    # =========================================================================
    # CACHE MANAGEMENT
    # =========================================================================

    def get_stats(self) -> dict:
        """Get cache hit/miss statistics, counted across runs."""
        stats = {}
        for name, cache in (("discover", self.discover_cache), ("issues", self.issues_cache)):
            hits, misses = cache.stats()
            total = hits + misses
            stats[name] = {
                "hits": hits,
                "misses": misses,
                "hit_rate": hits / total if total > 0 else 0
            }

        stats["cache_size_mb"] = self._get_cache_size_mb()
        return stats

    def _get_cache_size_mb(self) -> float:
        """Calculate total cache size in MB."""
        total_bytes = 0
        cache_path = Path(self.cache_dir)

        if cache_path.exists():
            for file in cache_path.rglob("*"):
                if file.is_file():
                    total_bytes += file.stat().st_size

        return round(total_bytes / (1024 * 1024), 2)

    def clear_all(self):
        """Clear all caches."""
        self.discover_cache.clear()
        self.issues_cache.clear()
        self.discover_cache.stats(reset=True)
        self.issues_cache.stats(reset=True)

    def close(self):
        self.discover_cache.close()
        self.issues_cache.close()
