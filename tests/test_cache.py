"""Tests for the GitHub response cache."""

from pathlib import Path

import pytest

from repovibe.cache import CacheManager


@pytest.fixture
def cache(tmp_path: Path):
    manager = CacheManager(cache_dir=str(tmp_path / "cache"))
    yield manager
    manager.close()


class TestCacheManager:
    """Test CacheManager."""

    def test_discover_round_trip(self, cache: CacheManager) -> None:
        assert cache.get_discover("python", "", 1, 100) is None

        cache.set_discover("python", "", 1, 100, {"repositories": [], "pagination": {}})

        assert cache.get_discover("python", "", 1, 100) == {"repositories": [], "pagination": {}}
        assert cache.get_discover("python", "", 2, 100) is None

    def test_issues_round_trip(self, cache: CacheManager) -> None:
        cache.set_issues("o/r", "open", "created", "desc", 1, 20, {"issues": [1]})

        assert cache.get_issues("o/r", "open", "created", "desc", 1, 20) == {"issues": [1]}
        assert cache.get_issues("o/r", "closed", "created", "desc", 1, 20) is None

    def test_stats(self, cache: CacheManager) -> None:
        cache.get_issues("o/r", "open", "created", "desc", 1, 20)
        cache.set_issues("o/r", "open", "created", "desc", 1, 20, {"issues": []})
        cache.get_issues("o/r", "open", "created", "desc", 1, 20)

        stats = cache.get_stats()
        assert stats["issues"] == {"hits": 1, "misses": 1, "hit_rate": 0.5}
        assert stats["discover"]["hit_rate"] == 0
        assert stats["cache_size_mb"] >= 0

    def test_clear_all(self, cache: CacheManager) -> None:
        cache.set_discover("", "fastapi", 1, 100, {"repositories": []})
        cache.clear_all()

        assert cache.get_discover("", "fastapi", 1, 100) is None

    def test_stats_survive_a_new_manager(self, tmp_path: Path) -> None:
        first = CacheManager(cache_dir=str(tmp_path / "shared"))
        first.set_discover("go", "", 1, 100, {"repositories": []})
        first.get_discover("go", "", 1, 100)
        first.get_discover("go", "", 2, 100)
        first.close()

        second = CacheManager(cache_dir=str(tmp_path / "shared"))
        try:
            assert second.get_stats()["discover"] == {"hits": 1, "misses": 1, "hit_rate": 0.5}
        finally:
            second.close()

    def test_clear_all_resets_stats(self, cache: CacheManager) -> None:
        cache.get_issues("o/r", "open", "created", "desc", 1, 20)
        cache.clear_all()

        assert cache.get_stats()["issues"]["misses"] == 0
