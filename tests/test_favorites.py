"""Tests for favorites."""

import json
from pathlib import Path
from unittest.mock import Mock

from repovibe.favorites import FavoriteRepo, FavoritesManager, JsonFileStore, MemoryStore
from repovibe.models import RepositorySummary


def _repo(repo_id: str = "octo/webapp") -> dict:
    return {"id": repo_id, "name": repo_id.split("/")[1], "language": "Python", "stargazers_count": 10}


class TestFavoritesManager:
    """Test FavoritesManager with an in-memory store."""

    def test_starts_empty(self, favorites_manager: FavoritesManager) -> None:
        assert favorites_manager.get_favorites() == []
        assert favorites_manager.count() == 0

    def test_add_and_list(self, favorites_manager: FavoritesManager) -> None:
        assert favorites_manager.add_favorite(_repo()) is True

        favorites = favorites_manager.get_favorites()
        assert [fav.id for fav in favorites] == ["octo/webapp"]
        assert favorites[0].added_at
        assert favorites[0].language == "Python"
        assert favorites_manager.is_favorite("octo/webapp")

    def test_add_twice_returns_false(self, favorites_manager: FavoritesManager) -> None:
        favorites_manager.add_favorite(_repo())
        assert favorites_manager.add_favorite(_repo()) is False
        assert favorites_manager.count() == 1

    def test_keeps_insertion_order(self, favorites_manager: FavoritesManager) -> None:
        for repo_id in ("a/one", "b/two", "c/three"):
            favorites_manager.add_favorite(_repo(repo_id))

        assert [fav.id for fav in favorites_manager.get_favorites()] == ["a/one", "b/two", "c/three"]

    def test_add_repository_summary(self, favorites_manager: FavoritesManager) -> None:
        summary = RepositorySummary(
            full_name="octo/webapp",
            name="webapp",
            owner_login="octo",
            owner_avatar_url="https://avatars/octo",
            stargazers_count=5
        )
        favorites_manager.add_favorite(summary)

        fav = favorites_manager.get("octo/webapp")
        assert fav.owner == {"login": "octo", "avatar_url": "https://avatars/octo"}
        assert fav.stargazers_count == 5

    def test_remove(self, favorites_manager: FavoritesManager) -> None:
        favorites_manager.add_favorite(_repo())

        assert favorites_manager.remove_favorite("octo/webapp") is True
        assert favorites_manager.remove_favorite("octo/webapp") is False
        assert not favorites_manager.is_favorite("octo/webapp")

    def test_clear(self, favorites_manager: FavoritesManager) -> None:
        favorites_manager.add_favorite(_repo("a/one"))
        favorites_manager.add_favorite(_repo("b/two"))

        assert favorites_manager.clear_all() is True
        assert favorites_manager.count() == 0

    def test_search_matches_name_id_description_and_language(self, favorites_manager: FavoritesManager) -> None:
        favorites_manager.add_favorite({"id": "octo/webapp", "name": "webapp", "language": "Python"})
        favorites_manager.add_favorite({"id": "rust-lang/cargo", "name": "cargo", "description": "Rust package manager"})
        favorites_manager.add_favorite({"id": "tokio-rs/tokio", "name": "tokio", "language": "Rust"})

        assert [fav.id for fav in favorites_manager.search("WEBAPP")] == ["octo/webapp"]
        assert [fav.id for fav in favorites_manager.search("rust")] == ["rust-lang/cargo", "tokio-rs/tokio"]
        assert [fav.id for fav in favorites_manager.search("python")] == ["octo/webapp"]
        assert favorites_manager.search("package manager")[0].id == "rust-lang/cargo"
        assert favorites_manager.search("nothing-like-this") == []

    def test_empty_search_returns_everything(self, favorites_manager: FavoritesManager) -> None:
        favorites_manager.add_favorite(_repo("a/one"))
        favorites_manager.add_favorite(_repo("b/two"))

        assert len(favorites_manager.search("")) == 2
        assert len(favorites_manager.search("   ")) == 2

    def test_stored_as_camel_case_json_under_key(self) -> None:
        store = MemoryStore()
        FavoritesManager(store=store).add_favorite(_repo())

        data = json.loads(store.get("RepoVibe"))
        assert data[0]["id"] == "octo/webapp"
        assert "addedAt" in data[0]

    def test_corrupt_storage_reads_as_empty(self) -> None:
        store = MemoryStore()
        store.set("RepoVibe", "not json")

        assert FavoritesManager(store=store).get_favorites() == []


class TestSubscriptions:
    """Test change notifications."""

    def test_subscribers_get_new_list(self, favorites_manager: FavoritesManager) -> None:
        callback = Mock()
        favorites_manager.subscribe(callback)

        favorites_manager.add_favorite(_repo())

        callback.assert_called_once()
        favorites = callback.call_args[0][0]
        assert [fav.id for fav in favorites] == ["octo/webapp"]

    def test_notified_on_every_change(self, favorites_manager: FavoritesManager) -> None:
        callback = Mock()
        favorites_manager.subscribe(callback)

        favorites_manager.add_favorite(_repo())
        favorites_manager.remove_favorite("octo/webapp")
        favorites_manager.clear_all()

        assert callback.call_count == 3

    def test_not_notified_when_nothing_changes(self, favorites_manager: FavoritesManager) -> None:
        favorites_manager.add_favorite(_repo())
        callback = Mock()
        favorites_manager.subscribe(callback)

        favorites_manager.add_favorite(_repo())
        favorites_manager.remove_favorite("missing/repo")

        callback.assert_not_called()

    def test_unsubscribe(self, favorites_manager: FavoritesManager) -> None:
        callback = Mock()
        unsubscribe = favorites_manager.subscribe(callback)
        unsubscribe()
        unsubscribe()

        favorites_manager.add_favorite(_repo())

        callback.assert_not_called()


class TestJsonFileStore:
    """Test the file-backed store."""

    def test_persists_between_instances(self, temp_data_dir: Path) -> None:
        path = temp_data_dir / "favorites.json"
        FavoritesManager(store=JsonFileStore(path)).add_favorite(_repo())

        reloaded = FavoritesManager(store=JsonFileStore(path))
        assert reloaded.is_favorite("octo/webapp")

    def test_missing_file(self, temp_data_dir: Path) -> None:
        store = JsonFileStore(temp_data_dir / "nested" / "favorites.json")

        assert store.get("RepoVibe") is None
        store.set("RepoVibe", "[]")
        assert store.get("RepoVibe") == "[]"

    def test_delete(self, temp_data_dir: Path) -> None:
        store = JsonFileStore(temp_data_dir / "favorites.json")
        store.set("RepoVibe", "[]")
        store.delete("RepoVibe")
        store.delete("RepoVibe")

        assert store.get("RepoVibe") is None

    def test_corrupt_file_reads_as_empty(self, temp_data_dir: Path) -> None:
        path = temp_data_dir / "favorites.json"
        path.write_text("{broken", encoding="utf-8")

        assert FavoritesManager(store=JsonFileStore(path)).get_favorites() == []


class TestFavoriteRepo:
    def test_from_dict_accepts_both_timestamp_keys(self) -> None:
        camel = FavoriteRepo.from_dict({"id": "a/b", "name": "b", "addedAt": "2024-01-01"})
        snake = FavoriteRepo.from_dict({"id": "a/b", "name": "b", "added_at": "2024-01-01"})
        assert camel == snake
