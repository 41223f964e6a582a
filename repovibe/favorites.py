"""
Favorites - bookmark GitHub repositories.

=============================================================================
STORAGE
=============================================================================

Favorites are a single JSON list kept under one key ("RepoVibe") of a
key-value store. The store is injected, so the same manager works with:

1. JsonFileStore (default)
   - A small JSON file in .data/
   - Human-readable, easy to back up

2. MemoryStore
   - A dict, nothing touches the disk
   - Handy for tests and one-off scripts

Any object with get(key), set(key, value) and delete(key) will do.

=============================================================================
CHANGE NOTIFICATIONS
=============================================================================

Interested code subscribes explicitly instead of listening for a global
event:

    unsubscribe = manager.subscribe(lambda favorites: refresh(favorites))
    ...
    unsubscribe()

Subscribers are called with the new list after every successful add,
remove or clear.
=============================================================================
"""

import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .config import DATA_DIR, FAVORITES_STORAGE_KEY
from .models import RepositorySummary

logger = logging.getLogger(__name__)

Subscriber = Callable[[List["FavoriteRepo"]], None]


# =============================================================================
# STORES
# =============================================================================

class MemoryStore:
    """In-memory key-value store."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str):
        self._data[key] = value

    def delete(self, key: str):
        self._data.pop(key, None)


class JsonFileStore:
    """Key-value store backed by a JSON file."""

    def __init__(self, path: Union[str, Path] = None):
        self.path = Path(path or Path(DATA_DIR) / "favorites.json")

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, data: Dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str):
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str):
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


# =============================================================================
# FAVORITES
# =============================================================================

@dataclass
class FavoriteRepo:
    """
    A bookmarked repository.

    We keep display metadata so favorites can be listed without API calls.
    """
    id: str  # owner/repo
    name: str
    added_at: str  # ISO format datetime
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: Optional[int] = None
    forks_count: Optional[int] = None
    owner: Optional[Dict[str, str]] = None  # {"login": ..., "avatar_url": ...}
    html_url: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["addedAt"] = data.pop("added_at")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "FavoriteRepo":
        return cls(
            id=data["id"],
            name=data.get("name") or data["id"],
            added_at=data.get("addedAt") or data.get("added_at") or "",
            description=data.get("description"),
            language=data.get("language"),
            stargazers_count=data.get("stargazers_count"),
            forks_count=data.get("forks_count"),
            owner=data.get("owner"),
            html_url=data.get("html_url")
        )

    @classmethod
    def from_repository(cls, repo: RepositorySummary) -> "FavoriteRepo":
        owner = None
        if repo.owner_login:
            owner = {"login": repo.owner_login, "avatar_url": repo.owner_avatar_url}

        return cls(
            id=repo.full_name,
            name=repo.name,
            added_at="",
            description=repo.description,
            language=repo.language,
            stargazers_count=repo.stargazers_count,
            forks_count=repo.forks_count,
            owner=owner,
            html_url=repo.html_url
        )


class FavoritesManager:
    """Manages the user's favorite repositories."""

    def __init__(self, store=None, storage_key: str = FAVORITES_STORAGE_KEY):
        """
        Args:
            store: Key-value store (get/set/delete). Defaults to a
                   JsonFileStore in .data/.
            storage_key: Key the favorites list is stored under
        """
        self.store = store if store is not None else JsonFileStore()
        self.storage_key = storage_key
        self._subscribers: List[Subscriber] = []

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call `callback(favorites)` after every change.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self):
        favorites = self.get_favorites()
        for callback in list(self._subscribers):
            callback(favorites)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_favorites(self) -> List[FavoriteRepo]:
        """All favorites, in the order they were added."""
        try:
            stored = self.store.get(self.storage_key)
            if not stored:
                return []
            return [FavoriteRepo.from_dict(item) for item in json.loads(stored)]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Could not read favorites: %s", e)
            return []

    def add_favorite(self, repo: Union[FavoriteRepo, RepositorySummary, dict]) -> bool:
        """
        Add a repository to favorites.

        Args:
            repo: The repository. Its added_at is set to now.

        Returns:
            True if added, False if it was already a favorite
        """
        if isinstance(repo, RepositorySummary):
            favorite = FavoriteRepo.from_repository(repo)
        elif isinstance(repo, dict):
            favorite = FavoriteRepo.from_dict(repo)
        else:
            favorite = repo

        favorites = self.get_favorites()
        if any(fav.id == favorite.id for fav in favorites):
            return False

        favorite.added_at = datetime.now(timezone.utc).isoformat()
        favorites.append(favorite)

        self._save(favorites)
        self._notify()
        return True

    def remove_favorite(self, repo_id: str) -> bool:
        """
        Remove a repository from favorites.

        Returns:
            True if removed, False if not found
        """
        favorites = self.get_favorites()
        remaining = [fav for fav in favorites if fav.id != repo_id]

        if len(remaining) == len(favorites):
            return False

        self._save(remaining)
        self._notify()
        return True

    def is_favorite(self, repo_id: str) -> bool:
        return any(fav.id == repo_id for fav in self.get_favorites())

    def get(self, repo_id: str) -> Optional[FavoriteRepo]:
        for fav in self.get_favorites():
            if fav.id == repo_id:
                return fav
        return None

    def search(self, query: str) -> List[FavoriteRepo]:
        """
        Favorites whose name, id, description or language contains the
        query (case-insensitive). An empty query matches everything.
        """
        query = (query or "").strip().lower()
        favorites = self.get_favorites()
        if not query:
            return favorites

        return [
            fav for fav in favorites
            if any(
                query in (field or "").lower()
                for field in (fav.name, fav.id, fav.description, fav.language)
            )
        ]

    def count(self) -> int:
        return len(self.get_favorites())

    def clear_all(self) -> bool:
        """Remove every favorite."""
        self.store.delete(self.storage_key)
        self._notify()
        return True

    def _save(self, favorites: List[FavoriteRepo]):
        self.store.set(
            self.storage_key,
            json.dumps([fav.to_dict() for fav in favorites], ensure_ascii=False)
        )
