from __future__ import annotations
import json
from typing import Dict, Iterable, List, Optional, Protocol

from pkgexplorer.models import PackageRecord
from pkgexplorer.utils.logging_setup import configure_logging_from_env

logger = configure_logging_from_env(__name__)

FAVORITES_KEY = "favorites"

class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...

class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

class Favorites:
    """Set of favorited package names, persisted as a JSON array.

    The state object is passed explicitly to whoever needs it; it reads the
    storage once in load() and rewrites the whole array on every toggle.
    """

    def __init__(self, storage: KeyValueStorage, key: str = FAVORITES_KEY):
        self._storage = storage
        self._key = key
        self._names: Dict[str, None] = {}  # insertion-ordered set

    def load(self) -> "Favorites":
        self._names = {}
        raw = self._storage.get_item(self._key)
        if not raw:
            return self
        try:
            saved = json.loads(raw)
            if not isinstance(saved, list):
                raise ValueError("favorites entry is not a list")
        except ValueError as e:
            logger.error("favorites_load_fail key=%s err=%s", self._key, e)
            return self
        for name in saved:
            if isinstance(name, str) and name:
                self._names[name] = None
        return self

    def toggle(self, name: str) -> bool:
        if name in self._names:
            del self._names[name]
            now_favorite = False
        else:
            self._names[name] = None
            now_favorite = True
        self._storage.set_item(self._key, json.dumps(self.names()))
        return now_favorite

    def is_favorite(self, name: str) -> bool:
        return name in self._names

    def names(self) -> List[str]:
        return list(self._names)

    def select(self, records: Iterable[PackageRecord]) -> List[PackageRecord]:
        return [r for r in records if r.name in self._names]

    def __len__(self) -> int:
        return len(self._names)
