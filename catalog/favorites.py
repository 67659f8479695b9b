"""
Favorites store.

Favorites are full RecipeRecords (not just ids) so the Favorites view can be
shown without any network call. The list is serialized as a JSON array under a
single key of a small key-value store:

- JsonFileStore: a JSON object on disk, one entry per key, replaced atomically
- InMemoryStore: a dict, for tests and throwaway sessions

Writes are all-or-nothing: the in-memory list is only replaced after the store
accepted the new payload. A failed write raises PersistenceError and the
previous list stays in effect.
"""

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

from catalog.config import FavoritesConfig
from catalog.errors import NotFoundError, PersistenceError
from catalog.models import RecipeRecord

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """
    Abstract string key-value store.

    Implementations raise PersistenceError when they can't read or write.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if there is none."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing what was there."""


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStore(KeyValueStore):
    """
    File-backed store: one JSON object mapping keys to string values.

    Each write goes to a temp file in the same directory and is moved into
    place with os.replace, so a crash never leaves a half-written file.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else FavoritesConfig.get_path()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"Storage file {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".favorites-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e


class FavoriteOutcome(str, Enum):
    """Result of a favorites mutation. No-ops are reported, not raised."""

    ADDED = "added"
    ALREADY_PRESENT = "already_present"
    REMOVED = "removed"
    NOT_PRESENT = "not_present"


def serialize_favorites(records: List[RecipeRecord]) -> str:
    """Serialize a favorites list as a JSON array of records."""
    return json.dumps([record.model_dump(mode="json") for record in records], ensure_ascii=False)


def deserialize_favorites(raw: Optional[str]) -> List[RecipeRecord]:
    """
    Parse a stored favorites payload.

    Corrupt payloads and unreadable entries are logged and skipped; the list
    never contains two records with the same id.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("Stored favorites are not valid JSON, starting with an empty list: %s", e)
        return []
    if not isinstance(data, list):
        logger.warning("Stored favorites are not a JSON array, starting with an empty list")
        return []

    records: List[RecipeRecord] = []
    seen_ids = set()
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            record = RecipeRecord.from_stored(item)
        except ValueError as e:
            logger.warning("Skipping unreadable favorite: %s", e)
            continue
        if record.id in seen_ids:
            continue
        seen_ids.add(record.id)
        records.append(record)
    return records


class FavoritesStore:
    """
    CRUD over the persisted favorites list, keyed by recipe id.

    The list is loaded lazily on first use and kept in memory afterwards.
    Mutations are serialized with an asyncio.Lock because each one awaits the
    storage write before committing. The lock is tied to one event loop and
    is recreated when the running loop changes (the Streamlit app runs each
    action in its own loop).
    """

    def __init__(self, storage: KeyValueStore, key: Optional[str] = None) -> None:
        self.storage = storage
        self.key = key or FavoritesConfig.get_storage_key()
        self._favorites: Optional[List[RecipeRecord]] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _mutation_lock(self) -> asyncio.Lock:
        """Return the write lock for the running event loop, creating it on first use in that loop."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _load(self) -> List[RecipeRecord]:
        if self._favorites is None:
            raw = await asyncio.to_thread(self.storage.get_item, self.key)
            self._favorites = deserialize_favorites(raw)
            logger.debug("Loaded %d favorites", len(self._favorites))
        return self._favorites

    async def _commit(self, updated: List[RecipeRecord]) -> None:
        payload = serialize_favorites(updated)
        await asyncio.to_thread(self.storage.set_item, self.key, payload)
        self._favorites = updated

    async def list(self) -> List[RecipeRecord]:
        """Return the favorites in the order they were added."""
        return list(await self._load())

    async def contains(self, recipe_id: str) -> bool:
        favorites = await self._load()
        return any(record.id == recipe_id for record in favorites)

    async def add(self, record: RecipeRecord) -> FavoriteOutcome:
        """
        Append a record unless its id is already in the list.

        Raises:
            PersistenceError: If the write fails (the list is left unchanged)
        """
        async with self._mutation_lock():
            favorites = await self._load()
            if any(existing.id == record.id for existing in favorites):
                return FavoriteOutcome.ALREADY_PRESENT
            await self._commit(favorites + [record])
        logger.info("Added recipe %s to favorites", record.id)
        return FavoriteOutcome.ADDED

    async def remove(self, recipe_id: str) -> FavoriteOutcome:
        """
        Remove the record with this id, if present.

        Raises:
            PersistenceError: If the write fails (the list is left unchanged)
        """
        async with self._mutation_lock():
            favorites = await self._load()
            updated = [record for record in favorites if record.id != recipe_id]
            if len(updated) == len(favorites):
                return FavoriteOutcome.NOT_PRESENT
            await self._commit(updated)
        logger.info("Removed recipe %s from favorites", recipe_id)
        return FavoriteOutcome.REMOVED

    async def toggle(
        self,
        recipe_id: str,
        fetch_if_missing: Callable[[str], Awaitable[Optional[RecipeRecord]]],
    ) -> FavoriteOutcome:
        """
        Remove the recipe if favorited, otherwise fetch its full record and add it.

        Args:
            recipe_id: Recipe to toggle
            fetch_if_missing: Coroutine function returning the full record
                              (typically CatalogClient.get_by_id)

        Raises:
            NotFoundError: If the recipe must be added but the fetch returned None
            RemoteFetchError: If the fetch fails
            PersistenceError: If the write fails
        """
        if await self.contains(recipe_id):
            return await self.remove(recipe_id)

        record = await fetch_if_missing(recipe_id)
        if record is None:
            raise NotFoundError(recipe_id)
        return await self.add(record)
