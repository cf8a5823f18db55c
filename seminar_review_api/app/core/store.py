"""
Record store: the keyed collection underneath every repository.

The store keeps one collection per entity type (``session``,
``registration``, ``evaluation``, ``award``, ``user``) and supports
find-by-id, find-all, filtered scan, upsert, delete and next-id
allocation.  Entities are pydantic models with an integer ``id``.

Stored entities are deep-copied on the way in and on the way out, so
a caller can only change stored state through ``upsert``.  Services
rely on this to validate first and write last: a failed operation
never leaves a half-mutated record behind.

``SqliteRecordStore`` extends the in-memory store with write-through
persistence.  Reads are served from memory; every committed
``upsert``/``delete`` is written to SQLite before the call returns.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from .db import get_cursor, init_db

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class RecordStore(ABC):
    """Contract consumed by the repositories."""

    @abstractmethod
    def find_by_id(self, entity_type: str, entity_id: Optional[int]) -> Optional[BaseModel]:
        ...

    @abstractmethod
    def find_all(self, entity_type: str) -> List[BaseModel]:
        ...

    @abstractmethod
    def scan(self, entity_type: str, predicate: Callable[[BaseModel], bool]) -> List[BaseModel]:
        ...

    @abstractmethod
    def upsert(self, entity_type: str, entity: EntityT) -> EntityT:
        ...

    @abstractmethod
    def delete(self, entity_type: str, entity_id: int) -> bool:
        ...

    @abstractmethod
    def delete_all(self, entity_type: str) -> int:
        ...

    @abstractmethod
    def next_id(self, entity_type: str) -> int:
        ...


class InMemoryRecordStore(RecordStore):
    """Process-wide store backed by dictionaries.

    All access goes through a re-entrant lock, so every read sees a
    consistent snapshot of a collection.
    """

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[int, BaseModel]] = {}
        # Highest id ever stored per type; deleted ids are never handed out again.
        self._last_ids: Dict[str, int] = {}
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _collection(self, entity_type: str) -> Dict[int, BaseModel]:
        return self._collections.setdefault(entity_type, {})

    def find_by_id(self, entity_type: str, entity_id: Optional[int]) -> Optional[BaseModel]:
        if entity_id is None:
            return None
        with self._lock:
            entity = self._collection(entity_type).get(entity_id)
            return entity.model_copy(deep=True) if entity is not None else None

    def find_all(self, entity_type: str) -> List[BaseModel]:
        with self._lock:
            collection = self._collection(entity_type)
            return [collection[key].model_copy(deep=True) for key in sorted(collection)]

    def scan(self, entity_type: str, predicate: Callable[[BaseModel], bool]) -> List[BaseModel]:
        return [entity for entity in self.find_all(entity_type) if predicate(entity)]

    def upsert(self, entity_type: str, entity: EntityT) -> EntityT:
        with self._lock:
            stored = entity.model_copy(deep=True)
            if stored.id is None:
                stored.id = self.next_id(entity_type)
            # Write to the backing file first so memory never runs ahead of it.
            self._persist(entity_type, stored)
            self._collection(entity_type)[stored.id] = stored
            self._last_ids[entity_type] = max(self._last_ids.get(entity_type, 0), stored.id)
            return stored.model_copy(deep=True)

    def delete(self, entity_type: str, entity_id: int) -> bool:
        with self._lock:
            collection = self._collection(entity_type)
            if entity_id not in collection:
                return False
            self._remove(entity_type, entity_id)
            del collection[entity_id]
            return True

    def delete_all(self, entity_type: str) -> int:
        with self._lock:
            collection = self._collection(entity_type)
            count = len(collection)
            self._remove_all(entity_type)
            collection.clear()
            return count

    def next_id(self, entity_type: str) -> int:
        """One past the highest id ever stored, including deleted ones."""
        with self._lock:
            highest = max(self._collection(entity_type), default=0)
            return max(highest, self._last_ids.get(entity_type, 0)) + 1

    def count(self, entity_type: str) -> int:
        with self._lock:
            return len(self._collection(entity_type))

    # Persistence hooks, no-ops for the pure in-memory store.

    def _persist(self, entity_type: str, entity: BaseModel) -> None:
        pass

    def _remove(self, entity_type: str, entity_id: int) -> None:
        pass

    def _remove_all(self, entity_type: str) -> None:
        pass


class SqliteRecordStore(InMemoryRecordStore):
    """In-memory store with write-through persistence to SQLite.

    Parameters
    ----------
    models : Mapping[str, Type[BaseModel]]
        Entity type name to pydantic model, used to rebuild entities
        from their JSON documents on load.
    db_url : Optional[str]
        Database file; defaults to ``settings.database_url``.
    """

    def __init__(self, models: Mapping[str, Type[BaseModel]], db_url: Optional[str] = None) -> None:
        super().__init__()
        self._models = dict(models)
        self._db_url = db_url
        version = init_db(db_url)
        logger.debug("Record store schema at version %s", version)
        self._load()

    def _load(self) -> None:
        loaded = 0
        with get_cursor(self._db_url) as cursor:
            rows = cursor.execute(
                "SELECT entity_type, id, data FROM records ORDER BY entity_type, id"
            ).fetchall()
        for row in rows:
            model = self._models.get(row["entity_type"])
            if model is None:
                logger.warning("Skipping record of unknown type %s", row["entity_type"])
                continue
            entity = model.model_validate(json.loads(row["data"]))
            self._collection(row["entity_type"])[row["id"]] = entity
            loaded += 1
        with get_cursor(self._db_url) as cursor:
            for row in cursor.execute("SELECT entity_type, last_id FROM sequences").fetchall():
                self._last_ids[row["entity_type"]] = row["last_id"]
        logger.info("Loaded %s records from %s", loaded, self._db_url or "default database")

    def _persist(self, entity_type: str, entity: BaseModel) -> None:
        with get_cursor(self._db_url) as cursor:
            cursor.execute(
                "INSERT INTO records (entity_type, id, data) VALUES (?, ?, ?)"
                " ON CONFLICT(entity_type, id) DO UPDATE SET data = excluded.data,"
                " updated_at = CURRENT_TIMESTAMP",
                (entity_type, entity.id, entity.model_dump_json()),
            )
            cursor.execute(
                "INSERT INTO sequences (entity_type, last_id) VALUES (?, ?)"
                " ON CONFLICT(entity_type) DO UPDATE SET last_id = MAX(last_id, excluded.last_id)",
                (entity_type, entity.id),
            )

    def _remove(self, entity_type: str, entity_id: int) -> None:
        with get_cursor(self._db_url) as cursor:
            cursor.execute(
                "DELETE FROM records WHERE entity_type = ? AND id = ?",
                (entity_type, entity_id),
            )

    def _remove_all(self, entity_type: str) -> None:
        with get_cursor(self._db_url) as cursor:
            cursor.execute("DELETE FROM records WHERE entity_type = ?", (entity_type,))
