"""
Typed query facade over the record store.

A repository is bound to one entity type and adds field-based lookups
and counts on top of the store's find/scan/upsert/delete primitives.
"""

from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from ..core.store import RecordStore

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseRepository(Generic[ModelT]):
    entity_type: str = ""
    model: Type[BaseModel] = BaseModel

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def find_by_id(self, entity_id: Optional[int]) -> Optional[ModelT]:
        return self.store.find_by_id(self.entity_type, entity_id)

    def find_all(self) -> List[ModelT]:
        return self.store.find_all(self.entity_type)

    def find_where(self, predicate: Callable[[ModelT], bool]) -> List[ModelT]:
        return self.store.scan(self.entity_type, predicate)

    def find_by(self, field: str, value: Any) -> List[ModelT]:
        return self.find_where(lambda entity: getattr(entity, field) == value)

    def find_one_by(self, field: str, value: Any) -> Optional[ModelT]:
        matches = self.find_by(field, value)
        return matches[0] if matches else None

    def count(self) -> int:
        return len(self.find_all())

    def count_by(self, field: str, value: Any) -> int:
        return len(self.find_by(field, value))

    def exists(self, entity_id: Optional[int]) -> bool:
        return self.find_by_id(entity_id) is not None

    def save(self, entity: ModelT) -> ModelT:
        """Insert or update ``entity``; a missing id is allocated by the store."""
        return self.store.upsert(self.entity_type, entity)

    def delete(self, entity_id: int) -> bool:
        return self.store.delete(self.entity_type, entity_id)

    def next_id(self) -> int:
        return self.store.next_id(self.entity_type)
