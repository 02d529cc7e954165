from __future__ import annotations

from collections.abc import Iterable
from threading import Lock
from typing import Any

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.domain.entities.entity_type import EntityType


class InMemoryEntityStore(EntityStorePort):
    def __init__(self):
        self._records: dict[tuple[EntityType, str], Any] = {}
        self._lock = Lock()

    def get(self, entity_type: EntityType, entity_id: str) -> Any | None:
        with self._lock:
            return self._records.get((EntityType(entity_type), entity_id))

    def get_many(self, entity_type: EntityType, entity_ids: Iterable[str]) -> dict[str, Any]:
        kind = EntityType(entity_type)
        with self._lock:
            return {
                entity_id: self._records[(kind, entity_id)]
                for entity_id in entity_ids
                if (kind, entity_id) in self._records
            }

    def set(self, record: Any) -> None:
        self.set_many([record])

    def set_many(self, records: Iterable[Any]) -> None:
        staged = {(record.ENTITY_TYPE, record.id): record for record in records}
        with self._lock:
            self._records.update(staged)

    def all(self, entity_type: EntityType) -> list[Any]:
        kind = EntityType(entity_type)
        with self._lock:
            return [record for (key_type, _), record in self._records.items() if key_type == kind]
