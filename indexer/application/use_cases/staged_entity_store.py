from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.domain.entities.entity_type import EntityType


class StagedEntityStore(EntityStorePort):
    """Buffers writes over another store until commit().

    Reads see staged records first, so later events in a batch observe the
    state written by earlier ones. Nothing reaches the backing store unless
    commit() is called.
    """

    def __init__(self, backing: EntityStorePort):
        self._backing = backing
        self._staged: dict[tuple[EntityType, str], Any] = {}

    def get(self, entity_type: EntityType, entity_id: str) -> Any | None:
        key = (EntityType(entity_type), entity_id)
        if key in self._staged:
            return self._staged[key]
        return self._backing.get(entity_type, entity_id)

    def get_many(self, entity_type: EntityType, entity_ids: Iterable[str]) -> dict[str, Any]:
        kind = EntityType(entity_type)
        found: dict[str, Any] = {}
        missing: list[str] = []
        for entity_id in entity_ids:
            if (kind, entity_id) in self._staged:
                found[entity_id] = self._staged[(kind, entity_id)]
            else:
                missing.append(entity_id)
        if missing:
            found.update(self._backing.get_many(kind, missing))
        return found

    def set(self, record: Any) -> None:
        self.set_many([record])

    def set_many(self, records: Iterable[Any]) -> None:
        for record in records:
            self._staged[(record.ENTITY_TYPE, record.id)] = record

    @property
    def pending(self) -> int:
        return len(self._staged)

    def commit(self) -> int:
        records = list(self._staged.values())
        if records:
            self._backing.set_many(records)
        self._staged.clear()
        return len(records)
