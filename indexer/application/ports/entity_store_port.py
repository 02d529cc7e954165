from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

from indexer.domain.entities.entity_type import EntityType


class EntityStorePort(Protocol):
    def get(self, entity_type: EntityType, entity_id: str) -> Any | None:
        ...

    def get_many(self, entity_type: EntityType, entity_ids: Iterable[str]) -> dict[str, Any]:
        ...

    def set(self, record: Any) -> None:
        ...

    def set_many(self, records: Iterable[Any]) -> None:
        ...
