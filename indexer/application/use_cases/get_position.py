from __future__ import annotations

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.position import Position
from indexer.domain.exceptions import MissingEntityError


class GetPositionUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, position_id: str) -> Position:
        position = self._store.get(EntityType.POSITION, position_id)
        if position is None:
            raise MissingEntityError(f"Position not found: {position_id}.")
        return position
