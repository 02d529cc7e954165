from __future__ import annotations

from indexer.application.dto.entity_lookup import GetTickInput
from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.tick import Tick
from indexer.domain.exceptions import MissingEntityError
from indexer.domain.services.entity_ids import tick_id


class GetTickUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, command: GetTickInput) -> Tick:
        key = tick_id(command.pool_key, command.tick_idx)
        tick = self._store.get(EntityType.TICK, key)
        if tick is None:
            raise MissingEntityError(f"Tick not initialized: {key}.")
        return tick
