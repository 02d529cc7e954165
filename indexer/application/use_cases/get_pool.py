from __future__ import annotations

from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.application.use_cases.ledger_loading import load_pool
from indexer.domain.entities.pool import Pool


class GetPoolUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, pool_key: str) -> Pool:
        return load_pool(store=self._store, pool_key=pool_key)
