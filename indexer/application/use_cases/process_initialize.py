from __future__ import annotations

import logging

from indexer.application.dto.process_event import ProcessEventOutput
from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.application.ports.token_metadata_port import TokenMetadataPort
from indexer.application.use_cases.ledger_loading import (
    get_or_create_token,
    load_hook_stats,
    load_intervals,
)
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.events import InitializeEvent
from indexer.domain.exceptions import PoolAlreadyInitializedError
from indexer.domain.services.pool_ledger import InitializeSnapshot, apply_initialize


logger = logging.getLogger(__name__)


class ProcessInitializeUseCase:
    def __init__(self, *, store: EntityStorePort, metadata_port: TokenMetadataPort):
        self._store = store
        self._metadata_port = metadata_port

    def execute(self, event: InitializeEvent) -> ProcessEventOutput:
        meta = event.meta
        pool_key = meta.pool_key
        if self._store.get(EntityType.POOL, pool_key) is not None:
            raise PoolAlreadyInitializedError(f"Pool already initialized: {pool_key}.")

        token0 = get_or_create_token(
            store=self._store,
            metadata_port=self._metadata_port,
            chain_id=meta.chain_id,
            address=event.token0,
        )
        token1 = get_or_create_token(
            store=self._store,
            metadata_port=self._metadata_port,
            chain_id=meta.chain_id,
            address=event.token1,
        )
        snapshot = InitializeSnapshot(
            token0=token0,
            token1=token1,
            hook_stats=load_hook_stats(store=self._store, chain_id=meta.chain_id, hooks=event.hooks),
            intervals=load_intervals(
                store=self._store,
                pool_key=pool_key,
                token0_id=token0.id,
                token1_id=token1.id,
                timestamp=meta.block_timestamp,
            ),
        )
        update = apply_initialize(snapshot, event)
        records = update.records()
        self._store.set_many(records)

        logger.info(
            "ledger: pool_initialized pool=%s name=%s tick=%s sqrt_price=%s",
            pool_key,
            update.pool.name,
            update.pool.tick,
            update.pool.sqrt_price,
        )
        return ProcessEventOutput(
            kind=event.KIND,
            pool_key=pool_key,
            block_number=meta.block_number,
            log_index=meta.log_index,
            applied=True,
            records_written=len(records),
        )
