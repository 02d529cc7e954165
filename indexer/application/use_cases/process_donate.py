from __future__ import annotations

import logging

from indexer.application.dto.process_event import ProcessEventOutput
from indexer.application.ports.entity_store_port import EntityStorePort
from indexer.application.use_cases.ledger_loading import (
    load_hook_stats,
    load_intervals,
    load_pool,
    load_pool_tokens,
)
from indexer.domain.entities.events import DonateEvent
from indexer.domain.services.pool_ledger import DonateSnapshot, apply_donate


logger = logging.getLogger(__name__)


class ProcessDonateUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, event: DonateEvent) -> ProcessEventOutput:
        meta = event.meta
        pool = load_pool(store=self._store, pool_key=meta.pool_key)
        token0, token1 = load_pool_tokens(store=self._store, pool=pool)

        snapshot = DonateSnapshot(
            pool=pool,
            token0=token0,
            token1=token1,
            hook_stats=load_hook_stats(store=self._store, chain_id=pool.chain_id, hooks=pool.hooks),
            intervals=load_intervals(
                store=self._store,
                pool_key=pool.id,
                token0_id=token0.id,
                token1_id=token1.id,
                timestamp=meta.block_timestamp,
            ),
        )
        update = apply_donate(snapshot, event)
        records = update.records()
        self._store.set_many(records)

        if pool.liquidity == 0:
            logger.info(
                "ledger: donate_without_liquidity pool=%s amount0=%s amount1=%s",
                pool.id,
                event.amount0,
                event.amount1,
            )
        return ProcessEventOutput(
            kind=event.KIND,
            pool_key=pool.id,
            block_number=meta.block_number,
            log_index=meta.log_index,
            applied=True,
            records_written=len(records),
        )
