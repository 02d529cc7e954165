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
from indexer.domain.entities.entity_type import EntityType
from indexer.domain.entities.events import SwapEvent
from indexer.domain.services import entity_ids
from indexer.domain.services.pool_ledger import SwapSnapshot, apply_swap
from indexer.domain.services.tick_crossing import candidate_ticks


logger = logging.getLogger(__name__)


class ProcessSwapUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, event: SwapEvent) -> ProcessEventOutput:
        meta = event.meta
        pool = load_pool(store=self._store, pool_key=meta.pool_key)
        token0, token1 = load_pool_tokens(store=self._store, pool=pool)

        candidates = candidate_ticks(
            old_tick=pool.tick,
            new_tick=event.tick,
            tick_spacing=pool.tick_spacing,
        )
        ticks = self._store.get_many(
            EntityType.TICK,
            [entity_ids.tick_id(pool.id, idx) for idx in candidates],
        )

        snapshot = SwapSnapshot(
            pool=pool,
            token0=token0,
            token1=token1,
            ticks=ticks,
            hook_stats=load_hook_stats(store=self._store, chain_id=pool.chain_id, hooks=pool.hooks),
            intervals=load_intervals(
                store=self._store,
                pool_key=pool.id,
                token0_id=token0.id,
                token1_id=token1.id,
                timestamp=meta.block_timestamp,
            ),
        )
        update = apply_swap(snapshot, event)
        records = update.records()
        self._store.set_many(records)

        if update.ticks:
            logger.debug(
                "ledger: ticks_crossed pool=%s from=%s to=%s crossed=%s",
                pool.id,
                pool.tick,
                event.tick,
                [tick.tick_idx for tick in update.ticks],
            )
        return ProcessEventOutput(
            kind=event.KIND,
            pool_key=pool.id,
            block_number=meta.block_number,
            log_index=meta.log_index,
            applied=True,
            records_written=len(records),
        )
