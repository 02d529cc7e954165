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
from indexer.domain.entities.events import ModifyLiquidityEvent
from indexer.domain.services import entity_ids
from indexer.domain.services.pool_ledger import ModifyLiquiditySnapshot, apply_modify_liquidity


logger = logging.getLogger(__name__)


class ProcessModifyLiquidityUseCase:
    def __init__(self, *, store: EntityStorePort):
        self._store = store

    def execute(self, event: ModifyLiquidityEvent) -> ProcessEventOutput:
        meta = event.meta
        pool = load_pool(store=self._store, pool_key=meta.pool_key)
        token0, token1 = load_pool_tokens(store=self._store, pool=pool)

        owner = event.sender.lower()
        lower_id = entity_ids.tick_id(pool.id, event.tick_lower)
        upper_id = entity_ids.tick_id(pool.id, event.tick_upper)
        ticks = self._store.get_many(EntityType.TICK, [lower_id, upper_id])

        snapshot = ModifyLiquiditySnapshot(
            pool=pool,
            token0=token0,
            token1=token1,
            lower_tick=ticks.get(lower_id),
            upper_tick=ticks.get(upper_id),
            position=self._store.get(
                EntityType.POSITION,
                entity_ids.position_id(pool.id, owner, event.tick_lower, event.tick_upper),
            ),
            liquidity_provider=self._store.get(
                EntityType.LIQUIDITY_PROVIDER,
                entity_ids.liquidity_provider_id(pool.id, owner),
            ),
            hook_stats=load_hook_stats(store=self._store, chain_id=pool.chain_id, hooks=pool.hooks),
            intervals=load_intervals(
                store=self._store,
                pool_key=pool.id,
                token0_id=token0.id,
                token1_id=token1.id,
                timestamp=meta.block_timestamp,
            ),
        )
        update = apply_modify_liquidity(snapshot, event)
        records = update.records()
        self._store.set_many(records)

        logger.debug(
            "ledger: liquidity_modified pool=%s owner=%s range=[%s,%s] delta=%s",
            pool.id,
            owner,
            event.tick_lower,
            event.tick_upper,
            event.liquidity_delta,
        )
        return ProcessEventOutput(
            kind=event.KIND,
            pool_key=pool.id,
            block_number=meta.block_number,
            log_index=meta.log_index,
            applied=True,
            records_written=len(records),
        )
