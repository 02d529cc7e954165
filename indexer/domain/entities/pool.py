from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from indexer.domain.entities.entity_type import EntityType


@dataclass(frozen=True)
class Pool:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.POOL

    id: str
    chain_id: int
    pool_id: str
    name: str
    token0_id: str
    token1_id: str
    fee_tier: int
    tick_spacing: int
    hooks: str
    tick: int
    sqrt_price: int
    liquidity: int = 0
    fee_growth_global0: int = 0
    fee_growth_global1: int = 0
    volume0: int = 0
    volume1: int = 0
    fees0: int = 0
    fees1: int = 0
    tvl0: int = 0
    tvl1: int = 0
    tx_count: int = 0
    swap_count: int = 0
    modify_liquidity_count: int = 0
    position_count: int = 0
    active_position_count: int = 0
    created_at_timestamp: int = 0
    created_at_block_number: int = 0


@dataclass(frozen=True)
class HookStats:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.HOOK_STATS

    id: str
    chain_id: int
    hooks: str
    first_pool_created_at: int
    pool_count: int = 0
    swap_count: int = 0
    volume0: int = 0
    volume1: int = 0
    fees0: int = 0
    fees1: int = 0
    tvl0: int = 0
    tvl1: int = 0
