from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from indexer.domain.entities.entity_type import EntityType


@dataclass(frozen=True)
class Position:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.POSITION

    id: str
    chain_id: int
    pool_id: str
    owner: str
    liquidity_provider_id: str
    token0_id: str
    token1_id: str
    tick_lower: int
    tick_upper: int
    transaction_id: str
    liquidity: int = 0
    fee_growth_inside0_last: int = 0
    fee_growth_inside1_last: int = 0
    fees0: int = 0
    fees1: int = 0
    deposited0: int = 0
    deposited1: int = 0
    withdrawn0: int = 0
    withdrawn1: int = 0
    modify_liquidity_count: int = 0
    created_at_timestamp: int = 0
    created_at_block_number: int = 0


@dataclass(frozen=True)
class LiquidityProvider:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.LIQUIDITY_PROVIDER

    id: str
    chain_id: int
    pool_id: str
    address: str
    deposited0: int = 0
    deposited1: int = 0
    withdrawn0: int = 0
    withdrawn1: int = 0
    fees0: int = 0
    fees1: int = 0
    position_count: int = 0
    modify_liquidity_count: int = 0
    created_at_timestamp: int = 0
    created_at_block_number: int = 0
