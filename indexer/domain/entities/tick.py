from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from indexer.domain.entities.entity_type import EntityType


@dataclass(frozen=True)
class Tick:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TICK

    id: str
    chain_id: int
    pool_id: str
    tick_idx: int
    liquidity_gross: int = 0
    liquidity_net: int = 0
    fee_growth_outside0: int = 0
    fee_growth_outside1: int = 0
    position_count: int = 0
    created_at_timestamp: int = 0
    created_at_block_number: int = 0
