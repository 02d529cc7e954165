from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from indexer.domain.entities.entity_type import EntityType


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    decimals: int


@dataclass(frozen=True)
class Token:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TOKEN

    id: str
    chain_id: int
    address: str
    symbol: str
    name: str
    decimals: int
    volume: int = 0
    fees: int = 0
    tvl: int = 0
    tx_count: int = 0
    pool_count: int = 0
    swap_count: int = 0
    modify_liquidity_count: int = 0
    position_count: int = 0
