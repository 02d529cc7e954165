from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from indexer.domain.entities.entity_type import EntityType


@dataclass(frozen=True)
class TransactionRecord:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRANSACTION

    id: str
    chain_id: int
    hash: str
    block_number: int
    timestamp: int


@dataclass(frozen=True)
class SwapRecord:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SWAP

    id: str
    chain_id: int
    transaction_id: str
    timestamp: int
    pool_id: str
    token0_id: str
    token1_id: str
    sender: str
    origin: str
    amount0: int
    amount1: int
    fees0: int
    fees1: int
    tick: int
    sqrt_price: int
    log_index: int


@dataclass(frozen=True)
class ModifyLiquidityRecord:
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.MODIFY_LIQUIDITY

    id: str
    chain_id: int
    transaction_id: str
    timestamp: int
    pool_id: str
    token0_id: str
    token1_id: str
    sender: str
    origin: str
    amount: int
    amount0: int
    amount1: int
    tick_lower: int
    tick_upper: int
    log_index: int
