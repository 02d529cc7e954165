from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from indexer.domain.entities.entity_type import EntityType


class IntervalPeriod(IntEnum):
    FIVE_MINUTES = 300
    HOUR = 3600
    DAY = 86400


INTERVAL_PERIODS: tuple[IntervalPeriod, ...] = (
    IntervalPeriod.FIVE_MINUTES,
    IntervalPeriod.HOUR,
    IntervalPeriod.DAY,
)


@dataclass(frozen=True)
class PoolIntervalBucket:
    """OHLC of the pool sqrt price over one period."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.POOL_INTERVAL

    id: str
    chain_id: int
    pool_id: str
    period: int
    start_timestamp: int
    open: int
    high: int
    low: int
    close: int
    liquidity: int
    sqrt_price: int
    tick: int
    tvl0: int = 0
    tvl1: int = 0
    volume0: int = 0
    volume1: int = 0
    fees0: int = 0
    fees1: int = 0
    tx_count: int = 0
    swap_count: int = 0
    modify_liquidity_count: int = 0


@dataclass(frozen=True)
class TokenIntervalBucket:
    """OHLC of the token's running tvl over one period."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TOKEN_INTERVAL

    id: str
    chain_id: int
    token_id: str
    period: int
    start_timestamp: int
    open: int
    high: int
    low: int
    close: int
    tvl: int = 0
    volume: int = 0
    fees: int = 0
    tx_count: int = 0
    swap_count: int = 0
    modify_liquidity_count: int = 0
