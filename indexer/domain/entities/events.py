from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


ADDRESS_ZERO = "0x0000000000000000000000000000000000000000"


class EventKind(str, Enum):
    INITIALIZE = "initialize"
    MODIFY_LIQUIDITY = "modify_liquidity"
    SWAP = "swap"
    DONATE = "donate"


@dataclass(frozen=True)
class EventMeta:
    chain_id: int
    block_number: int
    block_timestamp: int
    transaction_hash: str
    log_index: int
    pool_id: str
    transaction_from: str = ""

    @property
    def pool_key(self) -> str:
        return f"{self.chain_id}_{self.pool_id}"

    @property
    def ordering_key(self) -> tuple[int, int]:
        return (self.block_number, self.log_index)


@dataclass(frozen=True)
class InitializeEvent:
    KIND: ClassVar[EventKind] = EventKind.INITIALIZE

    meta: EventMeta
    token0: str
    token1: str
    fee: int
    tick_spacing: int
    hooks: str
    sqrt_price: int
    tick: int


@dataclass(frozen=True)
class ModifyLiquidityEvent:
    KIND: ClassVar[EventKind] = EventKind.MODIFY_LIQUIDITY

    meta: EventMeta
    sender: str
    tick_lower: int
    tick_upper: int
    liquidity_delta: int


@dataclass(frozen=True)
class SwapEvent:
    KIND: ClassVar[EventKind] = EventKind.SWAP

    meta: EventMeta
    sender: str
    amount0: int
    amount1: int
    sqrt_price: int
    liquidity: int
    tick: int


@dataclass(frozen=True)
class DonateEvent:
    KIND: ClassVar[EventKind] = EventKind.DONATE

    meta: EventMeta
    amount0: int
    amount1: int


LedgerEvent = Union[InitializeEvent, ModifyLiquidityEvent, SwapEvent, DonateEvent]
