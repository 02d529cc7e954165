from __future__ import annotations

from pydantic import BaseModel, Field


class PoolResponse(BaseModel):
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
    sqrt_price: str = Field(..., description="Q64.96 sqrt price.")
    liquidity: str
    fee_growth_global0: str = Field(..., description="Q128.128 fee growth for token0.")
    fee_growth_global1: str = Field(..., description="Q128.128 fee growth for token1.")
    volume0: str
    volume1: str
    fees0: str
    fees1: str
    tvl0: str
    tvl1: str
    tx_count: int
    swap_count: int
    modify_liquidity_count: int
    position_count: int
    active_position_count: int
    created_at_timestamp: int
    created_at_block_number: int


class TickResponse(BaseModel):
    id: str
    pool_id: str
    tick_idx: int
    liquidity_gross: str
    liquidity_net: str
    fee_growth_outside0: str
    fee_growth_outside1: str
    position_count: int
    created_at_timestamp: int
    created_at_block_number: int


class PositionResponse(BaseModel):
    id: str
    pool_id: str
    owner: str
    liquidity_provider_id: str
    tick_lower: int
    tick_upper: int
    liquidity: str
    fee_growth_inside0_last: str
    fee_growth_inside1_last: str
    fees0: str
    fees1: str
    deposited0: str
    deposited1: str
    withdrawn0: str
    withdrawn1: str
    modify_liquidity_count: int
    transaction_id: str
    created_at_timestamp: int
    created_at_block_number: int


class PoolIntervalResponse(BaseModel):
    id: str
    pool_id: str
    period: int
    start_timestamp: int
    open: str
    high: str
    low: str
    close: str
    liquidity: str
    sqrt_price: str
    tick: int
    tvl0: str
    tvl1: str
    volume0: str
    volume1: str
    fees0: str
    fees1: str
    tx_count: int
    swap_count: int
    modify_liquidity_count: int
