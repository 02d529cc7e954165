from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from indexer.api.deps import get_pool_interval_use_case, get_pool_use_case, get_tick_use_case
from indexer.api.schemas.ledger import PoolIntervalResponse, PoolResponse, TickResponse
from indexer.application.dto.entity_lookup import GetPoolIntervalInput, GetTickInput
from indexer.application.use_cases.get_pool import GetPoolUseCase
from indexer.application.use_cases.get_pool_interval import GetPoolIntervalUseCase
from indexer.application.use_cases.get_tick import GetTickUseCase
from indexer.domain.exceptions import IntervalPeriodError, MissingEntityError

router = APIRouter()


@router.get("/v1/pools/{pool_key}", response_model=PoolResponse)
def get_pool(
    pool_key: str,
    use_case: GetPoolUseCase = Depends(get_pool_use_case),
):
    try:
        pool = use_case.execute(pool_key)
    except MissingEntityError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return PoolResponse(
        id=pool.id,
        chain_id=pool.chain_id,
        pool_id=pool.pool_id,
        name=pool.name,
        token0_id=pool.token0_id,
        token1_id=pool.token1_id,
        fee_tier=pool.fee_tier,
        tick_spacing=pool.tick_spacing,
        hooks=pool.hooks,
        tick=pool.tick,
        sqrt_price=str(pool.sqrt_price),
        liquidity=str(pool.liquidity),
        fee_growth_global0=str(pool.fee_growth_global0),
        fee_growth_global1=str(pool.fee_growth_global1),
        volume0=str(pool.volume0),
        volume1=str(pool.volume1),
        fees0=str(pool.fees0),
        fees1=str(pool.fees1),
        tvl0=str(pool.tvl0),
        tvl1=str(pool.tvl1),
        tx_count=pool.tx_count,
        swap_count=pool.swap_count,
        modify_liquidity_count=pool.modify_liquidity_count,
        position_count=pool.position_count,
        active_position_count=pool.active_position_count,
        created_at_timestamp=pool.created_at_timestamp,
        created_at_block_number=pool.created_at_block_number,
    )


@router.get("/v1/pools/{pool_key}/ticks/{tick_idx}", response_model=TickResponse)
def get_tick(
    pool_key: str,
    tick_idx: int,
    use_case: GetTickUseCase = Depends(get_tick_use_case),
):
    try:
        tick = use_case.execute(GetTickInput(pool_key=pool_key, tick_idx=tick_idx))
    except MissingEntityError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return TickResponse(
        id=tick.id,
        pool_id=tick.pool_id,
        tick_idx=tick.tick_idx,
        liquidity_gross=str(tick.liquidity_gross),
        liquidity_net=str(tick.liquidity_net),
        fee_growth_outside0=str(tick.fee_growth_outside0),
        fee_growth_outside1=str(tick.fee_growth_outside1),
        position_count=tick.position_count,
        created_at_timestamp=tick.created_at_timestamp,
        created_at_block_number=tick.created_at_block_number,
    )


@router.get("/v1/pools/{pool_key}/intervals/{period}", response_model=PoolIntervalResponse)
def get_pool_interval(
    pool_key: str,
    period: int,
    timestamp: int = Query(..., ge=0, description="Any unix timestamp inside the bucket."),
    use_case: GetPoolIntervalUseCase = Depends(get_pool_interval_use_case),
):
    try:
        bucket = use_case.execute(
            GetPoolIntervalInput(pool_key=pool_key, period=period, timestamp=timestamp)
        )
    except IntervalPeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except MissingEntityError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return PoolIntervalResponse(
        id=bucket.id,
        pool_id=bucket.pool_id,
        period=bucket.period,
        start_timestamp=bucket.start_timestamp,
        open=str(bucket.open),
        high=str(bucket.high),
        low=str(bucket.low),
        close=str(bucket.close),
        liquidity=str(bucket.liquidity),
        sqrt_price=str(bucket.sqrt_price),
        tick=bucket.tick,
        tvl0=str(bucket.tvl0),
        tvl1=str(bucket.tvl1),
        volume0=str(bucket.volume0),
        volume1=str(bucket.volume1),
        fees0=str(bucket.fees0),
        fees1=str(bucket.fees1),
        tx_count=bucket.tx_count,
        swap_count=bucket.swap_count,
        modify_liquidity_count=bucket.modify_liquidity_count,
    )
