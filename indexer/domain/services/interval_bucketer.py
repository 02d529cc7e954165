from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any, TypeVar

from indexer.domain.entities.interval import (
    INTERVAL_PERIODS,
    PoolIntervalBucket,
    TokenIntervalBucket,
)
from indexer.domain.entities.pool import Pool
from indexer.domain.entities.token import Token
from indexer.domain.exceptions import IntervalPeriodError
from indexer.domain.services.entity_ids import interval_bucket_id


BucketT = TypeVar("BucketT", PoolIntervalBucket, TokenIntervalBucket)


def validate_period(period: int) -> int:
    if period not in INTERVAL_PERIODS:
        raise IntervalPeriodError(f"Unsupported interval period: {period}.")
    return int(period)


def period_start(timestamp: int, period: int) -> int:
    period = validate_period(period)
    return (timestamp // period) * period


def bucket_id(entity_id: str, timestamp: int, period: int) -> str:
    return interval_bucket_id(entity_id, period, period_start(timestamp, period))


def upsert_bucket(
    *,
    existing: BucketT | None,
    seed: Callable[[str, int], BucketT],
    entity_id: str,
    timestamp: int,
    period: int,
    value: int,
    **snapshot: Any,
) -> BucketT:
    """Record one touch of value in the bucket containing timestamp.

    seed(id, start_timestamp) builds the bucket on first touch; it must set
    open, high, low and close to value. snapshot fields overwrite the
    bucket's point-in-time state.
    """
    start = period_start(timestamp, period)
    key = interval_bucket_id(entity_id, period, start)
    if existing is not None and existing.id != key:
        raise IntervalPeriodError(f"Bucket {existing.id} does not cover {key}.")

    bucket = existing if existing is not None else seed(key, start)
    return replace(
        bucket,
        high=max(bucket.high, value),
        low=min(bucket.low, value),
        close=value,
        tx_count=bucket.tx_count + 1,
        **snapshot,
    )


def upsert_pool_bucket(
    *,
    existing: PoolIntervalBucket | None,
    pool: Pool,
    timestamp: int,
    period: int,
) -> PoolIntervalBucket:
    def seed(key: str, start: int) -> PoolIntervalBucket:
        return PoolIntervalBucket(
            id=key,
            chain_id=pool.chain_id,
            pool_id=pool.id,
            period=int(period),
            start_timestamp=start,
            open=pool.sqrt_price,
            high=pool.sqrt_price,
            low=pool.sqrt_price,
            close=pool.sqrt_price,
            liquidity=pool.liquidity,
            sqrt_price=pool.sqrt_price,
            tick=pool.tick,
        )

    return upsert_bucket(
        existing=existing,
        seed=seed,
        entity_id=pool.id,
        timestamp=timestamp,
        period=period,
        value=pool.sqrt_price,
        liquidity=pool.liquidity,
        sqrt_price=pool.sqrt_price,
        tick=pool.tick,
        tvl0=pool.tvl0,
        tvl1=pool.tvl1,
    )


def upsert_token_bucket(
    *,
    existing: TokenIntervalBucket | None,
    token: Token,
    timestamp: int,
    period: int,
) -> TokenIntervalBucket:
    def seed(key: str, start: int) -> TokenIntervalBucket:
        return TokenIntervalBucket(
            id=key,
            chain_id=token.chain_id,
            token_id=token.id,
            period=int(period),
            start_timestamp=start,
            open=token.tvl,
            high=token.tvl,
            low=token.tvl,
            close=token.tvl,
        )

    return upsert_bucket(
        existing=existing,
        seed=seed,
        entity_id=token.id,
        timestamp=timestamp,
        period=period,
        value=token.tvl,
        tvl=token.tvl,
    )
