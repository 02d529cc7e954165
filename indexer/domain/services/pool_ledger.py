from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

from indexer.domain.entities.events import (
    ADDRESS_ZERO,
    DonateEvent,
    EventMeta,
    InitializeEvent,
    ModifyLiquidityEvent,
    SwapEvent,
)
from indexer.domain.entities.interval import (
    INTERVAL_PERIODS,
    PoolIntervalBucket,
    TokenIntervalBucket,
)
from indexer.domain.entities.pool import HookStats, Pool
from indexer.domain.entities.position import LiquidityProvider, Position
from indexer.domain.entities.records import (
    ModifyLiquidityRecord,
    SwapRecord,
    TransactionRecord,
)
from indexer.domain.entities.tick import Tick
from indexer.domain.entities.token import Token
from indexer.domain.exceptions import PositionLiquidityUnderflowError
from indexer.domain.services import entity_ids
from indexer.domain.services.amount_math import compute_amounts
from indexer.domain.services.fee_growth import (
    accrued_fees,
    apply_fee_growth,
    fee_growth_inside,
    flip_fee_growth_outside,
    swap_fee,
)
from indexer.domain.services.interval_bucketer import upsert_pool_bucket, upsert_token_bucket
from indexer.domain.services.tick_crossing import crossed_ticks


LedgerRecord = Union[
    Pool,
    Token,
    Tick,
    Position,
    LiquidityProvider,
    HookStats,
    PoolIntervalBucket,
    TokenIntervalBucket,
    TransactionRecord,
    SwapRecord,
    ModifyLiquidityRecord,
]


@dataclass(frozen=True)
class IntervalSnapshot:
    """Existing buckets keyed by period for the pool and its two tokens."""

    pool: Mapping[int, PoolIntervalBucket] = field(default_factory=dict)
    token0: Mapping[int, TokenIntervalBucket] = field(default_factory=dict)
    token1: Mapping[int, TokenIntervalBucket] = field(default_factory=dict)


@dataclass(frozen=True)
class InitializeSnapshot:
    token0: Token
    token1: Token
    hook_stats: HookStats | None
    intervals: IntervalSnapshot = field(default_factory=IntervalSnapshot)


@dataclass(frozen=True)
class ModifyLiquiditySnapshot:
    pool: Pool
    token0: Token
    token1: Token
    lower_tick: Tick | None
    upper_tick: Tick | None
    position: Position | None
    liquidity_provider: LiquidityProvider | None
    hook_stats: HookStats | None
    intervals: IntervalSnapshot = field(default_factory=IntervalSnapshot)


@dataclass(frozen=True)
class SwapSnapshot:
    pool: Pool
    token0: Token
    token1: Token
    ticks: Mapping[str, Tick]
    hook_stats: HookStats | None
    intervals: IntervalSnapshot = field(default_factory=IntervalSnapshot)


@dataclass(frozen=True)
class DonateSnapshot:
    pool: Pool
    token0: Token
    token1: Token
    hook_stats: HookStats | None
    intervals: IntervalSnapshot = field(default_factory=IntervalSnapshot)


@dataclass(frozen=True)
class LedgerUpdate:
    pool: Pool
    tokens: tuple[Token, ...]
    ticks: tuple[Tick, ...] = ()
    position: Position | None = None
    liquidity_provider: LiquidityProvider | None = None
    hook_stats: HookStats | None = None
    pool_buckets: tuple[PoolIntervalBucket, ...] = ()
    token_buckets: tuple[TokenIntervalBucket, ...] = ()
    transaction: TransactionRecord | None = None
    swap: SwapRecord | None = None
    modify_liquidity: ModifyLiquidityRecord | None = None

    def records(self) -> list[LedgerRecord]:
        optional = (
            self.position,
            self.liquidity_provider,
            self.hook_stats,
            self.transaction,
            self.swap,
            self.modify_liquidity,
        )
        return [
            self.pool,
            *self.tokens,
            *self.ticks,
            *self.pool_buckets,
            *self.token_buckets,
            *(record for record in optional if record is not None),
        ]


def has_hooks(hooks: str) -> bool:
    return hooks.lower() != ADDRESS_ZERO


def _add(record: Any, **deltas: int) -> Any:
    return replace(record, **{name: getattr(record, name) + value for name, value in deltas.items()})


def _touch_intervals(
    *,
    pool: Pool,
    token0: Token,
    token1: Token,
    timestamp: int,
    intervals: IntervalSnapshot,
    pool_deltas: Mapping[str, int],
    token0_deltas: Mapping[str, int],
    token1_deltas: Mapping[str, int],
) -> tuple[tuple[PoolIntervalBucket, ...], tuple[TokenIntervalBucket, ...]]:
    pool_buckets = []
    token_buckets = []
    for period in INTERVAL_PERIODS:
        pool_bucket = upsert_pool_bucket(
            existing=intervals.pool.get(period),
            pool=pool,
            timestamp=timestamp,
            period=period,
        )
        pool_buckets.append(_add(pool_bucket, **pool_deltas))
        for token, existing, deltas in (
            (token0, intervals.token0, token0_deltas),
            (token1, intervals.token1, token1_deltas),
        ):
            token_bucket = upsert_token_bucket(
                existing=existing.get(period),
                token=token,
                timestamp=timestamp,
                period=period,
            )
            token_buckets.append(_add(token_bucket, **deltas))
    return tuple(pool_buckets), tuple(token_buckets)


def _transaction(meta: EventMeta) -> TransactionRecord:
    return TransactionRecord(
        id=entity_ids.transaction_id(meta.chain_id, meta.transaction_hash),
        chain_id=meta.chain_id,
        hash=meta.transaction_hash,
        block_number=meta.block_number,
        timestamp=meta.block_timestamp,
    )


def apply_initialize(snapshot: InitializeSnapshot, event: InitializeEvent) -> LedgerUpdate:
    meta = event.meta
    token0 = _add(snapshot.token0, pool_count=1)
    token1 = _add(snapshot.token1, pool_count=1)

    hook_stats = None
    if has_hooks(event.hooks):
        hook_stats = snapshot.hook_stats
        if hook_stats is None:
            hook_stats = HookStats(
                id=entity_ids.hook_stats_id(meta.chain_id, event.hooks),
                chain_id=meta.chain_id,
                hooks=event.hooks,
                first_pool_created_at=meta.block_timestamp,
            )
        hook_stats = _add(hook_stats, pool_count=1)

    pool = Pool(
        id=meta.pool_key,
        chain_id=meta.chain_id,
        pool_id=meta.pool_id,
        name=f"{token0.symbol}/{token1.symbol}",
        token0_id=token0.id,
        token1_id=token1.id,
        fee_tier=event.fee,
        tick_spacing=event.tick_spacing,
        hooks=event.hooks,
        tick=event.tick,
        sqrt_price=event.sqrt_price,
        created_at_timestamp=meta.block_timestamp,
        created_at_block_number=meta.block_number,
    )

    pool_buckets, token_buckets = _touch_intervals(
        pool=pool,
        token0=token0,
        token1=token1,
        timestamp=meta.block_timestamp,
        intervals=snapshot.intervals,
        pool_deltas={},
        token0_deltas={},
        token1_deltas={},
    )
    return LedgerUpdate(
        pool=pool,
        tokens=(token0, token1),
        hook_stats=hook_stats,
        pool_buckets=pool_buckets,
        token_buckets=token_buckets,
    )


def _new_tick(pool: Pool, tick_idx: int, meta: EventMeta) -> Tick:
    return Tick(
        id=entity_ids.tick_id(pool.id, tick_idx),
        chain_id=pool.chain_id,
        pool_id=pool.id,
        tick_idx=tick_idx,
        created_at_timestamp=meta.block_timestamp,
        created_at_block_number=meta.block_number,
    )


def apply_modify_liquidity(
    snapshot: ModifyLiquiditySnapshot,
    event: ModifyLiquidityEvent,
) -> LedgerUpdate:
    meta = event.meta
    pool = snapshot.pool
    delta = event.liquidity_delta
    is_adding = delta > 0
    owner = event.sender.lower()

    amounts = compute_amounts(
        liquidity_delta=delta,
        tick_lower=event.tick_lower,
        tick_upper=event.tick_upper,
        sqrt_price_current=pool.sqrt_price,
    )

    pool = _add(
        pool,
        tx_count=1,
        modify_liquidity_count=1,
        tvl0=amounts.amount0,
        tvl1=amounts.amount1,
    )
    if event.tick_lower <= pool.tick < event.tick_upper:
        pool = _add(pool, liquidity=delta)

    token0 = _add(snapshot.token0, tx_count=1, modify_liquidity_count=1, tvl=amounts.amount0)
    token1 = _add(snapshot.token1, tx_count=1, modify_liquidity_count=1, tvl=amounts.amount1)

    hook_stats = snapshot.hook_stats
    if hook_stats is not None:
        hook_stats = _add(hook_stats, tvl0=amounts.amount0, tvl1=amounts.amount1)

    prior = snapshot.position
    lower_tick = snapshot.lower_tick
    if lower_tick is None:
        lower_tick = _new_tick(pool, event.tick_lower, meta)
    upper_tick = snapshot.upper_tick
    if upper_tick is None:
        upper_tick = _new_tick(pool, event.tick_upper, meta)
    lower_tick = _add(lower_tick, liquidity_gross=delta, liquidity_net=delta)
    upper_tick = _add(upper_tick, liquidity_gross=delta, liquidity_net=-delta)
    if prior is None and is_adding:
        lower_tick = _add(lower_tick, position_count=1)
        upper_tick = _add(upper_tick, position_count=1)

    inside0 = fee_growth_inside(
        fee_growth_global=pool.fee_growth_global0,
        fee_growth_outside_lower=lower_tick.fee_growth_outside0,
        fee_growth_outside_upper=upper_tick.fee_growth_outside0,
        tick_lower=event.tick_lower,
        tick_upper=event.tick_upper,
        tick_current=pool.tick,
    )
    inside1 = fee_growth_inside(
        fee_growth_global=pool.fee_growth_global1,
        fee_growth_outside_lower=lower_tick.fee_growth_outside1,
        fee_growth_outside_upper=upper_tick.fee_growth_outside1,
        tick_lower=event.tick_lower,
        tick_upper=event.tick_upper,
        tick_current=pool.tick,
    )

    transaction = _transaction(meta)
    provider = snapshot.liquidity_provider
    if provider is None:
        provider = LiquidityProvider(
            id=entity_ids.liquidity_provider_id(pool.id, owner),
            chain_id=pool.chain_id,
            pool_id=pool.id,
            address=owner,
            created_at_timestamp=meta.block_timestamp,
            created_at_block_number=meta.block_number,
        )
    position = prior
    if position is None:
        position = Position(
            id=entity_ids.position_id(pool.id, owner, event.tick_lower, event.tick_upper),
            chain_id=pool.chain_id,
            pool_id=pool.id,
            owner=owner,
            liquidity_provider_id=provider.id,
            token0_id=pool.token0_id,
            token1_id=pool.token1_id,
            tick_lower=event.tick_lower,
            tick_upper=event.tick_upper,
            transaction_id=transaction.id,
            created_at_timestamp=meta.block_timestamp,
            created_at_block_number=meta.block_number,
        )

    if prior is not None and prior.liquidity > 0:
        fees0 = accrued_fees(
            liquidity=prior.liquidity,
            fee_growth_inside_now=inside0,
            fee_growth_inside_last=prior.fee_growth_inside0_last,
        )
        fees1 = accrued_fees(
            liquidity=prior.liquidity,
            fee_growth_inside_now=inside1,
            fee_growth_inside_last=prior.fee_growth_inside1_last,
        )
        position = _add(position, fees0=fees0, fees1=fees1)
        provider = _add(provider, fees0=fees0, fees1=fees1)

    new_liquidity = position.liquidity + delta
    if new_liquidity < 0:
        raise PositionLiquidityUnderflowError(
            f"Position {position.id} liquidity {position.liquidity} cannot absorb delta {delta}."
        )

    if is_adding:
        flow = {"deposited0": amounts.amount0_abs, "deposited1": amounts.amount1_abs}
    else:
        flow = {"withdrawn0": amounts.amount0_abs, "withdrawn1": amounts.amount1_abs}
    position = replace(
        _add(position, modify_liquidity_count=1, **flow),
        liquidity=new_liquidity,
        fee_growth_inside0_last=inside0,
        fee_growth_inside1_last=inside1,
    )
    provider = _add(provider, modify_liquidity_count=1, **flow)

    if prior is None:
        provider = _add(provider, position_count=1)
        pool = _add(pool, position_count=1)
        token0 = _add(token0, position_count=1)
        token1 = _add(token1, position_count=1)

    prior_liquidity = prior.liquidity if prior is not None else 0
    if new_liquidity > 0 and prior_liquidity == 0:
        pool = _add(pool, active_position_count=1)
    elif new_liquidity == 0 and prior_liquidity > 0:
        pool = _add(pool, active_position_count=-1)

    record = ModifyLiquidityRecord(
        id=entity_ids.modify_liquidity_id(transaction.id, meta.log_index),
        chain_id=meta.chain_id,
        transaction_id=transaction.id,
        timestamp=meta.block_timestamp,
        pool_id=pool.id,
        token0_id=pool.token0_id,
        token1_id=pool.token1_id,
        sender=event.sender,
        origin=meta.transaction_from.lower(),
        amount=delta,
        amount0=amounts.amount0,
        amount1=amounts.amount1,
        tick_lower=event.tick_lower,
        tick_upper=event.tick_upper,
        log_index=meta.log_index,
    )

    counted = {"modify_liquidity_count": 1}
    pool_buckets, token_buckets = _touch_intervals(
        pool=pool,
        token0=token0,
        token1=token1,
        timestamp=meta.block_timestamp,
        intervals=snapshot.intervals,
        pool_deltas=counted,
        token0_deltas=counted,
        token1_deltas=counted,
    )
    return LedgerUpdate(
        pool=pool,
        tokens=(token0, token1),
        ticks=(lower_tick, upper_tick),
        position=position,
        liquidity_provider=provider,
        hook_stats=hook_stats,
        pool_buckets=pool_buckets,
        token_buckets=token_buckets,
        transaction=transaction,
        modify_liquidity=record,
    )


def apply_swap(snapshot: SwapSnapshot, event: SwapEvent) -> LedgerUpdate:
    meta = event.meta
    prior = snapshot.pool

    # Event amounts are signed from the caller's side; flip to the pool's.
    amount0 = -event.amount0
    amount1 = -event.amount1
    amount0_abs = abs(amount0)
    amount1_abs = abs(amount1)
    fees0 = swap_fee(amount_abs=amount0_abs, fee_tier=prior.fee_tier)
    fees1 = swap_fee(amount_abs=amount1_abs, fee_tier=prior.fee_tier)

    fee_growth_global0 = apply_fee_growth(
        fee_growth_global=prior.fee_growth_global0,
        fees=fees0,
        active_liquidity=prior.liquidity,
    )
    fee_growth_global1 = apply_fee_growth(
        fee_growth_global=prior.fee_growth_global1,
        fees=fees1,
        active_liquidity=prior.liquidity,
    )

    flipped = []
    for tick_idx in crossed_ticks(
        pool_id=prior.id,
        old_tick=prior.tick,
        new_tick=event.tick,
        tick_spacing=prior.tick_spacing,
        ticks=snapshot.ticks,
    ):
        tick = snapshot.ticks[entity_ids.tick_id(prior.id, tick_idx)]
        flipped.append(
            replace(
                tick,
                fee_growth_outside0=flip_fee_growth_outside(
                    fee_growth_global=fee_growth_global0,
                    fee_growth_outside=tick.fee_growth_outside0,
                ),
                fee_growth_outside1=flip_fee_growth_outside(
                    fee_growth_global=fee_growth_global1,
                    fee_growth_outside=tick.fee_growth_outside1,
                ),
            )
        )

    pool = replace(
        _add(
            prior,
            volume0=amount0_abs,
            volume1=amount1_abs,
            fees0=fees0,
            fees1=fees1,
            tvl0=amount0,
            tvl1=amount1,
            tx_count=1,
            swap_count=1,
        ),
        fee_growth_global0=fee_growth_global0,
        fee_growth_global1=fee_growth_global1,
        liquidity=event.liquidity,
        tick=event.tick,
        sqrt_price=event.sqrt_price,
    )
    token0 = _add(
        snapshot.token0,
        volume=amount0_abs,
        fees=fees0,
        tvl=amount0,
        tx_count=1,
        swap_count=1,
    )
    token1 = _add(
        snapshot.token1,
        volume=amount1_abs,
        fees=fees1,
        tvl=amount1,
        tx_count=1,
        swap_count=1,
    )

    hook_stats = snapshot.hook_stats
    if hook_stats is not None:
        hook_stats = _add(
            hook_stats,
            swap_count=1,
            volume0=amount0_abs,
            volume1=amount1_abs,
            fees0=fees0,
            fees1=fees1,
            tvl0=amount0,
            tvl1=amount1,
        )

    transaction = _transaction(meta)
    swap = SwapRecord(
        id=entity_ids.swap_id(meta.chain_id, meta.transaction_hash, meta.log_index),
        chain_id=meta.chain_id,
        transaction_id=transaction.id,
        timestamp=meta.block_timestamp,
        pool_id=pool.id,
        token0_id=pool.token0_id,
        token1_id=pool.token1_id,
        sender=event.sender,
        origin=meta.transaction_from.lower(),
        amount0=amount0,
        amount1=amount1,
        fees0=fees0,
        fees1=fees1,
        tick=event.tick,
        sqrt_price=event.sqrt_price,
        log_index=meta.log_index,
    )

    pool_buckets, token_buckets = _touch_intervals(
        pool=pool,
        token0=token0,
        token1=token1,
        timestamp=meta.block_timestamp,
        intervals=snapshot.intervals,
        pool_deltas={
            "volume0": amount0_abs,
            "volume1": amount1_abs,
            "fees0": fees0,
            "fees1": fees1,
            "swap_count": 1,
        },
        token0_deltas={"volume": amount0_abs, "fees": fees0, "swap_count": 1},
        token1_deltas={"volume": amount1_abs, "fees": fees1, "swap_count": 1},
    )
    return LedgerUpdate(
        pool=pool,
        tokens=(token0, token1),
        ticks=tuple(flipped),
        hook_stats=hook_stats,
        pool_buckets=pool_buckets,
        token_buckets=token_buckets,
        transaction=transaction,
        swap=swap,
    )


def apply_donate(snapshot: DonateSnapshot, event: DonateEvent) -> LedgerUpdate:
    meta = event.meta
    prior = snapshot.pool
    amount0 = event.amount0
    amount1 = event.amount1

    # Donations only count as fees when some liquidity is in range to earn them.
    earned0 = amount0 if prior.liquidity > 0 else 0
    earned1 = amount1 if prior.liquidity > 0 else 0

    pool = replace(
        _add(prior, tvl0=amount0, tvl1=amount1, fees0=earned0, fees1=earned1, tx_count=1),
        fee_growth_global0=apply_fee_growth(
            fee_growth_global=prior.fee_growth_global0,
            fees=earned0,
            active_liquidity=prior.liquidity,
        ),
        fee_growth_global1=apply_fee_growth(
            fee_growth_global=prior.fee_growth_global1,
            fees=earned1,
            active_liquidity=prior.liquidity,
        ),
    )
    token0 = _add(snapshot.token0, tvl=amount0, fees=earned0, tx_count=1)
    token1 = _add(snapshot.token1, tvl=amount1, fees=earned1, tx_count=1)

    hook_stats = snapshot.hook_stats
    if hook_stats is not None:
        hook_stats = _add(
            hook_stats,
            fees0=earned0,
            fees1=earned1,
            tvl0=amount0,
            tvl1=amount1,
        )

    pool_buckets, token_buckets = _touch_intervals(
        pool=pool,
        token0=token0,
        token1=token1,
        timestamp=meta.block_timestamp,
        intervals=snapshot.intervals,
        pool_deltas={"fees0": earned0, "fees1": earned1},
        token0_deltas={"fees": earned0},
        token1_deltas={"fees": earned1},
    )
    return LedgerUpdate(
        pool=pool,
        tokens=(token0, token1),
        hook_stats=hook_stats,
        pool_buckets=pool_buckets,
        token_buckets=token_buckets,
        transaction=_transaction(meta),
    )
