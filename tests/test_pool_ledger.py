from __future__ import annotations

from dataclasses import replace

import pytest

from indexer.domain.entities.events import (
    ADDRESS_ZERO,
    DonateEvent,
    EventMeta,
    InitializeEvent,
    ModifyLiquidityEvent,
    SwapEvent,
)
from indexer.domain.entities.pool import HookStats, Pool
from indexer.domain.entities.position import Position
from indexer.domain.entities.tick import Tick
from indexer.domain.entities.token import Token
from indexer.domain.exceptions import PositionLiquidityUnderflowError
from indexer.domain.services.fee_growth import Q128
from indexer.domain.services.pool_ledger import (
    DonateSnapshot,
    InitializeSnapshot,
    ModifyLiquiditySnapshot,
    SwapSnapshot,
    apply_donate,
    apply_initialize,
    apply_modify_liquidity,
    apply_swap,
)
from indexer.domain.services.tick_math import Q96, get_sqrt_ratio_at_tick


HOOKS = "0x00000000000000000000000000000000000000c0"
POOL_KEY = "1_0xpool"


def _meta(log_index: int = 0, timestamp: int = 1_700_000_000) -> EventMeta:
    return EventMeta(
        chain_id=1,
        block_number=100,
        block_timestamp=timestamp,
        transaction_hash="0xtx",
        log_index=log_index,
        pool_id="0xpool",
        transaction_from="0xORIGIN",
    )


def _token(address: str, symbol: str) -> Token:
    return Token(id=f"1_{address}", chain_id=1, address=address, symbol=symbol, name=symbol, decimals=18)


def _pool(**overrides) -> Pool:
    pool = Pool(
        id=POOL_KEY,
        chain_id=1,
        pool_id="0xpool",
        name="AAA/BBB",
        token0_id="1_0xaaa",
        token1_id="1_0xbbb",
        fee_tier=3000,
        tick_spacing=60,
        hooks=ADDRESS_ZERO,
        tick=0,
        sqrt_price=Q96,
    )
    return replace(pool, **overrides)


def _modify_snapshot(pool: Pool, **overrides) -> ModifyLiquiditySnapshot:
    values = {
        "pool": pool,
        "token0": _token("0xaaa", "AAA"),
        "token1": _token("0xbbb", "BBB"),
        "lower_tick": None,
        "upper_tick": None,
        "position": None,
        "liquidity_provider": None,
        "hook_stats": None,
    }
    values.update(overrides)
    return ModifyLiquiditySnapshot(**values)


def _modify(delta: int, lower: int = -60, upper: int = 60) -> ModifyLiquidityEvent:
    return ModifyLiquidityEvent(
        meta=_meta(log_index=1),
        sender="0xOWNER",
        tick_lower=lower,
        tick_upper=upper,
        liquidity_delta=delta,
    )


class TestApplyInitialize:
    def test_creates_pool_with_zero_accumulators(self):
        event = InitializeEvent(
            meta=_meta(),
            token0="0xaaa",
            token1="0xbbb",
            fee=3000,
            tick_spacing=60,
            hooks=ADDRESS_ZERO,
            sqrt_price=Q96,
            tick=0,
        )
        update = apply_initialize(
            InitializeSnapshot(token0=_token("0xaaa", "AAA"), token1=_token("0xbbb", "BBB"), hook_stats=None),
            event,
        )

        assert update.pool.id == POOL_KEY
        assert update.pool.name == "AAA/BBB"
        assert update.pool.liquidity == 0
        assert update.pool.fee_growth_global0 == 0
        assert update.pool.created_at_block_number == 100
        assert [token.pool_count for token in update.tokens] == [1, 1]
        assert update.hook_stats is None
        assert len(update.pool_buckets) == 3
        assert len(update.token_buckets) == 6

    def test_creates_hook_stats_for_hooked_pool(self):
        event = InitializeEvent(
            meta=_meta(timestamp=1234),
            token0="0xaaa",
            token1="0xbbb",
            fee=500,
            tick_spacing=10,
            hooks=HOOKS,
            sqrt_price=Q96,
            tick=0,
        )
        update = apply_initialize(
            InitializeSnapshot(token0=_token("0xaaa", "AAA"), token1=_token("0xbbb", "BBB"), hook_stats=None),
            event,
        )
        assert update.hook_stats.id == f"1_{HOOKS}"
        assert update.hook_stats.pool_count == 1
        assert update.hook_stats.first_pool_created_at == 1234

    def test_increments_existing_hook_stats(self):
        existing = HookStats(id=f"1_{HOOKS}", chain_id=1, hooks=HOOKS, first_pool_created_at=10, pool_count=4)
        event = InitializeEvent(
            meta=_meta(timestamp=9999),
            token0="0xaaa",
            token1="0xbbb",
            fee=500,
            tick_spacing=10,
            hooks=HOOKS,
            sqrt_price=Q96,
            tick=0,
        )
        update = apply_initialize(
            InitializeSnapshot(token0=_token("0xaaa", "AAA"), token1=_token("0xbbb", "BBB"), hook_stats=existing),
            event,
        )
        assert update.hook_stats.pool_count == 5
        assert update.hook_stats.first_pool_created_at == 10


class TestApplyModifyLiquidity:
    def test_new_position_in_range(self):
        update = apply_modify_liquidity(_modify_snapshot(_pool()), _modify(1000))

        lower, upper = update.ticks
        assert (lower.tick_idx, lower.liquidity_gross, lower.liquidity_net) == (-60, 1000, 1000)
        assert (upper.tick_idx, upper.liquidity_gross, upper.liquidity_net) == (60, 1000, -1000)
        assert lower.position_count == upper.position_count == 1
        assert lower.fee_growth_outside0 == 0

        assert update.pool.liquidity == 1000
        assert update.pool.active_position_count == 1
        assert update.pool.position_count == 1
        assert (update.pool.tvl0, update.pool.tvl1) == (2, 2)

        position = update.position
        assert position.id == f"{POOL_KEY}#0xowner#-60#60"
        assert position.liquidity == 1000
        assert (position.deposited0, position.deposited1) == (2, 2)
        assert update.liquidity_provider.id == f"{POOL_KEY}-0xowner"
        assert update.liquidity_provider.position_count == 1

        assert update.modify_liquidity.id == "1_0xtx-1"
        assert update.modify_liquidity.origin == "0xorigin"
        assert update.transaction.id == "1_0xtx"
        assert all(bucket.modify_liquidity_count == 1 for bucket in update.pool_buckets)
        assert [token.tvl for token in update.tokens] == [2, 2]

    def test_out_of_range_position_does_not_touch_pool_liquidity(self):
        update = apply_modify_liquidity(_modify_snapshot(_pool()), _modify(1000, lower=60, upper=120))
        assert update.pool.liquidity == 0
        assert update.pool.tvl1 == 0
        assert update.pool.tvl0 > 0

    def test_upper_tick_is_exclusive_for_pool_liquidity(self):
        update = apply_modify_liquidity(_modify_snapshot(_pool(tick=60)), _modify(1000))
        assert update.pool.liquidity == 0

    def test_existing_position_accrues_fees_before_resizing(self):
        pool = _pool(fee_growth_global0=Q128, fee_growth_global1=2 * Q128, liquidity=10)
        position = Position(
            id=f"{POOL_KEY}#0xowner#-60#60",
            chain_id=1,
            pool_id=POOL_KEY,
            owner="0xowner",
            liquidity_provider_id=f"{POOL_KEY}-0xowner",
            token0_id="1_0xaaa",
            token1_id="1_0xbbb",
            tick_lower=-60,
            tick_upper=60,
            transaction_id="1_0xold",
            liquidity=10,
        )
        lower = Tick(id=f"{POOL_KEY}#-60", chain_id=1, pool_id=POOL_KEY, tick_idx=-60, liquidity_gross=10, liquidity_net=10)
        upper = Tick(id=f"{POOL_KEY}#60", chain_id=1, pool_id=POOL_KEY, tick_idx=60, liquidity_gross=10, liquidity_net=-10)

        update = apply_modify_liquidity(
            _modify_snapshot(pool, lower_tick=lower, upper_tick=upper, position=position),
            _modify(-10),
        )

        assert (update.position.fees0, update.position.fees1) == (10, 20)
        assert (update.liquidity_provider.fees0, update.liquidity_provider.fees1) == (10, 20)
        assert update.position.liquidity == 0
        assert update.position.fee_growth_inside0_last == Q128
        assert update.position.fee_growth_inside1_last == 2 * Q128
        assert update.pool.liquidity == 0
        assert update.pool.active_position_count == -1
        assert update.pool.position_count == 0
        assert update.ticks[0].position_count == 0
        assert update.position.withdrawn0 == update.position.withdrawn1 == 0

    def test_removing_more_than_position_liquidity_raises(self):
        with pytest.raises(PositionLiquidityUnderflowError):
            apply_modify_liquidity(_modify_snapshot(_pool()), _modify(-1))

    def test_hook_stats_follow_tvl(self):
        hook_stats = HookStats(id=f"1_{HOOKS}", chain_id=1, hooks=HOOKS, first_pool_created_at=0)
        update = apply_modify_liquidity(
            _modify_snapshot(_pool(hooks=HOOKS), hook_stats=hook_stats),
            _modify(1000),
        )
        assert (update.hook_stats.tvl0, update.hook_stats.tvl1) == (2, 2)


class TestApplySwap:
    def _snapshot(self, pool: Pool, ticks: dict[str, Tick], hook_stats: HookStats | None = None) -> SwapSnapshot:
        return SwapSnapshot(
            pool=pool,
            token0=_token("0xaaa", "AAA"),
            token1=_token("0xbbb", "BBB"),
            ticks=ticks,
            hook_stats=hook_stats,
        )

    def _swap(self, tick: int, liquidity: int, amount0: int = -1000, amount1: int = 900) -> SwapEvent:
        return SwapEvent(
            meta=_meta(log_index=7),
            sender="0xrouter",
            amount0=amount0,
            amount1=amount1,
            sqrt_price=get_sqrt_ratio_at_tick(tick),
            liquidity=liquidity,
            tick=tick,
        )

    def test_fee_growth_uses_pre_swap_liquidity_and_flips_crossed_ticks(self):
        ticks = {
            f"{POOL_KEY}#60": Tick(id=f"{POOL_KEY}#60", chain_id=1, pool_id=POOL_KEY, tick_idx=60, fee_growth_outside0=5),
        }
        update = apply_swap(self._snapshot(_pool(liquidity=1000), ticks), self._swap(tick=120, liquidity=0))

        expected0 = 3 * Q128 // 1000
        expected1 = 2 * Q128 // 1000
        assert update.pool.fee_growth_global0 == expected0
        assert update.pool.fee_growth_global1 == expected1
        assert [tick.tick_idx for tick in update.ticks] == [60]
        assert update.ticks[0].fee_growth_outside0 == expected0 - 5
        assert update.ticks[0].fee_growth_outside1 == expected1

        assert update.pool.liquidity == 0
        assert update.pool.tick == 120
        assert (update.pool.volume0, update.pool.volume1) == (1000, 900)
        assert (update.pool.fees0, update.pool.fees1) == (3, 2)
        assert (update.pool.tvl0, update.pool.tvl1) == (1000, -900)
        assert update.pool.swap_count == update.pool.tx_count == 1

    def test_swap_without_tick_change_flips_nothing(self):
        ticks = {f"{POOL_KEY}#0": Tick(id=f"{POOL_KEY}#0", chain_id=1, pool_id=POOL_KEY, tick_idx=0)}
        update = apply_swap(self._snapshot(_pool(tick=10, liquidity=1), ticks), self._swap(tick=10, liquidity=1))
        assert update.ticks == ()

    def test_swap_record_and_tokens(self):
        update = apply_swap(self._snapshot(_pool(), {}), self._swap(tick=0, liquidity=0))

        assert update.swap.id == "1_0xtx_7"
        assert (update.swap.amount0, update.swap.amount1) == (1000, -900)
        assert (update.swap.fees0, update.swap.fees1) == (3, 2)
        token0, token1 = update.tokens
        assert (token0.volume, token0.fees, token0.tvl, token0.swap_count) == (1000, 3, 1000, 1)
        assert (token1.volume, token1.fees, token1.tvl, token1.swap_count) == (900, 2, -900, 1)
        assert update.pool.fee_growth_global0 == 0
        assert all(bucket.swap_count == 1 for bucket in update.pool_buckets)
        assert all(bucket.volume0 == 1000 for bucket in update.pool_buckets)

    def test_existing_hook_stats_accumulate(self):
        hook_stats = HookStats(id=f"1_{HOOKS}", chain_id=1, hooks=HOOKS, first_pool_created_at=0)
        update = apply_swap(
            self._snapshot(_pool(hooks=HOOKS), {}, hook_stats=hook_stats),
            self._swap(tick=0, liquidity=0),
        )
        assert update.hook_stats.swap_count == 1
        assert (update.hook_stats.volume0, update.hook_stats.fees0) == (1000, 3)
        assert (update.hook_stats.tvl0, update.hook_stats.tvl1) == (1000, -900)


class TestApplyDonate:
    def _snapshot(self, pool: Pool) -> DonateSnapshot:
        return DonateSnapshot(
            pool=pool,
            token0=_token("0xaaa", "AAA"),
            token1=_token("0xbbb", "BBB"),
            hook_stats=None,
        )

    def test_donate_without_liquidity_only_moves_tvl(self):
        update = apply_donate(self._snapshot(_pool()), DonateEvent(meta=_meta(), amount0=100, amount1=0))

        assert update.pool.fee_growth_global0 == 0
        assert update.pool.tvl0 == 100
        assert update.pool.fees0 == 0
        assert update.pool.tx_count == 1
        assert update.tokens[0].tvl == 100
        assert all(bucket.fees0 == 0 for bucket in update.pool_buckets)
        assert update.transaction.id == "1_0xtx"

    def test_donate_with_liquidity_grows_fees(self):
        update = apply_donate(
            self._snapshot(_pool(liquidity=4)),
            DonateEvent(meta=_meta(), amount0=100, amount1=8),
        )

        assert update.pool.fee_growth_global0 == 25 * Q128
        assert update.pool.fee_growth_global1 == 2 * Q128
        assert (update.pool.fees0, update.pool.fees1) == (100, 8)
        assert all(bucket.fees0 == 100 for bucket in update.pool_buckets)
        assert update.tokens[1].fees == 8
