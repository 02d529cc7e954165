from __future__ import annotations

from dataclasses import dataclass

from indexer.domain.services.tick_math import Q96, get_sqrt_ratio_at_tick


@dataclass(frozen=True)
class TokenAmounts:
    amount0: int
    amount1: int
    amount0_abs: int
    amount1_abs: int


def get_amount0_delta(sqrt_ratio_a: int, sqrt_ratio_b: int, liquidity: int) -> int:
    if sqrt_ratio_a > sqrt_ratio_b:
        sqrt_ratio_a, sqrt_ratio_b = sqrt_ratio_b, sqrt_ratio_a
    if sqrt_ratio_a <= 0 or liquidity <= 0:
        return 0
    numerator1 = liquidity << 96
    numerator2 = sqrt_ratio_b - sqrt_ratio_a
    return (numerator1 * numerator2 // sqrt_ratio_b) // sqrt_ratio_a


def get_amount1_delta(sqrt_ratio_a: int, sqrt_ratio_b: int, liquidity: int) -> int:
    if sqrt_ratio_a > sqrt_ratio_b:
        sqrt_ratio_a, sqrt_ratio_b = sqrt_ratio_b, sqrt_ratio_a
    if liquidity <= 0:
        return 0
    return liquidity * (sqrt_ratio_b - sqrt_ratio_a) // Q96


def compute_amounts(
    *,
    liquidity_delta: int,
    tick_lower: int,
    tick_upper: int,
    sqrt_price_current: int,
) -> TokenAmounts:
    """Token deltas for a liquidity change, rounded down.

    Positive amounts mean tokens deposited into the pool, negative amounts
    tokens withdrawn from it.
    """
    liquidity_abs = abs(liquidity_delta)
    sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)

    if sqrt_price_current <= sqrt_lower:
        amount0_abs = get_amount0_delta(sqrt_lower, sqrt_upper, liquidity_abs)
        amount1_abs = 0
    elif sqrt_price_current >= sqrt_upper:
        amount0_abs = 0
        amount1_abs = get_amount1_delta(sqrt_lower, sqrt_upper, liquidity_abs)
    else:
        amount0_abs = get_amount0_delta(sqrt_price_current, sqrt_upper, liquidity_abs)
        amount1_abs = get_amount1_delta(sqrt_lower, sqrt_price_current, liquidity_abs)

    sign = 1 if liquidity_delta > 0 else -1
    return TokenAmounts(
        amount0=sign * amount0_abs,
        amount1=sign * amount1_abs,
        amount0_abs=amount0_abs,
        amount1_abs=amount1_abs,
    )
