from __future__ import annotations


Q128 = 2**128
FEE_DENOMINATOR = 1_000_000


def div_trunc(numerator: int, denominator: int) -> int:
    # Integer division rounding toward zero, as on-chain signed arithmetic does.
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def fee_growth_inside(
    *,
    fee_growth_global: int,
    fee_growth_outside_lower: int,
    fee_growth_outside_upper: int,
    tick_lower: int,
    tick_upper: int,
    tick_current: int,
) -> int:
    fee_growth_below = (
        fee_growth_outside_lower
        if tick_current >= tick_lower
        else fee_growth_global - fee_growth_outside_lower
    )
    fee_growth_above = (
        fee_growth_outside_upper
        if tick_current < tick_upper
        else fee_growth_global - fee_growth_outside_upper
    )
    return fee_growth_global - fee_growth_below - fee_growth_above


def accrued_fees(
    *,
    liquidity: int,
    fee_growth_inside_now: int,
    fee_growth_inside_last: int,
) -> int:
    return div_trunc(liquidity * (fee_growth_inside_now - fee_growth_inside_last), Q128)


def apply_fee_growth(*, fee_growth_global: int, fees: int, active_liquidity: int) -> int:
    # Fees earned while no liquidity is active are not distributed.
    if active_liquidity == 0:
        return fee_growth_global
    return fee_growth_global + div_trunc(fees * Q128, active_liquidity)


def flip_fee_growth_outside(*, fee_growth_global: int, fee_growth_outside: int) -> int:
    return fee_growth_global - fee_growth_outside


def swap_fee(*, amount_abs: int, fee_tier: int) -> int:
    return amount_abs * fee_tier // FEE_DENOMINATOR
