from __future__ import annotations

from indexer.domain.services.fee_growth import (
    Q128,
    accrued_fees,
    apply_fee_growth,
    div_trunc,
    fee_growth_inside,
    flip_fee_growth_outside,
    swap_fee,
)


class TestFeeGrowth:
    def test_fee_growth_inside_can_go_negative_when_tick_is_inside_range(self):
        inside = fee_growth_inside(
            fee_growth_global=5 * Q128,
            fee_growth_outside_lower=2 * Q128,
            fee_growth_outside_upper=4 * Q128,
            tick_current=30,
            tick_lower=-120,
            tick_upper=120,
        )
        assert inside == -Q128

    def test_fee_growth_inside_when_tick_is_below_range(self):
        inside = fee_growth_inside(
            fee_growth_global=3 * Q128 + 7,
            fee_growth_outside_lower=5 * Q128 // 2,
            fee_growth_outside_upper=Q128 // 2,
            tick_current=-180,
            tick_lower=-120,
            tick_upper=120,
        )
        assert inside == 2 * Q128

    def test_fee_growth_inside_when_tick_is_above_range(self):
        inside = fee_growth_inside(
            fee_growth_global=9 * Q128,
            fee_growth_outside_lower=3 * Q128,
            fee_growth_outside_upper=Q128 + 42,
            tick_current=180,
            tick_lower=-120,
            tick_upper=120,
        )
        assert inside == 42 - 2 * Q128

    def test_fee_growth_inside_treats_lower_bound_as_inside_and_upper_as_above(self):
        at_lower = fee_growth_inside(
            fee_growth_global=4 * Q128,
            fee_growth_outside_lower=Q128,
            fee_growth_outside_upper=Q128 // 4,
            tick_current=-60,
            tick_lower=-60,
            tick_upper=60,
        )
        at_upper = fee_growth_inside(
            fee_growth_global=4 * Q128,
            fee_growth_outside_lower=Q128,
            fee_growth_outside_upper=Q128 // 4,
            tick_current=60,
            tick_lower=-60,
            tick_upper=60,
        )
        assert at_lower == 11 * Q128 // 4
        assert at_upper == -(3 * Q128 // 4)

    def test_fee_growth_inside_is_signed_without_wrap(self):
        inside = fee_growth_inside(
            fee_growth_global=10,
            fee_growth_outside_lower=20,
            fee_growth_outside_upper=5,
            tick_current=-20,
            tick_lower=-10,
            tick_upper=10,
        )
        assert inside == 15

    def test_accrued_fees_uses_q128(self):
        assert accrued_fees(liquidity=3, fee_growth_inside_now=Q128, fee_growth_inside_last=0) == 3

    def test_accrued_fees_truncates_toward_zero(self):
        assert accrued_fees(liquidity=1, fee_growth_inside_now=0, fee_growth_inside_last=Q128 // 2) == 0
        assert accrued_fees(liquidity=3, fee_growth_inside_now=0, fee_growth_inside_last=Q128 // 2) == -1

    def test_accrued_fees_is_linear_in_liquidity(self):
        delta = 123_456_789_012_345_678_901_234_567
        single = accrued_fees(liquidity=10**18, fee_growth_inside_now=delta, fee_growth_inside_last=0)
        double = accrued_fees(liquidity=2 * 10**18, fee_growth_inside_now=delta, fee_growth_inside_last=0)
        assert abs(double - 2 * single) <= 1

    def test_apply_fee_growth_keeps_global_without_liquidity(self):
        assert apply_fee_growth(fee_growth_global=42, fees=1000, active_liquidity=0) == 42

    def test_apply_fee_growth_spreads_fees_over_active_liquidity(self):
        assert apply_fee_growth(fee_growth_global=0, fees=1, active_liquidity=2) == Q128 // 2

    def test_flip_fee_growth_outside(self):
        assert flip_fee_growth_outside(fee_growth_global=100, fee_growth_outside=30) == 70

    def test_swap_fee_rounds_down(self):
        assert swap_fee(amount_abs=1_000_000, fee_tier=3000) == 3000
        assert swap_fee(amount_abs=999, fee_tier=3000) == 2

    def test_div_trunc_rounds_toward_zero(self):
        assert div_trunc(7, 2) == 3
        assert div_trunc(-7, 2) == -3
        assert div_trunc(7, -2) == -3
        assert div_trunc(-7, -2) == 3
