"""Tests for constant product pricing."""

import pytest

from swappool.errors import EmptyPool, InsufficientReserve, ZeroAmount
from swappool.pricing import AmountOut, ConstantProduct, constant_product, quote


class TestQuote:
    """Output = ceil(amount_in * reserve_out / (reserve_in + amount_in))."""

    @pytest.mark.parametrize(
        ("amount_in", "reserve_in", "reserve_out", "expected"),
        [
            (1, 5, 250_000, 41_667),  # 41666.67 rounded up
            (120_000, 1_000_000, 20, 3),  # 2.14 rounded up
            (1, 25, 1_250_000, 48_077),  # 48076.9 rounded up
            (1, 20, 1_000_000, 47_620),  # 47619.05 rounded up
            (1, 21, 952_380, 43_290),  # exact division, no rounding
        ],
    )
    def test_observed_cases(self, amount_in, reserve_in, reserve_out, expected):
        assert quote(amount_in, reserve_in, reserve_out) == expected

    def test_rounds_toward_trader(self):
        """Rounding up can leave the product slightly below k; this is accepted."""
        reserve_in, reserve_out, amount_in = 5, 250_000, 1
        amount_out = quote(amount_in, reserve_in, reserve_out)
        k_before = reserve_in * reserve_out
        k_after = (reserve_in + amount_in) * (reserve_out - amount_out)
        assert k_after < k_before
        # Never by more than one unit of the output reserve
        assert k_before - k_after < reserve_in + amount_in

    def test_zero_amount_raises(self):
        with pytest.raises(ZeroAmount):
            quote(0, 10, 10)

    @pytest.mark.parametrize(("reserve_in", "reserve_out"), [(0, 10), (10, 0), (0, 0)])
    def test_empty_reserve_raises(self, reserve_in, reserve_out):
        with pytest.raises(EmptyPool):
            quote(1, reserve_in, reserve_out)

    def test_empty_pool_checked_before_amount(self):
        with pytest.raises(EmptyPool):
            quote(0, 0, 0)

    def test_negative_input_raises_value_error(self):
        with pytest.raises(ValueError):
            quote(-1, 10, 10)

    def test_output_never_exceeds_reserve(self):
        for amount_in in (1, 10, 10**6, 10**30):
            assert quote(amount_in, 7, 1_000) <= 1_000

    def test_huge_amounts_stay_exact(self):
        reserve = 10**70
        assert quote(reserve, reserve, reserve) == reserve // 2


class TestGetAmountIn:
    @pytest.mark.parametrize(
        ("amount_out", "reserve_in", "reserve_out"),
        [
            (41_667, 5, 250_000),
            (3, 1_000_000, 20),
            (1, 25, 1_250_000),
            (48_077, 25, 1_250_000),
            (999, 1_000, 1_000),
        ],
    )
    def test_is_minimal_input(self, amount_out, reserve_in, reserve_out):
        amm = ConstantProduct()
        amount_in = amm.get_amount_in(amount_out, reserve_in, reserve_out)

        assert amm.get_amount_out(amount_in, reserve_in, reserve_out) >= amount_out
        if amount_in > 1:
            assert amm.get_amount_out(amount_in - 1, reserve_in, reserve_out) < amount_out

    def test_single_unit_input(self):
        assert constant_product.get_amount_in(41_667, 5, 250_000) == 1

    def test_cannot_drain_reserve(self):
        with pytest.raises(InsufficientReserve):
            constant_product.get_amount_in(20, 1_000_000, 20)

    def test_zero_amount_out(self):
        with pytest.raises(ZeroAmount):
            constant_product.get_amount_in(0, 10, 10)


class TestProjectedReserves:
    def test_projected(self):
        assert constant_product.projected_reserves(1, 41_667, 5, 250_000) == (6, 208_333)

    def test_amount_out_tuple(self):
        result = AmountOut(3, 17, 1_120_000)
        amount_out, reserve0, reserve1 = result
        assert (amount_out, reserve0, reserve1) == (3, 17, 1_120_000)
        assert result.amount_out == 3
