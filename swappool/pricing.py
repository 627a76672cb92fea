"""Constant product pricing.

The pool prices trades on the curve x * y = k with no trading fee:
the input joins the reserve at full value and the output leaves at full value.

Rounding favors the trader: the output is rounded UP, so the post-trade
product may end up slightly below the pre-trade product (by less than one
unit of the output reserve).
"""

from __future__ import annotations

from typing import NamedTuple

import structlog

from swappool.errors import EmptyPool, InsufficientReserve, ZeroAmount
from swappool.safe_int import S, require_amount

logger = structlog.get_logger()


class AmountOut(NamedTuple):
    """Quote for a prospective swap, with the reserves the pool would hold after it."""

    amount_out: int
    reserve0: int
    reserve1: int


class ConstantProduct:
    """Constant product math.

    Formula: amount_out = ceil(amount_in * reserve_out / (reserve_in + amount_in))
    """

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for an exact input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, rounded up

        Raises:
            EmptyPool: If either reserve is zero
            ZeroAmount: If amount_in is zero
        """
        _check_reserves(reserve_in, reserve_out)
        require_amount("amount_in", amount_in)
        if amount_in == 0:
            raise ZeroAmount("amount_in must be positive")

        numerator = S(amount_in) * reserve_out
        denominator = S(reserve_in) + amount_in
        return numerator.ceiling_div(denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the smallest input whose quoted output reaches amount_out.

        Because get_amount_out rounds up, output x is reached as soon as
        amount_in * reserve_out > (x - 1) * (reserve_in + amount_in), giving:
            amount_in = floor((x - 1) * reserve_in / (reserve_out - x + 1)) + 1

        Raises:
            EmptyPool: If either reserve is zero
            ZeroAmount: If amount_out is zero
            InsufficientReserve: If amount_out would drain the output reserve
        """
        _check_reserves(reserve_in, reserve_out)
        require_amount("amount_out", amount_out)
        if amount_out == 0:
            raise ZeroAmount("amount_out must be positive")
        if amount_out >= reserve_out:
            raise InsufficientReserve(
                f"Cannot buy {amount_out} from an output reserve of {reserve_out}"
            )

        numerator = (S(amount_out) - 1) * reserve_in
        denominator = S(reserve_out) - amount_out + 1
        return (numerator // denominator + 1).value

    def projected_reserves(
        self,
        amount_in: int,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> tuple[int, int]:
        """Reserves (in, out) after applying a trade.

        Raises:
            Underflow: If amount_out exceeds reserve_out
        """
        return (S(reserve_in) + amount_in).value, (S(reserve_out) - amount_out).value


def _check_reserves(reserve_in: int, reserve_out: int) -> None:
    require_amount("reserve_in", reserve_in)
    require_amount("reserve_out", reserve_out)
    if reserve_in == 0 or reserve_out == 0:
        raise EmptyPool(f"Pool has no liquidity: reserves ({reserve_in}, {reserve_out})")


# Singleton instance
constant_product = ConstantProduct()


def quote(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Output amount for amount_in against the given reserves (see ConstantProduct)."""
    amount_out = constant_product.get_amount_out(amount_in, reserve_in, reserve_out)
    logger.debug(
        "quote",
        amount_in=amount_in,
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
    )
    return amount_out
