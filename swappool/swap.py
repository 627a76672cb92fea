"""Slippage-guarded swaps against the pool's reserves."""

from __future__ import annotations

import structlog

from swappool.errors import InsufficientReserve, InvalidTokenPair, SlippageExceeded
from swappool.ledger import ReserveLedger
from swappool.models.types import normalize_address
from swappool.pricing import AmountOut, ConstantProduct, constant_product
from swappool.safe_int import require_amount
from swappool.tokens.gateway import TokenGateway, TransferJournal

logger = structlog.get_logger()


class SwapExecutor:
    """Executes exact-input swaps.

    All reads used for quoting and validation happen before the first token
    call, so a token callback can never observe or influence the quote.
    """

    def __init__(
        self,
        reserves: ReserveLedger,
        gateway: TokenGateway,
        pricing: ConstantProduct = constant_product,
    ) -> None:
        self.reserves = reserves
        self.gateway = gateway
        self.pricing = pricing

    def resolve_pair(self, token_in: str, token_out: str) -> tuple[int, int]:
        """Map (token_in, token_out) to asset indexes.

        Raises:
            InvalidTokenPair: If the tokens are equal or not the pool's pair
        """
        if normalize_address(token_in) == normalize_address(token_out):
            raise InvalidTokenPair(f"token_in and token_out are the same: {token_in}")
        try:
            index_in = self.gateway.index_of(token_in)
            index_out = self.gateway.index_of(token_out)
        except InvalidTokenPair as err:
            raise InvalidTokenPair(
                f"({token_in}, {token_out}) is not this pool's pair "
                f"({self.gateway.address_of(0)}, {self.gateway.address_of(1)})"
            ) from err
        return index_in, index_out

    def get_amount_out(self, amount_in: int, token_in: str) -> AmountOut:
        """Quote a swap of amount_in of token_in without touching any state.

        Returns:
            AmountOut with the output and the projected (reserve0, reserve1)

        Raises:
            InvalidTokenPair: If token_in is not one of the pool's tokens
            EmptyPool: If the pool has no liquidity
            ZeroAmount: If amount_in is zero
            InsufficientReserve: If the output would drain the output reserve
        """
        index_in = self.gateway.index_of(token_in)
        reserves = self.reserves.read()
        reserve_in, reserve_out = reserves[index_in], reserves[1 - index_in]

        amount_out = self.pricing.get_amount_out(amount_in, reserve_in, reserve_out)
        _check_not_drained(amount_out, reserve_out)
        new_in, new_out = self.pricing.projected_reserves(
            amount_in, amount_out, reserve_in, reserve_out
        )
        if index_in == 0:
            return AmountOut(amount_out, new_in, new_out)
        return AmountOut(amount_out, new_out, new_in)

    def swap(
        self,
        caller: str,
        amount_in: int,
        amount_out_min: int,
        token_in: str,
        token_out: str,
        to: str,
        journal: TransferJournal,
    ) -> int:
        """Swap amount_in of token_in from caller for token_out sent to `to`.

        Returns:
            Amount of token_out delivered

        Raises:
            InvalidTokenPair: If the tokens are not the pool's pair
            ZeroAmount: If amount_in is zero
            EmptyPool: If the pool has no liquidity
            SlippageExceeded: If the output is below amount_out_min
            InsufficientReserve: If the output would drain the output reserve
            TransferFailed: If the pull or the push is refused
        """
        index_in, index_out = self.resolve_pair(token_in, token_out)
        require_amount("amount_out_min", amount_out_min)

        reserves = self.reserves.read()
        reserve_in, reserve_out = reserves[index_in], reserves[index_out]
        amount_out = self.pricing.get_amount_out(amount_in, reserve_in, reserve_out)

        if amount_out < amount_out_min:
            logger.warning(
                "swap_slippage_exceeded",
                trader=caller,
                token_in=token_in,
                amount_in=amount_in,
                amount_out=amount_out,
                amount_out_min=amount_out_min,
            )
            raise SlippageExceeded(
                f"Output {amount_out} is below the minimum {amount_out_min}"
            )
        _check_not_drained(amount_out, reserve_out)

        self.gateway.pull(index_in, caller, amount_in, journal)
        self.reserves.credit(index_in, amount_in)
        self.reserves.debit(index_out, amount_out)
        self.gateway.push(index_out, to, amount_out, journal)

        logger.info(
            "swap_executed",
            trader=caller,
            recipient=to,
            token_in=self.gateway.address_of(index_in),
            token_out=self.gateway.address_of(index_out),
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out


def _check_not_drained(amount_out: int, reserve_out: int) -> None:
    # A reserve may only reach zero through a full withdrawal
    if amount_out >= reserve_out:
        raise InsufficientReserve(f"Output {amount_out} would drain the reserve of {reserve_out}")
