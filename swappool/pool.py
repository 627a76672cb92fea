"""The pool aggregate.

Pool owns the reserve and share ledgers and is the only way to change them.
Every mutating call runs as one transaction:

- callers are serialized by a re-entrant lock, so operations are totally
  ordered and never interleave;
- a call that arrives while another operation is in flight (a token callback
  re-entering the pool) is rejected with ReentrantCall;
- on any error both ledgers are restored from a snapshot and pulled tokens
  are returned, then the error is re-raised unchanged.

Callers are identified explicitly with the keyword-only ``caller`` argument.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from swappool.config import DEFAULT_POOL_CONFIG, PoolConfig
from swappool.errors import InvalidCounterparty, InvariantViolation, ReentrantCall
from swappool.ledger import ReserveLedger, ShareLedger
from swappool.liquidity import LiquidityManager
from swappool.models.pool import PoolState
from swappool.models.types import normalize_address
from swappool.pricing import AmountOut, constant_product, quote
from swappool.swap import SwapExecutor
from swappool.tokens.base import FungibleToken
from swappool.tokens.gateway import TokenGateway, TransferJournal

logger = structlog.get_logger()


class Pool:
    """Two-asset constant product liquidity pool.

    Args:
        token0: First asset
        token1: Second asset (must differ from token0)
        address: The pool's own identity in the token contracts
        config: Share issuance and deposit settings

    Raises:
        InvalidTokenPair: If token0 and token1 are the same asset
    """

    def __init__(
        self,
        token0: FungibleToken,
        token1: FungibleToken,
        address: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.config = config
        self._gateway = TokenGateway(address, token0, token1)
        self._reserves = ReserveLedger()
        self._shares = ShareLedger()
        self._liquidity = LiquidityManager(self._reserves, self._shares, self._gateway, config)
        self._swaps = SwapExecutor(self._reserves, self._gateway)
        self._lock = threading.RLock()
        self._in_flight: str | None = None

        logger.info(
            "pool_created",
            pool=self.address,
            token0=self.token0,
            token1=self.token1,
            initial_share_supply=config.initial_share_supply,
            strict_ratio=config.strict_ratio,
        )

    # --- Identity and reads ---

    @property
    def address(self) -> str:
        return self._gateway.pool_address

    @property
    def token0(self) -> str:
        return self._gateway.address_of(0)

    @property
    def token1(self) -> str:
        return self._gateway.address_of(1)

    @property
    def tokens(self) -> tuple[FungibleToken, FungibleToken]:
        """The (token0, token1) contracts."""
        return self._gateway.tokens

    @property
    def reserve0(self) -> int:
        return self.get_reserves()[0]

    @property
    def reserve1(self) -> int:
        return self.get_reserves()[1]

    def get_reserves(self) -> tuple[int, int]:
        with self._lock:
            return self._reserves.read()

    def total_supply(self) -> int:
        with self._lock:
            return self._shares.total_supply()

    def balance_of(self, holder: str) -> int:
        with self._lock:
            return self._shares.balance_of(normalize_address(holder))

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._shares.allowance(normalize_address(owner), normalize_address(spender))

    def state(self) -> PoolState:
        """Snapshot of identity, reserves and share supply."""
        with self._lock:
            reserve0, reserve1 = self._reserves.read()
            return PoolState(
                address=self.address,
                token0=self.token0,
                token1=self.token1,
                reserve0=str(reserve0),
                reserve1=str(reserve1),
                total_supply=str(self._shares.total_supply()),
            )

    # --- Quotes ---

    @staticmethod
    def quote(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Pure constant product quote (see swappool.pricing)."""
        return quote(amount_in, reserve_in, reserve_out)

    def get_amount_out(self, amount_in: int, input_token: str) -> AmountOut:
        """Quote a swap against current reserves without changing state.

        Returns:
            AmountOut(amount_out, reserve0, reserve1) with the reserves the pool
            would hold after the trade
        """
        with self._lock:
            result = self._swaps.get_amount_out(amount_in, input_token)
        logger.debug(
            "amount_out_quoted",
            pool=self.address,
            token_in=normalize_address(input_token),
            amount_in=amount_in,
            amount_out=result.amount_out,
        )
        return result

    def get_amount_in(self, amount_out: int, output_token: str) -> int:
        """Smallest input of the other token that yields at least amount_out of output_token."""
        with self._lock:
            index_out = self._gateway.index_of(output_token)
            reserves = self._reserves.read()
            return constant_product.get_amount_in(
                amount_out, reserves[1 - index_out], reserves[index_out]
            )

    # --- Liquidity ---

    def add(self, amount0: int, amount1: int, *, caller: str) -> int:
        """Deposit both assets and mint LP shares to caller.

        The caller must have approved the pool for both amounts.

        Returns:
            Number of shares minted
        """
        caller = self._counterparty("caller", caller)
        with self._transaction("add", caller) as journal:
            return self._liquidity.add(caller, amount0, amount1, journal)

    def remove(self, share_amount: int, *, caller: str) -> tuple[int, int]:
        """Burn share_amount of caller's shares for the pro-rata reserves.

        Returns:
            (amount0, amount1) sent to caller
        """
        caller = self._counterparty("caller", caller)
        with self._transaction("remove", caller) as journal:
            return self._liquidity.remove(caller, share_amount, journal)

    # --- Swaps ---

    def swap(
        self,
        amount_in: int,
        amount_out_min: int,
        token_in: str,
        token_out: str,
        to: str,
        *,
        caller: str,
    ) -> int:
        """Swap amount_in of token_in for at least amount_out_min of token_out.

        The caller must have approved the pool for amount_in of token_in.

        Returns:
            Amount of token_out delivered to `to`
        """
        caller = self._counterparty("caller", caller)
        to = self._counterparty("to", to)
        with self._transaction("swap", caller) as journal:
            return self._swaps.swap(
                caller, amount_in, amount_out_min, token_in, token_out, to, journal
            )

    # --- LP share token ---

    def transfer(self, to: str, amount: int, *, caller: str) -> bool:
        """Move caller's LP shares to another holder."""
        caller = self._counterparty("caller", caller)
        to = self._counterparty("to", to)
        with self._transaction("transfer", caller):
            self._shares.transfer(caller, to, amount)
        return True

    def approve(self, spender: str, amount: int, *, caller: str) -> bool:
        """Allow spender to move up to amount of caller's LP shares."""
        caller = self._counterparty("caller", caller)
        spender = normalize_address(spender, validate=True)
        with self._transaction("approve", caller):
            self._shares.approve(caller, spender, amount)
        return True

    def transfer_from(self, owner: str, to: str, amount: int, *, caller: str) -> bool:
        """Move owner's LP shares using caller's allowance."""
        caller = self._counterparty("caller", caller)
        owner = normalize_address(owner, validate=True)
        to = self._counterparty("to", to)
        with self._transaction("transfer_from", caller):
            self._shares.transfer_from(caller, owner, to, amount)
        return True

    # --- Invariants ---

    def check_invariants(self) -> None:
        """Verify the accounting invariants.

        Raises:
            InvariantViolation: If any invariant does not hold
        """
        with self._lock:
            reserve0, reserve1 = self._reserves.read()
            total_supply = self._shares.total_supply()
            held = sum(self._shares.holders().values())
            balances = self._gateway.balances()

        if held != total_supply:
            raise InvariantViolation(f"Share balances sum to {held}, supply is {total_supply}")
        empty = (reserve0 == 0, reserve1 == 0, total_supply == 0)
        if any(empty) and not all(empty):
            raise InvariantViolation(
                f"Pool is partially empty: reserves ({reserve0}, {reserve1}), "
                f"supply {total_supply}"
            )
        if balances != (reserve0, reserve1):
            raise InvariantViolation(
                f"Reserves ({reserve0}, {reserve1}) differ from token balances {balances}"
            )

    def _counterparty(self, role: str, address: str) -> str:
        """Normalize a caller or recipient; the pool never trades with itself."""
        address = normalize_address(address, validate=True)
        if address == self.address:
            raise InvalidCounterparty(f"{role} cannot be the pool's own address {address}")
        return address

    # --- Transactions ---

    @contextmanager
    def _transaction(self, operation: str, caller: str) -> Iterator[TransferJournal]:
        with self._lock:
            if self._in_flight is not None:
                logger.warning(
                    "pool_reentrant_call_rejected",
                    pool=self.address,
                    operation=operation,
                    in_flight=self._in_flight,
                    caller=caller,
                )
                raise ReentrantCall(
                    f"{operation} called while {self._in_flight} is in flight"
                )

            self._in_flight = operation
            reserves_snapshot = self._reserves.snapshot()
            shares_snapshot = self._shares.snapshot()
            journal = TransferJournal()
            try:
                yield journal
            except Exception as err:
                self._reserves.restore(reserves_snapshot)
                self._shares.restore(shares_snapshot)
                for entry in self._gateway.unwind(journal):
                    # Reserves were restored but this movement was not
                    logger.error(
                        "pool_reserve_desynced",
                        pool=self.address,
                        operation=operation,
                        asset_index=entry.asset_index,
                        direction=entry.direction.value,
                        counterparty=entry.counterparty,
                        amount=entry.amount,
                    )
                logger.warning(
                    "pool_operation_failed",
                    pool=self.address,
                    operation=operation,
                    caller=caller,
                    error=getattr(err, "kind", type(err).__name__),
                    detail=str(err),
                )
                raise
            finally:
                self._in_flight = None

    def __repr__(self) -> str:
        reserve0, reserve1 = self._reserves.read()
        return (
            f"Pool({self.address}, token0={self.token0}, token1={self.token1}, "
            f"reserves=({reserve0}, {reserve1}), supply={self._shares.total_supply()})"
        )
