"""Pool-side access to the two token contracts.

TokenGateway turns token refusals into TransferFailed and records every
movement in a TransferJournal so a failed pool operation can hand pulled
funds back.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import structlog

from swappool.errors import InvalidTokenPair, PoolError, TransferFailed
from swappool.models.types import normalize_address
from swappool.tokens.base import FungibleToken

logger = structlog.get_logger()


class Direction(str, Enum):
    """Direction of a token movement relative to the pool."""

    PULL = "pull"  # counterparty -> pool
    PUSH = "push"  # pool -> counterparty


@dataclass(frozen=True)
class JournalEntry:
    direction: Direction
    asset_index: int
    counterparty: str
    amount: int


@dataclass
class TransferJournal:
    """Token movements made by one pool operation, in order."""

    entries: list[JournalEntry] = field(default_factory=list)

    def record(self, entry: JournalEntry) -> None:
        self.entries.append(entry)

    def __len__(self) -> int:
        return len(self.entries)


class TokenGateway:
    """Pulls funds into and pushes funds out of the pool's address.

    Args:
        pool_address: The pool's holder identity in both token contracts
        token0: First asset
        token1: Second asset

    Raises:
        InvalidTokenPair: If both tokens share an address
    """

    def __init__(self, pool_address: str, token0: FungibleToken, token1: FungibleToken) -> None:
        if normalize_address(token0.address) == normalize_address(token1.address):
            raise InvalidTokenPair(f"Pool tokens must be distinct: {token0.address}")
        self.pool_address = normalize_address(pool_address, validate=True)
        self._tokens = (token0, token1)

    @property
    def tokens(self) -> tuple[FungibleToken, FungibleToken]:
        return self._tokens

    def address_of(self, asset_index: int) -> str:
        return normalize_address(self._tokens[asset_index].address)

    def index_of(self, token: str) -> int:
        """Asset index of a token address.

        Raises:
            InvalidTokenPair: If the token is not one of the pool's assets
        """
        token_norm = normalize_address(token)
        if token_norm == self.address_of(0):
            return 0
        if token_norm == self.address_of(1):
            return 1
        raise InvalidTokenPair(f"Token {token} not in pool")

    def balances(self) -> tuple[int, int]:
        """Pool's balance in (token0, token1)."""
        return (
            self._tokens[0].balance_of(self.pool_address),
            self._tokens[1].balance_of(self.pool_address),
        )

    def pull(self, asset_index: int, owner: str, amount: int, journal: TransferJournal) -> None:
        """Move amount from owner into the pool using the pool's allowance.

        Raises:
            TransferFailed: If the token refuses or fails the transfer
        """
        token = self._tokens[asset_index]
        entry = JournalEntry(Direction.PULL, asset_index, owner, amount)
        before = token.balance_of(self.pool_address)
        try:
            ok = self._call(
                "pull",
                asset_index,
                lambda: token.transfer_from(self.pool_address, owner, self.pool_address, amount),
            )
        except PoolError:
            # The token may have moved funds before raising
            if token.balance_of(self.pool_address) - before == amount:
                journal.record(entry)
            raise
        if not ok:
            raise TransferFailed(
                f"Pull of {amount} {token.address} from {owner} refused "
                "(insufficient balance or allowance)"
            )
        journal.record(entry)

    def push(self, asset_index: int, to: str, amount: int, journal: TransferJournal) -> None:
        """Send amount from the pool to a recipient.

        Raises:
            TransferFailed: If the token refuses or fails the transfer
        """
        token = self._tokens[asset_index]
        entry = JournalEntry(Direction.PUSH, asset_index, to, amount)
        before = token.balance_of(self.pool_address)
        try:
            ok = self._call(
                "push", asset_index, lambda: token.transfer(self.pool_address, to, amount)
            )
        except PoolError:
            if before - token.balance_of(self.pool_address) == amount:
                journal.record(entry)
            raise
        if not ok:
            raise TransferFailed(f"Push of {amount} {token.address} to {to} refused")
        journal.record(entry)

    def unwind(self, journal: TransferJournal) -> list[JournalEntry]:
        """Reverse journaled movements, newest first.

        Pulled funds sit at the pool's address and are always returned. Pushed
        funds can only be reclaimed if the recipient approved the pool; a
        movement that cannot be reversed is logged as an error.

        Returns:
            The entries that could not be reversed, oldest first
        """
        stuck: list[JournalEntry] = []
        for entry in reversed(journal.entries):
            token = self._tokens[entry.asset_index]
            try:
                if entry.direction is Direction.PULL:
                    ok = token.transfer(self.pool_address, entry.counterparty, entry.amount)
                else:
                    ok = token.transfer_from(
                        self.pool_address, entry.counterparty, self.pool_address, entry.amount
                    )
            except Exception:
                logger.exception(
                    "transfer_unwind_failed",
                    token=token.address,
                    direction=entry.direction.value,
                    counterparty=entry.counterparty,
                    amount=entry.amount,
                )
                stuck.append(entry)
                continue
            if not ok:
                stuck.append(entry)
                logger.error(
                    "transfer_unwind_refused",
                    token=token.address,
                    direction=entry.direction.value,
                    counterparty=entry.counterparty,
                    amount=entry.amount,
                )
            else:
                logger.debug(
                    "transfer_unwound",
                    token=token.address,
                    direction=entry.direction.value,
                    counterparty=entry.counterparty,
                    amount=entry.amount,
                )
        journal.entries.clear()
        stuck.reverse()
        return stuck

    def _call(self, action: str, asset_index: int, fn: Callable[[], bool]) -> bool:
        try:
            return bool(fn())
        except PoolError:
            # Errors raised by a nested pool call (e.g. ReentrantCall) keep their kind
            raise
        except Exception as err:
            raise TransferFailed(
                f"Token {self.address_of(asset_index)} raised during {action}: {err}"
            ) from err
