"""In-memory fungible token.

Implements FungibleToken with standard balance/allowance semantics so a pool
can run without a chain: in the API's default deployment and in tests.
"""

from __future__ import annotations

import threading

import structlog

from swappool.models.types import normalize_address
from swappool.safe_int import require_amount

logger = structlog.get_logger()


class InMemoryToken:
    """Fungible token ledger held in process memory.

    The whole initial supply is credited to ``owner`` at construction.
    Refused transfers return False and leave balances untouched.
    """

    def __init__(
        self,
        address: str,
        name: str,
        symbol: str,
        initial_supply: int = 0,
        owner: str | None = None,
    ) -> None:
        self._address = normalize_address(address, validate=True)
        self.name = name
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = require_amount("initial_supply", initial_supply)
        self._lock = threading.RLock()

        if initial_supply:
            if owner is None:
                raise ValueError("owner is required when initial_supply is non-zero")
            self._balances[normalize_address(owner, validate=True)] = initial_supply

    @property
    def address(self) -> str:
        return self._address

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        require_amount("amount", amount)
        key = (normalize_address(owner), normalize_address(spender))
        with self._lock:
            self._allowances[key] = amount
        logger.debug("token_approval", token=self.symbol, owner=key[0], spender=key[1], amount=amount)
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        require_amount("amount", amount)
        sender, to = normalize_address(sender), normalize_address(to)
        with self._lock:
            if not self._move(sender, to, amount):
                return False
        self._after_transfer(sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        require_amount("amount", amount)
        spender, owner, to = (
            normalize_address(spender),
            normalize_address(owner),
            normalize_address(to),
        )
        with self._lock:
            allowance = self._allowances.get((owner, spender), 0)
            if allowance < amount:
                logger.debug(
                    "token_allowance_insufficient",
                    token=self.symbol,
                    owner=owner,
                    spender=spender,
                    allowance=allowance,
                    amount=amount,
                )
                return False
            if not self._move(owner, to, amount):
                return False
            self._allowances[(owner, spender)] = allowance - amount
        self._after_transfer(owner, to, amount)
        return True

    def _move(self, sender: str, to: str, amount: int) -> bool:
        balance = self._balances.get(sender, 0)
        if balance < amount:
            logger.debug(
                "token_balance_insufficient",
                token=self.symbol,
                holder=sender,
                balance=balance,
                amount=amount,
            )
            return False
        self._balances[sender] = balance - amount
        self._balances[to] = self._balances.get(to, 0) + amount
        return True

    def _after_transfer(self, sender: str, to: str, amount: int) -> None:
        """Hook called after every successful transfer (outside the token lock)."""

    def __repr__(self) -> str:
        return f"InMemoryToken({self.symbol}, address={self._address})"
