"""LP share accounting.

Shares behave like a standard fungible token: a total supply, per-holder
balances, allowances and transfers. Minting and burning are reserved for the
liquidity manager; transfers move balances without touching supply.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from swappool.errors import InsufficientAllowance, InsufficientShares
from swappool.safe_int import S, require_amount

logger = structlog.get_logger()


@dataclass(frozen=True)
class ShareSnapshot:
    """Copy of the share ledger used to roll back a failed operation."""

    total_supply: int
    balances: dict[str, int]
    allowances: dict[tuple[str, str], int]


class ShareLedger:
    """Total supply plus per-holder balances and allowances.

    Notes:
    - Balances are always non-negative.
    - Zero balances and zero allowances are omitted to keep the table sparse.
    - sum(balances) == total_supply holds after every public call.
    """

    def __init__(self) -> None:
        self._total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    # --- Reads ---

    def balance_of(self, holder: str) -> int:
        """LP balance of holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def holders(self) -> dict[str, int]:
        """Copy of all non-zero balances."""
        return dict(self._balances)

    # --- Supply changes ---

    def mint(self, holder: str, amount: int) -> None:
        """Create amount new shares for holder."""
        require_amount("amount", amount)
        self._total_supply = (S(self._total_supply) + amount).to_uint256()
        self._set_balance(holder, (S(self.balance_of(holder)) + amount).to_uint256())

    def burn(self, holder: str, amount: int) -> None:
        """Destroy amount of holder's shares.

        Raises:
            InsufficientShares: If holder owns fewer than amount shares
        """
        require_amount("amount", amount)
        balance = self.balance_of(holder)
        if balance < amount:
            raise InsufficientShares(
                f"Cannot burn {amount} shares: {holder} holds {balance}"
            )
        self._set_balance(holder, balance - amount)
        self._total_supply = (S(self._total_supply) - amount).value

    # --- Fungible token operations ---

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move amount of sender's shares to another holder.

        Raises:
            InsufficientShares: If sender owns fewer than amount shares
        """
        require_amount("amount", amount)
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientShares(
                f"Cannot transfer {amount} shares: {sender} holds {balance}"
            )
        self._set_balance(sender, balance - amount)
        self._set_balance(to, self.balance_of(to) + amount)
        logger.debug("shares_transferred", sender=sender, to=to, amount=amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Set spender's allowance over owner's shares (replaces any previous value)."""
        require_amount("amount", amount)
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """Move owner's shares on behalf of an approved spender.

        Raises:
            InsufficientAllowance: If spender's allowance is below amount
            InsufficientShares: If owner holds fewer than amount shares
        """
        require_amount("amount", amount)
        allowance = self.allowance(owner, spender)
        if allowance < amount:
            raise InsufficientAllowance(
                f"{spender} may spend {allowance} of {owner}'s shares, requested {amount}"
            )
        self.transfer(owner, to, amount)
        self.approve(owner, spender, allowance - amount)

    # --- Rollback support ---

    def snapshot(self) -> ShareSnapshot:
        return ShareSnapshot(
            total_supply=self._total_supply,
            balances=dict(self._balances),
            allowances=dict(self._allowances),
        )

    def restore(self, snapshot: ShareSnapshot) -> None:
        self._total_supply = snapshot.total_supply
        self._balances = dict(snapshot.balances)
        self._allowances = dict(snapshot.allowances)

    def _set_balance(self, holder: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def __repr__(self) -> str:
        return f"ShareLedger(total_supply={self._total_supply}, holders={len(self._balances)})"
