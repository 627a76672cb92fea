"""Fungible token capability interface.

The pool never owns token logic; it talks to each asset through this protocol.
Calls are made with an explicit acting identity (``sender``, ``owner`` or
``spender``) in place of an execution-context caller.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FungibleToken(Protocol):
    """Protocol for the token contracts a pool custodies.

    Mutating methods return True on success and False when the token refuses
    the transfer (insufficient balance or allowance).
    """

    @property
    def address(self) -> str:
        """Token identifier (lowercase 0x address)."""
        ...

    def balance_of(self, holder: str) -> int:
        """Balance held by holder."""
        ...

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move amount from sender to to."""
        ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move amount from owner to to, spending spender's allowance."""
        ...

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set spender's allowance over owner's balance."""
        ...
