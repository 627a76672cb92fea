"""Reserve bookkeeping for the pool's two assets."""

from __future__ import annotations

from swappool.errors import InsufficientReserve
from swappool.safe_int import S, require_amount


class ReserveLedger:
    """Tracks reserve0 and reserve1 in raw token units.

    Reserves are only ever moved by pool operations, so each one mirrors the
    pool's balance in the corresponding token contract.
    """

    __slots__ = ("_reserves",)

    def __init__(self, reserve0: int = 0, reserve1: int = 0) -> None:
        self._reserves = [
            require_amount("reserve0", reserve0),
            require_amount("reserve1", reserve1),
        ]

    def credit(self, asset_index: int, amount: int) -> int:
        """Add amount to a reserve and return the new reserve.

        Raises:
            Uint256Overflow: If the reserve would exceed uint256
        """
        i = _check_index(asset_index)
        require_amount("amount", amount)
        self._reserves[i] = (S(self._reserves[i]) + amount).to_uint256()
        return self._reserves[i]

    def debit(self, asset_index: int, amount: int) -> int:
        """Subtract amount from a reserve and return the new reserve.

        Raises:
            InsufficientReserve: If amount exceeds the reserve
        """
        i = _check_index(asset_index)
        require_amount("amount", amount)
        if amount > self._reserves[i]:
            raise InsufficientReserve(
                f"Cannot debit {amount} from reserve{i} of {self._reserves[i]}"
            )
        self._reserves[i] = (S(self._reserves[i]) - amount).value
        return self._reserves[i]

    def read(self) -> tuple[int, int]:
        """Current (reserve0, reserve1)."""
        return self._reserves[0], self._reserves[1]

    def is_empty(self) -> bool:
        return self._reserves[0] == 0 and self._reserves[1] == 0

    def snapshot(self) -> tuple[int, int]:
        return self.read()

    def restore(self, snapshot: tuple[int, int]) -> None:
        self._reserves = [snapshot[0], snapshot[1]]

    def __repr__(self) -> str:
        return f"ReserveLedger(reserve0={self._reserves[0]}, reserve1={self._reserves[1]})"


def _check_index(asset_index: int) -> int:
    if asset_index not in (0, 1):
        raise ValueError(f"asset_index must be 0 or 1: {asset_index}")
    return asset_index
