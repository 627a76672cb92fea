"""Reserve and LP share ledgers."""

from swappool.ledger.reserves import ReserveLedger
from swappool.ledger.shares import ShareLedger, ShareSnapshot

__all__ = [
    "ReserveLedger",
    "ShareLedger",
    "ShareSnapshot",
]
