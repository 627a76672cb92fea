"""Token collaborators: the capability interface, an in-memory adapter and the pool gateway."""

from swappool.tokens.base import FungibleToken
from swappool.tokens.gateway import Direction, JournalEntry, TokenGateway, TransferJournal
from swappool.tokens.memory import InMemoryToken

__all__ = [
    "FungibleToken",
    "InMemoryToken",
    "TokenGateway",
    "TransferJournal",
    "JournalEntry",
    "Direction",
]
