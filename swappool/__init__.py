"""Two-asset constant product liquidity pool."""

from swappool.config import DEFAULT_POOL_CONFIG, PoolConfig
from swappool.errors import (
    EmptyPool,
    InsufficientAllowance,
    InsufficientReserve,
    InsufficientShares,
    InvalidCounterparty,
    InvalidTokenPair,
    InvariantViolation,
    PoolError,
    ReentrantCall,
    SlippageExceeded,
    TransferFailed,
    UnbalancedDeposit,
    ZeroAmount,
)
from swappool.pool import Pool
from swappool.pricing import AmountOut, quote
from swappool.tokens import FungibleToken, InMemoryToken

__version__ = "0.1.0"
__all__ = [
    "Pool",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    "AmountOut",
    "quote",
    "FungibleToken",
    "InMemoryToken",
    # Errors
    "PoolError",
    "ZeroAmount",
    "EmptyPool",
    "InsufficientReserve",
    "InsufficientShares",
    "InsufficientAllowance",
    "InvalidTokenPair",
    "InvalidCounterparty",
    "SlippageExceeded",
    "TransferFailed",
    "UnbalancedDeposit",
    "ReentrantCall",
    "InvariantViolation",
    "__version__",
]
