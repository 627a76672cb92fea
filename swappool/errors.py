"""Pool error classes.

Every error is terminal for the operation that raised it: the pool rolls back
all ledger changes and refunds pulled tokens before the error reaches the
caller. ``kind`` is a stable identifier used in logs and API responses.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    kind = "PoolError"


class ZeroAmount(PoolError):
    """An amount that must be positive was zero, or would mint/trade nothing."""

    kind = "ZeroAmount"


class EmptyPool(PoolError):
    """Quote requested against a zero reserve."""

    kind = "EmptyPool"


class InsufficientReserve(PoolError):
    """Debit larger than the reserve, or a trade that would drain it."""

    kind = "InsufficientReserve"


class InsufficientShares(PoolError):
    """Holder does not own enough LP shares."""

    kind = "InsufficientShares"


class InsufficientAllowance(InsufficientShares):
    """Spender is not approved for enough of the owner's LP shares."""

    kind = "InsufficientAllowance"


class InvalidTokenPair(PoolError):
    """Token identifiers do not match the pool's pair."""

    kind = "InvalidTokenPair"


class SlippageExceeded(PoolError):
    """Computed output is below the caller's minimum."""

    kind = "SlippageExceeded"


class TransferFailed(PoolError):
    """A token pull or push was refused by the token contract."""

    kind = "TransferFailed"


class UnbalancedDeposit(PoolError):
    """Deposit ratio differs from the reserve ratio (strict mode only)."""

    kind = "UnbalancedDeposit"


class ReentrantCall(PoolError):
    """A pool operation was entered while another one was in flight."""

    kind = "ReentrantCall"


class InvariantViolation(PoolError):
    """Pool accounting no longer matches its invariants."""

    kind = "InvariantViolation"


class InvalidCounterparty(PoolError, ValueError):
    """The pool's own address was given as caller or recipient."""

    kind = "InvalidCounterparty"
