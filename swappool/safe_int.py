"""Checked arithmetic for reserves, share supply and trade amounts.

Pool math works on raw token units and must never go negative or silently
divide by zero. Wrap the first operand in ``S`` and chain plain ints onto it:

    shares = (S(amount0) * total_supply // reserve0).value
    new_reserve = (S(reserve) + amount).to_uint256()

Failures raise SafeIntError subclasses, which are ArithmeticErrors.
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Pool arithmetic fault."""


class DivisionByZero(SafeIntError):
    pass


class Underflow(SafeIntError):
    """A debit larger than the balance it is taken from."""


class Uint256Overflow(SafeIntError):
    """A stored amount left the uint256 range."""


class SafeInt:
    """Unsigned-amount integer whose operators check their result."""

    __slots__ = ("value",)

    def __init__(self, value: SafeInt | int) -> None:
        if isinstance(value, SafeInt):
            value = value.value
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self.value = value

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value + _raw(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        other = _raw(other)
        if other > self.value:
            raise Underflow(f"Cannot take {other} from {self.value}")
        return SafeInt(self.value - other)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value * _raw(other))

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self.value // _nonzero(self.value, other))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self.value == _raw(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SafeInt({self.value})"

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Divide and round up; used where rounding favours the trader."""
        divisor = _nonzero(self.value, other)
        quotient, remainder = divmod(self.value, divisor)
        return SafeInt(quotient + (1 if remainder else 0))

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self.value, _raw(other)))

    def to_uint256(self) -> int:
        """Unwrap a value about to be stored in a ledger.

        Raises:
            Uint256Overflow: If the value is negative or above 2**256 - 1
        """
        if not 0 <= self.value <= UINT256_MAX:
            raise Uint256Overflow(f"{self.value} is outside the uint256 range")
        return self.value


def _raw(operand: SafeInt | int) -> int:
    return operand.value if isinstance(operand, SafeInt) else operand


def _nonzero(dividend: int, divisor: SafeInt | int) -> int:
    divisor = _raw(divisor)
    if divisor == 0:
        raise DivisionByZero(f"Cannot divide {dividend} by zero")
    return divisor


def require_amount(name: str, value: int) -> int:
    """Reject an amount argument that is not a uint256 int.

    Bad amounts are programming errors at the Python surface, not pool
    errors, so they raise TypeError/ValueError.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    if not 0 <= value <= UINT256_MAX:
        raise ValueError(f"{name} must be a uint256: {value}")
    return value


S = SafeInt
