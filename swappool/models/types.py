"""Identity and amount types shared by the pool and its API.

Holders, tokens and the pool itself are identified by 0x-prefixed 20-byte
hex addresses, compared case-insensitively. Amounts are uint256 values that
travel through JSON as decimal strings.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from swappool.safe_int import UINT256_MAX

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def validate_uint256(value: Any) -> str:
    """Coerce a wire amount to its canonical decimal string.

    Accepts ints and decimal strings ("007" becomes "7"). Used as the
    pydantic validator for Uint256 fields and for query parameters.

    Raises:
        ValueError: For bools, other types, non-decimal strings, negative
            amounts and amounts above 2**256 - 1
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Amount must be a decimal string or int, got {type(value).__name__}")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Amount is not a decimal integer: '{value}'") from err
    if value < 0:
        raise ValueError(f"Amount cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Amount overflow: {value} does not fit in uint256")
    return str(value)


Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="Raw token amount as a decimal string"),
]


def is_valid_address(address: Any) -> bool:
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Canonical lowercase 0x form of an address, for use as a ledger key.

    A missing 0x prefix is added. With validate=True a malformed address
    raises ValueError; the pool validates every identity it stores.
    """
    canonical = address.lower()
    if not canonical.startswith("0x"):
        canonical = f"0x{canonical}"
    if validate and not is_valid_address(canonical):
        raise ValueError(f"Invalid address: {address}")
    return canonical
