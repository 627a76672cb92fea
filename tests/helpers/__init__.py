"""Test helpers module for shared test utilities.

- constants: Account and token addresses, funding amounts
- factories: Token/pool deployment and approve-then-act helpers
"""

from tests.helpers.constants import (
    ACCOUNT_TOKEN0,
    ACCOUNT_TOKEN1,
    ACCOUNTS,
    ALICE,
    BOB,
    CAROL,
    DAVE,
    DEPLOYER,
    OTHER_TOKEN,
    POOL,
    TOKEN0,
    TOKEN1,
)
from tests.helpers.factories import deposit, make_pool, make_tokens, swap_exact_in

__all__ = [
    # Constants
    "POOL",
    "TOKEN0",
    "TOKEN1",
    "OTHER_TOKEN",
    "DEPLOYER",
    "ALICE",
    "BOB",
    "CAROL",
    "DAVE",
    "ACCOUNTS",
    "ACCOUNT_TOKEN0",
    "ACCOUNT_TOKEN1",
    # Factories
    "make_tokens",
    "make_pool",
    "deposit",
    "swap_exact_in",
]
