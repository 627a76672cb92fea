"""Pool configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from swappool.constants import INITIAL_SHARE_SUPPLY

_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class PoolConfig:
    """Configuration for share issuance and deposit handling.

    Attributes:
        initial_share_supply: Shares minted by the first deposit into an empty
            pool, independent of the deposited amounts (default: 100,000)
        strict_ratio: If True, reject deposits whose ratio differs from the
            reserve ratio with UnbalancedDeposit. If False, mint on the smaller
            side and leave the excess in the pool.
    """

    initial_share_supply: int = INITIAL_SHARE_SUPPLY
    strict_ratio: bool = False

    def __post_init__(self) -> None:
        if self.initial_share_supply <= 0:
            raise ValueError(
                f"initial_share_supply must be positive: {self.initial_share_supply}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PoolConfig:
        """Build a config from SWAPPOOL_* environment variables.

        - SWAPPOOL_INITIAL_SHARE_SUPPLY: first-deposit issuance (default: 100000)
        - SWAPPOOL_STRICT_RATIO: reject unbalanced deposits (default: false)
        """
        env = os.environ if environ is None else environ
        return cls(
            initial_share_supply=int(
                env.get("SWAPPOOL_INITIAL_SHARE_SUPPLY", str(INITIAL_SHARE_SUPPLY))
            ),
            strict_ratio=env.get("SWAPPOOL_STRICT_RATIO", "false").lower() in _TRUTHY,
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
