"""Liquidity deposits and withdrawals.

Share issuance:
    First deposit (total_supply == 0):
        minted = initial_share_supply            (fixed, amounts only fund reserves)
    Later deposits:
        minted = min(floor(amount0 * total_supply / reserve0),
                     floor(amount1 * total_supply / reserve1))

Withdrawal, using the supply read before burning:
    amount0 = floor(reserve0 * shares / total_supply)
    amount1 = floor(reserve1 * shares / total_supply)

An imbalanced deposit mints on its smaller side; the excess stays in the pool
and accrues to all holders. PoolConfig.strict_ratio rejects such deposits.
"""

from __future__ import annotations

import structlog

from swappool.config import DEFAULT_POOL_CONFIG, PoolConfig
from swappool.constants import TOKEN0_INDEX, TOKEN1_INDEX
from swappool.errors import InsufficientShares, UnbalancedDeposit, ZeroAmount
from swappool.ledger import ReserveLedger, ShareLedger
from swappool.safe_int import S, require_amount
from swappool.tokens.gateway import TokenGateway, TransferJournal

logger = structlog.get_logger()


def compute_shares_to_mint(
    amount0: int,
    amount1: int,
    reserve0: int,
    reserve1: int,
    total_supply: int,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> int:
    """Compute LP shares to mint for a deposit.

    Args:
        amount0: Amount of token0 being deposited
        amount1: Amount of token1 being deposited
        reserve0: Current reserve of token0
        reserve1: Current reserve of token1
        total_supply: Current LP share supply
        config: Issuance configuration

    Returns:
        Number of shares to mint (always positive)

    Raises:
        ZeroAmount: If either amount is zero or the deposit would mint nothing
        UnbalancedDeposit: If config.strict_ratio and the deposit ratio differs
            from the reserve ratio
    """
    require_amount("amount0", amount0)
    require_amount("amount1", amount1)
    if amount0 == 0 or amount1 == 0:
        raise ZeroAmount(f"Deposit amounts must be positive: ({amount0}, {amount1})")

    if total_supply == 0:
        return config.initial_share_supply

    if config.strict_ratio and S(amount0) * reserve1 != S(amount1) * reserve0:
        raise UnbalancedDeposit(
            f"Deposit ({amount0}, {amount1}) does not match reserve ratio "
            f"({reserve0}, {reserve1})"
        )

    shares0 = S(amount0) * total_supply // reserve0
    shares1 = S(amount1) * total_supply // reserve1
    minted = shares0.min(shares1).value

    if minted == 0:
        raise ZeroAmount(f"Deposit ({amount0}, {amount1}) is too small to mint a share")
    return minted


def compute_withdrawal(
    share_amount: int,
    reserve0: int,
    reserve1: int,
    total_supply: int,
) -> tuple[int, int]:
    """Compute the pro-rata reserves returned for burning share_amount.

    Raises:
        ZeroAmount: If share_amount is zero
        InsufficientShares: If share_amount exceeds total_supply
    """
    require_amount("share_amount", share_amount)
    if share_amount == 0:
        raise ZeroAmount("share_amount must be positive")
    if share_amount > total_supply:
        raise InsufficientShares(
            f"Cannot redeem {share_amount} shares from a supply of {total_supply}"
        )

    amount0 = (S(reserve0) * share_amount // total_supply).value
    amount1 = (S(reserve1) * share_amount // total_supply).value
    return amount0, amount1


class LiquidityManager:
    """Applies deposits and withdrawals to the ledgers and the token contracts.

    Callers (the Pool) provide serialization and rollback; every method here
    assumes it runs inside a pool transaction with its own journal.
    """

    def __init__(
        self,
        reserves: ReserveLedger,
        shares: ShareLedger,
        gateway: TokenGateway,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.reserves = reserves
        self.shares = shares
        self.gateway = gateway
        self.config = config

    def add(self, caller: str, amount0: int, amount1: int, journal: TransferJournal) -> int:
        """Deposit both assets from caller and mint shares to caller.

        Returns:
            Number of shares minted

        Raises:
            ZeroAmount: If either amount is zero or nothing would be minted
            UnbalancedDeposit: In strict mode, if the ratio is off
            TransferFailed: If either pull is refused
        """
        reserve0, reserve1 = self.reserves.read()
        total_supply = self.shares.total_supply()
        minted = compute_shares_to_mint(
            amount0, amount1, reserve0, reserve1, total_supply, self.config
        )

        self.gateway.pull(TOKEN0_INDEX, caller, amount0, journal)
        self.gateway.pull(TOKEN1_INDEX, caller, amount1, journal)

        self.shares.mint(caller, minted)
        self.reserves.credit(TOKEN0_INDEX, amount0)
        self.reserves.credit(TOKEN1_INDEX, amount1)

        logger.info(
            "liquidity_added",
            provider=caller,
            amount0=amount0,
            amount1=amount1,
            shares_minted=minted,
            first_deposit=total_supply == 0,
        )
        return minted

    def remove(self, caller: str, share_amount: int, journal: TransferJournal) -> tuple[int, int]:
        """Burn caller's shares and return the pro-rata reserves to caller.

        Returns:
            (amount0, amount1) sent to caller

        Raises:
            ZeroAmount: If share_amount is zero
            InsufficientShares: If caller holds fewer than share_amount shares
            TransferFailed: If either push is refused
        """
        require_amount("share_amount", share_amount)
        if share_amount == 0:
            raise ZeroAmount("share_amount must be positive")
        balance = self.shares.balance_of(caller)
        if balance < share_amount:
            raise InsufficientShares(
                f"Cannot remove {share_amount} shares: {caller} holds {balance}"
            )

        reserve0, reserve1 = self.reserves.read()
        amount0, amount1 = compute_withdrawal(
            share_amount, reserve0, reserve1, self.shares.total_supply()
        )

        self.reserves.debit(TOKEN0_INDEX, amount0)
        self.reserves.debit(TOKEN1_INDEX, amount1)
        self.shares.burn(caller, share_amount)

        self.gateway.push(TOKEN0_INDEX, caller, amount0, journal)
        self.gateway.push(TOKEN1_INDEX, caller, amount1, journal)

        logger.info(
            "liquidity_removed",
            provider=caller,
            shares_burned=share_amount,
            amount0=amount0,
            amount1=amount1,
        )
        return amount0, amount1
