"""Pydantic models for pool state and pool operations.

Field aliases follow the camelCase names used on the wire; amounts are
Uint256 decimal strings.
"""

from pydantic import BaseModel, Field

from swappool.models.types import Address, Uint256


class PoolState(BaseModel):
    """Point-in-time view of a pool."""

    address: Address
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    total_supply: Uint256 = Field(alias="totalSupply")

    model_config = {"populate_by_name": True}


class ShareBalance(BaseModel):
    holder: Address
    balance: Uint256


class TokenBalance(BaseModel):
    token: Address
    holder: Address
    balance: Uint256


class AddLiquidityRequest(BaseModel):
    """Deposit amount0 of token0 and amount1 of token1 from caller."""

    caller: Address
    amount0: Uint256
    amount1: Uint256


class AddLiquidityResponse(BaseModel):
    shares_minted: Uint256 = Field(alias="sharesMinted")
    pool: PoolState

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    """Burn share_amount of caller's shares."""

    caller: Address
    share_amount: Uint256 = Field(alias="shareAmount")

    model_config = {"populate_by_name": True}


class RemoveLiquidityResponse(BaseModel):
    amount0: Uint256
    amount1: Uint256
    pool: PoolState


class AmountOutResponse(BaseModel):
    """Read-only swap quote with the projected reserves after the trade."""

    amount_out: Uint256 = Field(alias="amountOut")
    reserve0: Uint256
    reserve1: Uint256

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Exact-input swap with a minimum output."""

    caller: Address
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(default="0", alias="amountOutMin")
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    to: Address | None = Field(
        default=None,
        description="Recipient of the output (defaults to caller).",
    )

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")
    pool: PoolState

    model_config = {"populate_by_name": True}


class TokenApprovalRequest(BaseModel):
    owner: Address
    spender: Address
    amount: Uint256


class TokenApprovalResponse(BaseModel):
    ok: bool


class TokenTransferRequest(BaseModel):
    sender: Address
    to: Address
    amount: Uint256


class TokenTransferResponse(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    """Body returned for a rejected pool operation."""

    error: str = Field(description="Stable error kind, e.g. SlippageExceeded")
    detail: str
