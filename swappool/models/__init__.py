"""Pydantic models for pool state and API payloads."""

from swappool.models.pool import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    AmountOutResponse,
    ErrorResponse,
    PoolState,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ShareBalance,
    SwapRequest,
    SwapResponse,
    TokenApprovalRequest,
    TokenApprovalResponse,
    TokenBalance,
    TokenTransferRequest,
    TokenTransferResponse,
)
from swappool.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    "is_valid_address",
    # State
    "PoolState",
    "ShareBalance",
    "TokenBalance",
    # Requests / responses
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "AmountOutResponse",
    "SwapRequest",
    "SwapResponse",
    "TokenApprovalRequest",
    "TokenApprovalResponse",
    "TokenTransferRequest",
    "TokenTransferResponse",
    "ErrorResponse",
]
