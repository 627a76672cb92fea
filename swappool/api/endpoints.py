"""API endpoints for the pool.

Handlers are plain (sync) functions, so FastAPI runs them on its thread pool;
the pool's own lock serializes them.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from swappool.config import PoolConfig
from swappool.errors import TransferFailed
from swappool.models.pool import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    AmountOutResponse,
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
from swappool.models.types import normalize_address, validate_uint256
from swappool.pool import Pool
from swappool.tokens.memory import InMemoryToken

logger = structlog.get_logger()

router = APIRouter()

# Default deployment, configurable via SWAPPOOL_* environment variables
DEFAULT_POOL_ADDRESS = "0x" + "00" * 19 + "01"
DEFAULT_TOKEN0 = "0x" + "00" * 19 + "a0"
DEFAULT_TOKEN1 = "0x" + "00" * 19 + "a1"
DEFAULT_TREASURY = "0x" + "00" * 19 + "fe"
DEFAULT_TREASURY_SUPPLY0 = 100_000_000_000
DEFAULT_TREASURY_SUPPLY1 = 1_000_000_000_000_000


@dataclass
class Deployment:
    """A pool together with the token contracts it custodies."""

    pool: Pool
    tokens: dict[str, InMemoryToken]

    def token(self, address: str) -> InMemoryToken:
        try:
            return self.tokens[normalize_address(address)]
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown token: {address}") from None


def create_deployment(environ: Mapping[str, str] | None = None) -> Deployment:
    """Deploy two in-memory tokens and a pool over them.

    Configuration via environment variables:
    - SWAPPOOL_POOL_ADDRESS: the pool's address
    - SWAPPOOL_TOKEN0 / SWAPPOOL_TOKEN1: token addresses
    - SWAPPOOL_TREASURY: holder credited with both token supplies
    - SWAPPOOL_TREASURY_SUPPLY0 / SWAPPOOL_TREASURY_SUPPLY1: initial supplies
    - SWAPPOOL_INITIAL_SHARE_SUPPLY, SWAPPOOL_STRICT_RATIO: see PoolConfig.from_env
    """
    env = os.environ if environ is None else environ
    treasury = env.get("SWAPPOOL_TREASURY", DEFAULT_TREASURY)
    token0 = InMemoryToken(
        env.get("SWAPPOOL_TOKEN0", DEFAULT_TOKEN0),
        name="Token 0",
        symbol="TK0",
        initial_supply=int(env.get("SWAPPOOL_TREASURY_SUPPLY0", str(DEFAULT_TREASURY_SUPPLY0))),
        owner=treasury,
    )
    token1 = InMemoryToken(
        env.get("SWAPPOOL_TOKEN1", DEFAULT_TOKEN1),
        name="Token 1",
        symbol="TK1",
        initial_supply=int(env.get("SWAPPOOL_TREASURY_SUPPLY1", str(DEFAULT_TREASURY_SUPPLY1))),
        owner=treasury,
    )
    pool = Pool(
        token0,
        token1,
        address=env.get("SWAPPOOL_POOL_ADDRESS", DEFAULT_POOL_ADDRESS),
        config=PoolConfig.from_env(env),
    )
    logger.info("deployment_created", pool=pool.address, treasury=normalize_address(treasury))
    return Deployment(pool=pool, tokens={token0.address: token0, token1.address: token1})


@lru_cache(maxsize=1)
def _default_deployment() -> Deployment:
    return create_deployment()


def get_deployment() -> Deployment:
    """Dependency provider for the deployment.

    Override this in tests to inject a fresh pool:
        app.dependency_overrides[get_deployment] = lambda: deployment
    """
    return _default_deployment()


def _parse_address(name: str, value: str) -> str:
    try:
        return normalize_address(value, validate=True)
    except ValueError as err:
        raise HTTPException(status_code=422, detail=f"Invalid {name}: {value}") from err


def _parse_amount(name: str, value: str) -> int:
    try:
        return int(validate_uint256(value))
    except ValueError as err:
        raise HTTPException(status_code=422, detail=f"Invalid {name}: {err}") from err


# --- Pool ---


@router.get("/pool")
def get_pool_state(deployment: Deployment = Depends(get_deployment)) -> PoolState:
    """Current reserves and share supply."""
    return deployment.pool.state()


@router.get("/pool/shares/{holder}")
def get_share_balance(
    holder: str,
    deployment: Deployment = Depends(get_deployment),
) -> ShareBalance:
    holder = _parse_address("holder", holder)
    return ShareBalance(holder=holder, balance=str(deployment.pool.balance_of(holder)))


@router.get("/pool/amount-out")
def get_amount_out(
    amount_in: str = Query(alias="amountIn"),
    token_in: str = Query(alias="tokenIn"),
    deployment: Deployment = Depends(get_deployment),
) -> AmountOutResponse:
    """Read-only quote: output for amountIn of tokenIn and the projected reserves."""
    result = deployment.pool.get_amount_out(
        _parse_amount("amountIn", amount_in), _parse_address("tokenIn", token_in)
    )
    return AmountOutResponse(
        amount_out=str(result.amount_out),
        reserve0=str(result.reserve0),
        reserve1=str(result.reserve1),
    )


@router.post("/pool/add")
def add_liquidity(
    request: AddLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> AddLiquidityResponse:
    pool = deployment.pool
    minted = pool.add(int(request.amount0), int(request.amount1), caller=request.caller)
    return AddLiquidityResponse(shares_minted=str(minted), pool=pool.state())


@router.post("/pool/remove")
def remove_liquidity(
    request: RemoveLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> RemoveLiquidityResponse:
    pool = deployment.pool
    amount0, amount1 = pool.remove(int(request.share_amount), caller=request.caller)
    return RemoveLiquidityResponse(amount0=str(amount0), amount1=str(amount1), pool=pool.state())


@router.post("/pool/swap")
def swap(
    request: SwapRequest,
    deployment: Deployment = Depends(get_deployment),
) -> SwapResponse:
    pool = deployment.pool
    amount_out = pool.swap(
        int(request.amount_in),
        int(request.amount_out_min),
        request.token_in,
        request.token_out,
        request.to or request.caller,
        caller=request.caller,
    )
    return SwapResponse(amount_out=str(amount_out), pool=pool.state())


# --- Tokens ---


@router.get("/tokens/{token}/balances/{holder}")
def get_token_balance(
    token: str,
    holder: str,
    deployment: Deployment = Depends(get_deployment),
) -> TokenBalance:
    contract = deployment.token(token)
    holder = _parse_address("holder", holder)
    return TokenBalance(
        token=contract.address, holder=holder, balance=str(contract.balance_of(holder))
    )


@router.post("/tokens/{token}/approve")
def approve_token(
    token: str,
    request: TokenApprovalRequest,
    deployment: Deployment = Depends(get_deployment),
) -> TokenApprovalResponse:
    contract = deployment.token(token)
    return TokenApprovalResponse(
        ok=contract.approve(request.owner, request.spender, int(request.amount))
    )


@router.post("/tokens/{token}/transfer")
def transfer_token(
    token: str,
    request: TokenTransferRequest,
    deployment: Deployment = Depends(get_deployment),
) -> TokenTransferResponse:
    contract = deployment.token(token)
    if not contract.transfer(request.sender, request.to, int(request.amount)):
        raise TransferFailed(
            f"Transfer of {request.amount} {contract.address} from {request.sender} refused"
        )
    return TokenTransferResponse()
