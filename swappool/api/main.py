"""FastAPI application exposing the pool."""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from swappool import __version__
from swappool.api.endpoints import router
from swappool.errors import (
    EmptyPool,
    InvalidCounterparty,
    InvalidTokenPair,
    PoolError,
    TransferFailed,
    UnbalancedDeposit,
    ZeroAmount,
)
from swappool.models.pool import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SWAPPOOL_HOST", "0.0.0.0")
PORT = int(os.environ.get("SWAPPOOL_PORT", "8000"))
DEBUG = os.environ.get("SWAPPOOL_DEBUG", "false").lower() in ("true", "1", "yes")

# Errors caused by the request itself; everything else conflicts with pool state
BAD_REQUEST_ERRORS = (
    ZeroAmount,
    EmptyPool,
    InvalidTokenPair,
    InvalidCounterparty,
    UnbalancedDeposit,
    TransferFailed,
)

app = FastAPI(
    title="Swap Pool",
    description="Two-asset constant product liquidity pool",
    version=__version__,
)


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Report a rejected pool operation with its error kind."""
    status_code = 400 if isinstance(exc, BAD_REQUEST_ERRORS) else 409
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=exc.kind,
        status_code=status_code,
    )
    body = ErrorResponse(error=exc.kind, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - SWAPPOOL_HOST: Host to bind to (default: 0.0.0.0)
    - SWAPPOOL_PORT: Port to bind to (default: 8000)
    - SWAPPOOL_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "swappool.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
