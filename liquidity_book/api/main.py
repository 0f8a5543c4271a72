"""FastAPI application for the pool service.

Pools live in memory; each request runs to completion against the registry
before the next one is handled, so every call behaves as one transaction.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from liquidity_book import __version__
from liquidity_book.api.endpoints import router
from liquidity_book.config import ServiceSettings
from liquidity_book.errors import (
    BinNotFound,
    InsufficientLiquidity,
    InvalidAmount,
    InvalidBinStep,
    InvalidDeposit,
    InvalidFee,
    InvalidPrice,
    LiquidityBookError,
    NonContiguousBins,
    PoolExists,
    PoolMismatch,
    PoolNotFound,
    ReceiptAlreadyRedeemed,
    SlippageExceeded,
    TooManyBinsCrossed,
    UnknownReceipt,
)
from liquidity_book.log_config import configure_logging
from liquidity_book.models import ErrorResponse
from liquidity_book.safe_int import SafeIntError

logger = structlog.get_logger()

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

ERROR_STATUS: dict[type[LiquidityBookError], int] = {
    PoolNotFound: 404,
    BinNotFound: 404,
    UnknownReceipt: 404,
    PoolExists: 409,
    ReceiptAlreadyRedeemed: 409,
    PoolMismatch: 409,
    InvalidPrice: 422,
    InvalidBinStep: 422,
    InvalidFee: 422,
    InvalidAmount: 422,
    InvalidDeposit: 422,
    NonContiguousBins: 422,
    InsufficientLiquidity: 400,
    SlippageExceeded: 400,
    TooManyBinsCrossed: 400,
}

app = FastAPI(
    title="Liquidity Book pools",
    description="Discretized-liquidity AMM pools with per-bin fee accounting",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(
            status_code=413,
            content=ErrorResponse.of("request_too_large", "Request too large").model_dump(),
        )
    return await call_next(request)


@app.exception_handler(LiquidityBookError)
async def handle_pool_error(request: Request, exc: LiquidityBookError) -> JSONResponse:
    status = ERROR_STATUS.get(type(exc), 500)
    logger.warning(
        "request_rejected",
        path=request.url.path,
        error=exc.code,
        detail=str(exc),
        status=status,
    )
    return JSONResponse(status_code=status, content=ErrorResponse.of(exc.code, exc).model_dump())


@app.exception_handler(SafeIntError)
async def handle_arithmetic_error(request: Request, exc: SafeIntError) -> JSONResponse:
    logger.error("arithmetic_error", path=request.url.path, detail=str(exc))
    return JSONResponse(status_code=422, content=ErrorResponse.of("arithmetic_error", exc).model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool service.

    Configuration via environment variables, see ServiceSettings.
    """
    settings = ServiceSettings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(
        "liquidity_book.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
