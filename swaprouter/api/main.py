"""FastAPI application for the swap router.

Router errors are mapped to HTTP status codes in one exception handler;
nothing is retried and a failed swap has already been rolled back by the
time the response is written.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from swaprouter import __version__
from swaprouter.api.endpoints import router
from swaprouter.errors import (
    ApprovalFailed,
    MalformedPath,
    NoPathExists,
    RouterError,
    SlippageExceeded,
    StaleRegistry,
    TooManyAssets,
    TransferFailed,
    UnknownAsset,
    VenueError,
)
from swaprouter.math.log2 import Log2DomainError
from swaprouter.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SWAPROUTER_HOST", "0.0.0.0")
PORT = int(os.environ.get("SWAPROUTER_PORT", "8000"))
DEBUG = os.environ.get("SWAPROUTER_DEBUG", "false").lower() in ("true", "1", "yes")

# HTTP status for each router error; anything else is a 500
ERROR_STATUS: dict[type[RouterError], int] = {
    UnknownAsset: 404,
    NoPathExists: 404,
    MalformedPath: 422,
    TooManyAssets: 422,
    SlippageExceeded: 409,
    StaleRegistry: 409,
    TransferFailed: 400,
    ApprovalFailed: 400,
}

app = FastAPI(
    title="Swap Router",
    description="Multi-venue swap routing over log-domain rate graphs",
    version=__version__,
)

app.include_router(router)


def status_for(error: RouterError) -> int:
    """HTTP status for a router error, matching on the class hierarchy."""
    for error_type in type(error).__mro__:
        status = ERROR_STATUS.get(error_type)  # type: ignore[arg-type]
        if status is not None:
            return status
    return 500


def _error_response(status: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
    )


@app.exception_handler(RouterError)
async def router_error_handler(request: Request, exc: RouterError) -> JSONResponse:
    """Render router errors as JSON with a mapped status code."""
    status = status_for(exc)
    logger.warning(
        "request_failed",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
        status=status,
    )
    return _error_response(status, exc)


@app.exception_handler(VenueError)
async def venue_error_handler(request: Request, exc: VenueError) -> JSONResponse:
    """A venue refused a swap mid-route; the ledger has already rolled back."""
    logger.warning(
        "venue_failed",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    return _error_response(502, exc)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Invalid amounts and other argument errors are client errors."""
    if isinstance(exc, Log2DomainError):
        # Contract violation inside the router, not a bad request
        logger.error("log2_domain_violation", path=request.url.path, detail=str(exc))
        return _error_response(500, exc)
    return _error_response(422, exc)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the router API server.

    Configuration via environment variables:
    - SWAPROUTER_HOST: Host to bind to (default: 0.0.0.0)
    - SWAPROUTER_PORT: Port to bind to (default: 8000)
    - SWAPROUTER_DEBUG: Enable debug/reload mode (default: false)
    - SWAPROUTER_MARKET_FILE: JSON market description to serve
    """
    uvicorn.run(
        "swaprouter.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
