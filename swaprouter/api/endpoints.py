"""API endpoints for the swap router."""

import asyncio

import structlog
from fastapi import APIRouter, Depends

from swaprouter.models.api import (
    BestExchangeRequest,
    BestExchangeResponse,
    ExpectedOutRequest,
    ExpectedOutResponse,
    PathSwapRequest,
    SwapRequest,
    SwapResponse,
)
from swaprouter.routing.router import Router, get_default_router

logger = structlog.get_logger()

router = APIRouter()

def get_router() -> Router:
    """Dependency provider for the router instance.

    Override this in tests to inject a router over a test market:
        app.dependency_overrides[get_router] = lambda: test_router

    Returns:
        The router used to serve requests.
    """
    return get_default_router()


@router.post("/quote/best")
async def best_exchange(
    request: BestExchangeRequest,
    swap_router: Router = Depends(get_router),
) -> BestExchangeResponse:
    """Best direct quote across all venues."""
    loop = asyncio.get_running_loop()
    quote = await loop.run_in_executor(
        None,
        swap_router.get_best_exchange,
        request.asset_in,
        request.asset_out,
        int(request.amount_in),
    )
    return BestExchangeResponse(
        rate=str(quote.amount_out),
        venue=quote.venue.address if quote.venue is not None else None,
    )


@router.post("/quote", response_model_by_alias=True)
async def expected_out(
    request: ExpectedOutRequest,
    swap_router: Router = Depends(get_router),
) -> ExpectedOutResponse:
    """Best path between two assets and the output it yields."""
    loop = asyncio.get_running_loop()
    expected = await loop.run_in_executor(
        None,
        swap_router.get_expected_out,
        request.asset_in,
        request.asset_out,
        int(request.amount_in),
    )
    return ExpectedOutResponse(
        amount_out=str(expected.amount_out),
        token_path=[asset.address for asset in expected.token_path],
        exchange_path=[
            venue.address if venue is not None else None for venue in expected.exchange_path
        ],
        registry_version=expected.registry_version,
        arbitrage_detected=expected.arbitrage_detected,
    )


@router.post("/swap", response_model_by_alias=True)
async def swap_on_chain(
    request: SwapRequest,
    swap_router: Router = Depends(get_router),
) -> SwapResponse:
    """Solve the best path and execute it atomically."""
    logger.info(
        "received_swap",
        token_in=request.asset_in[-8:],
        token_out=request.asset_out[-8:],
        amount_in=request.amount_in,
        min_amount_out=request.min_amount_out,
    )
    loop = asyncio.get_running_loop()
    amount_out = await loop.run_in_executor(
        None,
        lambda: swap_router.swap_on_chain(
            request.asset_in,
            request.asset_out,
            int(request.amount_in),
            int(request.min_amount_out),
            request.recipient,
            sender=request.sender,
        ),
    )
    return SwapResponse(amount_out=str(amount_out))


@router.post("/swap/path", response_model_by_alias=True)
async def swap_path(
    request: PathSwapRequest,
    swap_router: Router = Depends(get_router),
) -> SwapResponse:
    """Execute a caller-pinned route."""
    logger.info(
        "received_path_swap",
        hops=len(request.exchange_path),
        amount_in=request.amount_in,
        min_amount_out=request.min_amount_out,
    )
    loop = asyncio.get_running_loop()
    amount_out = await loop.run_in_executor(
        None,
        lambda: swap_router.swap(
            request.token_path,
            request.exchange_path,
            int(request.amount_in),
            int(request.min_amount_out),
            request.recipient,
            sender=request.sender,
        ),
    )
    return SwapResponse(amount_out=str(amount_out))
