"""Pydantic models for router inputs and outputs."""

from swaprouter.models.api import (
    BestExchangeRequest,
    BestExchangeResponse,
    ErrorResponse,
    ExpectedOutRequest,
    ExpectedOutResponse,
    PathSwapRequest,
    SwapRequest,
    SwapResponse,
)
from swaprouter.models.market import MarketConfig
from swaprouter.models.types import Address, Uint256, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    # Market file
    "MarketConfig",
    # API
    "BestExchangeRequest",
    "BestExchangeResponse",
    "ErrorResponse",
    "ExpectedOutRequest",
    "ExpectedOutResponse",
    "PathSwapRequest",
    "SwapRequest",
    "SwapResponse",
]
