"""Pydantic models for the router HTTP surface."""

from pydantic import BaseModel, Field

from swaprouter.models.types import Address, Uint256


class BestExchangeRequest(BaseModel):
    """Direct single-venue quote request."""

    asset_in: Address = Field(alias="assetIn")
    asset_out: Address = Field(alias="assetOut")
    amount_in: Uint256 = Field(alias="amountIn")

    model_config = {"populate_by_name": True}


class BestExchangeResponse(BaseModel):
    """Best venue output; venue is None when no venue prices the pair."""

    rate: Uint256 = Field(description="Output amount of the best venue for amountIn.")
    venue: Address | None = None


class ExpectedOutRequest(BestExchangeRequest):
    """Best-path quote request."""

    pass


class ExpectedOutResponse(BaseModel):
    """Best path and the output it yields."""

    amount_out: Uint256 = Field(alias="amountOut")
    token_path: list[Address] = Field(alias="tokenPath")
    exchange_path: list[Address | None] = Field(alias="exchangePath")
    registry_version: int = Field(alias="registryVersion")
    arbitrage_detected: bool = Field(default=False, alias="arbitrageDetected")

    model_config = {"populate_by_name": True}


class SwapRequest(BaseModel):
    """Solve-and-execute request."""

    asset_in: Address = Field(alias="assetIn")
    asset_out: Address = Field(alias="assetOut")
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 = Field(alias="minAmountOut")
    recipient: Address
    sender: Address

    model_config = {"populate_by_name": True}


class PathSwapRequest(BaseModel):
    """Execute a caller-pinned route."""

    token_path: list[Address] = Field(alias="tokenPath")
    exchange_path: list[Address | None] = Field(alias="exchangePath")
    amount_in: Uint256 = Field(alias="amountIn")
    min_amount_out: Uint256 = Field(alias="minAmountOut")
    recipient: Address
    sender: Address

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    """Amount paid to the recipient."""

    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Router error body."""

    error: str = Field(description="Error class name.")
    detail: str


__all__ = [
    "BestExchangeRequest",
    "BestExchangeResponse",
    "ErrorResponse",
    "ExpectedOutRequest",
    "ExpectedOutResponse",
    "PathSwapRequest",
    "SwapRequest",
    "SwapResponse",
]
