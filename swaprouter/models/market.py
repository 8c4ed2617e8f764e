"""Pydantic models for market description files.

A market file lists the vetted assets and venues the router may use, plus
the balances and venue inventories to seed the in-memory ledger with.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from swaprouter.models.types import Address, Uint256


class AllowanceSpec(BaseModel):
    """Pre-approved spending: owner lets spender move up to amount."""

    owner: Address
    spender: Address
    amount: Uint256


class AssetSpec(BaseModel):
    """A fungible asset and its initial balances."""

    address: Address
    symbol: str
    decimals: int = Field(default=18, ge=0, le=77)
    transfer_fee_bps: int = Field(
        default=0,
        alias="transferFeeBps",
        ge=0,
        lt=10_000,
        description="Share of every transfer burned, in basis points.",
    )
    balances: dict[Address, Uint256] = Field(default_factory=dict)
    allowances: list[AllowanceSpec] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class FixedRateSpec(BaseModel):
    """One directional rate: output = input * numerator / denominator."""

    asset_in: Address = Field(alias="assetIn")
    asset_out: Address = Field(alias="assetOut")
    numerator: Uint256
    denominator: Uint256 = "1"

    model_config = {"populate_by_name": True}


class FixedRateVenueSpec(BaseModel):
    """Oracle-priced venue trading out of its own inventory."""

    kind: Literal["fixedRate"] = "fixedRate"
    address: Address
    rates: list[FixedRateSpec] = Field(default_factory=list)
    inventory: dict[Address, Uint256] = Field(
        default_factory=dict,
        description="Initial venue balance per asset address.",
    )


class ConstantProductVenueSpec(BaseModel):
    """x * y = k pool over two assets."""

    kind: Literal["constantProduct"] = "constantProduct"
    address: Address
    token0: Address
    token1: Address
    reserve0: Uint256
    reserve1: Uint256
    fee_bps: int = Field(default=30, alias="feeBps", ge=0, lt=10_000)

    model_config = {"populate_by_name": True}


VenueSpec = Annotated[
    FixedRateVenueSpec | ConstantProductVenueSpec,
    Field(discriminator="kind"),
]


class MarketConfig(BaseModel):
    """Complete market description."""

    assets: list[AssetSpec] = Field(default_factory=list)
    venues: list[VenueSpec] = Field(default_factory=list)


__all__ = [
    "AllowanceSpec",
    "AssetSpec",
    "ConstantProductVenueSpec",
    "FixedRateSpec",
    "FixedRateVenueSpec",
    "MarketConfig",
    "VenueSpec",
]
