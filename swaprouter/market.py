"""Build an in-memory market (ledger + registry) from a market description."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import structlog

from swaprouter.chain.ledger import Ledger
from swaprouter.chain.token import Token
from swaprouter.chain.venues import ConstantProductVenue, FixedRateVenue
from swaprouter.models.market import (
    ConstantProductVenueSpec,
    FixedRateVenueSpec,
    MarketConfig,
)
from swaprouter.models.types import normalize_address, short
from swaprouter.registry import MarketRegistry

logger = structlog.get_logger()


@dataclass
class Market:
    """Ledger and registry seeded from the same description."""

    ledger: Ledger
    registry: MarketRegistry

    def token(self, address: str) -> Token:
        asset = self.registry.get_asset(address)
        assert isinstance(asset, Token)
        return asset


def build_market(config: MarketConfig) -> Market:
    """Create tokens, venues and balances described by config.

    Raises:
        ValueError: If a venue references an asset that is not declared
    """
    ledger = Ledger()
    registry = MarketRegistry()
    tokens: dict[str, Token] = {}

    for spec in config.assets:
        if normalize_address(spec.address) in tokens:
            logger.warning("duplicate_asset_skipped", asset=short(spec.address))
            continue
        token = Token(
            address=spec.address,
            symbol=spec.symbol,
            decimals=spec.decimals,
            transfer_fee_bps=spec.transfer_fee_bps,
        )
        for account, amount in spec.balances.items():
            token.mint(account, int(amount))
        for allowance in spec.allowances:
            token.approve(allowance.owner, allowance.spender, int(allowance.amount))
        tokens[token.address] = token
        registry.add_asset(token)
        ledger.register(token)

    def lookup(address: str) -> Token:
        token = tokens.get(normalize_address(address))
        if token is None:
            raise ValueError(f"Venue references undeclared asset {address}")
        return token

    for venue_spec in config.venues:
        if registry.get_venue(venue_spec.address) is not None:
            logger.warning("duplicate_venue_skipped", venue=short(venue_spec.address))
            continue
        if isinstance(venue_spec, FixedRateVenueSpec):
            venue: FixedRateVenue | ConstantProductVenue = FixedRateVenue(venue_spec.address)
            for rate in venue_spec.rates:
                venue.set_rate(
                    lookup(rate.asset_in),
                    lookup(rate.asset_out),
                    int(rate.numerator),
                    int(rate.denominator),
                )
            for address, amount in venue_spec.inventory.items():
                lookup(address).mint(venue.address, int(amount))
        elif isinstance(venue_spec, ConstantProductVenueSpec):
            token0 = lookup(venue_spec.token0)
            token1 = lookup(venue_spec.token1)
            venue = ConstantProductVenue(
                venue_spec.address, token0, token1, fee_bps=venue_spec.fee_bps
            )
            token0.mint(venue.address, int(venue_spec.reserve0))
            token1.mint(venue.address, int(venue_spec.reserve1))
        else:
            raise TypeError(f"Unknown venue spec: {type(venue_spec)}")

        registry.add_venue(venue)
        ledger.register(venue)

    return Market(ledger=ledger, registry=registry)


def load_market(path: str | Path) -> Market:
    """Load and build a market from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    return build_market(MarketConfig.model_validate(data))


__all__ = ["Market", "build_market", "load_market"]
