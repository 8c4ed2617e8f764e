"""Best-rate aggregation across venues."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from swaprouter.chain.base import AssetToken, Venue
from swaprouter.errors import VenueError
from swaprouter.models.types import short
from swaprouter.routing.types import BestQuote

logger = structlog.get_logger()


def safe_quote(venue: Venue, asset_in: AssetToken, asset_out: AssetToken, amount_in: int) -> int:
    """Ask one venue for a quote, mapping any pricing failure to 0.

    Zero is the "no liquidity" signal: a venue that errors while pricing a
    pair is treated exactly like one that does not serve it.
    """
    try:
        amount_out = venue.quote(asset_in, asset_out, amount_in)
    except (VenueError, ArithmeticError, ValueError) as e:
        logger.debug(
            "venue_quote_failed",
            venue=short(venue.address),
            token_in=asset_in.symbol,
            token_out=asset_out.symbol,
            error=str(e),
        )
        return 0
    return max(int(amount_out), 0)


class RateOracle:
    """Finds the venue with the best output for a pair and amount.

    Venues are queried in registry order; a later venue replaces the current
    best only with a strictly greater output, so ties go to the earliest.
    """

    def __init__(self, venues: Sequence[Venue]) -> None:
        self._venues = tuple(venues)

    @property
    def venues(self) -> tuple[Venue, ...]:
        return self._venues

    def best_quote(self, asset_in: AssetToken, asset_out: AssetToken, amount_in: int) -> BestQuote:
        """Best (amount_out, venue) for amount_in of asset_in into asset_out.

        Args:
            asset_in: Asset being sold
            asset_out: Asset being bought (must differ from asset_in)
            amount_in: Positive input amount

        Returns:
            BestQuote; amount_out 0 and venue None if nothing prices the pair
        """
        if asset_in.address == asset_out.address:
            raise ValueError(f"Cannot quote {asset_in.symbol} against itself")
        if amount_in <= 0:
            raise ValueError(f"Quote amount must be positive, got {amount_in}")

        best_amount = 0
        best_venue: Venue | None = None
        for venue in self._venues:
            amount_out = safe_quote(venue, asset_in, asset_out, amount_in)
            if amount_out > best_amount:
                best_amount = amount_out
                best_venue = venue

        return BestQuote(amount_out=best_amount, venue=best_venue)


__all__ = ["RateOracle", "safe_quote"]
