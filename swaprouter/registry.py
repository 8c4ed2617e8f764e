"""Registry of tradable assets and exchange venues.

Assets are kept in an ordered, duplicate-free sequence whose positions are
the vertex indices of the rate graph. Venues are a duplicate-free sequence
referenced by value. Every mutation bumps a version number so a route
solved against one registry state can be refused against another.

Vetting which assets and venues are trusted happens before anything is
added here.
"""

from __future__ import annotations

import structlog

from swaprouter.chain.base import AssetToken, Venue
from swaprouter.errors import UnknownAsset
from swaprouter.models.types import normalize_address, short

logger = structlog.get_logger()


class MarketRegistry:
    """Ordered assets and venues with a mutation version.

    Assets and venues are append-only; there is no removal, so an index
    handed out for an asset stays valid for that asset.
    """

    def __init__(
        self,
        assets: list[AssetToken] | None = None,
        venues: list[Venue] | None = None,
    ) -> None:
        self._assets: list[AssetToken] = []
        self._asset_index: dict[str, int] = {}
        self._venues: list[Venue] = []
        self._venue_index: dict[str, int] = {}
        self._version = 0

        for asset in assets or []:
            self.add_asset(asset)
        for venue in venues or []:
            self.add_venue(venue)

    @property
    def version(self) -> int:
        """Incremented on every successful mutation."""
        return self._version

    @property
    def assets(self) -> tuple[AssetToken, ...]:
        return tuple(self._assets)

    @property
    def venues(self) -> tuple[Venue, ...]:
        return tuple(self._venues)

    @property
    def asset_count(self) -> int:
        return len(self._assets)

    @property
    def venue_count(self) -> int:
        return len(self._venues)

    def add_asset(self, asset: AssetToken) -> int:
        """Append an asset, returning its index.

        Re-adding an already registered address returns the existing index
        and leaves the registry unchanged.
        """
        address = normalize_address(asset.address)
        existing = self._asset_index.get(address)
        if existing is not None:
            logger.debug("asset_already_registered", asset=short(address), index=existing)
            return existing

        index = len(self._assets)
        self._assets.append(asset)
        self._asset_index[address] = index
        self._version += 1
        logger.debug("asset_registered", asset=short(address), symbol=asset.symbol, index=index)
        return index

    def add_venue(self, venue: Venue) -> bool:
        """Append a venue. Returns False if its address is already registered."""
        address = normalize_address(venue.address)
        if address in self._venue_index:
            logger.debug("venue_already_registered", venue=short(address))
            return False

        self._venue_index[address] = len(self._venues)
        self._venues.append(venue)
        self._version += 1
        logger.debug("venue_registered", venue=short(address))
        return True

    def has_asset(self, address: str) -> bool:
        return normalize_address(address) in self._asset_index

    def index_of(self, address: str) -> int:
        """Vertex index of an asset.

        Raises:
            UnknownAsset: If the address is not registered
        """
        index = self._asset_index.get(normalize_address(address))
        if index is None:
            raise UnknownAsset(address)
        return index

    def get_asset(self, address: str) -> AssetToken:
        """Look up an asset by address.

        Raises:
            UnknownAsset: If the address is not registered
        """
        return self._assets[self.index_of(address)]

    def get_venue(self, address: str) -> Venue | None:
        """Look up a venue by address, or None if not registered."""
        index = self._venue_index.get(normalize_address(address))
        return self._venues[index] if index is not None else None


__all__ = ["MarketRegistry"]
