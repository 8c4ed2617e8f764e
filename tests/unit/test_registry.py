"""Tests for MarketRegistry."""

import pytest

from swaprouter.chain import FixedRateVenue
from swaprouter.errors import UnknownAsset
from swaprouter.registry import MarketRegistry
from tests.helpers import TOKEN_A, TOKEN_B, TOKEN_D, VENUE_X, make_token


class TestAssets:
    """Tests for asset registration and lookup."""

    def test_indices_follow_insertion_order(self):
        """Assets are indexed in the order they were added."""
        a = make_token(TOKEN_A, "AAA")
        b = make_token(TOKEN_B, "BBB")
        registry = MarketRegistry(assets=[a, b])
        assert registry.index_of(TOKEN_A) == 0
        assert registry.index_of(TOKEN_B) == 1
        assert registry.assets == (a, b)

    def test_duplicate_returns_existing_index(self):
        """Re-adding an address leaves the registry unchanged."""
        registry = MarketRegistry()
        registry.add_asset(make_token(TOKEN_A, "AAA"))
        version = registry.version

        assert registry.add_asset(make_token(TOKEN_A, "AAA")) == 0
        assert registry.asset_count == 1
        assert registry.version == version

    def test_lookup_is_case_insensitive(self):
        """Lookups normalize the address."""
        registry = MarketRegistry(assets=[make_token(TOKEN_A, "AAA")])
        assert registry.has_asset(TOKEN_A.replace("a1", "A1"))

    def test_unknown_asset(self):
        """Unregistered addresses raise UnknownAsset."""
        registry = MarketRegistry(assets=[make_token(TOKEN_A, "AAA")])
        with pytest.raises(UnknownAsset) as exc_info:
            registry.get_asset(TOKEN_D)
        assert exc_info.value.asset == TOKEN_D


class TestVenues:
    """Tests for venue registration and lookup."""

    def test_add_venue(self):
        """A new venue is accepted and retrievable."""
        venue = FixedRateVenue(VENUE_X)
        registry = MarketRegistry()
        assert registry.add_venue(venue)
        assert registry.get_venue(VENUE_X) is venue

    def test_duplicate_venue_rejected(self):
        """The same address cannot be registered twice."""
        registry = MarketRegistry(venues=[FixedRateVenue(VENUE_X)])
        assert not registry.add_venue(FixedRateVenue(VENUE_X))
        assert registry.venue_count == 1

    def test_unknown_venue_is_none(self):
        """Looking up an unregistered venue returns None."""
        assert MarketRegistry().get_venue(VENUE_X) is None


class TestVersion:
    """Every mutation bumps the version."""

    def test_version_increments(self):
        """Adding an asset and a venue bumps the version twice."""
        registry = MarketRegistry()
        assert registry.version == 0
        registry.add_asset(make_token())
        registry.add_venue(FixedRateVenue(VENUE_X))
        assert registry.version == 2
