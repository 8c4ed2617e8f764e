"""Pytest configuration and fixtures."""

import pytest

from swaprouter.config import MissingVenuePolicy, RouterConfig
from tests.helpers import Scenario, make_scenario


@pytest.fixture
def scenario() -> Scenario:
    """A/B/C market: X trades A <-> B at 2:1, Y trades B <-> C at 3:1."""
    return make_scenario()


@pytest.fixture
def truncating_scenario() -> Scenario:
    """Scenario market whose router truncates paths at a missing venue."""
    return make_scenario(RouterConfig(missing_venue_policy=MissingVenuePolicy.TRUNCATE))


@pytest.fixture
def arbitrage_scenario() -> Scenario:
    """Scenario market where X buys A back at 2:3, so A -> B -> A gains 4/3."""
    s = make_scenario()
    s.x.set_rate(s.b, s.a, 2, 3)
    return s
