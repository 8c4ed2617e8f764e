"""Test helpers module for shared test utilities.

- constants: Asset, venue and account addresses
- factories: Token, pool and scenario market factories
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    INVENTORY_UNITS,
    POOL_AB,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    VENUE_X,
    VENUE_Y,
    VENUE_Z,
)
from tests.helpers.factories import (
    Scenario,
    make_pool,
    make_scenario,
    make_token,
    scenario_market_json,
)

__all__ = [
    # Constants
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TOKEN_D",
    "VENUE_X",
    "VENUE_Y",
    "VENUE_Z",
    "POOL_AB",
    "ALICE",
    "BOB",
    "INVENTORY_UNITS",
    # Factories
    "Scenario",
    "make_pool",
    "make_scenario",
    "make_token",
    "scenario_market_json",
]
