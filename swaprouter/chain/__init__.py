"""Execution environment: asset and venue capabilities plus in-memory
reference implementations used for simulation and tests.
"""

from swaprouter.chain.base import AssetToken, StatefulComponent, Venue
from swaprouter.chain.ledger import Ledger
from swaprouter.chain.token import Token
from swaprouter.chain.venues import ConstantProductVenue, FixedRate, FixedRateVenue

__all__ = [
    # Protocols
    "AssetToken",
    "StatefulComponent",
    "Venue",
    # Implementations
    "ConstantProductVenue",
    "FixedRate",
    "FixedRateVenue",
    "Ledger",
    "Token",
]
