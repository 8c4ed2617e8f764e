"""Router configuration."""

import os
from dataclasses import dataclass
from enum import Enum

from swaprouter.constants import MAX_ASSETS, PROBE_UNITS


class MissingVenuePolicy(str, Enum):
    """What execution does when a hop has no venue."""

    FAIL = "fail"  # Reject the path before any transfer
    TRUNCATE = "truncate"  # Stop at the hop and pay out what was reached


@dataclass(frozen=True)
class RouterConfig:
    """Centralized configuration for the router.

    Attributes:
        probe_units: Whole units of the input asset used to sample rates
            (scaled by the asset's decimals, default: 100)
        max_assets: Largest registry the rate graph will build over
            (default: 64). Bounds the O(N^3) solve.
        missing_venue_policy: Behaviour when a path hop has no venue
            (default: FAIL)
    """

    probe_units: int = PROBE_UNITS
    max_assets: int = MAX_ASSETS
    missing_venue_policy: MissingVenuePolicy = MissingVenuePolicy.FAIL

    def __post_init__(self) -> None:
        if self.probe_units <= 0:
            raise ValueError(f"probe_units must be positive, got {self.probe_units}")
        if self.max_assets <= 0:
            raise ValueError(f"max_assets must be positive, got {self.max_assets}")

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """Build a config from SWAPROUTER_* environment variables.

        - SWAPROUTER_PROBE_UNITS (default: 100)
        - SWAPROUTER_MAX_ASSETS (default: 64)
        - SWAPROUTER_MISSING_VENUE_POLICY: "fail" or "truncate" (default: fail)
        """
        return cls(
            probe_units=int(os.environ.get("SWAPROUTER_PROBE_UNITS", str(PROBE_UNITS))),
            max_assets=int(os.environ.get("SWAPROUTER_MAX_ASSETS", str(MAX_ASSETS))),
            missing_venue_policy=MissingVenuePolicy(
                os.environ.get("SWAPROUTER_MISSING_VENUE_POLICY", "fail").lower()
            ),
        )


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()
