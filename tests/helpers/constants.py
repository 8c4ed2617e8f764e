"""Shared address constants for tests.

All addresses are lowercase for consistency with normalize_address().

Usage:
    from tests.helpers import TOKEN_A, ALICE
    # or
    from tests.helpers.constants import TOKEN_A, ALICE
"""

# =============================================================================
# Assets
# =============================================================================

TOKEN_A = "0x00000000000000000000000000000000000000a1"
TOKEN_B = "0x00000000000000000000000000000000000000b2"
TOKEN_C = "0x00000000000000000000000000000000000000c3"
TOKEN_D = "0x00000000000000000000000000000000000000d4"  # Registered, never priced

# =============================================================================
# Venues
# =============================================================================

VENUE_X = "0x000000000000000000000000000000000000f001"  # A <-> B
VENUE_Y = "0x000000000000000000000000000000000000f002"  # B <-> C
VENUE_Z = "0x000000000000000000000000000000000000f003"  # Spare, per test
POOL_AB = "0x000000000000000000000000000000000000e001"  # Constant product A/B

# =============================================================================
# Accounts
# =============================================================================

ALICE = "0x000000000000000000000000000000000000a11c"  # Funds swaps
BOB = "0x0000000000000000000000000000000000000b0b"  # Receives output

# Venue inventory per asset, in whole units
INVENTORY_UNITS = 1_000_000


__all__ = [
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
]
