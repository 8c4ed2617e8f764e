"""Router error taxonomy.

Every error is fail-fast: nothing inside the router retries, because
retrying a swap against stale quotes risks worse execution. Read calls
leave no trace when they fail and execute calls are rolled back.
"""

from __future__ import annotations


class RouterError(Exception):
    """Base error for routing operations."""

    pass


class UnknownAsset(RouterError):
    """Asset identifier is not present in the registry."""

    def __init__(self, asset: str) -> None:
        super().__init__(f"Unknown asset: {asset}")
        self.asset = asset


class NoPathExists(RouterError):
    """No finite-cost chain of edges connects source to destination."""

    def __init__(self, asset_in: str, asset_out: str, reason: str = "unreachable") -> None:
        super().__init__(f"No path from {asset_in} to {asset_out}: {reason}")
        self.asset_in = asset_in
        self.asset_out = asset_out
        self.reason = reason


class MalformedPath(RouterError):
    """Caller-supplied path is structurally invalid."""

    pass


class TransferFailed(RouterError):
    """An asset transfer returned failure."""

    def __init__(self, asset: str, amount: int, detail: str) -> None:
        super().__init__(f"Transfer of {amount} {asset} failed: {detail}")
        self.asset = asset
        self.amount = amount


class ApprovalFailed(RouterError):
    """An asset approval returned failure."""

    def __init__(self, asset: str, spender: str, amount: int) -> None:
        super().__init__(f"Approval of {amount} {asset} for {spender} failed")
        self.asset = asset
        self.spender = spender
        self.amount = amount


class SlippageExceeded(RouterError):
    """Final output fell below the caller's minimum."""

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        super().__init__(f"Output {amount_out} below minimum {min_amount_out}")
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out


class StaleRegistry(RouterError):
    """Registry changed between solving a route and executing it."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Registry version {actual_version} does not match solved version {expected_version}"
        )
        self.expected_version = expected_version
        self.actual_version = actual_version


class TooManyAssets(RouterError):
    """Registry exceeds the configured graph size bound."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"{count} assets exceeds graph limit of {limit}")
        self.count = count
        self.limit = limit


class VenueError(Exception):
    """Base error raised by venue implementations."""

    pass


class VenueSwapFailed(VenueError):
    """Venue could not deliver the swap it was asked for."""

    pass


__all__ = [
    "RouterError",
    "UnknownAsset",
    "NoPathExists",
    "MalformedPath",
    "TransferFailed",
    "ApprovalFailed",
    "SlippageExceeded",
    "StaleRegistry",
    "TooManyAssets",
    "VenueError",
    "VenueSwapFailed",
]
