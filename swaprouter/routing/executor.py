"""Atomic execution of a resolved path.

The executor replays a path with real balances. Amounts are never taken
from quotes: after every transfer or swap the running amount is re-read as
the executor's balance delta, which absorbs venues that deliver more or
less than they quoted and assets that charge a fee on transfer.

Per-hop venue minimums are 0; the single slippage check is on the final
output, inside the same atomic block as every transfer, so a failed check
leaves all balances exactly as they were.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from swaprouter.chain.base import AssetToken
from swaprouter.chain.ledger import Ledger
from swaprouter.config import DEFAULT_ROUTER_CONFIG, MissingVenuePolicy, RouterConfig
from swaprouter.constants import ROUTER_ADDRESS
from swaprouter.errors import (
    ApprovalFailed,
    MalformedPath,
    SlippageExceeded,
    StaleRegistry,
    TransferFailed,
)
from swaprouter.models.types import normalize_address, short
from swaprouter.registry import MarketRegistry
from swaprouter.routing.types import Hop, Path, SwapCompleted
from swaprouter.safe_int import S

logger = structlog.get_logger()

SwapListener = Callable[[SwapCompleted], None]


class PathExecutor:
    """Executes paths against a ledger on behalf of callers.

    Args:
        ledger: Environment providing atomic()
        registry: Registry whose version guards solved routes
        config: Router configuration (missing venue policy)
        address: Account the executor trades from
    """

    def __init__(
        self,
        ledger: Ledger,
        registry: MarketRegistry,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
        address: str = ROUTER_ADDRESS,
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._config = config
        self.address = normalize_address(address)
        self._listeners: list[SwapListener] = []

    def subscribe(self, listener: SwapListener) -> None:
        """Register a callback for committed swaps."""
        self._listeners.append(listener)

    def execute(
        self,
        path: Path,
        amount_in: int,
        min_amount_out: int,
        sender: str,
        recipient: str,
        expected_version: int | None = None,
    ) -> int:
        """Swap amount_in of the path's first asset along the path.

        The sender must have approved the executor for amount_in of the
        first asset.

        Args:
            path: Fully resolved hops
            amount_in: Amount of the first asset to pull from sender
            min_amount_out: Smallest acceptable final output
            sender: Account funding the swap
            recipient: Account receiving the output
            expected_version: Registry version the path was solved at, if any

        Returns:
            Amount of the final asset paid to recipient

        Raises:
            MalformedPath: If a hop has no venue under the FAIL policy
            StaleRegistry: If the registry changed since expected_version
            TransferFailed: If pulling input or paying output fails
            ApprovalFailed: If approving a venue fails
            SlippageExceeded: If the output is below min_amount_out
        """
        if amount_in <= 0:
            raise ValueError(f"amount_in must be positive, got {amount_in}")
        if min_amount_out < 0:
            raise ValueError(f"min_amount_out must be non-negative, got {min_amount_out}")
        if expected_version is not None and expected_version != self._registry.version:
            raise StaleRegistry(expected_version, self._registry.version)

        hops = path.hops
        missing = path.first_missing_venue()
        if missing is not None:
            if self._config.missing_venue_policy == MissingVenuePolicy.FAIL:
                raise MalformedPath(f"Hop {missing} has no venue")
            logger.warning("path_truncated", hop=missing, hops=len(hops))
            hops = hops[:missing]

        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        asset_out = hops[-1].asset_out if hops else path.asset_in

        for hop in hops:
            self._ledger.track(hop.asset_in)
            self._ledger.track(hop.asset_out)
            self._ledger.track(hop.venue)
        self._ledger.track(path.asset_in)

        with self._ledger.atomic():
            amount = self._pull(path.asset_in, sender, amount_in)
            for index, hop in enumerate(hops):
                amount = self._swap_hop(index, hop, amount)

            if amount < min_amount_out:
                logger.warning(
                    "slippage_exceeded",
                    token_in=path.asset_in.symbol,
                    token_out=asset_out.symbol,
                    amount_out=amount,
                    min_amount_out=min_amount_out,
                )
                raise SlippageExceeded(amount, min_amount_out)

            if not asset_out.transfer(self.address, recipient, amount):
                raise TransferFailed(asset_out.address, amount, "payout to recipient")

        event = SwapCompleted(
            asset_in=path.asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=amount,
            recipient=recipient,
            hops_executed=len(hops),
            truncated=len(hops) < len(path),
        )
        logger.info(
            "swap_completed",
            token_in=event.asset_in.symbol,
            token_out=event.asset_out.symbol,
            amount_in=amount_in,
            amount_out=amount,
            recipient=short(recipient),
            hops=event.hops_executed,
            truncated=event.truncated,
        )
        for listener in self._listeners:
            listener(event)
        return amount

    def _pull(self, asset: AssetToken, sender: str, amount_in: int) -> int:
        before = asset.balance_of(self.address)
        if not asset.transfer_from(self.address, sender, self.address, amount_in):
            raise TransferFailed(asset.address, amount_in, f"pull from {short(sender)}")
        return (S(asset.balance_of(self.address)) - before).value

    def _swap_hop(self, index: int, hop: Hop, amount: int) -> int:
        venue = hop.venue
        assert venue is not None  # Missing venues are handled before execution

        before = hop.asset_out.balance_of(self.address)
        if not hop.asset_in.approve(self.address, venue.address, amount):
            raise ApprovalFailed(hop.asset_in.address, venue.address, amount)

        venue.swap(hop.asset_in, hop.asset_out, amount, 0, self.address)
        received = (S(hop.asset_out.balance_of(self.address)) - before).value

        logger.debug(
            "hop_executed",
            hop=index,
            venue=short(venue.address),
            token_in=hop.asset_in.symbol,
            token_out=hop.asset_out.symbol,
            amount_in=amount,
            amount_out=received,
        )
        return received


__all__ = ["PathExecutor", "SwapListener"]
