"""Router: public surface for quoting and executing multi-venue swaps.

Data flows Router -> RateGraph (via RateOracle) -> PathSolver ->
PathExecutor. Nothing is cached between calls: each quote rebuilds the
rate graph from the registry, because venue liquidity can change at any
time. Callers that quote and then execute within one request can build the
graph once with build_graph() and pass it to both calls.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Callable, Sequence
from functools import lru_cache, wraps
from typing import TypeVar

import structlog

from swaprouter.chain.base import AssetToken, Venue
from swaprouter.chain.ledger import Ledger
from swaprouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from swaprouter.constants import NULL_VENUE, ROUTER_ADDRESS
from swaprouter.errors import MalformedPath, StaleRegistry
from swaprouter.models.types import ZERO_ADDRESS, normalize_address, short
from swaprouter.registry import MarketRegistry
from swaprouter.routing.executor import PathExecutor, SwapListener
from swaprouter.routing.graph import RateGraph
from swaprouter.routing.oracle import RateOracle, safe_quote
from swaprouter.routing.pathfinding import PathSolver
from swaprouter.routing.types import BestQuote, ExpectedOut, Path

logger = structlog.get_logger()

AssetRef = str | AssetToken
VenueRef = str | Venue | None

T = TypeVar("T")


def _serialized(method: Callable[..., T]) -> Callable[..., T]:
    """Hold the router lock for the duration of the call."""

    @wraps(method)
    def wrapper(self: Router, *args, **kwargs) -> T:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class Router:
    """Composition root for the swap router.

    Owns no mutable state beyond what the registry and ledger hold. Quotes
    and swaps hold one re-entrant lock, so a quote never reads the balances
    of a swap that is still in flight and may yet roll back.

    Args:
        registry: Vetted assets and venues
        ledger: Execution environment for swaps. If None, an empty ledger
                is used and components are tracked as paths touch them.
        config: Router configuration. Defaults to DEFAULT_ROUTER_CONFIG.
        solver: Path solver. Defaults to a new PathSolver.
        address: Account the router executes from
    """

    def __init__(
        self,
        registry: MarketRegistry,
        ledger: Ledger | None = None,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
        solver: PathSolver | None = None,
        address: str = ROUTER_ADDRESS,
    ) -> None:
        self._registry = registry
        self._ledger = ledger if ledger is not None else Ledger()
        self._config = config
        self._solver = solver if solver is not None else PathSolver()
        self._executor = PathExecutor(self._ledger, registry, config=config, address=address)
        self._lock = threading.RLock()

    @property
    def registry(self) -> MarketRegistry:
        return self._registry

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def address(self) -> str:
        return self._executor.address

    def subscribe(self, listener: SwapListener) -> None:
        """Register a callback invoked with SwapCompleted after each swap."""
        self._executor.subscribe(listener)

    @_serialized
    def build_graph(self) -> RateGraph:
        """Build a fresh rate graph over the current registry."""
        return RateGraph.build(
            self._registry.assets,
            self._registry.venues,
            config=self._config,
            version=self._registry.version,
        )

    @_serialized
    def get_best_exchange(
        self, asset_in: AssetRef, asset_out: AssetRef, amount_in: int
    ) -> BestQuote:
        """Best single-venue quote for a direct trade.

        Raises:
            UnknownAsset: If either asset is not registered
        """
        token_in = self._resolve_asset(asset_in)
        token_out = self._resolve_asset(asset_out)
        return RateOracle(self._registry.venues).best_quote(token_in, token_out, amount_in)

    @_serialized
    def get_expected_out(
        self,
        asset_in: AssetRef,
        asset_out: AssetRef,
        amount_in: int,
        graph: RateGraph | None = None,
    ) -> ExpectedOut:
        """Find the best path and the output it yields for amount_in.

        The path is chosen on probe rates; the amount is then computed by
        replaying live quotes for the real amount hop by hop.

        Args:
            asset_in: Asset to sell
            asset_out: Asset to buy
            amount_in: Amount of asset_in to sell
            graph: Graph built earlier in the same request. Built fresh if None.

        Raises:
            UnknownAsset: If either asset is not registered
            MalformedPath: If asset_in and asset_out are the same asset
            NoPathExists: If no finite-cost chain connects them
            StaleRegistry: If graph was built against an older registry
        """
        if amount_in <= 0:
            raise ValueError(f"amount_in must be positive, got {amount_in}")
        token_in = self._resolve_asset(asset_in)
        token_out = self._resolve_asset(asset_out)
        if token_in.address == token_out.address:
            raise MalformedPath("Source and destination assets must differ")

        if graph is None:
            graph = self.build_graph()
        elif graph.version != self._registry.version:
            raise StaleRegistry(graph.version, self._registry.version)

        source = graph.index_of(token_in.address)
        dest = graph.index_of(token_out.address)
        path, result = self._solver.find_path(graph, source, dest)
        amount_out = self._replay_quotes(path, amount_in)

        logger.info(
            "path_quoted",
            token_in=token_in.symbol,
            token_out=token_out.symbol,
            path=[short(asset.address) for asset in path.token_path],
            hops=len(path),
            amount_in=amount_in,
            amount_out=amount_out,
            arbitrage=result.has_negative_cycle,
        )
        return ExpectedOut(
            amount_out=amount_out,
            path=path,
            registry_version=graph.version,
            arbitrage_detected=result.has_negative_cycle,
        )

    @_serialized
    def swap_on_chain(
        self,
        asset_in: AssetRef,
        asset_out: AssetRef,
        amount_in: int,
        min_amount_out: int,
        recipient: str,
        *,
        sender: str,
        graph: RateGraph | None = None,
    ) -> int:
        """Solve the best path and execute it.

        Returns:
            Amount of asset_out paid to recipient

        Raises:
            Everything get_expected_out raises, plus the execution errors of
            PathExecutor.execute (SlippageExceeded, TransferFailed, ...)
        """
        expected = self.get_expected_out(asset_in, asset_out, amount_in, graph=graph)
        return self._executor.execute(
            expected.path,
            amount_in,
            min_amount_out,
            sender=sender,
            recipient=recipient,
            expected_version=expected.registry_version,
        )

    @_serialized
    def swap(
        self,
        token_path: Sequence[AssetRef],
        exchange_path: Sequence[VenueRef],
        amount_in: int,
        min_amount_out: int,
        recipient: str,
        *,
        sender: str,
    ) -> int:
        """Execute a caller-pinned route, bypassing the solver.

        Venue entries that are None or the zero address mark a hop with no
        venue; see MissingVenuePolicy.

        Raises:
            MalformedPath: If the path lengths mismatch or a venue is not
                registered, before any transfer
            UnknownAsset: If an asset is not registered
        """
        if len(exchange_path) != len(token_path) - 1:
            raise MalformedPath(
                f"Exchange path length {len(exchange_path)} does not match "
                f"{max(len(token_path) - 1, 0)} hops"
            )
        tokens = [self._resolve_asset(asset) for asset in token_path]
        venues = [self._resolve_venue(venue) for venue in exchange_path]
        path = Path.from_sequences(tokens, venues)
        return self._executor.execute(
            path,
            amount_in,
            min_amount_out,
            sender=sender,
            recipient=recipient,
        )

    def _replay_quotes(self, path: Path, amount_in: int) -> int:
        amount = amount_in
        for hop in path.hops:
            if hop.venue is None or amount == 0:
                return 0
            amount = safe_quote(hop.venue, hop.asset_in, hop.asset_out, amount)
        return amount

    def _resolve_asset(self, asset: AssetRef) -> AssetToken:
        address = asset if isinstance(asset, str) else asset.address
        return self._registry.get_asset(address)

    def _resolve_venue(self, venue: VenueRef) -> Venue | None:
        if venue is NULL_VENUE:
            return NULL_VENUE
        address = normalize_address(venue if isinstance(venue, str) else venue.address)
        if address == ZERO_ADDRESS:
            return NULL_VENUE
        resolved = self._registry.get_venue(address)
        if resolved is None:
            raise MalformedPath(f"Venue {address} is not registered")
        return resolved


def _create_default_router() -> Router:
    """Create the default router from the environment.

    If SWAPROUTER_MARKET_FILE is set, the market (assets, venues, balances)
    is loaded from that JSON file. Otherwise the router starts with an
    empty registry.

    Returns:
        Configured Router instance
    """
    from swaprouter.market import load_market

    config = RouterConfig.from_env()
    market_file = os.environ.get("SWAPROUTER_MARKET_FILE")
    if market_file:
        try:
            market = load_market(market_file)
        except (OSError, json.JSONDecodeError, ValueError):
            logger.exception("market_file_load_failed", path=market_file)
            raise
        logger.info(
            "market_loaded",
            path=market_file,
            assets=market.registry.asset_count,
            venues=market.registry.venue_count,
        )
        return Router(market.registry, market.ledger, config=config)

    logger.info("market_empty", reason="SWAPROUTER_MARKET_FILE not set")
    return Router(MarketRegistry(), Ledger(), config=config)


@lru_cache(maxsize=1)
def get_default_router() -> Router:
    """Process-wide router instance, created on first use."""
    return _create_default_router()


__all__ = ["Router", "get_default_router"]
