"""Rate graph over all registered assets.

Every ordered pair of distinct assets gets one directed edge carrying the
best probe quote across venues. Rates are turned into additive costs with
cost = -log2(rate), so the path that maximizes the product of rates is the
path that minimizes the sum of costs. A rate better than 1:1 gives a
negative cost, which is why the solver is Bellman-Ford.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from swaprouter.chain.base import AssetToken, Venue
from swaprouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from swaprouter.constants import INF_COST, NULL_VENUE, SCALE
from swaprouter.errors import TooManyAssets, UnknownAsset
from swaprouter.math.log2 import Log2DomainError, log2_q128, to_q128
from swaprouter.models.types import normalize_address
from swaprouter.routing.oracle import RateOracle
from swaprouter.routing.types import Cost, CostMatrix, RateMatrix

logger = structlog.get_logger()


def to_cost(rate: int) -> Cost:
    """Convert a SCALE-denominated rate into a Q128.128 log-domain cost.

    Args:
        rate: amount_out * SCALE // amount_in

    Returns:
        INF_COST for a zero rate, otherwise -log2(rate / SCALE) in Q128.128.
        A 1:1 rate (rate == SCALE) costs exactly 0.

    Raises:
        Log2DomainError: If rate is negative
    """
    if rate == 0:
        return INF_COST
    if rate < 0:
        raise Log2DomainError(f"Rate must be non-negative, got {rate}")
    return -log2_q128(to_q128(rate, SCALE))


def probe_amount(asset: AssetToken, probe_units: int) -> int:
    """Probe size for an asset: probe_units whole units at its decimals."""
    return probe_units * 10**asset.decimals


@dataclass(frozen=True)
class RateGraph:
    """Snapshot of best rates and costs between all registered assets.

    Built fresh on every request; nothing is cached across builds because
    venue liquidity can change at any time. One build can serve both the
    quote and the execution of a single logical request.
    """

    assets: tuple[AssetToken, ...]
    venues: tuple[Venue, ...]
    rates: RateMatrix
    costs: CostMatrix
    version: int = 0

    @classmethod
    def build(
        cls,
        assets: Sequence[AssetToken],
        venues: Sequence[Venue],
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
        version: int = 0,
    ) -> RateGraph:
        """Query every ordered pair of distinct assets and derive edge costs.

        Args:
            assets: Registered assets; positions become vertex indices
            venues: Registered venues, in registry order
            config: Probe size and graph bound
            version: Registry version the inputs were read at

        Returns:
            RateGraph with N x N rate and cost matrices

        Raises:
            TooManyAssets: If len(assets) exceeds config.max_assets
        """
        size = len(assets)
        if size > config.max_assets:
            raise TooManyAssets(size, config.max_assets)

        oracle = RateOracle(venues)
        probes = tuple(probe_amount(asset, config.probe_units) for asset in assets)

        amounts: list[tuple[int, ...]] = []
        best_venues: list[tuple[Venue | None, ...]] = []
        for i, asset_in in enumerate(assets):
            row_amounts: list[int] = []
            row_venues: list[Venue | None] = []
            for j, asset_out in enumerate(assets):
                if i == j:
                    row_amounts.append(0)
                    row_venues.append(NULL_VENUE)
                    continue
                quote = oracle.best_quote(asset_in, asset_out, probes[i])
                row_amounts.append(quote.amount_out)
                row_venues.append(quote.venue)
            amounts.append(tuple(row_amounts))
            best_venues.append(tuple(row_venues))

        rates = RateMatrix(amounts=tuple(amounts), venues=tuple(best_venues), probes=probes)
        costs = CostMatrix(
            costs=tuple(
                tuple(INF_COST if i == j else to_cost(rates.rate(i, j)) for j in range(size))
                for i in range(size)
            )
        )
        graph = cls(
            assets=tuple(assets),
            venues=tuple(venues),
            rates=rates,
            costs=costs,
            version=version,
        )

        logger.debug(
            "rate_graph_built",
            assets=size,
            venues=len(venues),
            edges=graph.edge_count,
            version=version,
        )
        return graph

    @property
    def size(self) -> int:
        return len(self.assets)

    @property
    def edge_count(self) -> int:
        """Number of directed edges with a finite cost."""
        return sum(
            1 for i in range(self.size) for j in range(self.size) if self.costs.has_edge(i, j)
        )

    def index_of(self, address: str) -> int:
        """Vertex index of an asset address.

        Raises:
            UnknownAsset: If the asset was not part of the build
        """
        address = normalize_address(address)
        for index, asset in enumerate(self.assets):
            if asset.address == address:
                return index
        raise UnknownAsset(address)

    def rate(self, i: int, j: int) -> int:
        return self.rates.rate(i, j)

    def venue(self, i: int, j: int) -> Venue | None:
        return self.rates.venues[i][j]

    def cost(self, i: int, j: int) -> Cost:
        return self.costs.cost(i, j)


__all__ = ["RateGraph", "probe_amount", "to_cost"]
