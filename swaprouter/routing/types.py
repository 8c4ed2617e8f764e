"""Type definitions for routing module."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from swaprouter.chain.base import AssetToken, Venue
from swaprouter.constants import INF_COST, SCALE
from swaprouter.errors import MalformedPath

# Edge cost: signed Q128.128 int, or INF_COST for "no edge"
Cost = int | float


@dataclass(frozen=True)
class BestQuote:
    """Best venue output for a fixed input amount.

    amount_out == 0 and venue None when no venue prices the pair.
    """

    amount_out: int
    venue: Venue | None

    @property
    def found(self) -> bool:
        return self.venue is not None and self.amount_out > 0


@dataclass(frozen=True)
class Hop:
    """One swap on one venue between two adjacent assets."""

    asset_in: AssetToken
    asset_out: AssetToken
    venue: Venue | None  # None marks a hop with no venue


@dataclass(frozen=True)
class Path:
    """Ordered hops from the source asset to the destination asset.

    Hops are fully resolved values (asset and venue objects), never
    registry indices, so a path stays meaningful if the registry grows.
    """

    hops: tuple[Hop, ...]

    def __post_init__(self) -> None:
        if not self.hops:
            raise MalformedPath("Path must contain at least one hop")
        for k, hop in enumerate(self.hops):
            if hop.asset_in.address == hop.asset_out.address:
                raise MalformedPath(f"Hop {k} swaps {hop.asset_in.symbol} into itself")
            if k > 0 and self.hops[k - 1].asset_out.address != hop.asset_in.address:
                raise MalformedPath(f"Hop {k} does not start where hop {k - 1} ends")

    @classmethod
    def from_sequences(
        cls,
        token_path: Sequence[AssetToken],
        exchange_path: Sequence[Venue | None],
    ) -> Path:
        """Build a path from parallel asset and venue sequences.

        Raises:
            MalformedPath: If len(exchange_path) != len(token_path) - 1, or
                the path has no hop
        """
        if len(token_path) < 2:
            raise MalformedPath(f"Token path needs at least 2 assets, got {len(token_path)}")
        if len(exchange_path) != len(token_path) - 1:
            raise MalformedPath(
                f"Exchange path length {len(exchange_path)} does not match "
                f"{len(token_path) - 1} hops"
            )
        return cls(
            hops=tuple(
                Hop(asset_in=token_path[k], asset_out=token_path[k + 1], venue=exchange_path[k])
                for k in range(len(exchange_path))
            )
        )

    @property
    def token_path(self) -> tuple[AssetToken, ...]:
        return (self.hops[0].asset_in,) + tuple(hop.asset_out for hop in self.hops)

    @property
    def exchange_path(self) -> tuple[Venue | None, ...]:
        return tuple(hop.venue for hop in self.hops)

    @property
    def asset_in(self) -> AssetToken:
        return self.hops[0].asset_in

    @property
    def asset_out(self) -> AssetToken:
        return self.hops[-1].asset_out

    def __len__(self) -> int:
        return len(self.hops)

    def first_missing_venue(self) -> int | None:
        """Index of the first hop without a venue, if any."""
        for k, hop in enumerate(self.hops):
            if hop.venue is None:
                return k
        return None


@dataclass(frozen=True)
class RateMatrix:
    """Best observed probe outputs across all ordered asset pairs.

    amounts[i][j] is the best output for probes[i] units of asset i into
    asset j, produced by venues[i][j]. The diagonal is never consulted.
    """

    amounts: tuple[tuple[int, ...], ...]
    venues: tuple[tuple[Venue | None, ...], ...]
    probes: tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.amounts)

    def rate(self, i: int, j: int) -> int:
        """Output per input of edge (i, j), scaled by SCALE."""
        return self.amounts[i][j] * SCALE // self.probes[i]


@dataclass(frozen=True)
class CostMatrix:
    """Log-domain edge costs derived from a RateMatrix."""

    costs: tuple[tuple[Cost, ...], ...]

    @property
    def size(self) -> int:
        return len(self.costs)

    def cost(self, i: int, j: int) -> Cost:
        return self.costs[i][j]

    def has_edge(self, i: int, j: int) -> bool:
        return i != j and self.costs[i][j] != INF_COST


@dataclass(frozen=True)
class SolveResult:
    """Working state of one shortest-path run from a single source."""

    source: int
    distance: tuple[Cost, ...]
    parent: tuple[int | None, ...]
    improved_on_last_pass: bool
    passes: int

    @property
    def has_negative_cycle(self) -> bool:
        """True when quoted rates contain an arbitrage loop."""
        return self.improved_on_last_pass

    def reachable(self, index: int) -> bool:
        return self.distance[index] != INF_COST


@dataclass(frozen=True)
class ExpectedOut:
    """Result of quoting the best path for a trade."""

    amount_out: int
    path: Path
    registry_version: int
    arbitrage_detected: bool = False

    @property
    def token_path(self) -> tuple[AssetToken, ...]:
        return self.path.token_path

    @property
    def exchange_path(self) -> tuple[Venue | None, ...]:
        return self.path.exchange_path


@dataclass(frozen=True)
class SwapCompleted:
    """Notification emitted after a swap commits."""

    asset_in: AssetToken
    asset_out: AssetToken
    amount_in: int
    amount_out: int
    recipient: str
    hops_executed: int
    truncated: bool = False


__all__ = [
    "BestQuote",
    "Cost",
    "CostMatrix",
    "ExpectedOut",
    "Hop",
    "Path",
    "RateMatrix",
    "SolveResult",
    "SwapCompleted",
]
