"""Shortest-path search over the rate graph.

Costs are -log2(rate), so a rate better than 1:1 yields a negative edge.
Dijkstra is unsound with negative weights; this module uses Bellman-Ford
label correcting instead:

- distance[source] = 0, every other vertex starts at INF_COST
- up to N passes, each relaxing every finite edge (i, j) in row-major order
- stop as soon as a pass makes no update
- if the N-th pass still improved something, the graph has a negative
  cycle (an arbitrage loop in the quoted rates), which is reported but not
  acted upon, except that a parent vector left looping by such a cycle is
  replaced by the best cycle-free path (PathSolver.simple_path)

Worst case is N passes over N^2 edges, O(N^3). The rate graph refuses to
build over more than RouterConfig.max_assets assets to keep this bounded.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from swaprouter.chain.base import AssetToken, Venue
from swaprouter.constants import INF_COST
from swaprouter.errors import MalformedPath, NoPathExists
from swaprouter.routing.graph import RateGraph
from swaprouter.routing.types import Cost, CostMatrix, Hop, Path, SolveResult

logger = structlog.get_logger()


class PathSolver:
    """Bellman-Ford solver and path reconstruction.

    Stateless: every call allocates its own distance and parent vectors,
    so one instance can be shared freely.

    Usage:
        solver = PathSolver()
        result = solver.solve(graph.costs, source)
        path = solver.reconstruct(source, dest, result.parent, result.distance,
                                  graph.assets, graph.rates.venues)
    """

    def relax(
        self,
        costs: CostMatrix,
        distance: list[Cost],
        parent: list[int | None],
    ) -> bool:
        """Run one relaxation pass in place.

        Returns:
            True if any distance improved
        """
        size = costs.size
        updated = False
        for i in range(size):
            distance_i = distance[i]
            if distance_i == INF_COST:
                continue
            row = costs.costs[i]
            for j in range(size):
                if i == j:
                    continue
                cost = row[j]
                if cost == INF_COST:
                    continue
                candidate = distance_i + cost
                if candidate < distance[j]:
                    distance[j] = candidate
                    parent[j] = i
                    updated = True
        return updated

    def solve(self, costs: CostMatrix, source: int) -> SolveResult:
        """Find minimum-cost distances from source to every vertex.

        Args:
            costs: N x N cost matrix
            source: Source vertex index

        Returns:
            SolveResult with distance/parent vectors and the negative cycle
            flag (True iff the N-th pass still improved)
        """
        size = costs.size
        if not 0 <= source < size:
            raise IndexError(f"Source index {source} outside graph of size {size}")

        distance: list[Cost] = [INF_COST] * size
        parent: list[int | None] = [None] * size
        distance[source] = 0

        passes = 0
        updated = False
        for _ in range(size):
            passes += 1
            updated = self.relax(costs, distance, parent)
            if not updated:
                break

        # Loop only exits with updated=True when all N passes improved
        if updated:
            logger.info("negative_cycle_detected", source=source, passes=passes)

        return SolveResult(
            source=source,
            distance=tuple(distance),
            parent=tuple(parent),
            improved_on_last_pass=updated,
            passes=passes,
        )

    def reconstruct(
        self,
        source: int,
        dest: int,
        parent: Sequence[int | None],
        distance: Sequence[Cost],
        assets: Sequence[AssetToken],
        venues: Sequence[Sequence[Venue | None]],
    ) -> Path:
        """Walk parent pointers from dest back to source.

        Args:
            source: Source vertex index
            dest: Destination vertex index
            parent: Predecessor of each vertex on its best path
            distance: Best cost found for each vertex
            assets: Assets by vertex index
            venues: venues[i][j] is the venue for edge (i, j)

        Returns:
            Path ordered from source to dest

        Raises:
            MalformedPath: If source == dest
            NoPathExists: If dest is unreachable, or the parent walk does not
                reach source within N steps
        """
        if source == dest:
            raise MalformedPath("Source and destination assets must differ")

        asset_in = assets[source].address
        asset_out = assets[dest].address
        if distance[dest] == INF_COST:
            raise NoPathExists(asset_in, asset_out)

        size = len(assets)
        hops: list[Hop] = []
        current = dest
        while current != source:
            if len(hops) >= size:
                raise NoPathExists(asset_in, asset_out, reason="parent walk did not terminate")
            previous = parent[current]
            if previous is None:
                raise NoPathExists(asset_in, asset_out, reason="broken parent chain")
            hops.append(
                Hop(
                    asset_in=assets[previous],
                    asset_out=assets[current],
                    venue=venues[previous][current],
                )
            )
            current = previous

        hops.reverse()
        return Path(hops=tuple(hops))

    def simple_path(
        self,
        costs: CostMatrix,
        source: int,
        dest: int,
        assets: Sequence[AssetToken],
        venues: Sequence[Sequence[Venue | None]],
    ) -> Path:
        """Best cycle-free path from source to dest.

        Used when a negative cycle leaves the parent vector looping. Runs
        hop-bounded relaxation: layer k holds the cheapest k-edge walk to
        each vertex. Among the layers whose walk to dest visits no vertex
        twice, the cheapest wins (fewest hops on ties). If every layer's walk
        repeats a vertex, the fewest-hop path is returned.

        Raises:
            MalformedPath: If source == dest
            NoPathExists: If no finite-cost chain connects source to dest
        """
        if source == dest:
            raise MalformedPath("Source and destination assets must differ")

        size = costs.size
        layer: list[Cost] = [INF_COST] * size
        layer[source] = 0
        parents: list[list[int | None]] = []
        best: tuple[Cost, list[int]] | None = None

        for _ in range(1, size):
            following: list[Cost] = [INF_COST] * size
            parent: list[int | None] = [None] * size
            for i in range(size):
                if layer[i] == INF_COST:
                    continue
                for j in range(size):
                    if not costs.has_edge(i, j):
                        continue
                    candidate = layer[i] + costs.costs[i][j]
                    if candidate < following[j]:
                        following[j] = candidate
                        parent[j] = i
            parents.append(parent)
            layer = following
            if layer[dest] == INF_COST:
                continue
            walk = self._layer_walk(parents, dest)
            simple = walk[0] == source and len(set(walk)) == len(walk)
            if simple and (best is None or layer[dest] < best[0]):
                best = (layer[dest], walk)

        walk = best[1] if best is not None else self._fewest_hops(costs, source, dest)
        if walk is None:
            raise NoPathExists(assets[source].address, assets[dest].address)
        return Path(
            hops=tuple(
                Hop(asset_in=assets[i], asset_out=assets[j], venue=venues[i][j])
                for i, j in zip(walk, walk[1:])
            )
        )

    @staticmethod
    def _layer_walk(parents: Sequence[Sequence[int | None]], dest: int) -> list[int]:
        walk = [dest]
        for parent in reversed(parents):
            previous = parent[walk[-1]]
            if previous is None:
                break
            walk.append(previous)
        walk.reverse()
        return walk

    @staticmethod
    def _fewest_hops(costs: CostMatrix, source: int, dest: int) -> list[int] | None:
        previous: dict[int, int | None] = {source: None}
        frontier = [source]
        while frontier and dest not in previous:
            following = []
            for i in frontier:
                for j in range(costs.size):
                    if j not in previous and costs.has_edge(i, j):
                        previous[j] = i
                        following.append(j)
            frontier = following
        if dest not in previous:
            return None
        walk = [dest]
        step = previous[dest]
        while step is not None:
            walk.append(step)
            step = previous[step]
        walk.reverse()
        return walk

    def find_path(self, graph: RateGraph, source: int, dest: int) -> tuple[Path, SolveResult]:
        """Solve from source and reconstruct the path to dest.

        A negative cycle can leave the parent vector looping away from the
        source; the path then comes from simple_path instead.
        """
        result = self.solve(graph.costs, source)
        try:
            path = self.reconstruct(
                source,
                dest,
                result.parent,
                result.distance,
                graph.assets,
                graph.rates.venues,
            )
        except NoPathExists:
            if not (result.has_negative_cycle and result.reachable(dest)):
                raise
            path = self.simple_path(graph.costs, source, dest, graph.assets, graph.rates.venues)
            logger.info("path_fallback_simple", source=source, dest=dest, hops=len(path))
        return path, result


__all__ = ["PathSolver"]
