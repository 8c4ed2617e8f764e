"""Multi-venue swap routing.

Module structure:
- types.py: Path, Hop, rate/cost matrices and result dataclasses
- oracle.py: RateOracle, best quote across venues
- graph.py: RateGraph, probe rates and log-domain costs
- pathfinding.py: PathSolver, Bellman-Ford search and path reconstruction
- executor.py: PathExecutor, atomic execution with slippage enforcement
- router.py: Router facade
"""

from swaprouter.routing.executor import PathExecutor
from swaprouter.routing.graph import RateGraph, to_cost
from swaprouter.routing.oracle import RateOracle
from swaprouter.routing.pathfinding import PathSolver
from swaprouter.routing.router import Router, get_default_router
from swaprouter.routing.types import (
    BestQuote,
    CostMatrix,
    ExpectedOut,
    Hop,
    Path,
    RateMatrix,
    SolveResult,
    SwapCompleted,
)

__all__ = [
    "BestQuote",
    "CostMatrix",
    "ExpectedOut",
    "Hop",
    "Path",
    "PathExecutor",
    "PathSolver",
    "RateGraph",
    "RateMatrix",
    "RateOracle",
    "Router",
    "SolveResult",
    "SwapCompleted",
    "get_default_router",
    "to_cost",
]
