"""
Alternative route synthesis.

Runs the solver once per optimization mode (distance, then time, then cost)
and keeps each result only if its node sequence differs from every route
already kept.
"""

from typing import List, Optional

from .graph import RoadNetworkGraph
from .logging_config import get_logger
from .solver import ShortestPathSolver
from .types import NodeID, OptimizationMode, PathResult

logger = get_logger(__name__)

ALTERNATIVE_MODES = (OptimizationMode.DISTANCE, OptimizationMode.TIME, OptimizationMode.COST)


class RouteSynthesizer:
    """Produces a small, deduplicated set of alternative routes."""

    def __init__(self, graph: RoadNetworkGraph, solver: Optional[ShortestPathSolver] = None):
        self.graph = graph
        self.solver = solver or ShortestPathSolver(graph)

    def find_alternatives(self, start_id: NodeID, end_id: NodeID) -> List[PathResult]:
        """
        Distinct distance-, time- and cost-optimal routes, in that order.

        Returns:
            Between 0 (disconnected or unknown nodes) and 3 routes; no two
            share the same node sequence.
        """
        routes: List[PathResult] = []

        with self.graph.read_locked():
            for mode in ALTERNATIVE_MODES:
                candidate = self.solver.find_path(start_id, end_id, mode)
                if not candidate.found:
                    continue
                if any(candidate.same_route_as(kept) for kept in routes):
                    logger.debug(f"{mode.value}-optimal route {start_id} -> {end_id} duplicates a kept route")
                    continue
                routes.append(candidate)

        logger.info(f"Found {len(routes)} distinct route(s) from {start_id} to {end_id}")
        return routes


def find_alternatives(graph: RoadNetworkGraph, start_id: NodeID, end_id: NodeID) -> List[PathResult]:
    """Convenience function wrapping RouteSynthesizer."""
    return RouteSynthesizer(graph).find_alternatives(start_id, end_id)
