"""
All-pairs route totals between a chosen set of nodes.

Runs one exhaustive search per source and stores distance, time and cost of
each mode-optimal path in numpy arrays, together with the node id sequences.
Used for fleet planning tables (depot-to-depot figures) rather than for
drawing individual routes.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import NodeNotFoundError, ValidationError
from .graph import RoadNetworkGraph
from .logging_config import LogTimer, get_logger
from .solver import ModeLike, ShortestPathSolver
from .types import NodeID, OptimizationMode, PathResult

logger = get_logger(__name__)


@dataclass
class MatrixStats:
    """Statistics about a route matrix.

    Attributes:
        num_nodes: Number of nodes in the matrix
        num_paths: Number of ordered pairs with a route (diagonal included)
        memory_bytes: Approximate memory used by the numpy arrays
        mode: Optimization mode the routes were chosen under
    """

    num_nodes: int
    num_paths: int
    memory_bytes: int
    mode: str


class RouteMatrix:
    """Dense matrices of route totals indexed by node id.

    Unreachable pairs hold ``inf`` in every matrix.

    Attributes:
        node_ids: Row/column order
        mode: Optimization mode the stored routes are optimal for
        distance_km: (n, n) float array
        time_minutes: (n, n) float array of effective travel time
        cost: (n, n) float array of base cost plus tolls
    """

    def __init__(self, node_ids: Sequence[NodeID], mode: OptimizationMode):
        self.node_ids: List[NodeID] = list(node_ids)
        self.mode = mode
        self.index: Dict[NodeID, int] = {node_id: i for i, node_id in enumerate(self.node_ids)}

        n = len(self.node_ids)
        self.distance_km = np.full((n, n), np.inf, dtype=np.float64)
        self.time_minutes = np.full((n, n), np.inf, dtype=np.float64)
        self.cost = np.full((n, n), np.inf, dtype=np.float64)
        self.path_node_ids: Dict[Tuple[NodeID, NodeID], List[NodeID]] = {}

    def set(self, route: PathResult) -> None:
        """Store the totals of a found route."""
        i = self.index[route.start_id]
        j = self.index[route.end_id]
        self.distance_km[i, j] = route.total_distance_km
        self.time_minutes[i, j] = route.total_effective_time_minutes
        self.cost[i, j] = route.total_cost
        self.path_node_ids[(route.start_id, route.end_id)] = list(route.node_sequence)

    def _lookup(self, matrix: np.ndarray, source_id: NodeID, target_id: NodeID) -> float:
        if source_id not in self.index or target_id not in self.index:
            return float("inf")
        return float(matrix[self.index[source_id], self.index[target_id]])

    def get_distance(self, source_id: NodeID, target_id: NodeID) -> float:
        return self._lookup(self.distance_km, source_id, target_id)

    def get_time(self, source_id: NodeID, target_id: NodeID) -> float:
        return self._lookup(self.time_minutes, source_id, target_id)

    def get_cost(self, source_id: NodeID, target_id: NodeID) -> float:
        return self._lookup(self.cost, source_id, target_id)

    def get_path_ids(self, source_id: NodeID, target_id: NodeID) -> List[NodeID]:
        """Node ids of the stored route, or [] if there is none."""
        return self.path_node_ids.get((source_id, target_id), [])

    def has_path(self, source_id: NodeID, target_id: NodeID) -> bool:
        return bool(np.isfinite(self.get_distance(source_id, target_id)))

    def nearest_destination(self, source_id: NodeID) -> Optional[Tuple[NodeID, float]]:
        """Closest other node by the matrix's mode weight, or None."""
        if source_id not in self.index:
            return None
        weights = {
            OptimizationMode.DISTANCE: self.distance_km,
            OptimizationMode.TIME: self.time_minutes,
            OptimizationMode.COST: self.cost,
        }[self.mode]
        row = weights[self.index[source_id]].copy()
        row[self.index[source_id]] = np.inf
        if row.size == 0 or not np.isfinite(row).any():
            return None
        j = int(np.argmin(row))
        return self.node_ids[j], float(row[j])

    def get_stats(self) -> MatrixStats:
        return MatrixStats(
            num_nodes=len(self.node_ids),
            num_paths=len(self.path_node_ids),
            memory_bytes=int(self.distance_km.nbytes + self.time_minutes.nbytes + self.cost.nbytes),
            mode=self.mode.value,
        )


def compute_route_matrix(
    graph: RoadNetworkGraph,
    node_ids: Sequence[NodeID],
    mode: ModeLike = OptimizationMode.DISTANCE,
    solver: Optional[ShortestPathSolver] = None,
) -> RouteMatrix:
    """Compute route totals between every ordered pair of node_ids.

    Args:
        graph: Road network
        node_ids: Nodes to include, in row/column order
        mode: Optimization mode used to choose each route
        solver: Solver to reuse, created on demand

    Returns:
        RouteMatrix

    Raises:
        ValidationError: If node_ids contains duplicates
        NodeNotFoundError: If a node id is not in the graph
    """
    mode = OptimizationMode.parse(mode)
    node_ids = list(node_ids)
    if len(set(node_ids)) != len(node_ids):
        raise ValidationError("Route matrix node ids must be unique")

    solver = solver or ShortestPathSolver(graph)
    matrix = RouteMatrix(node_ids, mode)
    logger.info(f"Computing {mode.value} route matrix for {len(node_ids)} nodes")

    with graph.read_locked():
        for node_id in node_ids:
            if node_id not in graph:
                raise NodeNotFoundError(node_id)

        with LogTimer(logger, "Route matrix computation"):
            for source_id in node_ids:
                tree = solver.shortest_path_tree(source_id, mode)
                for target_id in node_ids:
                    path = tree.path_to(target_id)
                    if not path:
                        logger.debug(f"No path from {source_id} to {target_id}")
                        continue
                    matrix.set(solver.build_route(path, mode))

    stats = matrix.get_stats()
    logger.info(
        f"Route matrix complete: {stats.num_paths}/{len(node_ids) ** 2} pairs routed, "
        f"{stats.memory_bytes / 1024:.1f} KB"
    )
    return matrix
