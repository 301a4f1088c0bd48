"""
Single-source shortest path search over a RoadNetworkGraph.

Implements Dijkstra's label-setting algorithm under a selectable edge weight:

- distance: edge.distance_km
- time:     edge.time_minutes * edge.traffic_factor
- cost:     edge.base_cost + edge.toll_cost

Small graphs use the classic array scan (O(V^2)) that picks the first
unvisited node with the smallest tentative distance in node insertion order.
Graphs larger than RouterConfig.heap_threshold switch to a binary heap.
Both produce the same distances; ties between equal-cost paths may resolve
differently.

"No route" is a normal outcome: the solver returns PathResult.unreachable()
rather than raising. Use require_path() for a raising variant.
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from math import inf
from typing import Callable, Dict, List, Optional, Set, Union

from .config import RouterConfig
from .exceptions import (
    NegativeWeightError,
    NodeNotFoundError,
    NoPathError,
    SearchTimeoutError,
    ValidationError,
)
from .graph import RoadNetworkGraph
from .logging_config import LogTimer, get_logger
from .path_reconstruction import reconstruct_path
from .turn_by_turn import generate_instruction
from .types import Edge, NodeID, OptimizationMode, PathResult, RouteSegment, UnreachableReason

logger = get_logger(__name__)

WeightFunction = Callable[[Edge], float]

WEIGHT_FUNCTIONS: Dict[OptimizationMode, WeightFunction] = {
    OptimizationMode.DISTANCE: lambda edge: edge.distance_km,
    OptimizationMode.TIME: lambda edge: edge.time_minutes * edge.traffic_factor,
    OptimizationMode.COST: lambda edge: edge.base_cost + edge.toll_cost,
}

ModeLike = Union[OptimizationMode, str]


@dataclass
class SearchTree:
    """Distances and predecessors produced by one search.

    Attributes:
        source_id: Node the search started from
        mode: Optimization mode of the weights
        distances: Best known weight to each node (inf when not reached)
        predecessors: Previous node on the best path (None for source/unreached)
        settled: Nodes in the order they were finalized
    """

    source_id: NodeID
    mode: OptimizationMode
    distances: Dict[NodeID, float] = field(default_factory=dict)
    predecessors: Dict[NodeID, Optional[NodeID]] = field(default_factory=dict)
    settled: List[NodeID] = field(default_factory=list)

    def reachable(self, node_id: NodeID) -> bool:
        return self.distances.get(node_id, inf) < inf

    def path_to(self, target_id: NodeID) -> List[NodeID]:
        """Node ids from source to target, or [] if target was not reached."""
        if not self.reachable(target_id):
            return []
        return reconstruct_path(self.predecessors, self.source_id, target_id)


class ShortestPathSolver:
    """
    Dijkstra solver bound to one graph.

    Attributes:
        graph: Road network to search
        config: Router configuration (heap threshold, default deadline)
        weight_fn: Optional weight override applied instead of the mode's weight
    """

    def __init__(
        self,
        graph: RoadNetworkGraph,
        config: Optional[RouterConfig] = None,
        weight_fn: Optional[WeightFunction] = None,
    ):
        self.graph = graph
        self.config = config or graph.config
        self.weight_fn = weight_fn

    def _weight_for(self, mode: OptimizationMode) -> WeightFunction:
        return self.weight_fn or WEIGHT_FUNCTIONS[mode]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_path(
        self,
        start_id: NodeID,
        end_id: NodeID,
        mode: ModeLike = OptimizationMode.DISTANCE,
        deadline_s: Optional[float] = None,
    ) -> PathResult:
        """
        Minimum-weight path between two nodes.

        Args:
            start_id: Start node id
            end_id: End node id
            mode: distance, time or cost (enum or string)
            deadline_s: Wall-clock limit; defaults to config.search_deadline_s

        Returns:
            PathResult; check ``result.found``. Unknown ids and disconnected
            nodes yield the unreachable sentinel.

        Raises:
            ValidationError: If mode is not a known optimization mode
            NegativeWeightError: If a custom weight function returns a negative value
            SearchTimeoutError: If the deadline is exceeded
        """
        mode = OptimizationMode.parse(mode)

        with self.graph.read_locked():
            for node_id in (start_id, end_id):
                if node_id not in self.graph:
                    logger.debug(f"Route {start_id} -> {end_id}: unknown node '{node_id}'")
                    return PathResult.unreachable(start_id, end_id, mode, UnreachableReason.UNKNOWN_NODE)

            with LogTimer(logger, f"Dijkstra {start_id} -> {end_id} ({mode.value})", level=logging.DEBUG):
                tree = self._search(start_id, end_id, mode, deadline_s)

            path = reconstruct_path(tree.predecessors, start_id, end_id)
            if not path or path[0] != start_id:
                logger.debug(f"Route {start_id} -> {end_id}: unreachable")
                return PathResult.unreachable(start_id, end_id, mode, UnreachableReason.NO_PATH)

            return self._build_result(path, start_id, end_id, mode)

    def shortest_path_tree(
        self,
        start_id: NodeID,
        mode: ModeLike = OptimizationMode.DISTANCE,
        deadline_s: Optional[float] = None,
    ) -> SearchTree:
        """
        Run the search to exhaustion from start_id.

        Raises:
            NodeNotFoundError: If start_id is not in the graph
        """
        mode = OptimizationMode.parse(mode)
        with self.graph.read_locked():
            if start_id not in self.graph:
                raise NodeNotFoundError(start_id)
            return self._search(start_id, None, mode, deadline_s)

    def require_path(
        self,
        start_id: NodeID,
        end_id: NodeID,
        mode: ModeLike = OptimizationMode.DISTANCE,
        deadline_s: Optional[float] = None,
    ) -> PathResult:
        """
        Like find_path, but raise instead of returning the unreachable sentinel.

        Raises:
            NodeNotFoundError: If start_id or end_id is not in the graph
            NoPathError: If the nodes are disconnected
        """
        result = self.find_path(start_id, end_id, mode, deadline_s)
        if result.found:
            return result
        if result.reason is UnreachableReason.UNKNOWN_NODE:
            missing = start_id if start_id not in self.graph else end_id
            raise NodeNotFoundError(missing)
        raise NoPathError(start_id, end_id)

    def build_route(self, path: List[NodeID], mode: ModeLike = OptimizationMode.DISTANCE) -> PathResult:
        """Assemble a PathResult for an explicit node sequence.

        Raises:
            ValidationError: If path is empty
        """
        if not path:
            raise ValidationError("Cannot build a route from an empty node sequence")
        mode = OptimizationMode.parse(mode)
        with self.graph.read_locked():
            return self._build_result(path, path[0], path[-1], mode)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _search(
        self,
        start_id: NodeID,
        target_id: Optional[NodeID],
        mode: OptimizationMode,
        deadline_s: Optional[float],
    ) -> SearchTree:
        if deadline_s is None:
            deadline_s = self.config.search_deadline_s
        deadline = time.monotonic() + deadline_s if deadline_s is not None else None

        if self.graph.num_nodes > self.config.heap_threshold:
            return self._search_heap(start_id, target_id, mode, deadline, deadline_s)
        return self._search_scan(start_id, target_id, mode, deadline, deadline_s)

    def _relax(
        self,
        tree: SearchTree,
        current: NodeID,
        current_dist: float,
        visited: Set[NodeID],
        weight: WeightFunction,
    ) -> List[NodeID]:
        """Relax the outgoing edges of current; return the improved targets."""
        improved = []
        for edge in self.graph.neighbors(current):
            target = edge.to_id
            # Dangling edge (lenient graph): dead end
            if target not in tree.distances or target in visited:
                continue
            w = weight(edge)
            if w < 0:
                raise NegativeWeightError(edge.from_id, edge.to_id, w)
            new_dist = current_dist + w
            if new_dist < tree.distances[target]:
                tree.distances[target] = new_dist
                tree.predecessors[target] = current
                improved.append(target)
        return improved

    def _init_tree(self, start_id: NodeID, mode: OptimizationMode) -> SearchTree:
        tree = SearchTree(source_id=start_id, mode=mode)
        for node_id in self.graph.node_ids():
            tree.distances[node_id] = inf
            tree.predecessors[node_id] = None
        tree.distances[start_id] = 0.0
        return tree

    @staticmethod
    def _check_deadline(deadline: Optional[float], deadline_s: Optional[float]) -> None:
        if deadline is not None and time.monotonic() >= deadline:
            raise SearchTimeoutError("shortest path search", deadline_s)

    def _search_scan(
        self,
        start_id: NodeID,
        target_id: Optional[NodeID],
        mode: OptimizationMode,
        deadline: Optional[float],
        deadline_s: Optional[float],
    ) -> SearchTree:
        weight = self._weight_for(mode)
        tree = self._init_tree(start_id, mode)
        unvisited = dict.fromkeys(tree.distances)
        visited: Set[NodeID] = set()

        while unvisited:
            self._check_deadline(deadline, deadline_s)

            current = None
            min_distance = inf
            for node_id in unvisited:
                d = tree.distances[node_id]
                if d < min_distance:
                    min_distance = d
                    current = node_id

            if current is None:
                break

            del unvisited[current]
            visited.add(current)
            tree.settled.append(current)

            if current == target_id:
                break

            self._relax(tree, current, min_distance, visited, weight)

        return tree

    def _search_heap(
        self,
        start_id: NodeID,
        target_id: Optional[NodeID],
        mode: OptimizationMode,
        deadline: Optional[float],
        deadline_s: Optional[float],
    ) -> SearchTree:
        weight = self._weight_for(mode)
        tree = self._init_tree(start_id, mode)
        visited: Set[NodeID] = set()
        counter = itertools.count()
        heap = [(0.0, next(counter), start_id)]

        while heap:
            self._check_deadline(deadline, deadline_s)

            d, _, current = heapq.heappop(heap)
            if current in visited or d > tree.distances[current]:
                continue

            visited.add(current)
            tree.settled.append(current)

            if current == target_id:
                break

            for target in self._relax(tree, current, d, visited, weight):
                heapq.heappush(heap, (tree.distances[target], next(counter), target))

        return tree

    # ------------------------------------------------------------------
    # Result assembly
    # ------------------------------------------------------------------

    def _pick_edge(self, from_id: NodeID, to_id: NodeID, weight: WeightFunction) -> Edge:
        """Cheapest stored edge for one hop under the search weight."""
        candidates = [e for e in self.graph.neighbors(from_id) if e.to_id == to_id]
        if not candidates:
            raise NoPathError(from_id, to_id)
        return min(candidates, key=weight)

    def _build_result(
        self, path: List[NodeID], start_id: NodeID, end_id: NodeID, mode: OptimizationMode
    ) -> PathResult:
        weight = self._weight_for(mode)
        nodes = []
        for node_id in path:
            node = self.graph.get_node(node_id)
            if node is None:
                raise NodeNotFoundError(node_id)
            nodes.append(node)

        segments = []
        total_distance = 0.0
        total_time = 0.0
        total_cost = 0.0

        for from_node, to_node in zip(nodes, nodes[1:]):
            edge = self._pick_edge(from_node.id, to_node.id, weight)
            total_distance += edge.distance_km
            total_time += edge.effective_time_minutes
            total_cost += edge.total_cost
            segments.append(RouteSegment(
                from_node=from_node,
                to_node=to_node,
                distance_km=edge.distance_km,
                effective_time_minutes=edge.effective_time_minutes,
                cost=edge.total_cost,
                road_class=edge.road_class,
                instruction=generate_instruction(from_node, to_node, edge),
            ))

        logger.debug(
            f"Route {start_id} -> {end_id} ({mode.value}): {len(path)} nodes, "
            f"{total_distance:.1f} km, {total_time:.1f} min, cost {total_cost:.1f}"
        )

        return PathResult(
            start_id=start_id,
            end_id=end_id,
            mode=mode,
            node_sequence=tuple(path),
            coordinate_sequence=tuple(node.position for node in nodes),
            segments=tuple(segments),
            total_distance_km=total_distance,
            total_effective_time_minutes=total_time,
            total_cost=total_cost,
        )


def find_path(
    graph: RoadNetworkGraph,
    start_id: NodeID,
    end_id: NodeID,
    mode: ModeLike = OptimizationMode.DISTANCE,
    deadline_s: Optional[float] = None,
) -> PathResult:
    """Convenience function: shortest path under the given mode."""
    return ShortestPathSolver(graph).find_path(start_id, end_id, mode, deadline_s)


def require_path(
    graph: RoadNetworkGraph,
    start_id: NodeID,
    end_id: NodeID,
    mode: ModeLike = OptimizationMode.DISTANCE,
) -> PathResult:
    """Convenience function: shortest path, raising when none exists."""
    return ShortestPathSolver(graph).require_path(start_id, end_id, mode)
