"""
Road network graph with dynamic node insertion.

The graph owns the id -> Node mapping and a directional adjacency list per
node. Roads are logically undirected: every road is stored as a pair of
reciprocal edges with identical attributes.

Mutations (node/edge insertion, dynamic nodes) take an exclusive write lock;
searches hold a shared read lock for their whole run via ``read_locked()``.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .config import RouterConfig
from .exceptions import InvalidEdgeError
from .logging_config import get_logger
from .spatial_index import NodeSpatialIndex
from .types import Edge, Node, NodeID, NodeKind

logger = get_logger(__name__)


class _ReadWriteLock:
    """Single-writer / multiple-reader lock.

    Readers never wait for queued writers, so a thread may nest read sections.
    The thread holding the write lock may also enter read sections and nest
    further write sections.

    A thread inside a read section may request the write lock: it waits until
    every other reader has left. Only one thread may wait for such an upgrade
    at a time; a second one gets a RuntimeError, since both would otherwise
    wait on each other's read forever.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers: Dict[int, int] = {}
        self._writer: Optional[int] = None
        self._write_depth = 0
        self._upgrader: Optional[int] = None

    def _other_readers(self, me: int) -> bool:
        return any(ident != me for ident in self._readers)

    @contextmanager
    def read(self):
        me = threading.get_ident()
        with self._cond:
            while self._writer is not None and self._writer != me:
                self._cond.wait()
            self._readers[me] = self._readers.get(me, 0) + 1
        try:
            yield
        finally:
            with self._cond:
                remaining = self._readers[me] - 1
                if remaining:
                    self._readers[me] = remaining
                else:
                    del self._readers[me]
                self._cond.notify_all()

    @contextmanager
    def write(self):
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
            else:
                upgrading = me in self._readers
                if upgrading:
                    if self._upgrader is not None:
                        raise RuntimeError(
                            "Cannot upgrade read lock to write lock: another thread is already upgrading"
                        )
                    self._upgrader = me
                try:
                    while self._writer is not None or self._other_readers(me):
                        self._cond.wait()
                finally:
                    if upgrading:
                        self._upgrader = None
                self._writer = me
                self._write_depth = 1
        try:
            yield
        finally:
            with self._cond:
                self._write_depth -= 1
                if self._write_depth == 0:
                    self._writer = None
                    self._cond.notify_all()


class RoadNetworkGraph:
    """
    Weighted directional road graph keyed by string node ids.

    Attributes:
        config: Router configuration (dynamic insertion and strictness settings)
        strict_edges: Whether add_edge rejects edges with unknown endpoints
    """

    def __init__(self, config: Optional[RouterConfig] = None, strict_edges: Optional[bool] = None):
        """
        Initialize an empty road graph.

        Args:
            config: Router configuration, defaults to RouterConfig()
            strict_edges: Override config.strict_edges
        """
        self.config = config or RouterConfig()
        self.strict_edges = self.config.strict_edges if strict_edges is None else strict_edges
        self._nodes: Dict[NodeID, Node] = {}
        self._adjacency: Dict[NodeID, List[Edge]] = {}
        # Edges created by insert_dynamic_node, both directions, keyed by the inserted node
        self._dynamic_edges: Dict[NodeID, List[Edge]] = {}
        self._lock = _ReadWriteLock()

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @contextmanager
    def read_locked(self):
        """Hold shared read access, e.g. for the duration of a search."""
        with self._lock.read():
            yield self

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> None:
        """Insert or overwrite a node; its adjacency entry is kept or created."""
        with self._lock.write():
            self._add_node(node)

    def add_edge(self, edge: Edge) -> None:
        """
        Append a directed edge to the adjacency list of edge.from_id.

        In lenient mode the target need not exist; traversal then simply
        dead-ends there.

        Raises:
            InvalidEdgeError: If strict_edges is set and an endpoint is unknown
        """
        with self._lock.write():
            self._add_edge(edge)

    def add_road(self, edge: Edge) -> None:
        """Add an edge and its reciprocal."""
        with self._lock.write():
            self._add_edge(edge)
            self._add_edge(edge.reversed())

    def _add_node(self, node: Node) -> None:
        if node.id in self._nodes:
            logger.debug(f"Overwriting node '{node.id}'")
        self._nodes[node.id] = node
        self._adjacency.setdefault(node.id, [])

    def _add_edge(self, edge: Edge) -> None:
        if self.strict_edges:
            for endpoint in (edge.from_id, edge.to_id):
                if endpoint not in self._nodes:
                    raise InvalidEdgeError(edge.from_id, edge.to_id, endpoint)
        elif edge.to_id not in self._nodes:
            logger.debug(f"Edge {edge.from_id} -> {edge.to_id} targets an unknown node")
        self._adjacency.setdefault(edge.from_id, []).append(edge)

    def _detach(self, node_id: NodeID) -> None:
        """Drop the edges synthesized by an earlier dynamic insertion of node_id.

        Edges added through add_edge/add_road are kept.
        """
        synthesized = self._dynamic_edges.pop(node_id, [])
        for edge in synthesized:
            self._adjacency[edge.from_id].remove(edge)
        if synthesized:
            logger.debug(f"Removed {len(synthesized)} synthesized edge(s) of '{node_id}'")

    def insert_dynamic_node(self, node: Node) -> List[NodeID]:
        """
        Add a node and connect it to its nearest existing nodes.

        Candidates are all other nodes strictly within config.dynamic_radius_km
        (great-circle distance). At most config.dynamic_max_neighbors of the
        nearest are linked in both directions with synthesized edges:
        state highway, no toll, traffic factor 1.0, time estimated at
        config.assumed_speed_kmh and cost at config.cost_per_km.

        Re-inserting an existing id first removes the edges synthesized by its
        previous insertion; roads added with add_edge or add_road stay. A node
        with no candidate stays isolated, which is a valid state.

        Args:
            node: Node to insert

        Returns:
            Ids of the nodes it was connected to, nearest first
        """
        with self._lock.write():
            if node.id in self._nodes:
                self._detach(node.id)
            self._add_node(node)
            return self._connect_to_nearest(node)

    def _connect_to_nearest(self, node: Node) -> List[NodeID]:
        cfg = self.config
        index = NodeSpatialIndex(n for n in self._nodes.values() if n.id != node.id)
        candidates = index.within_radius(node.position, cfg.dynamic_radius_km)
        chosen = candidates[: cfg.dynamic_max_neighbors]

        for neighbor_id, distance_km in chosen:
            edge = Edge(
                from_id=node.id,
                to_id=neighbor_id,
                distance_km=distance_km,
                time_minutes=distance_km / cfg.assumed_speed_kmh * 60,
                base_cost=distance_km * cfg.cost_per_km,
                road_class=cfg.dynamic_road_class,
                toll_cost=0.0,
                traffic_factor=1.0,
            )
            self._add_edge(edge)
            self._add_edge(edge.reversed())
            self._dynamic_edges.setdefault(node.id, []).extend((edge, edge.reversed()))

        connected =[neighbor_id for neighbor_id, _ in chosen]
        if connected:
            logger.info(
                f"Dynamic node '{node.id}' connected to {len(connected)} node(s): {', '.join(connected)}"
            )
        else:
            logger.warning(
                f"Dynamic node '{node.id}' has no neighbours within {cfg.dynamic_radius_km} km; "
                f"it will be unreachable"
            )
        return connected

    def locate_or_insert(
        self,
        lat: float,
        lon: float,
        label: Optional[str] = None,
        kind: NodeKind = NodeKind.JUNCTION,
    ) -> NodeID:
        """
        Resolve a user-supplied location to a graph node.

        Returns the nearest existing node when it lies within
        config.snap_tolerance_km, otherwise inserts a dynamic node.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            label: Display name for a newly inserted node
            kind: Kind for a newly inserted node

        Returns:
            Id of the existing or newly inserted node
        """
        position = (lat, lon)
        with self._lock.write():
            nearest = NodeSpatialIndex(self._nodes.values()).nearest(position, k=1)
            if nearest and nearest[0][1] <= self.config.snap_tolerance_km:
                node_id, distance_km = nearest[0]
                logger.debug(f"Location ({lat}, {lon}) snapped to '{node_id}' ({distance_km:.3f} km)")
                return node_id

            node_id = f"dyn_{lat:.5f}_{lon:.5f}"
            node = Node(id=node_id, position=position, label=label or node_id, kind=kind)
            if node_id in self._nodes:
                self._detach(node_id)
            self._add_node(node)
            self._connect_to_nearest(node)
            return node_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def neighbors(self, node_id: NodeID) -> List[Edge]:
        """Outgoing edges of node_id, or an empty list."""
        with self._lock.read():
            return list(self._adjacency.get(node_id, ()))

    def get_node(self, node_id: NodeID) -> Optional[Node]:
        with self._lock.read():
            return self._nodes.get(node_id)

    def has_node(self, node_id: NodeID) -> bool:
        with self._lock.read():
            return node_id in self._nodes

    def get_all_nodes(self) -> List[Node]:
        """All nodes in insertion order."""
        with self._lock.read():
            return list(self._nodes.values())

    def node_ids(self) -> List[NodeID]:
        with self._lock.read():
            return list(self._nodes)

    def edge_between(self, from_id: NodeID, to_id: NodeID) -> Optional[Edge]:
        """First stored edge from from_id to to_id, if any."""
        with self._lock.read():
            for edge in self._adjacency.get(from_id, ()):
                if edge.to_id == to_id:
                    return edge
            return None

    def iter_edges(self) -> Iterator[Edge]:
        """Iterate over every stored directed edge (snapshot)."""
        with self._lock.read():
            snapshot = [edge for edges in self._adjacency.values() for edge in edges]
        return iter(snapshot)

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    @property
    def num_edges(self) -> int:
        with self._lock.read():
            return sum(len(edges) for edges in self._adjacency.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"RoadNetworkGraph(nodes={self.num_nodes}, edges={self.num_edges})"


def insert_dynamic_node(graph: RoadNetworkGraph, node: Node) -> List[NodeID]:
    """Convenience wrapper around RoadNetworkGraph.insert_dynamic_node."""
    return graph.insert_dynamic_node(node)
