"""
Haversine nearest-neighbour lookup over graph nodes.

Wraps scikit-learn's BallTree with the haversine metric so that dynamic node
insertion and location snapping do not have to scan every node by hand.
Distances reported back are recomputed with geo.haversine so that synthesized
edges carry exactly the great-circle distance.
"""

from typing import Iterable, List, Optional, Set, Tuple

import numpy as np
from sklearn.neighbors import BallTree  # type: ignore[import-untyped]

from .geo import EARTH_RADIUS_KM, haversine
from .logging_config import get_logger
from .types import Coordinate, Node, NodeID

logger = get_logger(__name__)

# Relative slack on the query radius; candidates are re-filtered exactly afterwards
_RADIUS_SLACK = 1e-9


class NodeSpatialIndex:
    """Static spatial index over a snapshot of node positions.

    Attributes:
        node_ids: Node ids in index order
        positions: (lat, lon) of each indexed node
    """

    def __init__(self, nodes: Iterable[Node]):
        node_list = list(nodes)
        self.node_ids: List[NodeID] = [node.id for node in node_list]
        self.positions: List[Coordinate] = [node.position for node in node_list]
        self._tree: Optional[BallTree] = None

        if node_list:
            X_radians = np.radians(np.asarray(self.positions, dtype=float))
            self._tree = BallTree(X_radians, metric="haversine")

        logger.debug(f"Spatial index built over {len(self.node_ids)} nodes")

    def __len__(self) -> int:
        return len(self.node_ids)

    def _query_point(self, coord: Coordinate) -> np.ndarray:
        return np.radians(np.asarray([coord], dtype=float))

    def within_radius(
        self,
        coord: Coordinate,
        radius_km: float,
        exclude: Optional[Set[NodeID]] = None,
    ) -> List[Tuple[NodeID, float]]:
        """Nodes strictly closer than radius_km, nearest first.

        Args:
            coord: Query point (lat, lon)
            radius_km: Exclusive search radius in kilometers
            exclude: Node ids to leave out of the result

        Returns:
            List of (node_id, distance_km) sorted by ascending distance
        """
        if self._tree is None:
            return []

        exclude = exclude or set()
        radius_rad = radius_km / EARTH_RADIUS_KM * (1 + _RADIUS_SLACK)
        indices, _ = self._tree.query_radius(
            self._query_point(coord), r=radius_rad, return_distance=True, sort_results=True
        )

        candidates: List[Tuple[NodeID, float]] = []
        for idx in indices[0]:
            node_id = self.node_ids[int(idx)]
            if node_id in exclude:
                continue
            distance_km = haversine(coord, self.positions[int(idx)])
            if distance_km < radius_km:
                candidates.append((node_id, distance_km))

        candidates.sort(key=lambda item: item[1])
        return candidates

    def nearest(
        self, coord: Coordinate, k: int = 1, exclude: Optional[Set[NodeID]] = None
    ) -> List[Tuple[NodeID, float]]:
        """The k nearest nodes regardless of distance, nearest first."""
        if self._tree is None or k <= 0:
            return []

        exclude = exclude or set()
        # Over-fetch so excluded ids do not shrink the answer
        fetch = min(len(self.node_ids), k + len(exclude))
        _, indices = self._tree.query(self._query_point(coord), k=fetch)

        result: List[Tuple[NodeID, float]] = []
        for idx in indices[0]:
            node_id = self.node_ids[int(idx)]
            if node_id in exclude:
                continue
            result.append((node_id, haversine(coord, self.positions[int(idx)])))
            if len(result) == k:
                break
        return result
