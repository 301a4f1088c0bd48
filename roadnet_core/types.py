"""
Type definitions for the road network router.

This module provides type aliases, enums and dataclasses for the graph model
and for route results. All coordinate operations should use these types for
consistency.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

from .exceptions import ValidationError

# Type Aliases for clarity (Python 3.9 compatible)
Coordinate = Tuple[float, float]  # (latitude, longitude) in decimal degrees
NodeID = str  # String node identifier, e.g. "mumbai"


class NodeKind(Enum):
    """Kind of point of interest. Descriptive only, never used in path cost."""

    CITY = "city"
    JUNCTION = "junction"
    TOLL = "toll"
    FUEL = "fuel"
    REST_AREA = "rest_area"


class RoadClass(Enum):
    """Classification of the road an edge runs along."""

    NATIONAL_HIGHWAY = "national_highway"
    STATE_HIGHWAY = "state_highway"
    EXPRESSWAY = "expressway"
    CITY_ROAD = "city_road"

    @property
    def title(self) -> str:
        """Display name, e.g. 'National Highway'."""
        return self.value.replace("_", " ").title()


class OptimizationMode(Enum):
    """Criterion used to weight edges during the shortest-path search."""

    DISTANCE = "distance"
    TIME = "time"
    COST = "cost"

    @classmethod
    def parse(cls, mode: Union["OptimizationMode", str]) -> "OptimizationMode":
        """Accept an enum member or its string value.

        Raises:
            ValidationError: If the string is not a known mode
        """
        if isinstance(mode, cls):
            return mode
        try:
            return cls(str(mode).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValidationError(f"Unknown optimization mode '{mode}' (expected one of: {valid})")


class UnreachableReason(Enum):
    """Standard reason codes for routes that could not be produced."""

    UNKNOWN_NODE = "unknown_node"
    NO_PATH = "no_path"


@dataclass(frozen=True)
class Node:
    """A point of interest in the road network.

    Attributes:
        id: Unique string key
        position: (latitude, longitude) in WGS84 degrees
        label: Human-readable name
        kind: City, junction, toll plaza, fuel station or rest area
    """

    id: NodeID
    position: Coordinate
    label: str
    kind: NodeKind = NodeKind.CITY

    @property
    def lat(self) -> float:
        return self.position[0]

    @property
    def lon(self) -> float:
        return self.position[1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lat": self.lat,
            "lon": self.lon,
            "label": self.label,
            "kind": self.kind.value,
        }


@dataclass(frozen=True)
class Edge:
    """A directed, weighted connection between two nodes.

    Attributes:
        from_id: Source node id
        to_id: Target node id
        distance_km: Physical distance (non-negative)
        time_minutes: Nominal travel time before traffic adjustment
        base_cost: Nominal monetary cost before tolls
        road_class: Road classification
        toll_cost: Additional monetary cost for this edge
        traffic_factor: Multiplier (> 0) applied to time_minutes
    """

    from_id: NodeID
    to_id: NodeID
    distance_km: float
    time_minutes: float
    base_cost: float
    road_class: RoadClass = RoadClass.NATIONAL_HIGHWAY
    toll_cost: float = 0.0
    traffic_factor: float = 1.0

    def __post_init__(self):
        """Reject attribute values that would break non-negative weights."""
        for name in ("distance_km", "time_minutes", "base_cost", "toll_cost"):
            if getattr(self, name) < 0:
                raise ValidationError(
                    f"Edge {self.from_id} -> {self.to_id}: {name} must be non-negative, "
                    f"got {getattr(self, name)}"
                )
        if self.traffic_factor <= 0:
            raise ValidationError(
                f"Edge {self.from_id} -> {self.to_id}: traffic_factor must be positive, "
                f"got {self.traffic_factor}"
            )

    @property
    def effective_time_minutes(self) -> float:
        """Travel time after applying the traffic factor."""
        return self.time_minutes * self.traffic_factor

    @property
    def total_cost(self) -> float:
        """Base cost plus toll."""
        return self.base_cost + self.toll_cost

    def reversed(self) -> "Edge":
        """Reciprocal edge with identical attributes."""
        return Edge(
            from_id=self.to_id,
            to_id=self.from_id,
            distance_km=self.distance_km,
            time_minutes=self.time_minutes,
            base_cost=self.base_cost,
            road_class=self.road_class,
            toll_cost=self.toll_cost,
            traffic_factor=self.traffic_factor,
        )


@dataclass(frozen=True)
class RouteSegment:
    """Per-edge breakdown of a route.

    Attributes:
        from_node: Node the segment starts at
        to_node: Node the segment ends at
        distance_km: Edge distance
        effective_time_minutes: Edge time after traffic adjustment
        cost: Edge base cost plus toll
        road_class: Road classification of the traversed edge
        instruction: Human-readable driving instruction
    """

    from_node: Node
    to_node: Node
    distance_km: float
    effective_time_minutes: float
    cost: float
    road_class: RoadClass
    instruction: str


class PathResult(NamedTuple):
    """Result of a single shortest-path search.

    Attributes:
        start_id: Requested start node
        end_id: Requested end node
        mode: Optimization mode that drove the search
        node_sequence: Node ids from start to end inclusive, empty if unreachable
        coordinate_sequence: Position of each node in node_sequence
        segments: Per-edge breakdown
        total_distance_km: Sum of distance_km over traversed edges
        total_effective_time_minutes: Sum of time_minutes * traffic_factor
        total_cost: Sum of base_cost + toll_cost
        reason: Why no route was produced (None when found)
    """

    start_id: NodeID
    end_id: NodeID
    mode: OptimizationMode
    node_sequence: Tuple[NodeID, ...]
    coordinate_sequence: Tuple[Coordinate, ...]
    segments: Tuple[RouteSegment, ...]
    total_distance_km: float
    total_effective_time_minutes: float
    total_cost: float
    reason: Optional[UnreachableReason] = None

    @classmethod
    def unreachable(
        cls,
        start_id: NodeID,
        end_id: NodeID,
        mode: OptimizationMode,
        reason: UnreachableReason = UnreachableReason.NO_PATH,
    ) -> "PathResult":
        """Sentinel result for a route that does not exist."""
        return cls(
            start_id=start_id,
            end_id=end_id,
            mode=mode,
            node_sequence=(),
            coordinate_sequence=(),
            segments=(),
            total_distance_km=0.0,
            total_effective_time_minutes=0.0,
            total_cost=0.0,
            reason=reason,
        )

    @property
    def found(self) -> bool:
        """True when the search produced a path from start to end."""
        return self.reason is None and len(self.node_sequence) > 0

    @property
    def num_segments(self) -> int:
        return len(self.segments)

    def same_route_as(self, other: "PathResult") -> bool:
        """Two routes are the same when their node sequences are identical."""
        return self.node_sequence == other.node_sequence

    def summary(self) -> Dict[str, Any]:
        """Rounded display figures for dashboards and reports."""
        hours, minutes = divmod(round(self.total_effective_time_minutes), 60)
        return {
            "start": self.start_id,
            "end": self.end_id,
            "mode": self.mode.value,
            "found": self.found,
            "path": list(self.node_sequence),
            "distance_km": round(self.total_distance_km),
            "time_minutes": round(self.total_effective_time_minutes),
            "time_display": f"{hours}h {minutes}m",
            "cost": round(self.total_cost),
            "segments": self.num_segments,
        }
