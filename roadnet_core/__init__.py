"""
Roadnet Core - Road network graph and shortest-path routing for fleet tracking

This package provides:
- A weighted road graph with dynamic insertion of ad hoc locations
- Dijkstra shortest paths optimised for distance, time or cost
- Distinct alternative routes per optimization criterion
- Route matrices, turn-by-turn directions and KML export

Version: 1.0.0
"""

from .alternatives import RouteSynthesizer, find_alternatives
from .config import RouterConfig, load_config
from .exceptions import (
    ConfigurationError,
    GraphBuildError,
    GraphError,
    InvalidEdgeError,
    NegativeWeightError,
    NodeNotFoundError,
    NoPathError,
    ResourceError,
    RouteGraphError,
    RoutingError,
    SearchTimeoutError,
    ValidationError,
)
from .geo import calculate_bearing, compass_direction, haversine
from .graph import RoadNetworkGraph, insert_dynamic_node
from .kml_export import KMLExporter, export_routes_to_kml
from .network import INDIAN_SEED_NODES, INDIAN_SEED_ROADS, build_default_indian_network, build_network
from .path_reconstruction import reconstruct_path, validate_path
from .route_matrix import MatrixStats, RouteMatrix, compute_route_matrix
from .solver import WEIGHT_FUNCTIONS, SearchTree, ShortestPathSolver, find_path, require_path
from .spatial_index import NodeSpatialIndex
from .turn_by_turn import TurnByTurnGenerator, TurnInstruction, generate_instruction, generate_turn_by_turn
from .types import (
    Coordinate,
    Edge,
    Node,
    NodeID,
    NodeKind,
    OptimizationMode,
    PathResult,
    RoadClass,
    RouteSegment,
    UnreachableReason,
)

__all__ = [
    # Types
    "Coordinate",
    "NodeID",
    "Node",
    "NodeKind",
    "Edge",
    "RoadClass",
    "OptimizationMode",
    "PathResult",
    "RouteSegment",
    "UnreachableReason",
    # Configuration
    "RouterConfig",
    "load_config",
    # Graph
    "RoadNetworkGraph",
    "insert_dynamic_node",
    "NodeSpatialIndex",
    "build_network",
    "build_default_indian_network",
    "INDIAN_SEED_NODES",
    "INDIAN_SEED_ROADS",
    # Routing
    "ShortestPathSolver",
    "SearchTree",
    "WEIGHT_FUNCTIONS",
    "find_path",
    "require_path",
    "reconstruct_path",
    "validate_path",
    "RouteSynthesizer",
    "find_alternatives",
    # Reporting
    "RouteMatrix",
    "MatrixStats",
    "compute_route_matrix",
    "TurnByTurnGenerator",
    "TurnInstruction",
    "generate_instruction",
    "generate_turn_by_turn",
    "KMLExporter",
    "export_routes_to_kml",
    # Geographic Utilities
    "haversine",
    "calculate_bearing",
    "compass_direction",
    # Exceptions
    "RouteGraphError",
    "ValidationError",
    "ConfigurationError",
    "GraphError",
    "GraphBuildError",
    "InvalidEdgeError",
    "RoutingError",
    "NodeNotFoundError",
    "NoPathError",
    "NegativeWeightError",
    "ResourceError",
    "SearchTimeoutError",
]

__version__ = "1.0.0"
