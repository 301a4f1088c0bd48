"""
Custom exceptions for the road network router.

Provides a clear exception hierarchy for better error handling and debugging.
All exceptions inherit from RouteGraphError for easy catching of all library errors.

Note that "no route" is a normal outcome on the lenient API (an unreachable
PathResult is returned); these exceptions are reserved for invalid input,
programmer errors and the strict helpers such as ``require_path``.
"""


class RouteGraphError(Exception):
    """Base exception for all road network errors."""

    pass


# ==============================================================================
# Input Errors
# ==============================================================================


class ValidationError(RouteGraphError):
    """Raised when input validation fails."""

    pass


class ConfigurationError(RouteGraphError):
    """Raised when configuration is invalid."""

    pass


# ==============================================================================
# Graph Construction Errors
# ==============================================================================


class GraphError(RouteGraphError):
    """Base class for graph-related errors."""

    pass


class GraphBuildError(GraphError):
    """Raised when graph construction fails."""

    def __init__(self, reason: str, num_nodes: int = 0, num_edges: int = 0):
        self.reason = reason
        self.num_nodes = num_nodes
        self.num_edges = num_edges
        msg = f"Graph construction failed: {reason}"
        if num_nodes or num_edges:
            msg += f" (nodes: {num_nodes}, edges: {num_edges})"
        super().__init__(msg)


class InvalidEdgeError(GraphError):
    """Raised when a strict graph receives an edge with an unknown endpoint."""

    def __init__(self, from_node: str, to_node: str, missing: str):
        self.from_node = from_node
        self.to_node = to_node
        self.missing = missing
        super().__init__(
            f"Edge {from_node} -> {to_node} references unknown node '{missing}'"
        )


# ==============================================================================
# Routing Errors
# ==============================================================================


class RoutingError(RouteGraphError):
    """Base class for routing-related errors."""

    pass


class NodeNotFoundError(RoutingError):
    """Raised when a route endpoint is not part of the graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' does not exist in the road network")


class NoPathError(RoutingError):
    """Raised when no path exists between two nodes."""

    def __init__(self, from_node: str, to_node: str):
        self.from_node = from_node
        self.to_node = to_node
        super().__init__(f"No path exists from {from_node} to {to_node}")


class NegativeWeightError(RoutingError):
    """Raised when a weight function yields a negative edge weight."""

    def __init__(self, from_node: str, to_node: str, weight: float):
        self.from_node = from_node
        self.to_node = to_node
        self.weight = weight
        super().__init__(
            f"Negative weight {weight} on edge {from_node} -> {to_node}; "
            f"Dijkstra requires non-negative weights"
        )


# ==============================================================================
# Resource Errors
# ==============================================================================


class ResourceError(RouteGraphError):
    """Base class for resource-related errors."""

    pass


class SearchTimeoutError(ResourceError):
    """Raised when a path search exceeds its deadline."""

    def __init__(self, operation: str, timeout_seconds: float):
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Operation '{operation}' exceeded timeout of {timeout_seconds}s"
        )
