"""
Robust path reconstruction for shortest path searches.

Walks a predecessor mapping backward from the target and guards against the
cycles and dangling links a corrupted mapping could contain.
"""

from typing import List, Mapping, Optional, Set

from .logging_config import get_logger
from .types import NodeID

logger = get_logger(__name__)


def reconstruct_path(
    predecessors: Mapping[NodeID, Optional[NodeID]],
    source_id: NodeID,
    target_id: NodeID,
    max_iterations: Optional[int] = None,
) -> List[NodeID]:
    """Reconstruct a shortest path from a predecessor mapping.

    Args:
        predecessors: predecessors[n] is the previous node on the best path to n.
            Missing keys and None both mean "no predecessor".
        source_id: Starting node id
        target_id: Destination node id
        max_iterations: Maximum number of steps before giving up.
            If None, uses len(predecessors) + 1 as the limit.

    Returns:
        List of node ids from source to target, or an empty list if:
        - No path exists (the walk does not end at source)
        - A cycle is detected
        - Maximum iterations are exceeded

    Example:
        >>> preds = {"a": None, "b": "a", "c": "b"}
        >>> reconstruct_path(preds, "a", "c")
        ['a', 'b', 'c']
    """
    if source_id == target_id:
        return [source_id]

    if max_iterations is None:
        max_iterations = len(predecessors) + 1

    path: List[NodeID] = []
    current: Optional[NodeID] = target_id
    visited: Set[NodeID] = set()

    for iteration in range(max_iterations):
        if current is None:
            # Walk ended without reaching the source
            logger.debug(f"No path exists from {source_id} to {target_id}")
            return []

        path.append(current)

        if current == source_id:
            path.reverse()
            logger.debug(f"Path reconstructed: {len(path)} nodes from {source_id} to {target_id}")
            return path

        if current in visited:
            logger.warning(
                f"Cycle detected during path reconstruction from {source_id} to {target_id} "
                f"at node {current} (iteration {iteration})"
            )
            return []

        visited.add(current)
        current = predecessors.get(current)

    logger.warning(
        f"Path reconstruction exceeded maximum iterations ({max_iterations}) "
        f"from {source_id} to {target_id}"
    )
    return []


def validate_path(path: List[NodeID], source_id: NodeID, target_id: NodeID) -> bool:
    """Validate that a path starts at source, ends at target and has no repeats.

    Example:
        >>> validate_path(["a", "b", "c"], "a", "c")
        True
        >>> validate_path(["a", "b"], "a", "c")
        False
    """
    if not path:
        logger.debug("Path validation failed: empty path")
        return False

    if path[0] != source_id:
        logger.debug(f"Path validation failed: starts at {path[0]}, expected {source_id}")
        return False

    if path[-1] != target_id:
        logger.debug(f"Path validation failed: ends at {path[-1]}, expected {target_id}")
        return False

    if len(path) != len(set(path)):
        logger.debug("Path validation failed: contains duplicate nodes")
        return False

    return True
