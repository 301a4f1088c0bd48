"""
Router configuration.

Collects the tunables of dynamic node insertion and path search in a single
dataclass that can be built from a dict or a JSON file.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ConfigurationError
from .types import RoadClass


@dataclass
class RouterConfig:
    """Configuration for graph construction and path search.

    Attributes:
        dynamic_radius_km: Only nodes strictly closer than this are linked to a dynamic node
        dynamic_max_neighbors: Maximum number of links created for a dynamic node
        assumed_speed_kmh: Speed used to estimate travel time of synthesized edges
        cost_per_km: Currency units per km used to estimate cost of synthesized edges
        dynamic_road_class: Road class assigned to synthesized edges
        snap_tolerance_km: locate_or_insert reuses an existing node within this distance
        heap_threshold: Graphs with more nodes than this use a binary-heap queue
        search_deadline_s: Optional wall-clock limit for one search
        strict_edges: Reject edges whose endpoints are not (yet) in the graph
    """

    dynamic_radius_km: float = 100.0
    dynamic_max_neighbors: int = 3
    assumed_speed_kmh: float = 60.0
    cost_per_km: float = 8.0
    dynamic_road_class: RoadClass = RoadClass.STATE_HIGHWAY
    snap_tolerance_km: float = 0.5
    heap_threshold: int = 500
    search_deadline_s: Optional[float] = None
    strict_edges: bool = False

    def __post_init__(self):
        """Validate values and coerce the road class from its string form."""
        if isinstance(self.dynamic_road_class, str):
            try:
                self.dynamic_road_class = RoadClass(self.dynamic_road_class)
            except ValueError:
                raise ConfigurationError(f"Unknown road class '{self.dynamic_road_class}'")

        if self.dynamic_radius_km <= 0:
            raise ConfigurationError(f"dynamic_radius_km must be positive, got {self.dynamic_radius_km}")
        if self.dynamic_max_neighbors < 0:
            raise ConfigurationError(
                f"dynamic_max_neighbors must be non-negative, got {self.dynamic_max_neighbors}"
            )
        if self.assumed_speed_kmh <= 0:
            raise ConfigurationError(f"assumed_speed_kmh must be positive, got {self.assumed_speed_kmh}")
        if self.cost_per_km < 0:
            raise ConfigurationError(f"cost_per_km must be non-negative, got {self.cost_per_km}")
        if self.snap_tolerance_km < 0:
            raise ConfigurationError(f"snap_tolerance_km must be non-negative, got {self.snap_tolerance_km}")
        if self.heap_threshold < 0:
            raise ConfigurationError(f"heap_threshold must be non-negative, got {self.heap_threshold}")
        if self.search_deadline_s is not None and self.search_deadline_s <= 0:
            raise ConfigurationError(f"search_deadline_s must be positive, got {self.search_deadline_s}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RouterConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["dynamic_road_class"] = self.dynamic_road_class.value
        return data


def load_config(path: Union[str, Path]) -> RouterConfig:
    """Load a RouterConfig from a JSON file.

    Args:
        path: Path to a JSON object whose keys are RouterConfig fields

    Raises:
        ConfigurationError: If the file is missing, malformed or has invalid values
    """
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a JSON object")

    return RouterConfig.from_dict(data)
