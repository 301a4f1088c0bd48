"""
Road network construction from seed data.

Provides the default Indian highway network used by the fleet dashboard and a
generic builder for test- or deployment-specific networks. Every call returns
a fresh, caller-owned graph.
"""

from typing import Iterable, Optional

from .config import RouterConfig
from .exceptions import GraphBuildError
from .graph import RoadNetworkGraph
from .logging_config import get_logger
from .types import Edge, Node, NodeKind, RoadClass

logger = get_logger(__name__)


INDIAN_SEED_NODES = (
    # Major cities
    Node("mumbai", (19.0760, 72.8777), "Mumbai", NodeKind.CITY),
    Node("delhi", (28.6139, 77.2090), "Delhi", NodeKind.CITY),
    Node("bangalore", (12.9716, 77.5946), "Bangalore", NodeKind.CITY),
    Node("chennai", (13.0827, 80.2707), "Chennai", NodeKind.CITY),
    Node("kolkata", (22.5726, 88.3639), "Kolkata", NodeKind.CITY),
    Node("pune", (18.5204, 73.8567), "Pune", NodeKind.CITY),
    Node("hyderabad", (17.3850, 78.4867), "Hyderabad", NodeKind.CITY),
    Node("ahmedabad", (23.0225, 72.5714), "Ahmedabad", NodeKind.CITY),
    Node("jaipur", (26.9124, 75.7873), "Jaipur", NodeKind.CITY),
    Node("surat", (21.1702, 72.8311), "Surat", NodeKind.CITY),
    # Highway junctions
    Node("panvel_junction", (18.9894, 73.1103), "Panvel Junction", NodeKind.JUNCTION),
    Node("vadodara_junction", (22.3072, 73.1812), "Vadodara Junction", NodeKind.JUNCTION),
    Node("indore_junction", (22.7196, 75.8577), "Indore Junction", NodeKind.JUNCTION),
    Node("nagpur_junction", (21.1458, 79.0882), "Nagpur Junction", NodeKind.JUNCTION),
    # Toll plazas
    Node("khalapur_toll", (18.8642, 73.3467), "Khalapur Toll Plaza", NodeKind.TOLL),
    Node("khed_toll", (18.7197, 73.4000), "Khed Toll Plaza", NodeKind.TOLL),
    # Fuel stations
    Node("lonavala_fuel", (18.7537, 73.4068), "Lonavala Fuel Station", NodeKind.FUEL),
    Node("nashik_fuel", (19.9975, 73.7898), "Nashik Fuel Station", NodeKind.FUEL),
)

_NH = RoadClass.NATIONAL_HIGHWAY
_EXP = RoadClass.EXPRESSWAY

# One entry per road; build_network inserts the reverse direction too.
INDIAN_SEED_ROADS = (
    # Mumbai-Pune Expressway
    Edge("mumbai", "panvel_junction", 42, 45, 50, _EXP, toll_cost=0, traffic_factor=1.2),
    Edge("panvel_junction", "khalapur_toll", 28, 25, 30, _EXP, toll_cost=85, traffic_factor=1.0),
    Edge("khalapur_toll", "lonavala_fuel", 35, 30, 40, _EXP, toll_cost=0, traffic_factor=1.0),
    Edge("lonavala_fuel", "pune", 25, 25, 30, _EXP, toll_cost=65, traffic_factor=1.1),
    # Mumbai-Ahmedabad (NH-48)
    Edge("mumbai", "surat", 284, 300, 350, _NH, toll_cost=150, traffic_factor=1.3),
    Edge("surat", "vadodara_junction", 125, 120, 150, _NH, toll_cost=80, traffic_factor=1.1),
    Edge("vadodara_junction", "ahmedabad", 110, 105, 130, _NH, toll_cost=70, traffic_factor=1.2),
    # Delhi-Ahmedabad (NH-48)
    Edge("delhi", "jaipur", 280, 300, 350, _NH, toll_cost=120, traffic_factor=1.4),
    Edge("jaipur", "ahmedabad", 680, 720, 850, _NH, toll_cost=280, traffic_factor=1.2),
    # Bangalore-Chennai (NH-44)
    Edge("bangalore", "chennai", 346, 360, 420, _NH, toll_cost=180, traffic_factor=1.3),
    # Bangalore-Hyderabad (NH-44)
    Edge("bangalore", "hyderabad", 569, 600, 700, _NH, toll_cost=250, traffic_factor=1.2),
    # Delhi-Kolkata (NH-19)
    Edge("delhi", "nagpur_junction", 1050, 1200, 1300, _NH, toll_cost=450, traffic_factor=1.3),
    Edge("nagpur_junction", "kolkata", 520, 600, 650, _NH, toll_cost=220, traffic_factor=1.2),
)


def build_network(
    seed_nodes: Iterable[Node],
    seed_edges: Iterable[Edge],
    config: Optional[RouterConfig] = None,
) -> RoadNetworkGraph:
    """
    Build a road graph from seed nodes and roads.

    Each seed edge is inserted together with its reciprocal, so the returned
    graph is symmetric. Seed data is always validated: both endpoints of
    every road must be among the seed nodes.

    Args:
        seed_nodes: Nodes to insert, in order
        seed_edges: One edge per road
        config: Router configuration carried by the graph

    Returns:
        New RoadNetworkGraph

    Raises:
        GraphBuildError: If a road references an unknown node
    """
    graph = RoadNetworkGraph(config=config)
    nodes = list(seed_nodes)
    edges = list(seed_edges)

    for node in nodes:
        graph.add_node(node)

    for edge in edges:
        for endpoint in (edge.from_id, edge.to_id):
            if not graph.has_node(endpoint):
                raise GraphBuildError(
                    f"road {edge.from_id} -> {edge.to_id} references unknown node '{endpoint}'",
                    num_nodes=len(nodes),
                    num_edges=len(edges),
                )
        graph.add_road(edge)

    logger.info(f"Road network built: {graph.num_nodes} nodes, {graph.num_edges} directed edges")
    return graph


def build_default_indian_network(config: Optional[RouterConfig] = None) -> RoadNetworkGraph:
    """Fresh graph of major Indian cities and highways."""
    return build_network(INDIAN_SEED_NODES, INDIAN_SEED_ROADS, config=config)
