"""
Command-line interface for the road network router.

Usage:
    roadnet-router nodes
    roadnet-router route mumbai pune --mode time
    roadnet-router alternatives mumbai ahmedabad --output-dir out
    roadnet-router insert 18.55 73.85 --label "Customer Depot" --route-to pune
    roadnet-router matrix mumbai pune surat ahmedabad --mode cost
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from .alternatives import RouteSynthesizer
from .config import RouterConfig, load_config
from .exceptions import RouteGraphError
from .graph import RoadNetworkGraph
from .kml_export import export_routes_to_kml
from .logging_config import get_logger, log_exception, setup_logging
from .network import build_default_indian_network
from .route_matrix import compute_route_matrix
from .solver import ShortestPathSolver
from .turn_by_turn import generate_turn_by_turn
from .types import OptimizationMode, PathResult

logger = get_logger(__name__)

MODE_CHOICES = [mode.value for mode in OptimizationMode]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='roadnet-router',
        description='Shortest-path routing over the fleet road network'
    )
    parser.add_argument('--config', help='JSON file with router configuration')
    parser.add_argument('--output-dir',
                        help='Write directions (CSV/JSON/text) and KML for computed routes here')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('nodes', help='List the nodes of the road network')

    route = subparsers.add_parser('route', help='Shortest route between two nodes')
    route.add_argument('start', help='Start node id')
    route.add_argument('end', help='End node id')
    route.add_argument('--mode', choices=MODE_CHOICES, default='distance',
                       help='Optimization criterion (default: distance)')

    alternatives = subparsers.add_parser('alternatives', help='Distinct distance/time/cost routes')
    alternatives.add_argument('start', help='Start node id')
    alternatives.add_argument('end', help='End node id')

    insert = subparsers.add_parser('insert', help='Insert a location and connect it to nearby nodes')
    insert.add_argument('lat', type=float, help='Latitude')
    insert.add_argument('lon', type=float, help='Longitude')
    insert.add_argument('--label', help='Display name for the new node')
    insert.add_argument('--route-to', help='Route from the inserted node to this node id')
    insert.add_argument('--mode', choices=MODE_CHOICES, default='distance',
                        help='Optimization criterion for --route-to (default: distance)')

    matrix = subparsers.add_parser('matrix', help='Route totals between every pair of nodes')
    matrix.add_argument('node_ids', nargs='+', help='Node ids')
    matrix.add_argument('--mode', choices=MODE_CHOICES, default='distance',
                        help='Optimization criterion (default: distance)')

    return parser


def _print_route(route: PathResult, index: Optional[int] = None) -> None:
    summary = route.summary()
    prefix = f"[{index}] " if index is not None else ""
    print(f"{prefix}{route.mode.value}-optimal: {' -> '.join(route.node_sequence)}")
    print(f"    {summary['distance_km']} km, {summary['time_display']}, cost {summary['cost']}")
    for segment in route.segments:
        print(f"    - {segment.instruction}")


def _export(routes: Sequence[PathResult], output_dir: Optional[str]) -> None:
    if not output_dir or not routes:
        return
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    for route in routes:
        stem = f"{route.start_id}_{route.end_id}_{route.mode.value}"
        generate_turn_by_turn(
            route,
            output_csv=str(out / f"{stem}.csv"),
            output_json=str(out / f"{stem}.json"),
            output_text=str(out / f"{stem}.txt"),
        )
    export_routes_to_kml(routes, str(out / "routes.kml"))
    logger.info(f"Route exports written to {out}")


def _cmd_nodes(graph: RoadNetworkGraph, args: argparse.Namespace) -> int:
    for node in graph.get_all_nodes():
        degree = len(graph.neighbors(node.id))
        print(f"{node.id:<20} {node.label:<24} {node.kind.value:<10} "
              f"({node.lat:.4f}, {node.lon:.4f}) links={degree}")
    return 0


def _cmd_route(graph: RoadNetworkGraph, args: argparse.Namespace) -> int:
    route = ShortestPathSolver(graph).find_path(args.start, args.end, args.mode)
    if not route.found:
        print(f"No route from {args.start} to {args.end} ({route.reason.value})")
        return 1
    _print_route(route)
    _export([route], args.output_dir)
    return 0


def _cmd_alternatives(graph: RoadNetworkGraph, args: argparse.Namespace) -> int:
    routes = RouteSynthesizer(graph).find_alternatives(args.start, args.end)
    if not routes:
        print(f"No route from {args.start} to {args.end}")
        return 1
    for i, route in enumerate(routes, start=1):
        _print_route(route, i)
    _export(routes, args.output_dir)
    return 0


def _cmd_insert(graph: RoadNetworkGraph, args: argparse.Namespace) -> int:
    node_id = graph.locate_or_insert(args.lat, args.lon, label=args.label)
    links = [edge.to_id for edge in graph.neighbors(node_id)]
    print(f"{node_id}: connected to {', '.join(links) if links else 'nothing'}")

    if args.route_to:
        args.start, args.end = node_id, args.route_to
        return _cmd_route(graph, args)
    return 0


def _cmd_matrix(graph: RoadNetworkGraph, args: argparse.Namespace) -> int:
    matrix = compute_route_matrix(graph, args.node_ids, args.mode)
    values = {
        OptimizationMode.DISTANCE: matrix.distance_km,
        OptimizationMode.TIME: matrix.time_minutes,
        OptimizationMode.COST: matrix.cost,
    }[matrix.mode]

    width = max(len(node_id) for node_id in matrix.node_ids) + 2
    print(" " * width + "".join(f"{node_id:>{width}}" for node_id in matrix.node_ids))
    for i, node_id in enumerate(matrix.node_ids):
        cells = "".join(
            f"{'-':>{width}}" if not np.isfinite(v) else f"{v:>{width}.0f}" for v in values[i]
        )
        print(f"{node_id:<{width}}{cells}")
    return 0


COMMANDS = {
    'nodes': _cmd_nodes,
    'route': _cmd_route,
    'alternatives': _cmd_alternatives,
    'insert': _cmd_insert,
    'matrix': _cmd_matrix,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = load_config(args.config) if args.config else RouterConfig()
        graph = build_default_indian_network(config)
        return COMMANDS[args.command](graph, args)
    except RouteGraphError as e:
        log_exception(logger, f"{args.command} failed", e)
        return 2


if __name__ == '__main__':
    sys.exit(main())
