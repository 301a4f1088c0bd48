"""
KML export of routes for map tools.

Writes each route as a styled LineString placemark (colour per optimization
mode) and each visited node as a point placemark.
"""

from typing import Dict, List, Optional, Sequence
import xml.etree.ElementTree as ET
from xml.dom import minidom

from .exceptions import ValidationError
from .logging_config import get_logger
from .types import Coordinate, Node, OptimizationMode, PathResult

logger = get_logger(__name__)

# KML colours are AABBGGRR
MODE_COLORS: Dict[OptimizationMode, str] = {
    OptimizationMode.DISTANCE: 'ff0000ff',  # Red
    OptimizationMode.TIME: 'ff00aa00',  # Green
    OptimizationMode.COST: 'ffff0000',  # Blue
}


class KMLExporter:
    """
    Export one or more routes to a KML document.
    """

    def __init__(self, routes: Sequence[PathResult], document_name: str = 'Fleet Routes'):
        """
        Args:
            routes: Found routes to export
            document_name: KML Document name

        Raises:
            ValidationError: If a route is the unreachable sentinel
        """
        for route in routes:
            if not route.found:
                raise ValidationError(
                    f"Cannot export unreachable route {route.start_id} -> {route.end_id}"
                )
        self.routes = list(routes)
        self.document_name = document_name

    def build_document(self) -> ET.Element:
        kml = ET.Element('kml', xmlns='http://www.opengis.net/kml/2.2')
        document = ET.SubElement(kml, 'Document')
        ET.SubElement(document, 'name').text = self.document_name

        self._add_styles(document)

        for i, route in enumerate(self.routes):
            self._add_route_placemark(document, route, i + 1)

        seen = set()
        for route in self.routes:
            nodes = {}
            for segment in route.segments:
                nodes[segment.from_node.id] = segment.from_node
                nodes[segment.to_node.id] = segment.to_node
            for node_id, coord in zip(route.node_sequence, route.coordinate_sequence):
                if node_id not in seen:
                    seen.add(node_id)
                    self._add_node_placemark(document, node_id, coord, nodes.get(node_id))

        return kml

    def export_kml(self, output_path: str) -> None:
        xml_string = ET.tostring(self.build_document(), encoding='utf-8')
        pretty_xml = minidom.parseString(xml_string).toprettyxml(indent='  ')

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(pretty_xml)

        logger.info(f"Exported {len(self.routes)} route(s) to {output_path}")

    def _add_styles(self, document: ET.Element) -> None:
        for mode, color in MODE_COLORS.items():
            style = ET.SubElement(document, 'Style', id=f'{mode.value}Style')
            line_style = ET.SubElement(style, 'LineStyle')
            ET.SubElement(line_style, 'color').text = color
            ET.SubElement(line_style, 'width').text = '4'

    def _add_route_placemark(self, document: ET.Element, route: PathResult, sequence: int) -> None:
        placemark = ET.SubElement(document, 'Placemark')
        ET.SubElement(placemark, 'name').text = (
            f"{sequence}. {route.start_id} -> {route.end_id} ({route.mode.value})"
        )
        ET.SubElement(placemark, 'description').text = self._route_description(route)
        ET.SubElement(placemark, 'styleUrl').text = f'#{route.mode.value}Style'

        extended_data = ET.SubElement(placemark, 'ExtendedData')
        fields = {
            'mode': route.mode.value,
            'distance_km': f"{route.total_distance_km:.2f}",
            'time_minutes': f"{route.total_effective_time_minutes:.1f}",
            'cost': f"{route.total_cost:.2f}",
            'path': ','.join(route.node_sequence),
        }
        for key, value in fields.items():
            data = ET.SubElement(extended_data, 'Data', name=key)
            ET.SubElement(data, 'value').text = value

        coordinates = list(route.coordinate_sequence)
        if len(coordinates) == 1:
            # A LineString needs two or more positions
            point = ET.SubElement(placemark, 'Point')
            ET.SubElement(point, 'coordinates').text = self._format_coordinates(coordinates)
            return

        linestring = ET.SubElement(placemark, 'LineString')
        ET.SubElement(linestring, 'tessellate').text = '1'
        ET.SubElement(linestring, 'coordinates').text = self._format_coordinates(coordinates)

    def _add_node_placemark(self, document: ET.Element, node_id: str, coord: Coordinate,
                            node: Optional[Node] = None) -> None:
        placemark = ET.SubElement(document, 'Placemark')
        if node is not None:
            ET.SubElement(placemark, 'name').text = node.label
            ET.SubElement(placemark, 'description').text = f"{node.kind.value} ({node.id})"
        else:
            ET.SubElement(placemark, 'name').text = node_id
        point = ET.SubElement(placemark, 'Point')
        ET.SubElement(point, 'coordinates').text = self._format_coordinates([coord])

    def _route_description(self, route: PathResult) -> str:
        lines = [
            f"Distance: {route.total_distance_km:.2f} km",
            f"Time: {route.summary()['time_display']}",
            f"Cost: {route.total_cost:.2f}",
            "",
        ]
        lines.extend(segment.instruction for segment in route.segments)
        return "\n".join(lines)

    def _format_coordinates(self, coordinates: List[Coordinate]) -> str:
        """KML wants lon,lat,alt tuples separated by spaces."""
        return " ".join(f"{lon},{lat},0" for lat, lon in coordinates)


def export_routes_to_kml(routes: Sequence[PathResult], output_path: str,
                         document_name: str = 'Fleet Routes') -> None:
    """
    Convenience function to export routes to KML.

    Args:
        routes: Found routes
        output_path: Path to output KML file
        document_name: KML Document name
    """
    KMLExporter(routes, document_name).export_kml(output_path)
