"""
Unit tests for KML export.
"""

import sys
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import unittest  # noqa: E402

from roadnet_core import (  # noqa: E402
    KMLExporter,
    ValidationError,
    build_default_indian_network,
    export_routes_to_kml,
    find_alternatives,
    find_path,
)

NS = {'kml': 'http://www.opengis.net/kml/2.2'}


class TestKMLExport(unittest.TestCase):

    def setUp(self):
        self.graph = build_default_indian_network()
        self.route = find_path(self.graph, "mumbai", "pune", "cost")

    def test_document_structure(self):
        kml = KMLExporter([self.route], "Test Routes").build_document()
        document = kml.find('Document')

        self.assertEqual(document.find('name').text, "Test Routes")
        self.assertEqual(len(document.findall('Style')), 3)
        # One route line plus five visited nodes
        self.assertEqual(len(document.findall('Placemark')), 6)

    def test_route_placemark(self):
        kml = KMLExporter([self.route]).build_document()
        placemark = kml.find('Document').findall('Placemark')[0]

        self.assertEqual(placemark.find('styleUrl').text, '#costStyle')
        coords = placemark.find('LineString/coordinates').text.split()
        self.assertEqual(len(coords), 5)
        self.assertEqual(coords[0], "72.8777,19.076,0")

        data = {d.get('name'): d.find('value').text for d in placemark.iter('Data')}
        self.assertEqual(data['cost'], "300.00")
        self.assertEqual(data['path'].split(',')[-1], "pune")

    def test_shared_nodes_written_once(self):
        routes = [self.route, find_path(self.graph, "mumbai", "surat")]
        kml = KMLExporter(routes).build_document()
        # Two lines plus mumbai, panvel, khalapur, lonavala, pune, surat
        self.assertEqual(len(kml.find('Document').findall('Placemark')), 8)

    def test_single_node_route_is_a_point(self):
        """A start == end route has one position, so it is drawn as a point."""
        route = find_path(self.graph, "delhi", "delhi")
        kml = KMLExporter([route]).build_document()
        placemarks = kml.find('Document').findall('Placemark')

        self.assertEqual(len(placemarks), 2)
        self.assertIsNone(placemarks[0].find('LineString'))
        self.assertEqual(placemarks[0].find('Point/coordinates').text, "77.209,28.6139,0")
        self.assertEqual(placemarks[1].find('name').text, "delhi")
        self.assertEqual(placemarks[1].find('Point/coordinates').text, "77.209,28.6139,0")

    def test_unreachable_rejected(self):
        with self.assertRaises(ValidationError):
            KMLExporter([find_path(self.graph, "mumbai", "kolkata")])

    def test_export_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "routes.kml"
            export_routes_to_kml(find_alternatives(self.graph, "mumbai", "pune"), str(path))

            root = ET.parse(path).getroot()
            placemarks = root.findall('kml:Document/kml:Placemark', NS)
            self.assertEqual(len(placemarks), 6)


if __name__ == '__main__':
    unittest.main()
