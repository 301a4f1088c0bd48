"""
Unit tests for core types and geographic helpers.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import unittest  # noqa: E402

from roadnet_core import (  # noqa: E402
    Edge,
    Node,
    NodeKind,
    OptimizationMode,
    PathResult,
    RoadClass,
    UnreachableReason,
    ValidationError,
    calculate_bearing,
    compass_direction,
    haversine,
)


class TestEdge(unittest.TestCase):

    def test_derived_weights(self):
        edge = Edge("a", "b", 42, 45, 50, toll_cost=10, traffic_factor=1.2)
        self.assertAlmostEqual(edge.effective_time_minutes, 54.0)
        self.assertEqual(edge.total_cost, 60)

    def test_reversed(self):
        edge = Edge("a", "b", 1, 2, 3, RoadClass.EXPRESSWAY, 4, 1.5)
        back = edge.reversed()
        self.assertEqual((back.from_id, back.to_id), ("b", "a"))
        self.assertEqual(back.reversed(), edge)

    def test_negative_attributes_rejected(self):
        with self.assertRaises(ValidationError):
            Edge("a", "b", -1, 1, 1)
        with self.assertRaises(ValidationError):
            Edge("a", "b", 1, 1, 1, toll_cost=-5)

    def test_traffic_factor_must_be_positive(self):
        with self.assertRaises(ValidationError):
            Edge("a", "b", 1, 1, 1, traffic_factor=0)


class TestEnums(unittest.TestCase):

    def test_mode_parse(self):
        self.assertIs(OptimizationMode.parse("TIME"), OptimizationMode.TIME)
        self.assertIs(OptimizationMode.parse(OptimizationMode.COST), OptimizationMode.COST)
        with self.assertRaises(ValidationError):
            OptimizationMode.parse("speed")

    def test_road_class_title(self):
        self.assertEqual(RoadClass.NATIONAL_HIGHWAY.title, "National Highway")
        self.assertEqual(RoadClass.EXPRESSWAY.title, "Expressway")


class TestNodeAndResult(unittest.TestCase):

    def test_node_to_dict(self):
        node = Node("pune", (18.5204, 73.8567), "Pune")
        self.assertEqual(node.to_dict(), {
            "id": "pune", "lat": 18.5204, "lon": 73.8567, "label": "Pune", "kind": "city",
        })
        self.assertEqual(Node("x", (0.0, 0.0), "X", NodeKind.REST_AREA).kind.value, "rest_area")

    def test_unreachable_sentinel(self):
        result = PathResult.unreachable("a", "b", OptimizationMode.DISTANCE)
        self.assertFalse(result.found)
        self.assertEqual(result.node_sequence, ())
        self.assertEqual(result.reason, UnreachableReason.NO_PATH)
        self.assertEqual(result.summary()["segments"], 0)


class TestGeo(unittest.TestCase):

    def test_haversine_mumbai_pune(self):
        self.assertEqual(round(haversine((19.0760, 72.8777), (18.5204, 73.8567))), 120)

    def test_haversine_zero_and_symmetric(self):
        a, b = (12.9716, 77.5946), (13.0827, 80.2707)
        self.assertEqual(haversine(a, a), 0.0)
        self.assertAlmostEqual(haversine(a, b), haversine(b, a))

    def test_antipodal(self):
        self.assertAlmostEqual(haversine((0.0, 0.0), (0.0, 180.0)), 3.141592653589793 * 6371.0)

    def test_bearing_and_compass(self):
        self.assertAlmostEqual(calculate_bearing((0.0, 0.0), (1.0, 0.0)), 0.0)
        self.assertAlmostEqual(calculate_bearing((0.0, 0.0), (0.0, 1.0)), 90.0)
        self.assertEqual(compass_direction(0.0), "north")
        self.assertEqual(compass_direction(90.0), "east")
        self.assertEqual(compass_direction(225.0), "south-west")
        self.assertEqual(compass_direction(350.0), "north")


if __name__ == '__main__':
    unittest.main()
