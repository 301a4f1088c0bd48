"""
Unit tests for route matrix computation.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import unittest  # noqa: E402

import numpy as np  # noqa: E402

from roadnet_core import (  # noqa: E402
    NodeNotFoundError,
    OptimizationMode,
    ValidationError,
    build_default_indian_network,
    compute_route_matrix,
)

IDS = ["mumbai", "pune", "surat", "bangalore"]


class TestRouteMatrix(unittest.TestCase):
    """Test all-pairs totals over a subset of the seed network."""

    @classmethod
    def setUpClass(cls):
        cls.graph = build_default_indian_network()
        cls.matrix = compute_route_matrix(cls.graph, IDS)

    def test_shape(self):
        self.assertEqual(self.matrix.distance_km.shape, (4, 4))
        self.assertEqual(self.matrix.node_ids, IDS)
        self.assertEqual(self.matrix.mode, OptimizationMode.DISTANCE)

    def test_distances(self):
        self.assertEqual(self.matrix.get_distance("mumbai", "pune"), 130)
        self.assertEqual(self.matrix.get_distance("surat", "pune"), 414)
        self.assertEqual(self.matrix.get_distance("pune", "mumbai"), 130)

    def test_diagonal_is_zero(self):
        np.testing.assert_array_equal(np.diag(self.matrix.distance_km), np.zeros(4))
        self.assertEqual(self.matrix.get_path_ids("bangalore", "bangalore"), ["bangalore"])

    def test_time_and_cost_of_distance_routes(self):
        self.assertAlmostEqual(self.matrix.get_time("mumbai", "pune"), 136.5)
        self.assertEqual(self.matrix.get_cost("mumbai", "pune"), 300)

    def test_unreachable_pairs(self):
        self.assertTrue(np.isinf(self.matrix.get_distance("mumbai", "bangalore")))
        self.assertTrue(np.isinf(self.matrix.get_cost("bangalore", "surat")))
        self.assertFalse(self.matrix.has_path("mumbai", "bangalore"))
        self.assertEqual(self.matrix.get_path_ids("mumbai", "bangalore"), [])

    def test_unknown_lookup(self):
        self.assertTrue(np.isinf(self.matrix.get_distance("mumbai", "atlantis")))

    def test_paths(self):
        self.assertEqual(
            self.matrix.get_path_ids("mumbai", "pune"),
            ["mumbai", "panvel_junction", "khalapur_toll", "lonavala_fuel", "pune"],
        )

    def test_nearest_destination(self):
        self.assertEqual(self.matrix.nearest_destination("mumbai"), ("pune", 130.0))
        self.assertIsNone(self.matrix.nearest_destination("bangalore"))
        self.assertIsNone(self.matrix.nearest_destination("atlantis"))

    def test_stats(self):
        stats = self.matrix.get_stats()
        self.assertEqual(stats.num_nodes, 4)
        self.assertEqual(stats.num_paths, 10)
        self.assertEqual(stats.mode, "distance")
        self.assertEqual(stats.memory_bytes, 3 * 16 * 8)


class TestRouteMatrixModes(unittest.TestCase):

    def setUp(self):
        self.graph = build_default_indian_network()

    def test_cost_mode(self):
        matrix = compute_route_matrix(self.graph, ["mumbai", "pune"], "cost")
        self.assertEqual(matrix.mode, OptimizationMode.COST)
        self.assertEqual(matrix.get_cost("mumbai", "pune"), 300)
        self.assertEqual(matrix.nearest_destination("mumbai"), ("pune", 300.0))

    def test_duplicate_ids(self):
        with self.assertRaises(ValidationError):
            compute_route_matrix(self.graph, ["mumbai", "mumbai"])

    def test_unknown_id(self):
        with self.assertRaises(NodeNotFoundError):
            compute_route_matrix(self.graph, ["mumbai", "atlantis"])

    def test_empty(self):
        matrix = compute_route_matrix(self.graph, [])
        self.assertEqual(matrix.get_stats().num_paths, 0)


if __name__ == '__main__':
    unittest.main()
