"""
Unit tests for the command-line interface.
"""

import io
import json
import logging
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import unittest  # noqa: E402

from roadnet_core.cli import main  # noqa: E402


class TestCLI(unittest.TestCase):

    def tearDown(self):
        # main() installs a handler bound to the captured stdout
        logger = logging.getLogger("roadnet_core")
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def _run(self, *argv):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            code = main(list(argv))
        return code, buffer.getvalue()

    def test_nodes(self):
        code, out = self._run("nodes")
        self.assertEqual(code, 0)
        self.assertIn("mumbai", out)
        self.assertIn("Nashik Fuel Station", out)

    def test_route(self):
        code, out = self._run("route", "mumbai", "pune", "--mode", "time")
        self.assertEqual(code, 0)
        self.assertIn("time-optimal: mumbai -> panvel_junction -> khalapur_toll -> lonavala_fuel -> pune", out)
        self.assertIn("130 km, 2h 16m, cost 300", out)

    def test_no_route(self):
        code, out = self._run("route", "mumbai", "chennai")
        self.assertEqual(code, 1)
        self.assertIn("no_path", out)

    def test_unknown_node(self):
        code, out = self._run("route", "mumbai", "atlantis")
        self.assertEqual(code, 1)
        self.assertIn("unknown_node", out)

    def test_alternatives(self):
        code, out = self._run("alternatives", "mumbai", "pune")
        self.assertEqual(code, 0)
        self.assertIn("[1] distance-optimal", out)
        self.assertNotIn("[2]", out)

    def test_insert_and_route(self):
        code, out = self._run("insert", "18.55", "73.85", "--label", "Depot", "--route-to", "pune")
        self.assertEqual(code, 0)
        self.assertIn("dyn_18.55000_73.85000: connected to pune, khed_toll, lonavala_fuel", out)
        self.assertIn("dyn_18.55000_73.85000 -> pune", out)

    def test_insert_snaps_to_existing(self):
        code, out = self._run("insert", "18.5204", "73.8567")
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("pune:"))

    def test_matrix(self):
        code, out = self._run("matrix", "mumbai", "pune", "bangalore")
        self.assertEqual(code, 0)
        self.assertIn("130", out)
        self.assertIn("-", out)

    def test_matrix_unknown_node(self):
        code, _ = self._run("matrix", "mumbai", "atlantis")
        self.assertEqual(code, 2)

    def test_invalid_mode(self):
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            main(["route", "mumbai", "pune", "--mode", "speed"])

    def test_output_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            code, _ = self._run("--output-dir", tmpdir, "route", "mumbai", "pune", "--mode", "cost")
            self.assertEqual(code, 0)

            out = Path(tmpdir)
            for suffix in ("csv", "json", "txt"):
                self.assertTrue((out / f"mumbai_pune_cost.{suffix}").exists())
            self.assertTrue((out / "routes.kml").exists())
            with open(out / "mumbai_pune_cost.json", encoding="utf-8") as f:
                self.assertEqual(json.load(f)["summary"]["cost"], 300)

    def test_config_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "router.json"
            path.write_text(json.dumps({"dynamic_max_neighbors": 1}), encoding="utf-8")
            code, out = self._run("--config", str(path), "insert", "18.55", "73.85")
            self.assertEqual(code, 0)
            self.assertIn("connected to pune\n", out)

    def test_bad_config_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            code, _ = self._run("--config", str(Path(tmpdir) / "absent.json"), "nodes")
            self.assertEqual(code, 2)


if __name__ == '__main__':
    unittest.main()
