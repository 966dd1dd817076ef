"""
Tests for the run_chinese_postman command-line script.
"""

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from run_chinese_postman import main  # noqa: E402

NETWORK = {
    "edges": [
        {"id": 101, "start": 1, "end": 2, "length": 100.0, "name": "AB"},
        {"id": 105, "start": 2, "end": 4, "length": 100.0, "name": "BD"},
        {"id": 106, "start": 4, "end": 3, "length": 100.0, "name": "DC"},
        {"id": 103, "start": 3, "end": 4, "length": 100.0, "name": "CD"},
        {"id": 104, "start": 4, "end": 1, "length": 100.0, "name": "DA"},
        {"id": 201, "start": 8, "end": 9, "length": 10.0},
        {"id": 202, "start": 9, "end": 8, "length": 10.0},
    ]
}


def make_request(required, origin_edge, destination_edge):
    return {
        "required_edges": required,
        "origin": {"candidates": [{"edge_id": origin_edge, "percent_along": 0.0}]},
        "destination": {"candidates": [{"edge_id": destination_edge, "percent_along": 1.0}]},
    }


class TestRunChinesePostman(unittest.TestCase):
    """Run main() against temporary input files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.network = self.dir / "network.json"
        self.network.write_text(json.dumps(NETWORK), encoding="utf-8")
        self.output = self.dir / "solution.json"

    def tearDown(self):
        self.tmp.cleanup()

    def write_request(self, data):
        path = self.dir / "request.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_writes_solution(self):
        request = self.write_request(make_request([101, 105, 106, 103, 104], 101, 106))

        code = main([str(self.network), request, "--output", str(self.output)])

        self.assertEqual(code, 0)
        result = json.loads(self.output.read_text(encoding="utf-8"))
        self.assertEqual(result["origin_node"], 1)
        self.assertEqual(result["destination_node"], 3)
        self.assertFalse(result["is_ideal"])
        self.assertEqual(result["matching_cost"], 300.0)
        self.assertEqual(len(result["edge_ids"]), 8)
        self.assertEqual(len(result["path"]), 8)
        self.assertEqual(result["path"][0]["mode"], "drive")

    def test_disconnected_request_fails(self):
        request = self.write_request(make_request([101, 105, 106, 103, 104, 201, 202], 101, 106))

        code = main([str(self.network), request, "--output", str(self.output)])

        self.assertEqual(code, 1)
        self.assertFalse(self.output.exists())

    def test_bad_threshold_override(self):
        request = self.write_request(make_request([101], 101, 101))
        code = main([str(self.network), request, "--percent-along-threshold", "2"])
        self.assertEqual(code, 1)

    def test_missing_request_file(self):
        code = main([str(self.network), str(self.dir / "missing.json")])
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
