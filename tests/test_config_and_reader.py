"""
Unit tests for solver configuration and the in-memory graph reader.
"""

import json
import tempfile
import unittest
from pathlib import Path

from postman_core import (
    CandidateEdge,
    ChinesePostmanRequest,
    ConfigurationError,
    InMemoryGraphReader,
    RoadEdge,
    SolverConfig,
    ValidationError,
    load_config,
)


class TestSolverConfig(unittest.TestCase):
    """Test SolverConfig construction and validation."""

    def test_defaults(self):
        config = SolverConfig()
        self.assertEqual(config.percent_along_threshold, 0.5)
        self.assertEqual(config.large_graph_warning, 1000)
        self.assertTrue(config.validate_solution)
        self.assertIs(config.validate(), config)

    def test_from_dict(self):
        config = SolverConfig.from_dict({"percent_along_threshold": 0.25})
        self.assertEqual(config.percent_along_threshold, 0.25)
        self.assertEqual(config.to_dict()["large_graph_warning"], 1000)

    def test_unknown_key(self):
        with self.assertRaises(ConfigurationError):
            SolverConfig.from_dict({"percent_along": 0.25})

    def test_out_of_range(self):
        with self.assertRaises(ConfigurationError):
            SolverConfig(percent_along_threshold=1.5).validate()
        with self.assertRaises(ConfigurationError):
            SolverConfig(large_graph_warning=0).validate()


class TestLoadConfig(unittest.TestCase):
    """Test loading configuration files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load(self):
        path = self.dir / "config.json"
        path.write_text(json.dumps({"validate_solution": False}), encoding="utf-8")
        config = load_config(path)
        self.assertFalse(config.validate_solution)

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            load_config(self.dir / "missing.json")

    def test_bad_json(self):
        path = self.dir / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_not_an_object(self):
        path = self.dir / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(ConfigurationError):
            load_config(path)


class TestInMemoryGraphReader(unittest.TestCase):
    """Test edge lookups and input checks."""

    def setUp(self):
        self.reader = InMemoryGraphReader([
            RoadEdge(1, 10, 20, 125.0, "High Street"),
            RoadEdge(2, 20, 10, 125.0, "High Street"),
        ])

    def test_lookups(self):
        self.assertEqual(self.reader.edge_start_node(1), 10)
        self.assertEqual(self.reader.edge_end_node(1), 20)
        self.assertEqual(self.reader.edge_length(2), 125.0)
        self.assertEqual(self.reader.edge(2).name, "High Street")
        self.assertIn(1, self.reader)
        self.assertNotIn(3, self.reader)
        self.assertEqual(len(self.reader), 2)

    def test_unknown_edge(self):
        with self.assertRaises(ValidationError):
            self.reader.edge_length(3)

    def test_duplicate_id(self):
        with self.assertRaises(ValidationError):
            InMemoryGraphReader([RoadEdge(1, 10, 20, 1.0), RoadEdge(1, 20, 10, 1.0)])

    def test_negative_length(self):
        with self.assertRaises(ValidationError):
            InMemoryGraphReader([RoadEdge(1, 10, 20, -1.0)])

    def test_from_dict(self):
        reader = InMemoryGraphReader.from_dict(
            {"edges": [{"id": "7", "start": 1, "end": 2, "length": "30.5"}]}
        )
        self.assertEqual(reader.edge_length(7), 30.5)
        self.assertEqual(reader.edge(7).name, "")

    def test_from_dict_malformed(self):
        with self.assertRaises(ValidationError):
            InMemoryGraphReader.from_dict({"edges": [{"id": 7, "start": 1}]})
        with self.assertRaises(ValidationError):
            InMemoryGraphReader.from_dict({})


class TestRequestTypes(unittest.TestCase):
    """Test request parsing."""

    def test_percent_along_range(self):
        with self.assertRaises(ValueError):
            CandidateEdge(1, 1.2)

    def test_request_from_dict(self):
        request = ChinesePostmanRequest.from_dict({
            "required_edges": [1, 2],
            "origin": {"candidates": [{"edge_id": 2, "percent_along": 0.1},
                                      {"edge_id": 1, "percent_along": 0.9}]},
            "destination": {"name": "depot", "candidates": []},
        })
        self.assertEqual(request.required_edges, [1, 2])
        self.assertEqual(request.avoid_edges, [])
        self.assertEqual(request.origin.candidate_rank(1), 1)
        self.assertIsNone(request.origin.candidate_rank(5))
        self.assertEqual(request.destination.name, "depot")


if __name__ == '__main__':
    unittest.main()
