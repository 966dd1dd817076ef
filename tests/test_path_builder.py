"""
Unit tests for recosting the solved walk.
"""

import unittest

from postman_core import InMemoryGraphReader, RecostError, ResolvedEndpoint, RoadEdge, TravelMode
from postman_core.path_builder import (
    DEFAULT_SPEED_MPS,
    build_path,
    recost_forward,
    trip_percentages,
)


class TestRecostForward(unittest.TestCase):
    """Test the length-based recoster."""

    def setUp(self):
        self.reader = InMemoryGraphReader([
            RoadEdge(1, 10, 20, 200.0),
            RoadEdge(2, 20, 30, 100.0),
        ])

    def test_single_edge_is_trimmed_at_both_ends(self):
        path = list(recost_forward(self.reader, [1], 0.25, 0.75))
        self.assertEqual(len(path), 1)
        self.assertAlmostEqual(path[0].path_distance, 100.0)
        self.assertAlmostEqual(path[0].cost, 100.0 / DEFAULT_SPEED_MPS)
        self.assertEqual(path[0].mode, TravelMode.DRIVE)
        self.assertFalse(path[0].shortcut)

    def test_cumulative_values(self):
        path = list(recost_forward(self.reader, [1, 2], 0.5, 0.5, speed_mps=10.0))
        self.assertEqual([p.edge_id for p in path], [1, 2])
        self.assertAlmostEqual(path[0].path_distance, 100.0)
        self.assertAlmostEqual(path[1].path_distance, 150.0)
        self.assertAlmostEqual(path[1].cost, 15.0)

    def test_target_before_source(self):
        with self.assertRaises(RecostError):
            list(recost_forward(self.reader, [1], 0.75, 0.25))

    def test_bad_speed(self):
        with self.assertRaises(RecostError):
            list(recost_forward(self.reader, [1], 0.0, 1.0, speed_mps=0))


class TestBuildPath(unittest.TestCase):
    """Test degraded output when recosting fails."""

    def setUp(self):
        self.reader = InMemoryGraphReader([RoadEdge(1, 10, 20, 200.0)])

    def test_full_path(self):
        path = build_path(self.reader, [1], 0.0, 1.0)
        self.assertEqual(len(path), 1)

    def test_failure_is_logged_not_raised(self):
        with self.assertLogs("postman_core", level="ERROR") as logs:
            path = build_path(self.reader, [1], 0.75, 0.25)
        self.assertEqual(path, [])
        self.assertIn("failed to recost", logs.output[0])

    def test_any_recoster_error_is_logged(self):
        def broken_recoster(reader, edge_ids, source_pct, target_pct):
            raise KeyError("restriction table missing")
            yield

        with self.assertLogs("postman_core", level="ERROR") as logs:
            path = build_path(self.reader, [1], 0.0, 1.0, recoster=broken_recoster)
        self.assertEqual(path, [])
        self.assertIn("restriction table missing", logs.output[0])


class TestTripPercentages(unittest.TestCase):
    """Only the candidate edge of a location is trimmed."""

    def setUp(self):
        # 0.25 along edge 1 snaps to its start node, 0.75 along edge 2 to its end node
        self.origin = ResolvedEndpoint(10, 1, 0, 0.25, on_start_node=True)
        self.destination = ResolvedEndpoint(30, 2, 0, 0.75, on_start_node=False)

    def test_both_candidate_edges_walked(self):
        self.assertEqual(trip_percentages([1, 2], self.origin, self.destination), (0.25, 0.75))

    def test_walk_starts_and_ends_elsewhere(self):
        self.assertEqual(trip_percentages([3, 1, 2, 4], self.origin, self.destination), (0.0, 1.0))

    def test_end_node_snap_does_not_trim_first_edge(self):
        origin = ResolvedEndpoint(20, 1, 0, 0.9, on_start_node=False)
        self.assertEqual(trip_percentages([1, 2], origin, self.destination), (0.0, 0.75))

    def test_start_node_snap_does_not_trim_last_edge(self):
        destination = ResolvedEndpoint(20, 2, 0, 0.1, on_start_node=True)
        self.assertEqual(trip_percentages([1, 2], self.origin, destination), (0.25, 1.0))

    def test_empty_walk(self):
        self.assertEqual(trip_percentages([], self.origin, self.destination), (0.0, 1.0))


if __name__ == '__main__':
    unittest.main()
