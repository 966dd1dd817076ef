"""
Unit tests for the minimum-cost assignment step.
"""

import unittest

import numpy as np

from postman_core.distance_matrix import NOT_CONNECTED
from postman_core.exceptions import GraphDisconnectedError
from postman_core.matching import build_cost_matrix, solve_assignment


def matrix(cells, size=4):
    dm = np.full((size, size), NOT_CONNECTED)
    np.fill_diagonal(dm, 0.0)
    for (i, j), value in cells.items():
        dm[i, j] = value
    return dm


class TestSolveAssignment(unittest.TestCase):
    """Test matching excess to deficit vertices."""

    def test_cost_matrix_orientation(self):
        dm = matrix({(0, 2): 1.0, (0, 3): 2.0, (1, 2): 3.0, (1, 3): 4.0})
        cost = build_cost_matrix([0, 1], [2, 3], dm)
        np.testing.assert_array_equal(cost, [[1.0, 2.0], [3.0, 4.0]])

    def test_diagonal_matching(self):
        dm = matrix({(0, 2): 1.0, (0, 3): 10.0, (1, 2): 10.0, (1, 3): 1.0})
        result = solve_assignment([0, 1], [2, 3], dm)
        self.assertEqual(result.pairs, [(0, 0), (1, 1)])
        self.assertEqual(result.total_cost, 2.0)

    def test_beats_greedy_choice(self):
        # Greedy would take 0->2 (1.0) and be left with 1->3 (100.0)
        dm = matrix({(0, 2): 1.0, (0, 3): 2.0, (1, 2): 2.0, (1, 3): 100.0})
        result = solve_assignment([0, 1], [2, 3], dm)
        self.assertEqual(result.pairs, [(0, 1), (1, 0)])
        self.assertEqual(result.total_cost, 4.0)

    def test_repeated_vertices(self):
        dm = matrix({(0, 1): 5.0, (0, 2): 7.0})
        result = solve_assignment([0, 0], [1, 2], dm)
        self.assertEqual(len(result.pairs), 2)
        self.assertEqual(result.total_cost, 12.0)

    def test_empty_sides(self):
        result = solve_assignment([], [], matrix({}))
        self.assertEqual(result.pairs, [])
        self.assertEqual(result.total_cost, 0.0)

    def test_unequal_sides_rejected(self):
        with self.assertRaises(ValueError):
            solve_assignment([0, 1], [2], matrix({}))

    def test_unreachable_cell_raises(self):
        dm = matrix({(0, 2): 1.0, (1, 3): 1.0, (0, 3): 1.0})
        with self.assertRaises(GraphDisconnectedError) as ctx:
            solve_assignment([0, 1], [2, 3], dm)
        self.assertEqual(ctx.exception.error_code, 450)


if __name__ == '__main__':
    unittest.main()
