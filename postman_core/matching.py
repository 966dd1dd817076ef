"""
Minimum-cost assignment between excess and deficit vertices.

Uses scipy's linear_sum_assignment (Hungarian-family solver). The cost matrix
is square by construction (see imbalance.py), so no dummy rows or columns are
ever added.
"""

from typing import List, NamedTuple, Sequence, Tuple

import numpy as np
from scipy.optimize import linear_sum_assignment

from .distance_matrix import NOT_CONNECTED
from .exceptions import GraphDisconnectedError
from .logging_config import LogTimer, get_logger
from .types import VertexIndex

logger = get_logger(__name__)


class Assignment(NamedTuple):
    """Matched positions and their total cost.

    Attributes:
        pairs: (excess position, deficit position), ordered by excess position
        total_cost: Sum of the matched shortest-path distances
    """

    pairs: List[Tuple[int, int]]
    total_cost: float


def build_cost_matrix(
    excess: Sequence[VertexIndex], deficit: Sequence[VertexIndex], distances: np.ndarray
) -> np.ndarray:
    """Rows are excess vertices, columns deficit vertices, cells the excess -> deficit distance."""
    return distances[np.ix_(list(excess), list(deficit))]


def solve_assignment(
    excess: Sequence[VertexIndex], deficit: Sequence[VertexIndex], distances: np.ndarray
) -> Assignment:
    """Find the minimum-cost one-to-one matching of excess to deficit vertices.

    Args:
        excess: Vertices where connecting walks start
        deficit: Vertices where connecting walks end
        distances: Relaxed all-pairs distance matrix

    Returns:
        Assignment covering every excess position

    Raises:
        ValueError: If the two lists differ in length
        GraphDisconnectedError: If a required cell is NOT_CONNECTED
    """
    if len(excess) != len(deficit):
        raise ValueError(
            f"Assignment needs equal-size sides, got {len(excess)} excess and {len(deficit)} deficit"
        )
    if not excess:
        return Assignment(pairs=[], total_cost=0.0)

    cost_matrix = build_cost_matrix(excess, deficit, distances)
    unreachable = int(np.count_nonzero(cost_matrix == NOT_CONNECTED))
    if unreachable:
        raise GraphDisconnectedError("assignment cost matrix", unreachable_pairs=unreachable)

    with LogTimer(logger, f"Assignment ({len(excess)}x{len(deficit)})"):
        row_ind, col_ind = linear_sum_assignment(cost_matrix)

    pairs = [(int(r), int(c)) for r, c in zip(row_ind, col_ind)]
    total_cost = float(cost_matrix[row_ind, col_ind].sum())

    logger.info(f"Matched {len(pairs)} imbalanced vertex pairs, cost = {total_cost:.1f}m")
    return Assignment(pairs=pairs, total_cost=total_cost)
