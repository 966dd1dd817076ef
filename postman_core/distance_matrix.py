"""
All-pairs shortest paths over the postman graph.

Floyd-Warshall on a dense numpy matrix seeded with real edge lengths, with a
parallel path matrix so that any matched vertex pair can be expanded back
into the hops it stands for.

Path matrix cells hold the vertex prefix of the shortest path: cell (i, j)
starts with i and lists every vertex visited before j. The final hop into j
is added by expand_path.
"""

from typing import Callable, List, NamedTuple, Sequence

import numpy as np

from .exceptions import NoPathError
from .logging_config import LogTimer, get_logger
from .postman_graph import PostmanGraph
from .types import Distance, EdgeID, Hop, VertexIndex

logger = get_logger(__name__)

NOT_CONNECTED = float("inf")

PathMatrix = List[List[List[VertexIndex]]]
EdgeLengthFunc = Callable[[EdgeID], Distance]


class AllPairsResult(NamedTuple):
    """Distance matrix and its parallel path matrix."""

    distances: np.ndarray
    paths: PathMatrix


def build_distance_matrix(graph: PostmanGraph, edge_length: EdgeLengthFunc) -> np.ndarray:
    """Seed a V x V matrix with direct edge lengths.

    Diagonal cells are 0, cells without a direct arc are NOT_CONNECTED.

    Args:
        graph: Postman graph
        edge_length: Returns the length of an edge id (the tile-store lookup)

    Returns:
        Float matrix of direct distances
    """
    n = graph.num_vertices()
    distances = np.full((n, n), NOT_CONNECTED, dtype=np.float64)
    np.fill_diagonal(distances, 0.0)

    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            arc = graph.get_arc(i, j)
            if arc is not None:
                distances[i, j] = edge_length(arc.edge_id)

    return distances


def compute_floyd_warshall(distances: np.ndarray) -> PathMatrix:
    """Relax ``distances`` in place and return the path matrix.

    Each intermediate vertex k is processed as one vectorised step. Row k and
    column k cannot change while k is the intermediate, so updating every
    (i, j) from the same snapshot matches the sequential triple loop. Paths
    are only replaced on a strict improvement.

    Raises:
        ValueError: If the matrix is not square
    """
    if distances.ndim != 2 or distances.shape[0] != distances.shape[1]:
        raise ValueError(f"Distance matrix must be square, got shape {distances.shape}")

    n = distances.shape[0]
    paths: PathMatrix = [
        [[i] if distances[i, j] != NOT_CONNECTED else [] for j in range(n)] for i in range(n)
    ]

    for k in range(n):
        alternative = distances[:, k, np.newaxis] + distances[np.newaxis, k, :]
        improved = alternative < distances
        improved[k, :] = False
        improved[:, k] = False
        np.fill_diagonal(improved, False)

        for i, j in zip(*np.nonzero(improved)):
            distances[i, j] = alternative[i, j]
            paths[i][j] = paths[i][k] + paths[k][j]

    return paths


def compute_all_pairs(graph: PostmanGraph, edge_length: EdgeLengthFunc) -> AllPairsResult:
    """Build and relax the distance matrix for every vertex pair.

    The cubic step is not interruptible once started.
    """
    n = graph.num_vertices()
    logger.info(f"Computing all-pairs shortest paths for {n} vertices")

    distances = build_distance_matrix(graph, edge_length)
    with LogTimer(logger, "Floyd-Warshall"):
        paths = compute_floyd_warshall(distances)

    unreachable = count_unreachable(distances)
    if unreachable:
        logger.debug(f"{unreachable} of {n * n} vertex pairs are unreachable")

    return AllPairsResult(distances=distances, paths=paths)


def count_unreachable(distances: np.ndarray) -> int:
    return int(np.count_nonzero(distances == NOT_CONNECTED))


def is_strongly_connected(distances: np.ndarray) -> bool:
    """True if every vertex can reach every other vertex."""
    return count_unreachable(distances) == 0


def expand_path(paths: PathMatrix, start: VertexIndex, end: VertexIndex) -> List[Hop]:
    """Turn the stored path between two vertices into consecutive hops.

    Example:
        >>> expand_path(paths, 0, 3)  # paths[0][3] == [0, 1, 2]
        [(0, 1), (1, 2), (2, 3)]

    Returns:
        Hops ending in ``end``; empty when ``start == end``

    Raises:
        NoPathError: If the two vertices are not connected
    """
    if start == end:
        return []

    path = paths[start][end]
    if not path:
        raise NoPathError(start, end)

    hops = list(zip(path, path[1:]))
    hops.append((path[-1], end))
    return hops


def path_length(distances: np.ndarray, hops: Sequence[Hop]) -> Distance:
    """Sum of the matrix distances along a hop sequence."""
    return float(sum(distances[u, v] for u, v in hops))
