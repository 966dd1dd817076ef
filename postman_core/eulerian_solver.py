"""
Eulerian construction for the Chinese Postman solver.

Matched vertex pairs are expanded into the hops of their shortest paths.
Those hops are traversed a second time, which balances the graph, and
Hierholzer's algorithm then walks every arc once starting at the origin.

References:
- Edmonds & Johnson (1973): Matching, Euler tours and the Chinese postman
- Hierholzer's algorithm (1873): Finding Eulerian circuits
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .distance_matrix import PathMatrix, expand_path
from .graph_reader import GraphReader
from .logging_config import get_logger
from .matching import Assignment
from .postman_graph import PostmanGraph
from .types import EdgeID, Hop, NodeID, VertexIndex

logger = get_logger(__name__)


@dataclass
class RouteStats:
    """Summary of an emitted walk."""

    num_traversals: int
    num_required: int
    num_duplicates: int
    total_length: float
    deadhead_length: float

    @property
    def deadhead_percentage(self) -> float:
        return (self.deadhead_length / self.total_length * 100) if self.total_length > 0 else 0.0


def build_extra_pairs(
    assignment: Assignment,
    excess: Sequence[VertexIndex],
    deficit: Sequence[VertexIndex],
    paths: PathMatrix,
) -> List[Hop]:
    """Concatenate the expanded shortest paths of every matched pair.

    Args:
        assignment: Matched (excess position, deficit position) pairs
        excess: Excess vertex list the positions refer to
        deficit: Deficit vertex list the positions refer to
        paths: Path matrix from Floyd-Warshall

    Returns:
        Hops to duplicate, in excess order
    """
    extra_pairs: List[Hop] = []
    for excess_pos, deficit_pos in assignment.pairs:
        extra_pairs.extend(expand_path(paths, excess[excess_pos], deficit[deficit_pos]))
    return extra_pairs


def compute_augmented_cycle(
    graph: PostmanGraph, origin: NodeID, extra_pairs: Sequence[Hop]
) -> List[EdgeID]:
    """Walk every required arc plus the duplicated hops, starting at ``origin``."""
    logger.info(f"Augmenting graph with {len(extra_pairs)} duplicated traversals")
    return graph.compute_ideal_euler_cycle(origin, extra_pairs)


def summarize_route(
    edge_ids: Iterable[EdgeID], required: Iterable[EdgeID], reader: GraphReader
) -> RouteStats:
    """Count traversals and split lengths into required and deadhead parts.

    The first traversal of each required edge counts as required, any repeat
    is deadhead.
    """
    remaining = Counter(required)
    num_traversals = 0
    num_required = 0
    total_length = 0.0
    deadhead_length = 0.0

    for edge_id in edge_ids:
        length = reader.edge_length(edge_id)
        num_traversals += 1
        total_length += length
        if remaining[edge_id] > 0:
            remaining[edge_id] -= 1
            num_required += 1
        else:
            deadhead_length += length

    return RouteStats(
        num_traversals=num_traversals,
        num_required=num_required,
        num_duplicates=num_traversals - num_required,
        total_length=total_length,
        deadhead_length=deadhead_length,
    )
