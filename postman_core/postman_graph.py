"""
Directed multigraph of required edges for the Chinese Postman solver.

Vertices live in an arena addressed by dense indices (0..V-1, insertion
order) with a side mapping from road-network node id to index, so the
distance and path matrices can be indexed directly. Arcs are stored in a
networkx MultiDiGraph keyed by those indices; parallel arcs are kept.

Each arc carries a unit traversal cost. Real edge lengths are only looked up
when the distance matrix is seeded (see distance_matrix.py).
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Sequence

import networkx as nx

from .exceptions import NoEulerianTrailError
from .logging_config import get_logger
from .types import EdgeID, Hop, NodeID, VertexIndex

logger = get_logger(__name__)

UNIT_COST = 1


@dataclass(frozen=True)
class PostmanVertex:
    """A road-network node and its dense index."""

    node_id: NodeID
    index: VertexIndex


@dataclass(frozen=True)
class PostmanArc:
    """A required directed edge.

    Attributes:
        edge_id: Real-world edge identifier
        cost: Unit traversal cost used for degree bookkeeping only
        duplicate: True for extra traversals added while balancing
    """

    edge_id: EdgeID
    cost: int = UNIT_COST
    duplicate: bool = False


class PostmanGraph:
    """
    In-memory directed multigraph built once per solve.

    Example:
        >>> g = PostmanGraph()
        >>> g.add_edge(10, 20, PostmanArc(edge_id=1))
        >>> g.add_edge(20, 10, PostmanArc(edge_id=2))
        >>> g.is_ideal_graph(10, 10)
        True
        >>> g.compute_ideal_euler_cycle(10)
        [1, 2]
    """

    def __init__(self):
        self._graph = nx.MultiDiGraph()
        self._vertices: List[PostmanVertex] = []
        self._node_to_index: Dict[NodeID, VertexIndex] = {}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_vertex(self, node_id: NodeID) -> VertexIndex:
        """Add a vertex if unseen and return its dense index."""
        index = self._node_to_index.get(node_id)
        if index is not None:
            return index

        index = len(self._vertices)
        self._node_to_index[node_id] = index
        self._vertices.append(PostmanVertex(node_id=node_id, index=index))
        self._graph.add_node(index)
        return index

    def add_edge(self, from_node: NodeID, to_node: NodeID, arc: PostmanArc) -> None:
        """Append an arc from ``from_node`` to ``to_node``. Parallel arcs are not merged."""
        from_index = self.add_vertex(from_node)
        to_index = self.add_vertex(to_node)
        self._graph.add_edge(from_index, to_index, arc=arc)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def num_vertices(self) -> int:
        return len(self._vertices)

    def num_arcs(self) -> int:
        return self._graph.number_of_edges()

    def get_vertex_index(self, node_id: NodeID) -> VertexIndex:
        """Dense index of a previously inserted node.

        Raises:
            KeyError: If the node was never added
        """
        return self._node_to_index[node_id]

    def get_vertex(self, index: VertexIndex) -> PostmanVertex:
        return self._vertices[index]

    def has_node(self, node_id: NodeID) -> bool:
        return node_id in self._node_to_index

    @property
    def vertices(self) -> Sequence[PostmanVertex]:
        return tuple(self._vertices)

    def arcs(self) -> Iterator[PostmanArc]:
        for _, _, arc in self._graph.edges(data="arc"):
            yield arc

    def in_degree(self, index: VertexIndex) -> int:
        return self._graph.in_degree(index)

    def out_degree(self, index: VertexIndex) -> int:
        return self._graph.out_degree(index)

    def get_arc(self, from_index: VertexIndex, to_index: VertexIndex) -> Optional[PostmanArc]:
        """Return one arc from ``from_index`` to ``to_index``, or None.

        Under multigraph semantics the first inserted arc represents the pair.
        """
        parallel = self._graph.get_edge_data(from_index, to_index)
        if not parallel:
            return None
        return next(iter(parallel.values()))["arc"]

    def get_unbalanced_vertices(self) -> Dict[VertexIndex, int]:
        """Imbalance map: vertex index -> out-degree minus in-degree, non-zero only."""
        unbalanced: Dict[VertexIndex, int] = {}
        for index in range(self.num_vertices()):
            imbalance = self.out_degree(index) - self.in_degree(index)
            if imbalance != 0:
                unbalanced[index] = imbalance
        return unbalanced

    def is_ideal_graph(self, origin: NodeID, destination: NodeID) -> bool:
        """Check whether an Eulerian walk exists without adding traversals.

        For a closed walk every vertex must be balanced. For an open walk the
        origin must have exactly one extra outgoing arc, the destination
        exactly one extra incoming arc, and every other vertex must balance.
        """
        unbalanced = self.get_unbalanced_vertices()
        if origin == destination:
            return not unbalanced

        origin_index = self.get_vertex_index(origin)
        destination_index = self.get_vertex_index(destination)
        return unbalanced == {origin_index: 1, destination_index: -1}

    # ------------------------------------------------------------------
    # Eulerian extraction
    # ------------------------------------------------------------------

    def compute_ideal_euler_cycle(
        self, origin: NodeID, extra_pairs: Optional[Sequence[Hop]] = None
    ) -> List[EdgeID]:
        """Extract an Eulerian circuit or trail starting at ``origin``.

        Each hop in ``extra_pairs`` is first added as a duplicate of the
        direct arc between its endpoints. The walk runs on a copy, so the
        graph itself is left unchanged.

        Args:
            origin: Node id the walk starts from
            extra_pairs: Vertex-index hops to traverse a second time

        Returns:
            Edge ids in traversal order

        Raises:
            NoEulerianTrailError: If a hop has no direct arc or arcs remain
                unreachable from the origin
        """
        start = self.get_vertex_index(origin)
        walk_graph = self._graph.copy()

        for from_index, to_index in extra_pairs or ():
            arc = self.get_arc(from_index, to_index)
            if arc is None:
                raise NoEulerianTrailError(
                    0, reason=f"no direct edge for balancing hop {from_index} -> {to_index}"
                )
            walk_graph.add_edge(from_index, to_index, arc=replace(arc, duplicate=True))

        total_arcs = walk_graph.number_of_edges()
        if total_arcs == 0:
            return []

        # Hierholzer: extend the walk until stuck, then back off onto the
        # finished trail so sub-circuits get spliced in at the right place.
        stack = [(start, None)]
        trail: List[EdgeID] = []
        while stack:
            current, arrived_by = stack[-1]
            next_edge = next(iter(walk_graph.out_edges(current, keys=True, data="arc")), None)
            if next_edge is None:
                stack.pop()
                if arrived_by is not None:
                    trail.append(arrived_by)
            else:
                _, to_index, key, arc = next_edge
                walk_graph.remove_edge(current, to_index, key=key)
                stack.append((to_index, arc.edge_id))

        trail.reverse()

        if len(trail) != total_arcs:
            raise NoEulerianTrailError(total_arcs - len(trail))

        logger.debug(
            f"Eulerian walk from vertex {start}: {len(trail)} traversals "
            f"({len(extra_pairs or ())} duplicated)"
        )
        return trail
