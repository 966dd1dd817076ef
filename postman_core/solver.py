"""
Chinese Postman solver orchestration.

Pipeline for one request:
1. Build the postman graph from the required edges (minus avoided ones) and
   resolve the origin and destination vertices
2. If the graph already admits the requested Eulerian walk, extract it
3. Otherwise compute all-pairs shortest paths, check strong connectivity,
   classify imbalanced vertices, match them, and extract the walk from the
   graph augmented with the matched shortest paths
4. Hand the edge sequence to the recoster

The solve is synchronous and runs to completion. Matrices are sized to the
vertices of this request and discarded afterwards.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import SolverConfig
from .distance_matrix import compute_all_pairs, count_unreachable, is_strongly_connected
from .eulerian_solver import RouteStats, build_extra_pairs, compute_augmented_cycle, summarize_route
from .exceptions import EndpointUnresolvedError, GraphDisconnectedError, ValidationError
from .graph_reader import GraphReader
from .imbalance import classify_imbalance
from .logging_config import get_logger
from .matching import solve_assignment
from .path_builder import Recoster, build_path, recost_forward, trip_percentages
from .postman_graph import PostmanArc, PostmanGraph
from .types import (
    ChinesePostmanRequest,
    EdgeID,
    Hop,
    Location,
    NodeID,
    PathInfo,
    ResolvedEndpoint,
)

logger = get_logger(__name__)


class SolveState(Enum):
    """Stages a solve passes through."""

    BUILD_GRAPH = "build_graph"
    IDEAL_CYCLE = "ideal_cycle"
    DISTANCES = "distances"
    CONNECTIVITY_CHECK = "connectivity_check"
    CLASSIFY = "classify"
    MATCH = "match"
    AUGMENTED_CYCLE = "augmented_cycle"
    EMIT = "emit"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PostmanSolution:
    """Complete solve result.

    Attributes:
        edge_ids: Walk as edge ids, one per traversal
        path: Recosted records for trip building
        origin: Resolved start vertex
        destination: Resolved end vertex
        is_ideal: True if no traversals had to be duplicated
        extra_pairs: Duplicated vertex hops
        matching_cost: Total assignment cost in meters
        stats: Traversal and length summary
        messages: Human-readable step log
    """

    edge_ids: List[EdgeID]
    path: List[PathInfo]
    origin: ResolvedEndpoint
    destination: ResolvedEndpoint
    is_ideal: bool
    extra_pairs: List[Hop]
    matching_cost: float
    stats: RouteStats
    messages: List[str] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return self.origin.node_id == self.destination.node_id

    @property
    def source_pct(self) -> float:
        """Percent along the first traversed edge where the trip starts."""
        return trip_percentages(self.edge_ids, self.origin, self.destination)[0]

    @property
    def target_pct(self) -> float:
        """Percent along the last traversed edge where the trip ends."""
        return trip_percentages(self.edge_ids, self.origin, self.destination)[1]


class _EndpointTracker:
    """Keeps the best-ranked candidate edge seen so far for one location."""

    def __init__(self, location: Location, threshold: float):
        self.location = location
        self.threshold = threshold
        self.best: Optional[ResolvedEndpoint] = None

    def offer(self, edge_id: EdgeID, start_node: NodeID, end_node: NodeID) -> None:
        rank = self.location.candidate_rank(edge_id)
        if rank is None:
            return
        if self.best is not None and rank >= self.best.rank:
            return

        percent_along = self.location.candidates[rank].percent_along
        on_start_node = percent_along < self.threshold
        self.best = ResolvedEndpoint(
            node_id=start_node if on_start_node else end_node,
            edge_id=edge_id,
            rank=rank,
            percent_along=percent_along,
            on_start_node=on_start_node,
        )


class ChinesePostmanSolver:
    """
    Route-inspection solver over a required subset of road-network edges.

    Example:
        >>> solver = ChinesePostmanSolver(reader)
        >>> solution = solver.solve(request)
        >>> solution.edge_ids
        [1, 2, 3, 4]
    """

    def __init__(
        self,
        reader: GraphReader,
        config: Optional[SolverConfig] = None,
        recoster: Recoster = recost_forward,
    ):
        """
        Args:
            reader: Read-only tile store for edge endpoints and lengths
            config: Solver settings (defaults if None)
            recoster: Turns the solved walk into PathInfo records
        """
        self.reader = reader
        self.config = (config or SolverConfig()).validate()
        self.recoster = recoster
        self.state = SolveState.BUILD_GRAPH
        self.messages: List[str] = []

    def _enter(self, state: SolveState) -> None:
        logger.debug(f"Solver state: {self.state.value} -> {state.value}")
        self.state = state

    def _note(self, message: str) -> None:
        self.messages.append(message)
        logger.info(f"  → {message}")

    # ------------------------------------------------------------------
    # Graph construction
    # ------------------------------------------------------------------

    def build_graph(
        self, request: ChinesePostmanRequest
    ) -> Tuple[PostmanGraph, ResolvedEndpoint, ResolvedEndpoint]:
        """Build the postman graph and resolve both endpoints.

        Raises:
            EndpointUnresolvedError: If origin or destination has no candidate
                edge among the non-avoided required edges
        """
        avoided = set(request.avoid_edges)
        origin_tracker = _EndpointTracker(request.origin, self.config.percent_along_threshold)
        destination_tracker = _EndpointTracker(
            request.destination, self.config.percent_along_threshold
        )

        graph = PostmanGraph()
        skipped = 0
        for edge_id in request.required_edges:
            if edge_id in avoided:
                skipped += 1
                continue

            start_node = self.reader.edge_start_node(edge_id)
            end_node = self.reader.edge_end_node(edge_id)
            origin_tracker.offer(edge_id, start_node, end_node)
            destination_tracker.offer(edge_id, start_node, end_node)
            graph.add_edge(start_node, end_node, PostmanArc(edge_id=edge_id))

        if skipped:
            logger.info(f"Skipped {skipped} avoided edge(s)")

        unresolved = [
            name
            for name, tracker in (("origin", origin_tracker), ("destination", destination_tracker))
            if tracker.best is None
        ]
        if unresolved:
            raise EndpointUnresolvedError(unresolved)

        return graph, origin_tracker.best, destination_tracker.best

    # ------------------------------------------------------------------
    # Solve
    # ------------------------------------------------------------------

    def solve(self, request: ChinesePostmanRequest) -> PostmanSolution:
        """
        Solve the Chinese Postman problem for one request.

        Args:
            request: Required edges, avoid list and the two locations

        Returns:
            PostmanSolution with the walk and its recosted path

        Raises:
            EndpointUnresolvedError: No usable candidate edge for an endpoint (451)
            GraphDisconnectedError: Required edges are not strongly connected (450)
            ValidationError: The walk failed the final checks
        """
        self.messages = []
        self.state = SolveState.BUILD_GRAPH
        try:
            return self._solve(request)
        except Exception:
            self._enter(SolveState.FAILED)
            raise

    def _solve(self, request: ChinesePostmanRequest) -> PostmanSolution:
        logger.info("Step 1: Building postman graph from required edges...")
        graph, origin, destination = self.build_graph(request)
        self._note(
            f"Built graph: {graph.num_vertices()} vertices, {graph.num_arcs()} required arcs"
        )
        if graph.num_vertices() >= self.config.large_graph_warning:
            logger.warning(
                f"{graph.num_vertices()} vertices: all-pairs shortest paths is cubic "
                f"and cannot be interrupted once started"
            )

        extra_pairs: List[Hop] = []
        matching_cost = 0.0
        is_ideal = graph.is_ideal_graph(origin.node_id, destination.node_id)

        if is_ideal:
            logger.info("Step 2: Graph is already Eulerian for the requested endpoints")
            self._enter(SolveState.IDEAL_CYCLE)
            edge_ids = graph.compute_ideal_euler_cycle(origin.node_id)
        else:
            edge_ids, extra_pairs, matching_cost = self._solve_augmented(
                graph, origin.node_id, destination.node_id
            )

        self._note(f"Eulerian walk: {len(edge_ids)} traversals ({len(extra_pairs)} duplicated)")

        avoided = set(request.avoid_edges)
        required = [e for e in request.required_edges if e not in avoided]
        if self.config.validate_solution:
            validate_solution(
                edge_ids, self.reader, required, origin.node_id, destination.node_id
            )

        stats = summarize_route(edge_ids, required, self.reader)
        self._note(
            f"Solution: {stats.total_length:.1f}m total, "
            f"{stats.deadhead_length:.1f}m deadhead = {stats.deadhead_percentage:.1f}%"
        )

        logger.info("Final step: Recosting path...")
        self._enter(SolveState.EMIT)
        source_pct, target_pct = trip_percentages(edge_ids, origin, destination)
        path = build_path(self.reader, edge_ids, source_pct, target_pct, self.recoster)

        self._enter(SolveState.DONE)
        return PostmanSolution(
            edge_ids=edge_ids,
            path=path,
            origin=origin,
            destination=destination,
            is_ideal=is_ideal,
            extra_pairs=extra_pairs,
            matching_cost=matching_cost,
            stats=stats,
            messages=list(self.messages),
        )

    def _solve_augmented(
        self, graph: PostmanGraph, origin: NodeID, destination: NodeID
    ) -> Tuple[List[EdgeID], List[Hop], float]:
        logger.info("Step 2: Computing all-pairs shortest paths...")
        self._enter(SolveState.DISTANCES)
        all_pairs = compute_all_pairs(graph, self.reader.edge_length)

        logger.info("Step 3: Checking strong connectivity...")
        self._enter(SolveState.CONNECTIVITY_CHECK)
        if not is_strongly_connected(all_pairs.distances):
            raise GraphDisconnectedError(
                "required edges", unreachable_pairs=count_unreachable(all_pairs.distances)
            )

        logger.info("Step 4: Classifying imbalanced vertices...")
        self._enter(SolveState.CLASSIFY)
        origin_index = graph.get_vertex_index(origin)
        destination_index = graph.get_vertex_index(destination)
        classification = classify_imbalance(
            graph.get_unbalanced_vertices(), origin_index, destination_index
        )
        self._note(
            f"Imbalance: {len(classification.excess)} excess, "
            f"{len(classification.deficit)} deficit entries"
        )

        logger.info("Step 5: Matching imbalanced vertices...")
        self._enter(SolveState.MATCH)
        assignment = solve_assignment(
            classification.excess, classification.deficit, all_pairs.distances
        )

        self._enter(SolveState.AUGMENTED_CYCLE)
        extra_pairs = build_extra_pairs(
            assignment, classification.excess, classification.deficit, all_pairs.paths
        )
        edge_ids = compute_augmented_cycle(graph, origin, extra_pairs)
        return edge_ids, extra_pairs, assignment.total_cost


def validate_solution(
    edge_ids: Sequence[EdgeID],
    reader: GraphReader,
    required: Iterable[EdgeID],
    origin: NodeID,
    destination: NodeID,
) -> None:
    """Check that a walk covers the required edges and joins up end to end.

    Raises:
        ValidationError: On the first failed check
    """
    missing = set(required) - set(edge_ids)
    if missing:
        raise ValidationError(f"Walk misses {len(missing)} required edge(s): {sorted(missing)}")

    if not edge_ids:
        raise ValidationError("Walk is empty")

    first_node = reader.edge_start_node(edge_ids[0])
    if first_node != origin:
        raise ValidationError(f"Walk starts at node {first_node}, expected {origin}")

    for previous, current in zip(edge_ids, edge_ids[1:]):
        if reader.edge_end_node(previous) != reader.edge_start_node(current):
            raise ValidationError(f"Walk breaks between edges {previous} and {current}")

    last_node = reader.edge_end_node(edge_ids[-1])
    if last_node != destination:
        raise ValidationError(f"Walk ends at node {last_node}, expected {destination}")

    duplicates = sum(count - 1 for count in Counter(edge_ids).values() if count > 1)
    logger.debug(f"Walk validated: {len(edge_ids)} traversals, {duplicates} repeated")


def solve_chinese_postman(
    reader: GraphReader,
    request: ChinesePostmanRequest,
    config: Optional[SolverConfig] = None,
    recoster: Recoster = recost_forward,
) -> PostmanSolution:
    """Convenience function: build a solver and run one request."""
    solver = ChinesePostmanSolver(reader, config=config, recoster=recoster)
    return solver.solve(request)
