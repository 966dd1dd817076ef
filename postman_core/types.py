"""
Type definitions for the Chinese Postman solver.

This module provides type aliases, request/response records and dataclasses
shared by the graph, matching and path-building modules.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

# Type aliases for clarity
NodeID = int  # Road-network node identifier
EdgeID = int  # Road-network directed edge identifier
VertexIndex = int  # Dense index into the postman graph (0..V-1)
Distance = float  # Edge length in meters
Hop = Tuple[VertexIndex, VertexIndex]  # One directed vertex-to-vertex step


class TravelMode(Enum):
    """Travel mode recorded on each emitted path entry."""

    DRIVE = "drive"
    PEDESTRIAN = "pedestrian"
    BICYCLE = "bicycle"


@dataclass
class CandidateEdge:
    """A correlated edge a location may snap to.

    Attributes:
        edge_id: Directed edge identifier
        percent_along: Position of the location along the edge, in [0, 1]
    """

    edge_id: EdgeID
    percent_along: float

    def __post_init__(self):
        if not 0.0 <= self.percent_along <= 1.0:
            raise ValueError(f"percent_along must be within [0, 1], got {self.percent_along}")


@dataclass
class Location:
    """Origin or destination location with ranked candidate edges.

    The order of ``candidates`` is the rank: index 0 is the best match.
    """

    candidates: List[CandidateEdge] = field(default_factory=list)
    name: Optional[str] = None

    def candidate_rank(self, edge_id: EdgeID) -> Optional[int]:
        """Rank of ``edge_id`` among the candidates, or None if absent."""
        for rank, candidate in enumerate(self.candidates):
            if candidate.edge_id == edge_id:
                return rank
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        candidates = [
            CandidateEdge(edge_id=int(c["edge_id"]), percent_along=float(c["percent_along"]))
            for c in data.get("candidates", [])
        ]
        return cls(candidates=candidates, name=data.get("name"))


@dataclass
class ChinesePostmanRequest:
    """Everything the solver consumes for one solve.

    Attributes:
        required_edges: Edge ids that must be traversed
        origin: Start location
        destination: End location (may resolve to the same vertex as origin)
        avoid_edges: Edge ids excluded even when listed as required
    """

    required_edges: List[EdgeID]
    origin: Location
    destination: Location
    avoid_edges: List[EdgeID] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChinesePostmanRequest":
        return cls(
            required_edges=[int(e) for e in data["required_edges"]],
            origin=Location.from_dict(data["origin"]),
            destination=Location.from_dict(data["destination"]),
            avoid_edges=[int(e) for e in data.get("avoid_edges", [])],
        )


@dataclass
class ResolvedEndpoint:
    """Vertex chosen for a location and the candidate that chose it.

    Attributes:
        node_id: Resolved road-network node
        edge_id: Candidate edge the node was taken from
        rank: Position of that candidate in the location's list
        percent_along: Position of the location along the candidate edge
        on_start_node: True if the location snapped to the edge's start node
    """

    node_id: NodeID
    edge_id: EdgeID
    rank: int
    percent_along: float
    on_start_node: bool = True


class PathInfo(NamedTuple):
    """One traversed edge instance handed to trip building.

    Attributes:
        mode: Travel mode used on the edge
        cost: Cumulative cost at the end of the edge
        edge_id: Directed edge identifier
        shortcut: True if the edge is a shortcut edge
        path_distance: Cumulative distance in meters at the end of the edge
        restriction_idx: Index of the complex restriction on the edge, if any
        transition_cost: Cost of entering the edge from the previous one
        recovered_from_shortcut: True if the edge was recovered from a shortcut
    """

    mode: TravelMode
    cost: float
    edge_id: EdgeID
    shortcut: bool
    path_distance: float
    restriction_idx: int
    transition_cost: float
    recovered_from_shortcut: bool
