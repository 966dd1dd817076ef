"""
Read-only access to road-network edges.

The solver never reaches for global tile state: a GraphReader is passed in
explicitly and only queried for edge endpoints and lengths. Readers must be
safe to share between independent solves, so implementations never mutate
themselves after construction.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, Union

from .exceptions import ValidationError
from .types import Distance, EdgeID, NodeID


@dataclass(frozen=True)
class RoadEdge:
    """A directed road-network edge as stored in the tile store."""

    edge_id: EdgeID
    start_node: NodeID
    end_node: NodeID
    length: Distance
    name: str = ""


class GraphReader:
    """Interface for the read-only tile store.

    Any reader passed to the solver must provide these methods.
    """

    def edge_start_node(self, edge_id: EdgeID) -> NodeID:
        raise NotImplementedError("GraphReader must implement edge_start_node")

    def edge_end_node(self, edge_id: EdgeID) -> NodeID:
        raise NotImplementedError("GraphReader must implement edge_end_node")

    def edge_length(self, edge_id: EdgeID) -> Distance:
        """Length of the edge in meters."""
        raise NotImplementedError("GraphReader must implement edge_length")


class InMemoryGraphReader(GraphReader):
    """GraphReader over a dict of RoadEdge records.

    Example:
        >>> reader = InMemoryGraphReader([RoadEdge(1, 10, 20, 125.0)])
        >>> reader.edge_length(1)
        125.0
    """

    def __init__(self, edges: Iterable[RoadEdge]):
        self._edges: Dict[EdgeID, RoadEdge] = {}
        for edge in edges:
            if edge.length < 0:
                raise ValidationError(f"Edge {edge.edge_id} has negative length {edge.length}")
            if edge.edge_id in self._edges:
                raise ValidationError(f"Duplicate edge id {edge.edge_id}")
            self._edges[edge.edge_id] = edge

    def _get(self, edge_id: EdgeID) -> RoadEdge:
        try:
            return self._edges[edge_id]
        except KeyError:
            raise ValidationError(f"Unknown edge id {edge_id}") from None

    def edge(self, edge_id: EdgeID) -> RoadEdge:
        return self._get(edge_id)

    def edge_start_node(self, edge_id: EdgeID) -> NodeID:
        return self._get(edge_id).start_node

    def edge_end_node(self, edge_id: EdgeID) -> NodeID:
        return self._get(edge_id).end_node

    def edge_length(self, edge_id: EdgeID) -> Distance:
        return self._get(edge_id).length

    def __contains__(self, edge_id: EdgeID) -> bool:
        return edge_id in self._edges

    def __iter__(self) -> Iterator[RoadEdge]:
        return iter(self._edges.values())

    def __len__(self) -> int:
        return len(self._edges)

    @classmethod
    def from_dict(cls, data: Dict) -> "InMemoryGraphReader":
        """Build a reader from ``{"edges": [{"id", "start", "end", "length", "name"?}, ...]}``."""
        try:
            edges = [
                RoadEdge(
                    edge_id=int(e["id"]),
                    start_node=int(e["start"]),
                    end_node=int(e["end"]),
                    length=float(e["length"]),
                    name=e.get("name", ""),
                )
                for e in data["edges"]
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed road network: {e}") from e
        return cls(edges)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryGraphReader":
        with Path(path).open("r", encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))
