"""
Custom exceptions for the Chinese Postman solver.

Provides a clear exception hierarchy for better error handling and debugging.
All exceptions inherit from PostmanError for easy catching of all library errors.

The two abort conditions callers report to users carry a numeric
``error_code`` (450 and 451) so they stay distinguishable at the service
boundary.
"""

from typing import Optional, Sequence


class PostmanError(Exception):
    """Base exception for all postman-solver errors."""

    error_code: Optional[int] = None


# ==============================================================================
# Input/Validation Errors
# ==============================================================================


class ValidationError(PostmanError):
    """Raised when input or solution validation fails."""

    pass


class ConfigurationError(PostmanError):
    """Raised when configuration is invalid."""

    pass


# ==============================================================================
# Graph Errors
# ==============================================================================


class GraphError(PostmanError):
    """Base class for graph-related errors."""

    pass


class GraphDisconnectedError(GraphError):
    """Raised when the required-edge graph is not strongly connected.

    No inspection walk exists in that case, so the solve is aborted.
    """

    error_code = 450

    def __init__(self, reason: str = "", unreachable_pairs: int = 0):
        self.reason = reason
        self.unreachable_pairs = unreachable_pairs
        msg = "Graph is not strongly connected"
        if unreachable_pairs:
            msg += f": {unreachable_pairs} unreachable vertex pairs"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class NoEulerianTrailError(GraphDisconnectedError):
    """Raised when Hierholzer extraction cannot consume every arc."""

    def __init__(self, unused_arcs: int, reason: str = ""):
        self.unused_arcs = unused_arcs
        super().__init__(reason or f"{unused_arcs} arc(s) left unused by the Eulerian walk")


class ImbalanceError(GraphError):
    """Raised when excess and deficit vertex lists do not pair up."""

    def __init__(self, num_excess: int, num_deficit: int):
        self.num_excess = num_excess
        self.num_deficit = num_deficit
        super().__init__(
            f"Imbalance classification mismatch: {num_excess} excess vs {num_deficit} deficit"
        )


# ==============================================================================
# Routing Errors
# ==============================================================================


class RoutingError(PostmanError):
    """Base class for routing-related errors."""

    pass


class NoPathError(RoutingError):
    """Raised when no path exists between two vertices."""

    def __init__(self, from_node, to_node):
        self.from_node = from_node
        self.to_node = to_node
        super().__init__(f"No path exists from {from_node} to {to_node}")


class EndpointUnresolvedError(RoutingError):
    """Raised when a location has no candidate edge among the required edges."""

    error_code = 451

    def __init__(self, endpoints: Sequence[str]):
        self.endpoints = list(endpoints)
        super().__init__(
            f"No usable candidate edge for {' and '.join(self.endpoints)} location"
        )


class RecostError(RoutingError):
    """Raised by a recoster that cannot re-evaluate the final edge sequence."""

    def __init__(self, reason: str, edge_id=None):
        self.reason = reason
        self.edge_id = edge_id
        msg = f"Failed to recost path: {reason}"
        if edge_id is not None:
            msg += f" (edge {edge_id})"
        super().__init__(msg)
