"""
Postman Core - Chinese Postman (route inspection) solver

Given a required subset of directed road-network edges, computes the
minimum-cost walk that traverses every required edge at least once, from a
resolved origin to a resolved destination:
- All-pairs shortest paths with path reconstruction (Floyd-Warshall)
- Degree-imbalance classification with origin/destination adjustment
- Minimum-cost assignment of imbalanced vertices
- Eulerian circuit/trail extraction on the augmented multigraph

Version: 1.0.0
"""

from .config import SolverConfig, load_config
from .distance_matrix import (
    NOT_CONNECTED,
    AllPairsResult,
    build_distance_matrix,
    compute_all_pairs,
    compute_floyd_warshall,
    expand_path,
    is_strongly_connected,
)
from .eulerian_solver import RouteStats, build_extra_pairs, compute_augmented_cycle, summarize_route
from .exceptions import (
    ConfigurationError,
    EndpointUnresolvedError,
    GraphDisconnectedError,
    GraphError,
    ImbalanceError,
    NoEulerianTrailError,
    NoPathError,
    PostmanError,
    RecostError,
    RoutingError,
    ValidationError,
)
from .graph_reader import GraphReader, InMemoryGraphReader, RoadEdge
from .imbalance import ImbalanceClassification, adjust_for_endpoints, classify_imbalance
from .logging_config import LogTimer, get_logger, setup_logging
from .matching import Assignment, solve_assignment
from .path_builder import build_path, recost_forward, trip_percentages
from .postman_graph import PostmanArc, PostmanGraph, PostmanVertex
from .solver import (
    ChinesePostmanSolver,
    PostmanSolution,
    SolveState,
    solve_chinese_postman,
    validate_solution,
)
from .types import (
    CandidateEdge,
    ChinesePostmanRequest,
    Location,
    PathInfo,
    ResolvedEndpoint,
    TravelMode,
)

__all__ = [
    # Types
    "CandidateEdge",
    "Location",
    "ChinesePostmanRequest",
    "PathInfo",
    "TravelMode",
    # Configuration
    "SolverConfig",
    "load_config",
    # Graph
    "GraphReader",
    "InMemoryGraphReader",
    "RoadEdge",
    "PostmanGraph",
    "PostmanVertex",
    "PostmanArc",
    # Distance & paths
    "NOT_CONNECTED",
    "AllPairsResult",
    "build_distance_matrix",
    "compute_floyd_warshall",
    "compute_all_pairs",
    "is_strongly_connected",
    "expand_path",
    # Balancing
    "ImbalanceClassification",
    "adjust_for_endpoints",
    "classify_imbalance",
    "Assignment",
    "solve_assignment",
    # Eulerian construction
    "RouteStats",
    "build_extra_pairs",
    "compute_augmented_cycle",
    "summarize_route",
    # Path emission
    "build_path",
    "recost_forward",
    "trip_percentages",
    # Solver
    "ChinesePostmanSolver",
    "PostmanSolution",
    "ResolvedEndpoint",
    "SolveState",
    "solve_chinese_postman",
    "validate_solution",
    # Logging
    "setup_logging",
    "get_logger",
    "LogTimer",
    # Exceptions
    "PostmanError",
    "ValidationError",
    "ConfigurationError",
    "GraphError",
    "GraphDisconnectedError",
    "NoEulerianTrailError",
    "ImbalanceError",
    "RoutingError",
    "NoPathError",
    "EndpointUnresolvedError",
    "RecostError",
]

__version__ = "1.0.0"
