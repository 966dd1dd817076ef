"""
Hand-off of the solved edge sequence to recosting and trip building.

A recoster turns the ordered edge ids into PathInfo records, one per
traversal. It is supplied by the caller and may fail part way, for example on
an access restriction it cannot reconcile. Any such failure is logged and the
records produced so far are returned, so the route is still emitted in
degraded form.
"""

from typing import Callable, Iterator, List, Sequence, Tuple

from .exceptions import RecostError
from .graph_reader import GraphReader
from .logging_config import get_logger, log_exception
from .types import EdgeID, PathInfo, ResolvedEndpoint, TravelMode

logger = get_logger(__name__)

DEFAULT_SPEED_MPS = 50 / 3.6  # 50 km/h
NO_RESTRICTION = -1

Recoster = Callable[[GraphReader, Sequence[EdgeID], float, float], Iterator[PathInfo]]


def trip_percentages(
    edge_ids: Sequence[EdgeID], origin: ResolvedEndpoint, destination: ResolvedEndpoint
) -> Tuple[float, float]:
    """Percent along the first and last traversed edge where the trip starts and ends.

    A location only trims the walk where the walk actually runs over its
    candidate edge: the origin's edge taken first from its start node, or the
    destination's edge taken last up to its end node. Anywhere else the trip
    starts or ends on the resolved vertex itself (0.0 and 1.0).

    Example:
        >>> origin = ResolvedEndpoint(3, 102, 0, 0.9, on_start_node=False)
        >>> trip_percentages([103, 104, 101, 102], origin, origin)
        (0.0, 0.9)
    """
    source_pct, target_pct = 0.0, 1.0
    if edge_ids:
        if edge_ids[0] == origin.edge_id and origin.on_start_node:
            source_pct = origin.percent_along
        if edge_ids[-1] == destination.edge_id and not destination.on_start_node:
            target_pct = destination.percent_along
    return source_pct, target_pct


def recost_forward(
    reader: GraphReader,
    edge_ids: Sequence[EdgeID],
    source_pct: float,
    target_pct: float,
    mode: TravelMode = TravelMode.DRIVE,
    speed_mps: float = DEFAULT_SPEED_MPS,
) -> Iterator[PathInfo]:
    """Length-based recoster.

    The first edge is trimmed to the part after ``source_pct``, the last to
    the part before ``target_pct``. Cost is travel time in seconds at a
    constant speed. Access restrictions are ignored.

    Raises:
        RecostError: If a single-edge path ends before it starts, or the
            reader reports an invalid length
    """
    if speed_mps <= 0:
        raise RecostError(f"speed must be positive, got {speed_mps}")

    cost = 0.0
    distance = 0.0
    last = len(edge_ids) - 1

    for i, edge_id in enumerate(edge_ids):
        length = reader.edge_length(edge_id)
        if length < 0:
            raise RecostError(f"negative length {length}", edge_id=edge_id)

        fraction = 1.0
        if i == 0:
            fraction -= source_pct
        if i == last:
            fraction -= 1.0 - target_pct
        if fraction < 0:
            raise RecostError(
                f"target percent {target_pct} lies before source percent {source_pct}",
                edge_id=edge_id,
            )

        distance += length * fraction
        cost += length * fraction / speed_mps
        yield PathInfo(
            mode=mode,
            cost=cost,
            edge_id=edge_id,
            shortcut=False,
            path_distance=distance,
            restriction_idx=NO_RESTRICTION,
            transition_cost=0.0,
            recovered_from_shortcut=False,
        )


def build_path(
    reader: GraphReader,
    edge_ids: Sequence[EdgeID],
    source_pct: float,
    target_pct: float,
    recoster: Recoster = recost_forward,
) -> List[PathInfo]:
    """Recost the final edge sequence.

    Args:
        reader: Read-only graph reader
        edge_ids: Solved walk, one id per traversal
        source_pct: Percent along the first edge where the trip starts
        target_pct: Percent along the last edge where the trip ends
        recoster: Callable producing PathInfo records

    Returns:
        PathInfo records; shorter than ``edge_ids`` if recosting failed
    """
    path: List[PathInfo] = []
    try:
        for info in recoster(reader, edge_ids, source_pct, target_pct):
            path.append(info)
    except Exception as e:
        log_exception(logger, "Chinese Postman failed to recost final path", e)

    if len(path) < len(edge_ids):
        logger.warning(f"Recosted {len(path)} of {len(edge_ids)} traversals")

    return path
