"""
Degree-imbalance classification for graph balancing.

An open walk from origin to destination becomes a closed one once a phantom
destination -> origin arc is added. That phantom arc gives the origin one
more incoming use and the destination one more outgoing use, which is what
adjust_for_endpoints applies before anything is matched.

After adjustment (imbalance = out-degree - in-degree):
- vertices with a negative value need extra outgoing traversals, so the
  connecting walks start there: the excess list
- vertices with a positive value need extra incoming traversals, so the
  connecting walks end there: the deficit list
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .exceptions import ImbalanceError
from .logging_config import get_logger
from .types import VertexIndex

logger = get_logger(__name__)


@dataclass
class ImbalanceClassification:
    """Vertices to connect while balancing.

    Each vertex appears once per unit of imbalance, so the lists are
    multisets. ``excess[i]`` is matched to some ``deficit[j]`` and a shortest
    walk excess -> deficit is duplicated.
    """

    excess: List[VertexIndex] = field(default_factory=list)
    deficit: List[VertexIndex] = field(default_factory=list)

    @property
    def is_balanced(self) -> bool:
        return not self.excess and not self.deficit

    def __len__(self) -> int:
        return len(self.excess)


def adjust_for_endpoints(
    imbalance: Dict[VertexIndex, int], origin: VertexIndex, destination: VertexIndex
) -> Dict[VertexIndex, int]:
    """Apply the phantom destination -> origin arc to an imbalance map.

    Args:
        imbalance: Vertex index -> out-degree minus in-degree (non-zero only)
        origin: Vertex the walk must start from
        destination: Vertex the walk must end at

    Returns:
        New imbalance map with zero entries dropped. Unchanged copy when
        origin and destination coincide.

    Example:
        >>> adjust_for_endpoints({}, origin=0, destination=2)
        {0: -1, 2: 1}
        >>> adjust_for_endpoints({0: 1, 2: -1}, origin=0, destination=2)
        {}
    """
    adjusted = dict(imbalance)
    if origin != destination:
        adjusted[origin] = adjusted.get(origin, 0) - 1
        adjusted[destination] = adjusted.get(destination, 0) + 1
    return {v: d for v, d in adjusted.items() if d != 0}


def classify_imbalance(
    imbalance: Dict[VertexIndex, int], origin: VertexIndex, destination: VertexIndex
) -> ImbalanceClassification:
    """Split imbalanced vertices into excess and deficit multisets.

    Balanced endpoints of an open walk still get one entry each: the origin
    in excess, the destination in deficit.

    Raises:
        ImbalanceError: If the two lists differ in length. The handshake
            property makes this impossible for a real degree map.
    """
    adjusted = adjust_for_endpoints(imbalance, origin, destination)

    classification = ImbalanceClassification()
    for vertex in sorted(adjusted):
        surplus = adjusted[vertex]
        if surplus < 0:
            classification.excess.extend([vertex] * -surplus)
        else:
            classification.deficit.extend([vertex] * surplus)

    if len(classification.excess) != len(classification.deficit):
        raise ImbalanceError(len(classification.excess), len(classification.deficit))

    logger.debug(
        f"Imbalance classified: {len(classification.excess)} excess, "
        f"{len(classification.deficit)} deficit entries"
    )
    return classification
