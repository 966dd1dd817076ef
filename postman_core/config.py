"""
Solver configuration.

Settings can be built in code, loaded from a JSON file, or overridden from
command-line flags by the run script.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

from .exceptions import ConfigurationError


@dataclass
class SolverConfig:
    """Tunable solver settings.

    Attributes:
        percent_along_threshold: Candidates located before this fraction of
            their edge resolve to the edge's start node, others to its end node
        large_graph_warning: Vertex count from which a warning about the cubic
            all-pairs step is logged
        validate_solution: Check coverage and endpoints of the final walk
    """

    percent_along_threshold: float = 0.5
    large_graph_warning: int = 1000
    validate_solution: bool = True

    def validate(self) -> "SolverConfig":
        """Raise ConfigurationError on out-of-range values; returns self."""
        if not 0.0 <= self.percent_along_threshold <= 1.0:
            raise ConfigurationError(
                f"percent_along_threshold must be within [0, 1], got {self.percent_along_threshold}"
            )
        if self.large_graph_warning < 1:
            raise ConfigurationError(
                f"large_graph_warning must be positive, got {self.large_graph_warning}"
            )
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SolverConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> SolverConfig:
    """Load a SolverConfig from a JSON file.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration '{path}' must be a JSON object")

    return SolverConfig.from_dict(data)
