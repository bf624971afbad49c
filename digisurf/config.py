"""
Configuration for boundary extraction runs.
"""

import json
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class TrackingConfig:
    """
    Parameters shared by the extraction programs.

    max_trials: random draws allowed when searching for a seed bel
    interior: surfel adjacency used in every direction pair
    closed: whether the Khalimsky space includes its bounding cells
    seed: seed of the random generator used by the bel search
    grid_step: size of a voxel when embedding surfels
    """
    max_trials: int = 100000
    interior: bool = True
    closed: bool = True
    seed: Optional[int] = None
    grid_step: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackingConfig":
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> "TrackingConfig":
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


DEFAULT_CONFIG = TrackingConfig()


def load_config(path: Optional[Path] = None, **overrides) -> TrackingConfig:
    """
    Build a run configuration.

    Starts from the JSON file at ``path`` (or DEFAULT_CONFIG), then applies
    every override that is not None, so unset command-line flags keep the
    file's values.
    """
    config = TrackingConfig.from_json(path) if path else DEFAULT_CONFIG
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})
