"""Runtime configuration for the roster core."""
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Union

from .rules import AUTO_ASSIGN_THRESHOLD, MANDATORY_SCORE_CAP


@dataclass
class RosterConfig:
    """Configuration shared by generation, matching and history."""

    # Generation
    weeks_to_generate: int = 4
    default_room_id: str = "room-1"

    # Matching
    auto_assign_threshold: int = AUTO_ASSIGN_THRESHOLD
    mandatory_score_cap: int = MANDATORY_SCORE_CAP
    use_optimizer: bool = False  # CP-SAT global assignment instead of greedy
    optimizer_time_limit_seconds: float = 10.0

    # History
    max_history: int = 50
    autosave_interval_seconds: float = 30.0
    autosave_key: str = "roster-autosave"
    autosave_db_path: str = "data/autosave.db"

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # empty: console only

    def __post_init__(self):
        if self.max_history < 1:
            self.max_history = 1
        if self.weeks_to_generate < 0:
            self.weeks_to_generate = 0
        if self.autosave_interval_seconds < 0:
            self.autosave_interval_seconds = 0.0

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> "RosterConfig":
        """Create from dictionary, ignoring unknown keys."""
        cfg = cls()
        for key, value in d.items():
            if hasattr(cfg, key):
                setattr(cfg, key, value)
        cfg.__post_init__()
        return cfg


def load_config(path: Union[str, Path]) -> RosterConfig:
    """Load configuration from a JSON file, validating it strictly."""
    from .validated import ValidatedRosterConfig

    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return ValidatedRosterConfig(**data).to_dataclass()
