"""
Pydantic Validated Models
=========================
Strict validation layer for configuration loaded from files or other
untrusted boundaries.

Usage:
    from roster.models.validated import ValidatedRosterConfig

    config = ValidatedRosterConfig(max_history=100).to_dataclass()

Note: the dataclass RosterConfig remains the type passed around internally.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import RosterConfig


class ValidatedRosterConfig(BaseModel):
    """
    Pydantic-validated roster configuration.

    Use this at API and file boundaries.
    Can be converted to/from the dataclass RosterConfig.
    """
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Generation
    weeks_to_generate: int = Field(default=4, ge=0, le=52, description="Weeks to expand per run")
    default_room_id: str = Field(default="room-1", min_length=1)

    # Matching
    auto_assign_threshold: int = Field(default=50, ge=0, le=100)
    mandatory_score_cap: int = Field(default=40, ge=0, le=100)
    use_optimizer: bool = Field(default=False)
    optimizer_time_limit_seconds: float = Field(default=10.0, gt=0, le=600)

    # History
    max_history: int = Field(default=50, ge=1, le=1000)
    autosave_interval_seconds: float = Field(default=30.0, ge=0)
    autosave_key: str = Field(default="roster-autosave", min_length=1)
    autosave_db_path: str = Field(default="data/autosave.db")

    # Logging
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept standard level names (plus TRACE) in any case."""
        level = v.strip().upper()
        if level not in ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_model(self):
        """Cross-field validation."""
        if self.mandatory_score_cap >= self.auto_assign_threshold:
            raise ValueError("mandatory_score_cap must stay below auto_assign_threshold")
        return self

    def to_dataclass(self) -> RosterConfig:
        """Convert to the dataclass used throughout the package."""
        return RosterConfig(**self.model_dump())

    @classmethod
    def from_dataclass(cls, config: RosterConfig) -> "ValidatedRosterConfig":
        """Create from dataclass RosterConfig."""
        return cls(**config.to_dict())
