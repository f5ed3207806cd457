"""Tests for validated configuration."""
import json

import pytest
from pydantic import ValidationError

from roster.models.config import RosterConfig, load_config
from roster.models.validated import ValidatedRosterConfig


class TestValidatedRosterConfig:
    """Tests for the pydantic configuration model."""

    def test_defaults_match_dataclass(self):
        assert ValidatedRosterConfig().to_dataclass() == RosterConfig()

    def test_from_dataclass(self):
        cfg = RosterConfig(max_history=20, use_optimizer=True)
        validated = ValidatedRosterConfig.from_dataclass(cfg)
        assert validated.max_history == 20
        assert validated.use_optimizer is True

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ValidatedRosterConfig(colour="blue")

    @pytest.mark.parametrize("field,value", [
        ("max_history", 0),
        ("weeks_to_generate", -1),
        ("auto_assign_threshold", 101),
        ("optimizer_time_limit_seconds", 0),
        ("autosave_key", ""),
    ])
    def test_bounds(self, field, value):
        with pytest.raises(ValidationError):
            ValidatedRosterConfig(**{field: value})

    def test_log_level_normalized(self):
        assert ValidatedRosterConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            ValidatedRosterConfig(log_level="chatty")

    def test_cap_must_stay_below_threshold(self):
        with pytest.raises(ValidationError, match="mandatory_score_cap"):
            ValidatedRosterConfig(auto_assign_threshold=40, mandatory_score_cap=40)

    def test_validate_assignment(self):
        cfg = ValidatedRosterConfig()
        with pytest.raises(ValidationError):
            cfg.max_history = -5


class TestLoadConfig:
    """Tests for loading configuration files."""

    def test_load(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps({"max_history": 100, "autosave_interval_seconds": 5}))

        cfg = load_config(path)

        assert isinstance(cfg, RosterConfig)
        assert cfg.max_history == 100
        assert cfg.autosave_interval_seconds == 5
        assert cfg.weeks_to_generate == 4

    def test_invalid_file_rejected(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps({"max_history": "lots"}))
        with pytest.raises(ValidationError):
            load_config(path)
