"""Tests for orchestrator configuration module.

Tests the AgentConfig, TrainingConfig, and config I/O functions.
"""

import pytest
import tempfile
from pathlib import Path

from algorithms.ntuple.agent import DEFAULT_LEARNING_RATE
from orchestrator.config import (
    AgentConfig,
    TrainingConfig,
    config_from_dict,
    load_config,
    save_config,
)


class TestAgentConfig:
    """Tests for AgentConfig dataclass."""

    def test_defaults(self):
        """Test default agent settings."""
        config = AgentConfig()
        assert config.learning_rate == DEFAULT_LEARNING_RATE
        assert config.seed is None
        assert config.init is True
        assert config.load_path is None
        assert config.save_path is None

    def test_non_positive_learning_rate_raises(self):
        """Test that a zero learning rate raises ValueError."""
        with pytest.raises(ValueError) as exc_info:
            AgentConfig(learning_rate=0.0)
        assert "learning_rate" in str(exc_info.value)

    def test_negative_seed_raises(self):
        with pytest.raises(ValueError):
            AgentConfig(seed=-1)

    def test_no_init_needs_load_path(self):
        """Test that weights must come from init or a file."""
        with pytest.raises(ValueError):
            AgentConfig(init=False)
        config = AgentConfig(init=False, load_path="w.bin")
        assert config.load_path == "w.bin"


class TestAgentTokens:
    """Tests for "key=value" token parsing."""

    def test_all_keys(self):
        """Test parsing every recognized key."""
        config = AgentConfig.from_tokens("alpha=0.01 seed=7 init=false load=in.bin save=out.bin")
        assert config.learning_rate == 0.01
        assert config.seed == 7
        assert config.init is False
        assert config.load_path == "in.bin"
        assert config.save_path == "out.bin"

    def test_empty_string_gives_defaults(self):
        assert AgentConfig.from_tokens("") == AgentConfig()

    def test_unknown_keys_ignored(self):
        """Test that name= and role= style tokens are ignored."""
        config = AgentConfig.from_tokens("name=learner role=player alpha=0.5")
        assert config.learning_rate == 0.5

    def test_bare_init_is_true(self):
        assert AgentConfig.from_tokens("init").init is True

    def test_invalid_alpha_raises(self):
        with pytest.raises(ValueError) as exc_info:
            AgentConfig.from_tokens("alpha=fast")
        assert "alpha" in str(exc_info.value)

    def test_invalid_seed_raises(self):
        with pytest.raises(ValueError):
            AgentConfig.from_tokens("seed=abc")

    def test_invalid_bool_raises(self):
        with pytest.raises(ValueError):
            AgentConfig.from_tokens("init=maybe")


class TestTrainingConfig:
    """Tests for TrainingConfig dataclass."""

    def test_defaults(self):
        config = TrainingConfig()
        assert config.name == "ntuple"
        assert config.total_episodes == 1000
        assert config.log_frequency == 100
        assert config.eval_games == 0
        assert config.checkpoint_frequency == 0
        assert config.results_path == Path("results")

    def test_invalid_episodes_raises(self):
        """Test that non-positive episode count raises ValueError."""
        with pytest.raises(ValueError) as exc_info:
            TrainingConfig(total_episodes=0)
        assert "total_episodes" in str(exc_info.value)

    def test_invalid_log_frequency_raises(self):
        with pytest.raises(ValueError):
            TrainingConfig(log_frequency=0)

    def test_negative_eval_games_raises(self):
        with pytest.raises(ValueError):
            TrainingConfig(eval_games=-1)

    def test_checkpoint_frequency_needs_dir(self):
        with pytest.raises(ValueError):
            TrainingConfig(checkpoint_frequency=10)


class TestConfigIO:
    """Tests for config load/save functions."""

    def test_save_and_load_roundtrip(self):
        """Test saving and loading a config preserves every field."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "run.yaml"
            config = TrainingConfig(
                name="roundtrip",
                agent=AgentConfig(learning_rate=0.002, seed=11, save_path="out.bin"),
                total_episodes=500,
                log_frequency=50,
                eval_games=10,
                checkpoint_dir="ckpt",
                checkpoint_frequency=100,
                results_dir="res",
            )
            save_config(config, str(config_path))

            assert load_config(str(config_path)) == config

    def test_load_nonexistent_raises(self):
        """Test loading nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/path/config.yaml")

    def test_load_empty_raises(self):
        """Test loading empty file raises ValueError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "empty.yaml"
            config_path.write_text("")
            with pytest.raises(ValueError) as exc_info:
                load_config(str(config_path))
            assert "empty" in str(exc_info.value)

    def test_missing_sections_use_defaults(self):
        config = config_from_dict({"name": "bare"})
        assert config.name == "bare"
        assert config.agent == AgentConfig()
        assert config.total_episodes == 1000

    def test_bad_section_raises(self):
        with pytest.raises(ValueError):
            config_from_dict({"agent": [1, 2, 3]})

    def test_shipped_config_loads(self):
        """Test the packaged default config is valid."""
        path = Path(__file__).resolve().parents[2] / "algorithms" / "ntuple" / "config.yaml"
        config = load_config(str(path))
        assert config.agent.learning_rate == pytest.approx(DEFAULT_LEARNING_RATE)

    def test_quoted_seed_is_cast(self):
        """Test a quoted YAML seed becomes an int."""
        config = config_from_dict({"agent": {"seed": "7"}})
        assert config.agent.seed == 7

    def test_non_numeric_seed_raises(self):
        with pytest.raises(ValueError) as exc_info:
            config_from_dict({"agent": {"seed": "lucky"}})
        assert "seed" in str(exc_info.value)


class TestTokenOverrides:
    """Tests for token overrides applied over an existing config."""

    def test_only_given_keys(self):
        assert AgentConfig.token_overrides("alpha=0.01 name=learner") == {"learning_rate": 0.01}

    def test_empty(self):
        assert AgentConfig.token_overrides("") == {}

    def test_replace_keeps_other_fields(self):
        """Test overriding alpha leaves seed and weight paths alone."""
        from dataclasses import replace

        base = AgentConfig(seed=3, load_path="in.bin", save_path="out.bin")
        config = replace(base, **AgentConfig.token_overrides("alpha=0.02"))
        assert config.learning_rate == 0.02
        assert config.seed == 3
        assert config.load_path == "in.bin"
        assert config.save_path == "out.bin"
