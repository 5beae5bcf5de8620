"""
Run Configuration.

Typed configuration for the n-tuple player and its training runs.

Two input surfaces end up in the same dataclasses:
- YAML files (load_config / save_config)
- legacy "key=value" token strings such as "alpha=0.003 seed=7 save=w.bin"
  (AgentConfig.from_tokens)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from algorithms.ntuple.agent import DEFAULT_LEARNING_RATE


_TRUE_TOKENS = frozenset(["1", "true", "yes", "on", ""])
_FALSE_TOKENS = frozenset(["0", "false", "no", "off"])


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_TOKENS:
        return True
    if lowered in _FALSE_TOKENS:
        return False
    raise ValueError(f"Invalid boolean for '{key}': {value!r}")


def _optional_int(key: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid integer for '{key}': {value!r}") from None


@dataclass
class AgentConfig:
    """Configuration consumed when building the player and environment.

    Attributes:
        learning_rate: Step size per weight entry (default 0.1 / 32)
        seed: Seed for the environment's random generator (None: random)
        init: Start from zeroed weight tables when nothing is loaded
        load_path: Weight file to load before playing
        save_path: Weight file to write after the run
    """
    learning_rate: float = DEFAULT_LEARNING_RATE
    seed: Optional[int] = None
    init: bool = True
    load_path: Optional[str] = None
    save_path: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.learning_rate <= 0:
            raise ValueError("learning_rate must be positive")
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be non-negative")
        if not self.init and not self.load_path:
            raise ValueError("Weights need either init or a load path")

    @staticmethod
    def token_overrides(args: str) -> Dict[str, Any]:
        """Parse "key=value" tokens (alpha, seed, init, load, save) into field values.

        Only keys present in `args` appear in the result, so it can be
        applied on top of an existing config with dataclasses.replace().
        Other keys (name=, role=, ...) are accepted and ignored. A bare
        "init" token counts as init=true.

        Raises:
            ValueError: If alpha or seed is not numeric
        """
        meta: Dict[str, str] = {}
        for pair in args.split():
            key, _, value = pair.partition("=")
            meta[key] = value

        kwargs: Dict[str, Any] = {}
        if "alpha" in meta:
            try:
                kwargs["learning_rate"] = float(meta["alpha"])
            except ValueError:
                raise ValueError(f"Invalid alpha: {meta['alpha']!r}") from None
        if "seed" in meta:
            try:
                kwargs["seed"] = int(float(meta["seed"]))
            except ValueError:
                raise ValueError(f"Invalid seed: {meta['seed']!r}") from None
        if "init" in meta:
            kwargs["init"] = _parse_bool("init", meta["init"])
        if meta.get("load"):
            kwargs["load_path"] = meta["load"]
        if meta.get("save"):
            kwargs["save_path"] = meta["save"]
        return kwargs

    @classmethod
    def from_tokens(cls, args: str) -> "AgentConfig":
        """Build a config from defaults plus "key=value" tokens."""
        return cls(**cls.token_overrides(args))


@dataclass
class TrainingConfig:
    """Configuration for a training run.

    Attributes:
        name: Run identifier (used for results and checkpoint names)
        agent: Player / environment configuration
        total_episodes: Episodes to train for
        log_frequency: Print a progress line every N episodes
        eval_games: Greedy evaluation games after training (0 = skip)
        checkpoint_dir: Directory for periodic weight checkpoints
        checkpoint_frequency: Save a checkpoint every N episodes (0 = never)
        results_dir: Base directory for metrics files
    """
    name: str = "ntuple"
    agent: AgentConfig = field(default_factory=AgentConfig)
    total_episodes: int = 1000
    log_frequency: int = 100
    eval_games: int = 0
    checkpoint_dir: Optional[str] = None
    checkpoint_frequency: int = 0
    results_dir: str = "results"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.total_episodes <= 0:
            raise ValueError("total_episodes must be positive")
        if self.log_frequency <= 0:
            raise ValueError("log_frequency must be positive")
        if self.eval_games < 0:
            raise ValueError("eval_games must be non-negative")
        if self.checkpoint_frequency < 0:
            raise ValueError("checkpoint_frequency must be non-negative")
        if self.checkpoint_frequency and not self.checkpoint_dir:
            raise ValueError("checkpoint_frequency needs a checkpoint_dir")

    @property
    def results_path(self) -> Path:
        """Get results directory as Path."""
        return Path(self.results_dir)


def config_from_dict(raw: Dict[str, Any]) -> TrainingConfig:
    """Build a TrainingConfig from a parsed YAML mapping.

    Raises:
        ValueError: If a section has the wrong shape or a value is invalid
    """
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")

    agent_raw = raw.get("agent") or {}
    training = raw.get("training") or {}
    logging_cfg = raw.get("logging") or {}
    checkpoint = raw.get("checkpoint") or {}
    for section, value in (("agent", agent_raw), ("training", training),
                           ("logging", logging_cfg), ("checkpoint", checkpoint)):
        if not isinstance(value, dict):
            raise ValueError(f"Section '{section}' must be a mapping")

    agent = AgentConfig(
        learning_rate=float(agent_raw.get("learning_rate", DEFAULT_LEARNING_RATE)),
        seed=_optional_int("seed", agent_raw.get("seed")),
        init=bool(agent_raw.get("init", True)),
        load_path=agent_raw.get("load"),
        save_path=agent_raw.get("save"),
    )

    return TrainingConfig(
        name=raw.get("name", "ntuple"),
        agent=agent,
        total_episodes=training.get("total_episodes", 1000),
        eval_games=training.get("eval_games", 0),
        log_frequency=logging_cfg.get("log_frequency", 100),
        checkpoint_dir=checkpoint.get("save_dir"),
        checkpoint_frequency=checkpoint.get("save_frequency", 0),
        results_dir=raw.get("results_dir", "results"),
    )


def load_config(config_path: str) -> TrainingConfig:
    """Load training configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        TrainingConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is empty or invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError("Config file is empty")

    return config_from_dict(raw)


def save_config(config: TrainingConfig, config_path: str) -> None:
    """Save training configuration to YAML file.

    Args:
        config: Configuration to save
        config_path: Path to output YAML file
    """
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    output = {
        "name": config.name,
        "results_dir": config.results_dir,
        "agent": {
            "learning_rate": config.agent.learning_rate,
            "seed": config.agent.seed,
            "init": config.agent.init,
            "load": config.agent.load_path,
            "save": config.agent.save_path,
        },
        "training": {
            "total_episodes": config.total_episodes,
            "eval_games": config.eval_games,
        },
        "logging": {
            "log_frequency": config.log_frequency,
        },
        "checkpoint": {
            "save_dir": config.checkpoint_dir,
            "save_frequency": config.checkpoint_frequency,
        },
    }

    with open(path, 'w') as f:
        yaml.dump(output, f, default_flow_style=False, sort_keys=False)
