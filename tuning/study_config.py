"""
Study Configuration.

Defines the configuration dataclass and predefined studies for tuning the
n-tuple player.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class StudyConfig:
    """Configuration for a single Optuna study.

    Attributes:
        study_name: Unique name for the study
        n_trials: Number of trials per study
        epochs_per_trial: Reporting epochs per trial
        episodes_per_epoch: Training episodes per epoch
        eval_games_per_epoch: Greedy evaluation games per epoch (0: use the
            epoch's training scores instead)
        seed: Environment seed shared by all trials (None: random)
        storage_path: SQLite storage path
    """
    study_name: str
    n_trials: int = 20
    epochs_per_trial: int = 20
    episodes_per_epoch: int = 500
    eval_games_per_epoch: int = 0
    seed: Optional[int] = None
    storage_path: str = "sqlite:///data/optuna/ntuple_tuning.db"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.n_trials <= 0:
            raise ValueError("n_trials must be positive")
        if self.epochs_per_trial <= 0:
            raise ValueError("epochs_per_trial must be positive")
        if self.episodes_per_epoch <= 0:
            raise ValueError("episodes_per_epoch must be positive")
        if self.eval_games_per_epoch < 0:
            raise ValueError("eval_games_per_epoch must be non-negative")


STUDY_CONFIGS: Dict[str, StudyConfig] = {
    "ntuple_alpha": StudyConfig(study_name="ntuple_alpha"),
    "ntuple_alpha_quick": StudyConfig(
        study_name="ntuple_alpha_quick",
        n_trials=5,
        epochs_per_trial=5,
        episodes_per_epoch=100,
    ),
}
