"""
Hyperparameter Tuning Module.

Optuna integration for tuning the n-tuple player's learning rate.
Studies are stored in SQLite so they can be resumed.
"""

from tuning.study_config import StudyConfig, STUDY_CONFIGS
from tuning.search_spaces import suggest_hyperparams

__all__ = [
    "StudyConfig",
    "STUDY_CONFIGS",
    "suggest_hyperparams",
]
