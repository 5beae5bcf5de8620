"""
Hyperparameter Search Spaces.

The n-tuple player has a single tunable parameter: the per-entry learning
rate. The default 0.1 / 32 sits in the middle of the searched range.
"""

from typing import Any, Dict

from optuna import Trial


LEARNING_RATE_RANGE = (1e-4, 1e-2)


def suggest_hyperparams(trial: Trial) -> Dict[str, Any]:
    """Suggest all hyperparameters for a trial.

    Args:
        trial: Optuna trial object

    Returns:
        Dictionary of hyperparameter values
    """
    low, high = LEARNING_RATE_RANGE
    return {
        "learning_rate": trial.suggest_float("learning_rate", low, high, log=True),
    }
