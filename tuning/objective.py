"""
Optuna Objective Function.

Trains a fresh n-tuple player per trial and reports the average score
after every epoch so that MedianPruner can stop weak trials early.
"""

import statistics
from typing import Callable

import optuna
from optuna import Trial

from algorithms.ntuple.run import build_player, evaluate, play_episode
from algorithms.ntuple.weights import WeightStore
from game.env import TileEnvironment
from game.turn import TurnContext
from orchestrator.config import AgentConfig
from tuning.search_spaces import suggest_hyperparams
from tuning.study_config import StudyConfig


def create_objective(config: StudyConfig) -> Callable[[Trial], float]:
    """Create Optuna objective function for a study.

    Args:
        config: Study configuration

    Returns:
        Objective function that takes a Trial and returns float (avg score)
    """

    def objective(trial: Trial) -> float:
        """Train a player and return its last epoch score.

        Args:
            trial: Optuna trial object

        Returns:
            Average score of the final epoch
        """
        params = suggest_hyperparams(trial)
        agent = AgentConfig(learning_rate=params["learning_rate"], seed=config.seed)

        weights = WeightStore.initialize()
        player = build_player(agent, training=True, weights=weights)
        environment = TileEnvironment(seed=config.seed)
        turn = TurnContext()

        epoch_score = 0.0
        for epoch in range(config.epochs_per_trial):
            scores = [
                play_episode(player, environment, turn).score
                for _ in range(config.episodes_per_epoch)
            ]

            if config.eval_games_per_epoch > 0:
                epoch_score = evaluate(agent, config.eval_games_per_epoch, weights=weights).avg_score
            else:
                epoch_score = statistics.mean(scores)

            trial.report(epoch_score, epoch)

            if trial.should_prune():
                raise optuna.TrialPruned()

        return epoch_score

    return objective
