"""
N-tuple Algorithm Entry Point.

Provides the episode driver and the train() / evaluate() interface.

An episode:
1. The environment places two tiles on an empty board (no last move yet)
2. Player and environment alternate: slide, then place
3. The episode ends when either side returns NoAction. The player's
   NoAction is where it learns from the episode.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from algorithms.ntuple.agent import NTuplePlayer
from algorithms.ntuple.patterns import PATTERNS, TABLE_SIZE
from algorithms.ntuple.value import ValueFunction
from algorithms.ntuple.weights import WeightFileError, WeightStore
from game.actions import NoAction
from game.board import Board
from game.env import TileEnvironment
from game.turn import TurnContext
from orchestrator.config import AgentConfig, TrainingConfig
from orchestrator.metrics import EpisodeRecord, EvaluationMetrics, TrainingMetrics


INITIAL_TILES = 2


@dataclass
class TrainingResult:
    """Result of training run.

    Attributes:
        checkpoints: List of saved weight file paths
        metrics: Per-episode training metrics
    """
    checkpoints: List[str]
    metrics: TrainingMetrics


@dataclass
class EvalResult:
    """Result of evaluation run.

    Attributes:
        scores: Final score per game
        avg_score: Average across all games
        max_score: Best score achieved
        metrics: Full evaluation statistics
    """
    scores: List[int]
    avg_score: float
    max_score: int
    metrics: EvaluationMetrics


def load_weights(config: AgentConfig) -> WeightStore:
    """Weights for a run: loaded from config.load_path, else zero-initialized.

    Raises:
        WeightFileError: If the load path cannot be read or its tables do
            not fit the n-tuple patterns
    """
    if config.load_path:
        weights = WeightStore.from_file(config.load_path)
        if weights.table_count != len(PATTERNS) or any(
                weights.table_size(t) != TABLE_SIZE for t in range(weights.table_count)):
            sizes = [weights.table_size(t) for t in range(weights.table_count)]
            raise WeightFileError(
                f"{config.load_path} holds tables {sizes}, expected "
                f"{len(PATTERNS)} tables of {TABLE_SIZE}"
            )
        return weights
    return WeightStore.initialize()


def build_player(config: AgentConfig, training: bool = True,
                 weights: Optional[WeightStore] = None) -> NTuplePlayer:
    if weights is None:
        weights = load_weights(config)
    return NTuplePlayer(
        ValueFunction(weights),
        learning_rate=config.learning_rate,
        training=training,
    )


def play_episode(
    player: NTuplePlayer,
    environment: TileEnvironment,
    turn: TurnContext,
) -> EpisodeRecord:
    """Play one episode from an empty board.

    Args:
        player: Player (learns at its own terminal state when training)
        environment: Tile generator
        turn: Turn state shared by both; its tile counters persist

    Returns:
        EpisodeRecord for the finished episode
    """
    start = time.time()
    board = Board()
    turn.begin_episode()
    player.open_episode()
    environment.open_episode()
    bonus_before = turn.bonus_tiles

    for _ in range(INITIAL_TILES):
        environment.take_action(board, turn).apply(board)

    score = 0
    steps = 0
    while True:
        action = player.take_action(board, turn)
        if isinstance(action, NoAction):
            break
        score += action.apply(board)
        steps += 1

        placement = environment.take_action(board, turn)
        if isinstance(placement, NoAction):
            # The player never reached its own terminal state
            player.close_episode()
            break
        placement.apply(board)

    return EpisodeRecord(
        score=score,
        steps=steps,
        max_exponent=board.max_exponent(),
        bonus_tiles=turn.bonus_tiles - bonus_before,
        duration_seconds=time.time() - start,
    )


def _format_progress(metrics: TrainingMetrics, window: int) -> str:
    summary = metrics.window(window)
    rates = " ".join(f"{tile}:{rate:.1%}" for tile, rate in summary["reach_rates"].items())
    return (f"Episode {summary['episodes']} | "
            f"Avg Score: {summary['avg_score']:.1f} | "
            f"Max Score: {summary['max_score']} | "
            f"Reach {rates}")


def train(config: TrainingConfig, weights: Optional[WeightStore] = None) -> TrainingResult:
    """Train an n-tuple player with online TD(0) episodes.

    Args:
        config: Training configuration
        weights: Optional preloaded weights (default: per config.agent)

    Returns:
        TrainingResult with checkpoint paths and training metrics

    Raises:
        WeightFileError: If weights cannot be loaded or saved
    """
    player = build_player(config.agent, training=True, weights=weights)
    environment = TileEnvironment(seed=config.agent.seed)
    turn = TurnContext()

    metrics = TrainingMetrics(
        experiment_name=config.name,
        learning_rate=config.agent.learning_rate,
    )
    checkpoints: List[str] = []
    checkpoint_dir = Path(config.checkpoint_dir) if config.checkpoint_dir else None

    print(f"Starting training for {config.total_episodes} episodes "
          f"(alpha={config.agent.learning_rate:g})...")
    start = time.time()

    for episode in range(1, config.total_episodes + 1):
        metrics.add_episode(play_episode(player, environment, turn))

        if episode % config.log_frequency == 0:
            print(_format_progress(metrics, config.log_frequency))

        if checkpoint_dir is not None and config.checkpoint_frequency \
                and episode % config.checkpoint_frequency == 0:
            checkpoint_path = str(checkpoint_dir / f"{config.name}_episode_{episode}.bin")
            player.value_function.weights.save(checkpoint_path)
            checkpoints.append(checkpoint_path)
            print(f"  Saved checkpoint: {checkpoint_path}")

    metrics.training_time_seconds = time.time() - start

    if config.agent.save_path:
        player.value_function.weights.save(config.agent.save_path)
        checkpoints.append(config.agent.save_path)
        print(f"Saved weights: {config.agent.save_path}")

    if config.eval_games > 0:
        eval_result = evaluate(config.agent, config.eval_games,
                               weights=player.value_function.weights, name=config.name)
        metrics.eval_scores.append({
            "episode": metrics.total_episodes,
            "avg_score": eval_result.avg_score,
            "max_score": eval_result.max_score,
        })
        print(f"  Eval: Avg={eval_result.avg_score:.1f}, Max={eval_result.max_score}")

    return TrainingResult(checkpoints=checkpoints, metrics=metrics)


def evaluate(
    config: AgentConfig,
    num_games: int,
    weights: Optional[WeightStore] = None,
    name: str = "ntuple",
) -> EvalResult:
    """Play greedy games without learning.

    Args:
        config: Agent configuration (weights loaded from it unless given)
        num_games: Number of games to play
        weights: Optional weights to evaluate (not modified)
        name: Run name recorded in the metrics

    Returns:
        EvalResult with scores and statistics
    """
    if num_games <= 0:
        raise ValueError("num_games must be positive")

    player = build_player(config, training=False, weights=weights)
    environment = TileEnvironment(seed=config.seed)
    turn = TurnContext()

    records = [play_episode(player, environment, turn) for _ in range(num_games)]
    metrics = EvaluationMetrics.from_records(name, records)
    return EvalResult(
        scores=metrics.scores,
        avg_score=metrics.avg_score,
        max_score=metrics.max_score,
        metrics=metrics,
    )
