"""
Metrics Collection and Aggregation.

Collects per-episode records from training and evaluation runs and stores
them as JSON / JSONL under a results directory.

Besides score statistics, runs are compared by tile reach rates: the
fraction of episodes whose largest tile reached a given value.
"""

import json
import statistics
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Iterable, List, Optional, Sequence


# 2048, 4096, 8192
DEFAULT_REACH_EXPONENTS = (11, 12, 13)


@dataclass
class EpisodeRecord:
    """Outcome of a single episode.

    Attributes:
        score: Sum of merge rewards earned by the player
        steps: Number of player slides
        max_exponent: Exponent of the largest tile on the final board
        bonus_tiles: Bonus tiles the environment placed during the episode
        duration_seconds: Wall time of the episode
    """
    score: int
    steps: int
    max_exponent: int
    bonus_tiles: int = 0
    duration_seconds: float = 0.0

    @property
    def max_tile(self) -> int:
        return (1 << self.max_exponent) if self.max_exponent else 0


def reach_rates(
    max_exponents: Sequence[int],
    exponents: Iterable[int] = DEFAULT_REACH_EXPONENTS,
) -> Dict[str, float]:
    """Fraction of episodes whose max tile reached each exponent.

    Returns:
        Dict keyed by tile value as a string (JSON friendly)
    """
    rates: Dict[str, float] = {}
    total = len(max_exponents)
    for exponent in exponents:
        reached = sum(1 for e in max_exponents if e >= exponent)
        rates[str(1 << exponent)] = reached / total if total else 0.0
    return rates


@dataclass
class TrainingMetrics:
    """Metrics collected during training.

    Attributes:
        experiment_name: Name of the run
        learning_rate: Step size used by the player
        total_episodes: Episodes completed
        scores: Score per episode
        max_exponents: Max tile exponent per episode
        bonus_tiles: Bonus tiles per episode
        eval_scores: Periodic evaluation summaries
        training_time_seconds: Total training time
        timestamp: When training completed
    """
    experiment_name: str
    learning_rate: float
    total_episodes: int = 0
    scores: List[int] = field(default_factory=list)
    max_exponents: List[int] = field(default_factory=list)
    bonus_tiles: List[int] = field(default_factory=list)
    eval_scores: List[Dict[str, Any]] = field(default_factory=list)
    training_time_seconds: float = 0.0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def add_episode(self, record: EpisodeRecord) -> None:
        self.total_episodes += 1
        self.scores.append(record.score)
        self.max_exponents.append(record.max_exponent)
        self.bonus_tiles.append(record.bonus_tiles)

    def window(self, size: int) -> Dict[str, Any]:
        """Summary of the last `size` episodes."""
        scores = self.scores[-size:]
        exponents = self.max_exponents[-size:]
        return {
            "episodes": self.total_episodes,
            "avg_score": statistics.mean(scores) if scores else 0.0,
            "max_score": max(scores) if scores else 0,
            "reach_rates": reach_rates(exponents),
        }


@dataclass
class EvaluationMetrics:
    """Metrics from an evaluation run.

    Attributes:
        experiment_name: Name of the run
        num_games: Number of games played
        scores: List of individual game scores
        avg_score: Mean score
        max_score: Maximum score achieved
        min_score: Minimum score
        std_score: Standard deviation of scores
        median_score: Median score
        reach_rates: Tile reach rates keyed by tile value
        timestamp: When evaluation completed
    """
    experiment_name: str
    num_games: int
    scores: List[int]
    avg_score: float
    max_score: int
    min_score: int
    std_score: float
    median_score: float
    reach_rates: Dict[str, float] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def from_records(cls, experiment_name: str, records: List[EpisodeRecord]) -> "EvaluationMetrics":
        """Create EvaluationMetrics from episode records.

        Args:
            experiment_name: Name of the run
            records: Finished episodes

        Returns:
            EvaluationMetrics with computed statistics
        """
        if not records:
            return cls(
                experiment_name=experiment_name,
                num_games=0,
                scores=[],
                avg_score=0.0,
                max_score=0,
                min_score=0,
                std_score=0.0,
                median_score=0.0,
                reach_rates=reach_rates([]),
            )

        scores = [r.score for r in records]
        return cls(
            experiment_name=experiment_name,
            num_games=len(scores),
            scores=scores,
            avg_score=statistics.mean(scores),
            max_score=max(scores),
            min_score=min(scores),
            std_score=statistics.stdev(scores) if len(scores) > 1 else 0.0,
            median_score=statistics.median(scores),
            reach_rates=reach_rates([r.max_exponent for r in records]),
        )


class MetricsCollector:
    """Stores training and evaluation metrics under a results directory.

    Layout:
        <results_dir>/<experiment_name>/training_metrics.json
        <results_dir>/<experiment_name>/evaluation_metrics.json
        <results_dir>/all_results.jsonl

    Attributes:
        results_dir: Base directory for storing results
    """

    def __init__(self, results_dir: str):
        self.results_dir = Path(results_dir)

    def _experiment_dir(self, experiment_name: str) -> Path:
        exp_dir = self.results_dir / experiment_name
        exp_dir.mkdir(parents=True, exist_ok=True)
        return exp_dir

    def save_training(self, metrics: TrainingMetrics) -> Path:
        path = self._experiment_dir(metrics.experiment_name) / "training_metrics.json"
        with open(path, 'w') as f:
            json.dump(asdict(metrics), f, indent=2)
        return path

    def save_evaluation(self, metrics: EvaluationMetrics, checkpoint_path: Optional[str] = None) -> Path:
        path = self._experiment_dir(metrics.experiment_name) / "evaluation_metrics.json"
        with open(path, 'w') as f:
            json.dump(asdict(metrics), f, indent=2)

        # Append to global results JSONL
        results_file = self.results_dir / "all_results.jsonl"
        with open(results_file, 'a') as f:
            record = {
                "experiment_name": metrics.experiment_name,
                "num_games": metrics.num_games,
                "avg_score": metrics.avg_score,
                "max_score": metrics.max_score,
                "reach_rates": metrics.reach_rates,
                "checkpoint_path": checkpoint_path,
                "timestamp": datetime.now().isoformat(),
            }
            f.write(json.dumps(record) + "\n")
        return path

    def load_training(self, experiment_name: str) -> Optional[TrainingMetrics]:
        path = self.results_dir / experiment_name / "training_metrics.json"
        if not path.exists():
            return None
        with open(path, 'r') as f:
            return TrainingMetrics(**json.load(f))

    def load_evaluation(self, experiment_name: str) -> Optional[EvaluationMetrics]:
        path = self.results_dir / experiment_name / "evaluation_metrics.json"
        if not path.exists():
            return None
        with open(path, 'r') as f:
            return EvaluationMetrics(**json.load(f))
