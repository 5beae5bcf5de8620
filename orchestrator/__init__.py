"""
Training Orchestrator Package.

Configuration, metrics and the command-line interface for training and
evaluating the n-tuple player.

Key modules:
- config: Agent and training configuration dataclasses (YAML / key=value)
- metrics: Episode records, training and evaluation metrics
- __main__: Command-line interface
"""

from orchestrator.config import AgentConfig, TrainingConfig
from orchestrator.metrics import EpisodeRecord, EvaluationMetrics, MetricsCollector, TrainingMetrics

__all__ = [
    "AgentConfig",
    "TrainingConfig",
    "EpisodeRecord",
    "EvaluationMetrics",
    "MetricsCollector",
    "TrainingMetrics",
]
