"""
Training Orchestrator CLI.

Entry point for training and evaluating the n-tuple player.

Usage:
    python -m orchestrator train <config.yaml> [--episodes N] [--alpha A] [--seed S]
    python -m orchestrator train <config.yaml> --agent-args "alpha=0.003 seed=7 save=w.bin"
    python -m orchestrator evaluate --load <weights.bin> [--games N] [--seed S]
    python -m orchestrator show <config.yaml>

Weight file errors are fatal: the command exits with status 1 instead of
playing with missing or unsaved weights.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from algorithms.ntuple.weights import WeightFileError
from orchestrator.config import AgentConfig, load_config
from orchestrator.metrics import MetricsCollector


def _apply_agent_overrides(agent: AgentConfig, args) -> AgentConfig:
    """Layer --agent-args tokens, then the explicit flags, over the config's agent."""
    overrides = {}
    if args.agent_args:
        overrides.update(AgentConfig.token_overrides(args.agent_args))
    if args.alpha is not None:
        overrides["learning_rate"] = args.alpha
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.load is not None:
        overrides["load_path"] = args.load
    if args.save is not None:
        overrides["save_path"] = args.save
    return replace(agent, **overrides) if overrides else agent


def cmd_train(args):
    """Train from a configuration file.

    Args:
        args: Parsed command line arguments
    """
    from algorithms.ntuple.run import train

    config_path = args.config

    if not Path(config_path).exists():
        print(f"Error: Config file not found: {config_path}")
        sys.exit(1)

    try:
        config = load_config(config_path)
        agent = _apply_agent_overrides(config.agent, args)
        overrides = {"agent": agent}
        if args.episodes is not None:
            overrides["total_episodes"] = args.episodes
        if args.eval_games is not None:
            overrides["eval_games"] = args.eval_games
        if args.results_dir:
            overrides["results_dir"] = args.results_dir
        config = replace(config, **overrides)
    except Exception as e:
        print(f"Error loading config: {e}")
        sys.exit(1)

    print(f"Loaded configuration from: {config_path}")
    print(f"  Episodes: {config.total_episodes}")
    print(f"  Learning rate: {config.agent.learning_rate:g}")
    print(f"  Seed: {config.agent.seed}")
    print(f"  Load: {config.agent.load_path}")
    print(f"  Save: {config.agent.save_path}")

    try:
        result = train(config)
    except WeightFileError as e:
        print(f"Error: {e}")
        sys.exit(1)

    collector = MetricsCollector(config.results_dir)
    metrics_path = collector.save_training(result.metrics)

    summary = result.metrics.window(result.metrics.total_episodes)
    print(f"\nFinal Summary:")
    print(f"  Episodes: {summary['episodes']}")
    print(f"  Avg score: {summary['avg_score']:.1f}")
    print(f"  Max score: {summary['max_score']}")
    for tile, rate in summary["reach_rates"].items():
        print(f"  Reached {tile}: {rate:.1%}")
    print(f"  Metrics: {metrics_path}")


def cmd_evaluate(args):
    """Evaluate saved weights with greedy play.

    Args:
        args: Parsed command line arguments
    """
    from algorithms.ntuple.run import evaluate

    try:
        agent = AgentConfig(seed=args.seed, init=False, load_path=args.load)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        result = evaluate(agent, args.games, name=args.name)
    except WeightFileError as e:
        print(f"Error: {e}")
        sys.exit(1)

    collector = MetricsCollector(args.results_dir)
    collector.save_evaluation(result.metrics, checkpoint_path=args.load)

    metrics = result.metrics
    print(f"Evaluated {metrics.num_games} games with {args.load}")
    print(f"  Avg score: {metrics.avg_score:.1f} (std {metrics.std_score:.1f})")
    print(f"  Median score: {metrics.median_score:.1f}")
    print(f"  Max score: {metrics.max_score}")
    for tile, rate in metrics.reach_rates.items():
        print(f"  Reached {tile}: {rate:.1%}")


def cmd_show(args):
    """Print a configuration file.

    Args:
        args: Parsed command line arguments
    """
    config_path = args.config

    if not Path(config_path).exists():
        print(f"Error: Config file not found: {config_path}")
        sys.exit(1)

    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"Error loading config: {e}")
        sys.exit(1)

    print(f"Configuration: {config_path}")
    print(f"  Name: {config.name}")
    print(f"  Episodes: {config.total_episodes}")
    print(f"  Eval games: {config.eval_games}")
    print(f"  Log frequency: {config.log_frequency}")
    print(f"  Checkpoints: {config.checkpoint_dir} every {config.checkpoint_frequency}")
    print(f"  Results dir: {config.results_dir}")
    print(f"  Agent:")
    print(f"      Learning rate: {config.agent.learning_rate:g}")
    print(f"      Seed: {config.agent.seed}")
    print(f"      Init: {config.agent.init}")
    print(f"      Load: {config.agent.load_path}")
    print(f"      Save: {config.agent.save_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orchestrator",
        description="Train and evaluate the 2048 n-tuple player",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # train command
    train_parser = subparsers.add_parser(
        "train",
        help="Train from a config file",
    )
    train_parser.add_argument(
        "config",
        help="Path to YAML configuration file",
    )
    train_parser.add_argument(
        "--episodes", "-n",
        type=int,
        help="Override number of training episodes",
    )
    train_parser.add_argument(
        "--alpha",
        type=float,
        help="Override learning rate",
    )
    train_parser.add_argument(
        "--seed",
        type=int,
        help="Override environment seed",
    )
    train_parser.add_argument(
        "--load",
        help="Load weights from this file",
    )
    train_parser.add_argument(
        "--save",
        help="Save weights to this file",
    )
    train_parser.add_argument(
        "--agent-args",
        help='Agent settings as "key=value" tokens (alpha, seed, init, load, save)',
    )
    train_parser.add_argument(
        "--eval-games",
        type=int,
        help="Override number of evaluation games after training",
    )
    train_parser.add_argument(
        "--results-dir",
        help="Override results directory",
    )
    train_parser.set_defaults(func=cmd_train)

    # evaluate command
    eval_parser = subparsers.add_parser(
        "evaluate",
        help="Evaluate saved weights",
    )
    eval_parser.add_argument(
        "--load",
        required=True,
        help="Weight file to evaluate",
    )
    eval_parser.add_argument(
        "--games", "-g",
        type=int,
        default=100,
        help="Number of games (default: 100)",
    )
    eval_parser.add_argument(
        "--seed",
        type=int,
        help="Environment seed",
    )
    eval_parser.add_argument(
        "--name",
        default="ntuple",
        help="Run name for the metrics files (default: ntuple)",
    )
    eval_parser.add_argument(
        "--results-dir",
        default="results",
        help="Results directory (default: results)",
    )
    eval_parser.set_defaults(func=cmd_evaluate)

    # show command
    show_parser = subparsers.add_parser(
        "show",
        help="Show a config file",
    )
    show_parser.add_argument(
        "config",
        help="Path to YAML configuration file",
    )
    show_parser.set_defaults(func=cmd_show)

    return parser


def main():
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
