"""
Learning-rate study for the n-tuple player.

Usage:
    python -m tuning.run_study --study ntuple_alpha
    python -m tuning.run_study --study ntuple_alpha_quick --trials 3 --seed 7

Trials share one SQLite study, so an interrupted search resumes where it
stopped. Every trial trains its own full-size weight tables, so trials run
one at a time.
"""

import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import optuna
from optuna.samplers import TPESampler
from optuna.trial import TrialState

from algorithms.ntuple.agent import DEFAULT_LEARNING_RATE
from tuning.objective import create_objective
from tuning.study_config import STUDY_CONFIGS, StudyConfig


# Prune below the median once a few trials have reported two epochs
PRUNER_STARTUP_TRIALS = 3
PRUNER_WARMUP_EPOCHS = 2
SAMPLER_SEED = 42
DEFAULT_RESULTS_DIR = "data/optuna/results"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tune the n-tuple player's learning rate")
    parser.add_argument(
        "--study",
        required=True,
        choices=list(STUDY_CONFIGS.keys()),
        help="Name of the study to run"
    )
    parser.add_argument(
        "--trials",
        type=int,
        help="Trials to add in this run (default: from config)"
    )
    parser.add_argument(
        "--storage",
        help="Optuna storage URL (default: from config)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Environment seed shared by all trials (default: from config)"
    )
    parser.add_argument(
        "--results-dir",
        default=DEFAULT_RESULTS_DIR,
        help=f"Where the best-trial summary is written (default: {DEFAULT_RESULTS_DIR})"
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the Optuna progress bar"
    )
    return parser


def study_config_from_args(args) -> StudyConfig:
    config = STUDY_CONFIGS[args.study]
    overrides = {}
    if args.trials is not None:
        overrides["n_trials"] = args.trials
    if args.storage is not None:
        overrides["storage_path"] = args.storage
    if args.seed is not None:
        overrides["seed"] = args.seed
    return replace(config, **overrides) if overrides else config


def create_study(config: StudyConfig) -> optuna.Study:
    """Create or resume the study named in the config."""
    if config.storage_path.startswith("sqlite:///"):
        Path(config.storage_path[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)

    pruner = optuna.pruners.MedianPruner(
        n_startup_trials=PRUNER_STARTUP_TRIALS,
        n_warmup_steps=PRUNER_WARMUP_EPOCHS,
        interval_steps=1,
    )
    return optuna.create_study(
        study_name=config.study_name,
        storage=config.storage_path,
        direction="maximize",
        pruner=pruner,
        sampler=TPESampler(seed=SAMPLER_SEED),
        load_if_exists=True,
    )


def summarize(study: optuna.Study) -> List[str]:
    """Summary lines for the study, or an empty list if no trial completed."""
    states = [t.state for t in study.trials]
    if TrialState.COMPLETE not in states:
        return []

    best = study.best_trial
    learning_rate = best.params["learning_rate"]
    return [
        f"Study: {study.study_name}",
        f"Trials: {states.count(TrialState.COMPLETE)} complete, "
        f"{states.count(TrialState.PRUNED)} pruned",
        f"Best trial: {best.number}",
        f"Best value (avg score): {best.value:.2f}",
        f"Best learning_rate: {learning_rate:.6g} "
        f"({learning_rate / DEFAULT_LEARNING_RATE:.2f}x the default 0.1/32)",
    ]


def main(argv: Optional[List[str]] = None) -> Optional[Path]:
    """Run a study and write its best trial.

    Returns:
        Path of the summary file, or None if no trial completed
    """
    args = build_parser().parse_args(argv)
    config = study_config_from_args(args)

    print(f"=" * 60)
    print(f"Study: {config.study_name}")
    print(f"Trials: {config.n_trials}")
    print(f"Epochs per trial: {config.epochs_per_trial} x {config.episodes_per_epoch} episodes")
    print(f"Seed: {config.seed}")
    print(f"Storage: {config.storage_path}")
    print(f"=" * 60)

    study = create_study(config)
    print(f"Loaded study with {len(study.trials)} existing trials")

    study.optimize(
        create_objective(config),
        n_trials=config.n_trials,
        n_jobs=1,
        show_progress_bar=not args.no_progress,
    )

    lines = summarize(study)
    if not lines:
        print("No trial completed; nothing to report")
        return None

    print()
    for line in lines:
        print(line)

    results_dir = Path(args.results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)
    results_file = results_dir / f"{config.study_name}_best.txt"
    results_file.write_text("\n".join(lines) + "\n")
    print(f"\nResults saved to: {results_file}")
    return results_file


if __name__ == "__main__":
    main()
