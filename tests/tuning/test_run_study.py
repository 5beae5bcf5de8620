"""Tests for the study runner CLI.

The objective is replaced by a fast stand-in so no games are played.
"""

import pytest
import sys
import optuna
from unittest.mock import patch

from tuning import run_study
from tuning.search_spaces import suggest_hyperparams


def _score_by_rate(config):
    def objective(trial):
        return 1000.0 * suggest_hyperparams(trial)["learning_rate"]
    return objective


def _always_pruned(config):
    def objective(trial):
        suggest_hyperparams(trial)
        raise optuna.TrialPruned()
    return objective


def _argv(tmp_path, trials=2):
    return [
        'run_study',
        '--study', 'ntuple_alpha_quick',
        '--trials', str(trials),
        '--storage', f"sqlite:///{tmp_path}/db/study.db",
        '--results-dir', str(tmp_path / "results"),
        '--seed', '3',
        '--no-progress',
    ]


class TestRunStudy:
    """Tests for run_study.main."""

    def test_writes_best_trial(self, tmp_path, capsys):
        """Test a short study writes its best learning rate."""
        with patch.object(run_study, 'create_objective', _score_by_rate):
            with patch.object(sys, 'argv', _argv(tmp_path)):
                results_file = run_study.main()

        assert results_file == tmp_path / "results" / "ntuple_alpha_quick_best.txt"
        text = results_file.read_text()
        assert "Best learning_rate" in text
        assert "2 complete, 0 pruned" in text
        assert (tmp_path / "db" / "study.db").exists()

        captured = capsys.readouterr()
        assert "Seed: 3" in captured.out

    def test_study_resumes(self, tmp_path):
        """Test a second run adds trials to the stored study."""
        with patch.object(run_study, 'create_objective', _score_by_rate):
            with patch.object(sys, 'argv', _argv(tmp_path)):
                run_study.main()
            with patch.object(sys, 'argv', _argv(tmp_path, trials=1)):
                run_study.main()

        study = optuna.load_study(
            study_name="ntuple_alpha_quick",
            storage=f"sqlite:///{tmp_path}/db/study.db",
        )
        assert len(study.trials) == 3

    def test_no_completed_trials(self, tmp_path, capsys):
        """Test a fully pruned study reports nothing."""
        with patch.object(run_study, 'create_objective', _always_pruned):
            with patch.object(sys, 'argv', _argv(tmp_path, trials=1)):
                assert run_study.main() is None

        assert not (tmp_path / "results").exists()
        assert "No trial completed" in capsys.readouterr().out

    def test_unknown_study_rejected(self):
        with patch.object(sys, 'argv', ['run_study', '--study', 'dqn_onehot_merge']):
            with pytest.raises(SystemExit) as exc_info:
                run_study.main()
            assert exc_info.value.code == 2


class TestStudyConfigFromArgs:
    """Tests for command-line overrides."""

    def test_defaults_from_predefined_study(self):
        args = run_study.build_parser().parse_args(['--study', 'ntuple_alpha'])
        config = run_study.study_config_from_args(args)
        assert config is run_study.STUDY_CONFIGS['ntuple_alpha']

    def test_overrides(self):
        args = run_study.build_parser().parse_args([
            '--study', 'ntuple_alpha', '--trials', '4', '--seed', '9',
            '--storage', 'sqlite:///x.db',
        ])
        config = run_study.study_config_from_args(args)
        assert config.n_trials == 4
        assert config.seed == 9
        assert config.storage_path == 'sqlite:///x.db'
        assert run_study.STUDY_CONFIGS['ntuple_alpha'].n_trials == 20
