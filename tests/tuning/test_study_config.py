"""Tests for study configuration and the Optuna objective."""

import pytest
import optuna

from tuning.objective import create_objective
from tuning.study_config import StudyConfig, STUDY_CONFIGS


class TestStudyConfig:
    """Test StudyConfig dataclass."""

    def test_defaults(self):
        config = StudyConfig(study_name="test")
        assert config.n_trials == 20
        assert config.epochs_per_trial == 20
        assert config.episodes_per_epoch == 500
        assert config.eval_games_per_epoch == 0
        assert config.storage_path.startswith("sqlite:///")

    def test_invalid_trials_raises(self):
        with pytest.raises(ValueError):
            StudyConfig(study_name="bad", n_trials=0)

    def test_invalid_epochs_raises(self):
        with pytest.raises(ValueError):
            StudyConfig(study_name="bad", epochs_per_trial=0)

    def test_invalid_episodes_raises(self):
        with pytest.raises(ValueError):
            StudyConfig(study_name="bad", episodes_per_epoch=0)

    def test_negative_eval_games_raises(self):
        with pytest.raises(ValueError):
            StudyConfig(study_name="bad", eval_games_per_epoch=-1)


class TestPredefinedStudies:
    """Test predefined study configurations."""

    def test_names_match_keys(self):
        for key, config in STUDY_CONFIGS.items():
            assert config.study_name == key

    def test_quick_study_is_smaller(self):
        full = STUDY_CONFIGS["ntuple_alpha"]
        quick = STUDY_CONFIGS["ntuple_alpha_quick"]
        assert quick.n_trials < full.n_trials
        assert quick.episodes_per_epoch < full.episodes_per_epoch


@pytest.mark.slow
class TestObjective:
    """Test the objective on a tiny study."""

    def test_training_scores(self):
        config = StudyConfig(study_name="tiny", epochs_per_trial=1, episodes_per_epoch=1, seed=0)
        objective = create_objective(config)
        score = objective(optuna.trial.FixedTrial({"learning_rate": 0.003125}))
        assert score >= 0

    def test_evaluation_scores(self):
        config = StudyConfig(
            study_name="tiny",
            epochs_per_trial=1,
            episodes_per_epoch=1,
            eval_games_per_epoch=1,
            seed=0,
        )
        objective = create_objective(config)
        score = objective(optuna.trial.FixedTrial({"learning_rate": 0.003125}))
        assert score >= 0
