import pytest
import numpy as np
import pandas as pd
from unittest.mock import MagicMock

from evaporative_cooling.config_manager.ec_configuration import ECConfiguration
from evaporative_cooling.data_manager.dataset import Dataset
from evaporative_cooling.interaction.interaction_scorer import InteractionScorer
from evaporative_cooling.utils.exceptions import ScorerFailureError


@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def dataset():
    rng = np.random.default_rng(2)
    classes = np.array([0, 1] * 8)
    return Dataset(pd.DataFrame({
        'rs1': rng.integers(0, 3, size=16),
        'rs2': np.where(classes == 1, 2, 0),
        'rs3': rng.integers(0, 3, size=16),
        'Class': classes,
    }))


def test_variant_follows_phenotype(mock_logger):
    config = ECConfiguration(target_attributes=1, interaction_threads=1)
    assert InteractionScorer(config, mock_logger, continuous_phenotype=False).name == "ReliefF"
    assert InteractionScorer(config, mock_logger, continuous_phenotype=True).name == "RReliefF"


def test_iterative_mode_from_config(mock_logger):
    assert not InteractionScorer(ECConfiguration(target_attributes=1), mock_logger, False).iterative
    assert InteractionScorer(ECConfiguration(target_attributes=1, interaction_remove_n=1),
                             mock_logger, False).iterative
    assert InteractionScorer(ECConfiguration(target_attributes=1, interaction_remove_percent=10),
                             mock_logger, False).iterative


@pytest.mark.parametrize("remove_n", [0, 1])
def test_scores_normalized_in_dataset_order(dataset, mock_logger, remove_n):
    config = ECConfiguration(target_attributes=1, k_nearest_neighbors=3, interaction_threads=1,
                             interaction_remove_n=remove_n)
    scorer = InteractionScorer(config, mock_logger, dataset.has_continuous_phenotype())

    scores = scorer.score(dataset)

    assert scores.names == ['rs1', 'rs2', 'rs3']
    assert scores.as_dict()['rs2'] == pytest.approx(1.0)
    assert min(scores.values) == pytest.approx(0.0)
    assert scorer.num_calls == 1


def test_learner_error_wrapped(mock_logger):
    dataset = Dataset(pd.DataFrame({'a': [0, 1, 2], 'b': [2, 1, 0], 'Class': [0, 0, 0]}))
    scorer = InteractionScorer(ECConfiguration(target_attributes=1, interaction_threads=1), mock_logger, False)

    with pytest.raises(ScorerFailureError) as exc_info:
        scorer.score(dataset)
    assert exc_info.value.phase == "interaction"
