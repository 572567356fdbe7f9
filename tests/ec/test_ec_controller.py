import pytest
import pandas as pd
import numpy as np
from unittest.mock import MagicMock, patch

from evaporative_cooling.config_manager.ec_configuration import ECConfiguration
from evaporative_cooling.data_manager.dataset import Dataset
from evaporative_cooling.ec.ec_controller import ECController
from evaporative_cooling.scoring.base_scorer import BaseScorer
from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils.error_handling import handle_phase_errors
from evaporative_cooling.utils.exceptions import (
    ConfigurationError,
    InsufficientAttributesError,
    InternalConsistencyError,
    ScorerFailureError,
)

# --- Fixtures ---

class FakeScorer:
    """Returns value_fn(name) for every active attribute."""

    def __init__(self, name, value_fn):
        self.name = name
        self.value_fn = value_fn
        self.num_calls = 0
        self.closed = False

    def score(self, dataset):
        self.num_calls += 1
        return ScoreSet((self.value_fn(n), n) for n in dataset.attribute_names())

    def close(self):
        self.closed = True


def attribute_index(name):
    return int(name[1:])


@pytest.fixture
def mock_logger():
    return MagicMock()


def make_dataset(num_attributes):
    rng = np.random.default_rng(0)
    data = {f"A{i}": rng.integers(0, 3, size=8) for i in range(1, num_attributes + 1)}
    data['Class'] = [0, 1, 0, 1, 0, 1, 0, 1]
    return Dataset(pd.DataFrame(data))


@pytest.fixture
def dataset():
    return make_dataset(10)


def make_controller(dataset, logger, main=None, interaction=None, **config_kwargs):
    controller = ECController(dataset, ECConfiguration(**config_kwargs), logger, show_progress=False)
    if main is not None:
        controller._create_main_effects_scorer = MagicMock(return_value=main)
    if interaction is not None:
        controller._create_interaction_scorer = MagicMock(return_value=interaction)
    return controller

# --- Tests ---

class TestECControllerLoop:

    def test_tied_free_energy_evaporates_in_name_order(self, dataset, mock_logger):
        """Every F is 11, so removal follows the string order of the names."""
        main = FakeScorer("main", lambda n: attribute_index(n))
        interaction = FakeScorer("interaction", lambda n: 11 - attribute_index(n))
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=3, remove_n=2)

        result = controller.run()

        assert result.names == ["A7", "A8", "A9"]
        assert list(result.values) == [11.0, 11.0, 11.0]
        assert controller.iterations_run == 4
        assert controller.get_evaporated_attributes().names == ["A1", "A10", "A2", "A3", "A4", "A5", "A6"]
        assert dataset.attribute_names() == ["A7", "A8", "A9"]

        history = controller.get_iteration_history()
        assert list(history['num_removed']) == [2, 2, 2, 1]
        assert list(history['working_after']) == [8, 6, 4, 3]
        assert history['removed_attributes'].iloc[0] == "A1,A10"

    def test_scorers_called_once_per_iteration_and_closed(self, dataset, mock_logger):
        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", attribute_index)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=5, remove_n=1)

        controller.run()

        assert main.num_calls == 5
        assert interaction.num_calls == 5
        assert main.closed and interaction.closed

    def test_combined_keeps_highest_free_energy(self, dataset, mock_logger):
        main = FakeScorer("main", lambda n: attribute_index(n) / 10.0)
        interaction = FakeScorer("interaction", lambda n: attribute_index(n) / 10.0)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=2, remove_n=3)

        result = controller.run()

        assert result.names == ["A10", "A9"]
        assert result.values == pytest.approx([2.0, 1.8])

    def test_main_effects_only_never_builds_interaction_scorer(self, mock_logger):
        dataset = make_dataset(4)
        main = FakeScorer("main", attribute_index)
        controller = make_controller(dataset, mock_logger, main=main,
                                     target_attributes=2, algorithm="main-effects-only")
        controller._create_interaction_scorer = MagicMock()

        result = controller.run()

        controller._create_interaction_scorer.assert_not_called()
        assert result.names == ["A4", "A3"]
        assert controller.get_interaction_scores() is None

    def test_interaction_only_uses_interaction_scores(self, mock_logger):
        dataset = make_dataset(4)
        interaction = FakeScorer("interaction", lambda n: -attribute_index(n))
        controller = make_controller(dataset, mock_logger, interaction=interaction,
                                     target_attributes=1, algorithm="Interaction-Only")
        controller._create_main_effects_scorer = MagicMock()

        result = controller.run()

        controller._create_main_effects_scorer.assert_not_called()
        assert result.names == ["A1"]

    def test_percent_removal_is_clamped_to_target(self, mock_logger):
        dataset = make_dataset(5)
        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", attribute_index)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=4, remove_percent=50)

        result = controller.run()

        assert controller.iterations_run == 1
        assert controller.get_evaporated_attributes().names == ["A1"]
        assert len(result) == 4

    def test_fixed_removal_count_is_clamped_to_target(self, dataset, mock_logger):
        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", attribute_index)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=9, remove_n=5)

        result = controller.run()

        assert list(controller.get_iteration_history()['num_removed']) == [1]
        assert controller.get_evaporated_attributes().names == ["A1"]
        assert len(result) == 9
        assert dataset.attribute_count() == 9

    def test_percent_rounding_to_zero_converges(self, mock_logger):
        dataset = make_dataset(5)
        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", attribute_index)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=2, remove_percent=10)

        result = controller.run()

        assert controller.converged
        assert controller.iterations_run == 0
        assert dataset.attribute_count() == 5
        assert result.names == ["A5", "A4"]

    def test_percent_recomputed_against_working_count(self, mock_logger):
        dataset = make_dataset(10)
        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", attribute_index)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=4, remove_percent=50)

        controller.run()

        # 10 -> 5 -> 4 (int(2.5) = 2, clamped to 1)
        assert list(controller.get_iteration_history()['num_removed']) == [5, 1]

    def test_run_is_single_use(self, dataset, mock_logger):
        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", attribute_index)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=9)
        controller.run()

        with pytest.raises(RuntimeError):
            controller.run()

    def test_default_scorers_built_from_config(self, dataset, mock_logger):
        with patch('evaporative_cooling.ec.ec_controller.MainEffectsScorer') as mock_main_cls, \
             patch('evaporative_cooling.ec.ec_controller.InteractionScorer') as mock_interaction_cls:
            mock_main_cls.return_value = FakeScorer("main", attribute_index)
            mock_interaction_cls.return_value = FakeScorer("interaction", attribute_index)
            controller = ECController(dataset, ECConfiguration(target_attributes=8), mock_logger,
                                      show_progress=False)
            controller.run()

        mock_main_cls.assert_called_once_with(controller.config, mock_logger)
        mock_interaction_cls.assert_called_once_with(controller.config, mock_logger, False)


class TestECControllerErrors:

    def test_none_dataset(self, mock_logger):
        with pytest.raises(ConfigurationError):
            ECController(None, ECConfiguration(target_attributes=1), mock_logger)

    def test_target_larger_than_dataset(self, dataset, mock_logger):
        with pytest.raises(ConfigurationError, match="exceeds"):
            ECController(dataset, ECConfiguration(target_attributes=11), mock_logger)

    def test_target_equal_to_dataset_has_nothing_to_evaporate(self, dataset, mock_logger):
        controller = ECController(dataset, ECConfiguration(target_attributes=10), mock_logger,
                                  show_progress=False)
        with pytest.raises(InsufficientAttributesError):
            controller.run()

    def test_scorer_failure_carries_phase_and_iteration(self, dataset, mock_logger):
        calls = {'n': 0}

        def flaky(name):
            if calls['n'] >= 10:
                raise RuntimeError("learner crashed")
            calls['n'] += 1
            return attribute_index(name)

        main = FakeScorer("main", attribute_index)
        interaction = FakeScorer("interaction", flaky)
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=3, remove_n=1)

        with pytest.raises(ScorerFailureError) as exc_info:
            controller.run()

        assert exc_info.value.phase == "interaction"
        assert exc_info.value.iteration == 2
        assert main.closed and interaction.closed

    def test_mismatched_score_sets_fail_in_free_energy_phase(self, dataset, mock_logger):
        main = FakeScorer("main", attribute_index)
        interaction = MagicMock()
        interaction.score.return_value = ScoreSet([(1.0, "A1")])
        controller = make_controller(dataset, mock_logger, main, interaction,
                                     target_attributes=3)

        with pytest.raises(InternalConsistencyError) as exc_info:
            controller.run()

        assert exc_info.value.phase == "free-energy"
        assert exc_info.value.iteration == 1


def test_diagnostics_logged_each_iteration(mock_logger):
    dataset = make_dataset(4)
    main = FakeScorer("main", attribute_index)
    interaction = FakeScorer("interaction", lambda n: -attribute_index(n))
    controller = make_controller(dataset, mock_logger, main, interaction,
                                 target_attributes=2, diagnostics=True)

    controller.run()

    debug_messages = [c.args[0] for c in mock_logger.debug.call_args_list]
    assert any("Kendall tau main_effects_vs_interaction: -1.0000" in m for m in debug_messages)


def test_adapter_failure_logged_once(dataset, mock_logger):
    class CrashingScorer(BaseScorer):
        name = "crashing"

        @handle_phase_errors("main-effects", wrap_as=ScorerFailureError)
        def score(self, dataset):
            raise RuntimeError("forest exhausted memory")

    controller = make_controller(dataset, mock_logger,
                                 main=CrashingScorer(None, mock_logger),
                                 interaction=FakeScorer("interaction", attribute_index),
                                 target_attributes=3)

    with pytest.raises(ScorerFailureError) as exc_info:
        controller.run()

    assert mock_logger.error.call_count == 1
    assert exc_info.value.phase == "main-effects"
    assert exc_info.value.iteration == 1
