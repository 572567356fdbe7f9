import contextlib
import logging
import time
from typing import Any, Dict, List, Optional

import pandas as pd
from tqdm import tqdm

from evaporative_cooling.config_manager.ec_configuration import ECConfiguration
from evaporative_cooling.ec.attribute_eliminator import eliminate_worst
from evaporative_cooling.ec.free_energy import compute_free_energy
from evaporative_cooling.interaction.interaction_scorer import InteractionScorer
from evaporative_cooling.main_effects.main_effects_scorer import MainEffectsScorer
from evaporative_cooling.reporting_engine.diagnostics import kendall_taus, tabulate_scores
from evaporative_cooling.scoring.score_set import Score, ScoreSet
from evaporative_cooling.utils.error_handling import handle_phase_errors
from evaporative_cooling.utils.exceptions import (
    ConfigurationError,
    InsufficientAttributesError,
    ScorerFailureError,
)
from evaporative_cooling.utils import constants


class ECController:
    """
    Orchestrates the Evaporative Cooling loop.

    Each iteration scores the working attributes with the learners the mode
    needs, fuses the scores into free energy, and evaporates the lowest
    attributes until the target count remains.
    """

    def __init__(self, dataset, config: ECConfiguration, logger: logging.Logger, show_progress: bool = True):
        if dataset is None:
            raise ConfigurationError("Dataset is not initialized.")
        if dataset.attribute_count() < 1:
            raise ConfigurationError("Dataset has no attributes.")
        if not isinstance(config, ECConfiguration):
            raise ConfigurationError(f"Expected ECConfiguration, got {type(config).__name__}.")
        if config.target_attributes > dataset.attribute_count():
            raise ConfigurationError(
                f"Target number of attributes ({config.target_attributes}) exceeds "
                f"the number of attributes in the dataset ({dataset.attribute_count()})."
            )

        self.dataset = dataset
        self.config = config
        self.logger = logger
        self.show_progress = show_progress

        # State Tracking
        self.current_iteration = 0
        self.iterations_run = 0
        self.converged = False
        self.main_effects_scores: Optional[ScoreSet] = None
        self.interaction_scores: Optional[ScoreSet] = None
        self.free_energy_scores: Optional[ScoreSet] = None
        self.ec_scores: Optional[ScoreSet] = None
        self.evaporated: List[Score] = []
        self.iteration_history: List[Dict[str, Any]] = []
        self._has_run = False

        self.logger.info(f"Evaporative Cooling algorithm: {config.algorithm}")
        self.logger.info(f"Target number of attributes: {config.target_attributes}")
        if config.remove_percent is not None:
            self.logger.info(f"Removing {config.remove_percent}% of working attributes per iteration")
        else:
            self.logger.info(f"Removing {config.remove_n} attribute(s) per iteration")

    # --- Scorer construction (one pair per run) ---

    def _create_main_effects_scorer(self):
        return MainEffectsScorer(self.config, self.logger)

    def _create_interaction_scorer(self):
        return InteractionScorer(self.config, self.logger, self.dataset.has_continuous_phenotype())

    # --- Main loop ---

    def run(self) -> ScoreSet:
        """
        Run the loop to completion and return the surviving attributes.

        Returns:
            ScoreSet: ``target_attributes`` (score, name) pairs sorted by
            descending free energy.

        Raises:
            RuntimeError: If the controller has already run.
            InsufficientAttributesError: If there is nothing to evaporate.
        """
        if self._has_run:
            raise RuntimeError("ECController.run() may only be called once; create a new controller.")
        self._has_run = True

        working = self.dataset.attribute_count()
        target = self.config.target_attributes
        if working <= target:
            raise InsufficientAttributesError(
                f"Dataset has {working} attributes; at least {target + 1} are needed "
                f"to select {target}."
            )

        with contextlib.ExitStack() as stack:
            main_scorer = interaction_scorer = None
            if self.config.uses_main_effects:
                main_scorer = self._create_main_effects_scorer()
                stack.callback(main_scorer.close)
            if self.config.uses_interaction:
                interaction_scorer = self._create_interaction_scorer()
                stack.callback(interaction_scorer.close)

            with tqdm(total=working - target, desc="Evaporative Cooling", unit="attribute",
                      disable=not self.show_progress) as pbar:
                while working > target:
                    self.current_iteration += 1
                    self.logger.info(f"\n{'='*60}")
                    self.logger.info(f"ITERATION {self.current_iteration} | Working attributes: {working}")
                    self.logger.info(f"{'='*60}")

                    timings: Dict[str, float] = {}
                    if main_scorer is not None:
                        started = time.perf_counter()
                        self.main_effects_scores = self._score_main_effects(main_scorer)
                        timings['main_effects_seconds'] = time.perf_counter() - started
                    if interaction_scorer is not None:
                        started = time.perf_counter()
                        self.interaction_scores = self._score_interaction(interaction_scorer)
                        timings['interaction_seconds'] = time.perf_counter() - started

                    num_to_remove = self._clamped_removal_count(working)

                    started = time.perf_counter()
                    self.free_energy_scores = self._compute_free_energy()
                    timings['free_energy_seconds'] = time.perf_counter() - started

                    if self.config.diagnostics:
                        self._log_diagnostics()

                    if num_to_remove == 0:
                        self.converged = True
                        self.logger.warning(
                            f"Removal count rounded to zero with {working} working attributes; stopping early."
                        )
                        break

                    started = time.perf_counter()
                    removed = self._remove_worst(num_to_remove)
                    timings['elimination_seconds'] = time.perf_counter() - started

                    self.evaporated.extend(removed)
                    self.logger.info(f"Evaporated {len(removed)} attribute(s): {removed.names}")
                    self.iteration_history.append({
                        'iteration': self.current_iteration,
                        'working_before': working,
                        'working_after': working - num_to_remove,
                        'num_removed': num_to_remove,
                        'removed_attributes': ",".join(removed.names),
                        **timings,
                    })
                    working -= num_to_remove
                    pbar.update(num_to_remove)

        self.iterations_run = len(self.iteration_history)
        self.ec_scores = self._select_survivors()
        self.logger.info(f"Evaporative Cooling finished after {self.iterations_run} iteration(s); "
                         f"{len(self.ec_scores)} attributes selected.")
        return self.ec_scores

    def _clamped_removal_count(self, working: int) -> int:
        requested = self.config.num_to_remove(working)
        allowed = working - self.config.target_attributes
        if requested > allowed:
            self.logger.info(f"Clamping removal count from {requested} to {allowed} to stop at the target.")
            return allowed
        return requested

    # --- Phases ---

    @handle_phase_errors(constants.PHASE_MAIN_EFFECTS, wrap_as=ScorerFailureError)
    def _score_main_effects(self, scorer) -> ScoreSet:
        self.logger.info(f"  >> Scoring main effects with {scorer.name}...")
        return scorer.score(self.dataset)

    @handle_phase_errors(constants.PHASE_INTERACTION, wrap_as=ScorerFailureError)
    def _score_interaction(self, scorer) -> ScoreSet:
        self.logger.info(f"  >> Scoring interactions with {scorer.name}...")
        return scorer.score(self.dataset)

    @handle_phase_errors(constants.PHASE_FREE_ENERGY)
    def _compute_free_energy(self) -> ScoreSet:
        return compute_free_energy(
            self.main_effects_scores if self.config.uses_main_effects else None,
            self.interaction_scores if self.config.uses_interaction else None,
            self.config.algorithm,
            self.config.temperature,
        )

    @handle_phase_errors(constants.PHASE_ELIMINATION)
    def _remove_worst(self, num_to_remove: int) -> ScoreSet:
        return eliminate_worst(self.free_energy_scores, num_to_remove, self.dataset)

    def _select_survivors(self) -> ScoreSet:
        active = self.dataset.attribute_names()
        return self.free_energy_scores.restricted_to(active).sorted_descending().head(self.config.target_attributes)

    def _log_diagnostics(self) -> None:
        if self.config.algorithm != constants.MODE_COMBINED:
            self.logger.debug(self.free_energy_scores.sorted_descending().to_frame().to_string(index=False))
            return
        table = tabulate_scores(self.main_effects_scores, self.interaction_scores, self.free_energy_scores)
        self.logger.debug(f"Iteration {self.current_iteration} scores:\n{table.to_string(index=False)}")
        for pair, tau in kendall_taus(self.main_effects_scores, self.interaction_scores,
                                      self.free_energy_scores).items():
            self.logger.debug(f"Kendall tau {pair}: {tau:.4f}")

    # --- Getters ---

    def get_main_effects_scores(self) -> Optional[ScoreSet]:
        return self.main_effects_scores

    def get_interaction_scores(self) -> Optional[ScoreSet]:
        return self.interaction_scores

    def get_free_energy_scores(self) -> Optional[ScoreSet]:
        return self.free_energy_scores

    def get_ec_scores(self) -> Optional[ScoreSet]:
        return self.ec_scores

    def get_evaporated_attributes(self) -> ScoreSet:
        return ScoreSet(self.evaporated)

    def get_iteration_history(self) -> pd.DataFrame:
        return pd.DataFrame(self.iteration_history)
