import logging

from evaporative_cooling.config_manager.ec_configuration import ECConfiguration
from evaporative_cooling.interaction.relieff import ReliefF, RReliefF
from evaporative_cooling.scoring.base_scorer import BaseScorer
from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils.error_handling import handle_phase_errors
from evaporative_cooling.utils.exceptions import ScorerFailureError
from evaporative_cooling.utils.resource_limits import resolve_thread_count
from evaporative_cooling.utils import constants


class InteractionScorer(BaseScorer):
    """
    Scores attributes by nearest-neighbor relevance.

    The learner variant (ReliefF or RReliefF) is fixed at construction from the
    phenotype type; single-pass versus iterative scoring follows the
    interaction removal settings.
    """

    def __init__(self, config: ECConfiguration, logger: logging.Logger, continuous_phenotype: bool):
        super().__init__(config, logger)
        self.num_threads = resolve_thread_count(config.interaction_threads, "Relief-F", logger)
        learner_cls = RReliefF if continuous_phenotype else ReliefF
        self.learner = learner_cls(
            k=config.k_nearest_neighbors,
            num_samples=config.num_instances_to_sample,
            num_threads=self.num_threads,
            seed=config.seed,
            logger=logger,
        )
        self.name = self.learner.name
        self.iterative = config.interaction_iterative
        self.logger.info(f"Initialized {self.name} ({'iterative' if self.iterative else 'standard'} mode).")

    @handle_phase_errors(constants.PHASE_INTERACTION, wrap_as=ScorerFailureError)
    def score(self, dataset) -> ScoreSet:
        self.num_calls += 1
        if self.iterative:
            self.logger.info(f"Running iterative {self.name}...")
            raw_scores = self.learner.compute_scores_iteratively(
                dataset,
                remove_n=self.config.interaction_remove_n,
                remove_percent=self.config.interaction_remove_percent,
            )
        else:
            self.logger.info(f"Running standard {self.name}...")
            raw_scores = self.learner.compute_scores(dataset)

        self.logger.debug(f"Normalizing {self.name} scores to 0-1...")
        return self._align_to_dataset(raw_scores.normalized(self.name), dataset)
