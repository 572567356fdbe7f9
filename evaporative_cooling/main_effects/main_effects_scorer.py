import logging
from pathlib import Path
from typing import Iterable, Union

from evaporative_cooling.config_manager.ec_configuration import ECConfiguration
from evaporative_cooling.main_effects.random_jungle import RandomJungle, select_tree_mode
from evaporative_cooling.scoring.base_scorer import BaseScorer
from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils.error_handling import handle_phase_errors
from evaporative_cooling.utils.exceptions import ParseError, ScorerFailureError
from evaporative_cooling.utils.resource_limits import resolve_thread_count
from evaporative_cooling.utils import constants

IMPORTANCE_FIELDS = 4


class MainEffectsScorer(BaseScorer):
    """
    Scores attributes by tree-ensemble variable importance.

    Each call grows a fresh forest on the active attributes, reads the
    importance file the learner writes, and normalizes the values into [0, 1].
    """

    name = "Random Jungle"

    def __init__(self, config: ECConfiguration, logger: logging.Logger):
        super().__init__(config, logger)
        self.num_threads = resolve_thread_count(config.main_effects_threads, self.name, logger)
        self.importance_path = Path(config.work_dir) / f"{config.out_files_prefix}{constants.IMPORTANCE_SUFFIX}"
        self.learner = RandomJungle(
            num_trees=config.num_trees,
            num_threads=self.num_threads,
            seed=config.seed,
            importance_measure=config.importance_measure,
            logger=logger,
        )

    @handle_phase_errors(constants.PHASE_MAIN_EFFECTS, wrap_as=ScorerFailureError)
    def score(self, dataset) -> ScoreSet:
        self.num_calls += 1
        tree_mode = select_tree_mode(
            dataset.has_continuous_phenotype(),
            dataset.has_genotypes(),
            dataset.has_numerics(),
        )
        self.logger.debug(f"Tree mode {tree_mode.code}: {tree_mode.description}")

        names = dataset.attribute_names()
        self.learner.run(dataset.attribute_matrix(names), dataset.phenotype(), names,
                         tree_mode, self.importance_path)

        self.logger.info(f"Loading variable importance scores from {self.importance_path}")
        raw_scores = read_importance_file(self.importance_path)
        return self._align_to_dataset(raw_scores.normalized(self.name), dataset)

    def close(self) -> None:
        self.learner.release()


def parse_importance_records(lines: Iterable[str], source: str = "<stream>") -> ScoreSet:
    """
    Parse variable importance records, skipping the header line.

    Every record must have exactly four whitespace-delimited fields:
    rank, attribute index, attribute name, importance.

    Raises:
        ParseError: On a malformed record or a non-numeric importance.
    """
    iterator = iter(lines)
    next(iterator, None)

    scores = []
    for line_number, line in enumerate(iterator, start=1):
        tokens = line.split()
        if len(tokens) != IMPORTANCE_FIELDS:
            raise ParseError(
                f"Error parsing {source} line {line_number}. Read {len(tokens)} columns. "
                f"Should be {IMPORTANCE_FIELDS}."
            )
        try:
            value = float(tokens[3])
        except ValueError:
            raise ParseError(
                f"Error parsing {source} line {line_number}: importance '{tokens[3]}' is not a number."
            )
        scores.append((value, tokens[2]))

    try:
        return ScoreSet(scores)
    except ValueError as e:
        raise ParseError(f"Error parsing {source}: {e}")


def read_importance_file(path: Union[str, Path]) -> ScoreSet:
    path = Path(path)
    if not path.exists():
        raise ParseError(f"Could not open variable importance file: {path}")
    with open(path, 'r') as f:
        return parse_importance_records(f, source=str(path))
