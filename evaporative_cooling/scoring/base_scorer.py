import abc
import logging

from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils.exceptions import InternalConsistencyError


class BaseScorer(abc.ABC):
    """
    Abstract base class for attribute scorers.

    Provides common functionality for:
    - Configuration and logger attachment.
    - Scoped ownership: scorers are context managers released at the end of a run.
    - Checking a score set against the dataset's active attributes.
    """

    #: Short label used in log messages and normalization warnings.
    name = "scorer"

    def __init__(self, config, logger: logging.Logger):
        self.config = config
        self.logger = logger
        self.num_calls = 0

    @abc.abstractmethod
    def score(self, dataset) -> ScoreSet:
        """
        Score every active attribute of ``dataset``.

        Returns one Score per active attribute, in the dataset's attribute order.
        """
        raise NotImplementedError("Subclasses must implement score.")

    def close(self) -> None:
        """Release learner resources. Subclasses override when they hold any."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _align_to_dataset(self, scores: ScoreSet, dataset) -> ScoreSet:
        """
        Verify ``scores`` covers exactly the active attributes and return them in dataset order.
        """
        active = dataset.attribute_names()
        if set(scores.names) != set(active) or len(scores) != len(active):
            missing = sorted(set(active) - set(scores.names))
            unexpected = sorted(set(scores.names) - set(active))
            raise InternalConsistencyError(
                f"{self.name} scored {len(scores)} attributes but {len(active)} are active "
                f"(missing: {missing[:5]}, unexpected: {unexpected[:5]})"
            )
        return scores.reordered(active)
