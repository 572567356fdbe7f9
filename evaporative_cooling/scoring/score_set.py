"""
Ordered (score, attribute name) collections used by every phase of Evaporative Cooling.
"""
import logging
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class Score(NamedTuple):
    value: float
    name: str


class ScoreSet:
    """
    Immutable ordered sequence of Scores, at most one per attribute name.

    All sorts are stable, so ties keep their encounter order.
    """

    def __init__(self, scores: Iterable[Union[Score, Tuple[float, str]]] = ()):
        self._scores: Tuple[Score, ...] = tuple(Score(float(value), str(name)) for value, name in scores)
        names = [s.name for s in self._scores]
        if len(set(names)) != len(names):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate attribute names in score set: {duplicates}")

    @classmethod
    def from_arrays(cls, values: Sequence[float], names: Sequence[str]) -> 'ScoreSet':
        if len(values) != len(names):
            raise ValueError(f"Got {len(values)} values for {len(names)} attribute names")
        return cls(zip(values, names))

    # --- Sequence protocol ---

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[Score]:
        return iter(self._scores)

    def __getitem__(self, index: int) -> Score:
        return self._scores[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, ScoreSet):
            return NotImplemented
        return self._scores == other._scores

    def __repr__(self) -> str:
        return f"ScoreSet({list(self._scores)!r})"

    # --- Accessors ---

    @property
    def names(self) -> List[str]:
        return [s.name for s in self._scores]

    @property
    def values(self) -> np.ndarray:
        return np.array([s.value for s in self._scores], dtype=np.float64)

    def as_dict(self) -> dict:
        return {s.name: s.value for s in self._scores}

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({'attribute': self.names, 'score': self.values})

    # --- Orderings ---

    def sorted_by_name(self) -> 'ScoreSet':
        return ScoreSet(sorted(self._scores, key=lambda s: s.name))

    def sorted_ascending(self) -> 'ScoreSet':
        return ScoreSet(sorted(self._scores, key=lambda s: s.value))

    def sorted_descending(self) -> 'ScoreSet':
        return ScoreSet(sorted(self._scores, key=lambda s: s.value, reverse=True))

    def reordered(self, names: Sequence[str]) -> 'ScoreSet':
        """Return the scores in the order of ``names``; every name must be present."""
        lookup = self.as_dict()
        return ScoreSet((lookup[name], name) for name in names)

    def restricted_to(self, names: Iterable[str]) -> 'ScoreSet':
        """Keep only the listed attributes, preserving the current order."""
        keep = set(names)
        return ScoreSet(s for s in self._scores if s.name in keep)

    def head(self, n: int) -> 'ScoreSet':
        return ScoreSet(self._scores[:n])

    def normalized(self, label: Optional[str] = None) -> 'ScoreSet':
        return normalize(self, label)


def normalize(scores: ScoreSet, label: Optional[str] = None) -> ScoreSet:
    """
    Linearly rescale score values into [0, 1] using (v - min) / (max - min).

    A degenerate set (max == min, e.g. all-zero importances) is returned unchanged
    and a warning is logged.

    Args:
        scores: Scores to rescale.
        label: Name of the producing scorer, used in the warning message.

    Returns:
        ScoreSet: New set in the same order.
    """
    if len(scores) == 0:
        return scores

    values = scores.values
    min_score = values.min()
    max_score = values.max()
    if min_score == max_score:
        logger.warning(f"{label or 'Score set'} min and max scores are the same ({min_score}). "
                       "No normalization performed.")
        return scores

    score_range = max_score - min_score
    return ScoreSet.from_arrays((values - min_score) / score_range, scores.names)
