"""
Scoring Module
==============

Responsibility:
- ScoreSet: ordered (score, attribute name) pairs with stable sorting.
- normalize: min-max rescaling of a score set into [0, 1].
- BaseScorer: the single capability interface shared by the main-effects and
  interaction scorers.
"""

from .score_set import Score, ScoreSet, normalize
from .base_scorer import BaseScorer

__all__ = ['Score', 'ScoreSet', 'normalize', 'BaseScorer']
