"""
Interaction scoring with nearest-neighbor relevance (ReliefF / RReliefF).
"""

from .relieff import ReliefF, RReliefF, scaled_attributes
from .interaction_scorer import InteractionScorer

__all__ = ['ReliefF', 'RReliefF', 'scaled_attributes', 'InteractionScorer']
