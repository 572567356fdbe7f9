"""
Main-effects scoring with a tree ensemble ("random jungle").
"""

from .random_jungle import RandomJungle, TreeMode, select_tree_mode, write_importance_file
from .main_effects_scorer import MainEffectsScorer, parse_importance_records, read_importance_file

__all__ = [
    'RandomJungle',
    'TreeMode',
    'select_tree_mode',
    'write_importance_file',
    'MainEffectsScorer',
    'parse_importance_records',
    'read_importance_file',
]
