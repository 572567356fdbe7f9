"""
Result files and diagnostic tables.
"""

from .score_writer import format_scores, write_scores, read_scores, results_filename
from .diagnostics import tabulate_scores, kendall_taus

__all__ = ['format_scores', 'write_scores', 'read_scores', 'results_filename',
           'tabulate_scores', 'kendall_taus']
