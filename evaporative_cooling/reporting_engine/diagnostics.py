"""
Side-by-side score tables and rank agreement between the EC score sets.
"""
from typing import Dict

import numpy as np
import pandas as pd
from scipy.stats import kendalltau

from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils.exceptions import InternalConsistencyError


def tabulate_scores(main_effects: ScoreSet, interaction: ScoreSet, free_energy: ScoreSet) -> pd.DataFrame:
    """
    Each score set sorted descending, placed in adjacent column pairs.
    """
    if not (len(main_effects) == len(interaction) == len(free_energy)):
        raise InternalConsistencyError(
            f"Cannot tabulate score sets of sizes {len(main_effects)}, "
            f"{len(interaction)} and {len(free_energy)}."
        )
    columns = {}
    for label, scores in (('interaction', interaction), ('main_effects', main_effects),
                          ('free_energy', free_energy)):
        ranked = scores.sorted_descending()
        columns[f'{label}_attribute'] = ranked.names
        columns[f'{label}_score'] = ranked.values
    return pd.DataFrame(columns)


def _rank_positions(scores: ScoreSet, names) -> np.ndarray:
    positions = {name: rank for rank, name in enumerate(scores.sorted_descending().names)}
    return np.array([positions[name] for name in names])


def kendall_taus(main_effects: ScoreSet, interaction: ScoreSet, free_energy: ScoreSet) -> Dict[str, float]:
    """Kendall's tau between the rankings of each pair of score sets."""
    names = sorted(set(main_effects.names) & set(interaction.names) & set(free_energy.names))
    pairs = {
        'main_effects_vs_interaction': (main_effects, interaction),
        'main_effects_vs_free_energy': (main_effects, free_energy),
        'interaction_vs_free_energy': (interaction, free_energy),
    }
    taus = {}
    for key, (a, b) in pairs.items():
        if len(names) < 2:
            taus[key] = float('nan')
            continue
        tau, _ = kendalltau(_rank_positions(a, names), _rank_positions(b, names))
        taus[key] = float(tau)
    return taus
