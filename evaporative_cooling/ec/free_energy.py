"""
Fusion of main-effects and interaction scores into a free energy ranking.
"""
from typing import Optional

from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils import constants
from evaporative_cooling.utils.exceptions import ConfigurationError, InternalConsistencyError


def compute_free_energy(main_effects: Optional[ScoreSet],
                        interaction: Optional[ScoreSet],
                        mode: str,
                        temperature: float = 1.0) -> ScoreSet:
    """
    Combine the two normalized score sets into free energy values.

    In combined mode both sets are sorted by attribute name and paired
    position by position: F = S_int + T * S_main. In the single-learner modes
    the relevant set is passed through as is.

    Args:
        main_effects: Normalized main-effects scores (required unless interaction-only).
        interaction: Normalized interaction scores (required unless main-effects-only).
        mode: Algorithm mode.
        temperature: Weight of the main-effects term.

    Returns:
        ScoreSet: In attribute-name order for combined mode.

    Raises:
        InternalConsistencyError: If a required set is missing, or the two sets
            differ in size or attribute names.
    """
    if mode == constants.MODE_COMBINED:
        if main_effects is None or interaction is None:
            raise InternalConsistencyError("Combined mode needs both main-effects and interaction scores.")
        if len(main_effects) != len(interaction):
            raise InternalConsistencyError(
                f"Score lists are unequal. Main effects: {len(main_effects)} "
                f"vs. interaction: {len(interaction)}"
            )
        main_by_name = main_effects.sorted_by_name()
        interaction_by_name = interaction.sorted_by_name()
        for main_score, interaction_score in zip(main_by_name, interaction_by_name):
            if main_score.name != interaction_score.name:
                raise InternalConsistencyError(
                    f"Attribute mismatch while combining scores: "
                    f"'{main_score.name}' vs. '{interaction_score.name}'"
                )
        return ScoreSet(
            (i.value + temperature * m.value, m.name)
            for m, i in zip(main_by_name, interaction_by_name)
        )

    if mode == constants.MODE_MAIN_EFFECTS_ONLY:
        if main_effects is None:
            raise InternalConsistencyError("Main-effects-only mode produced no main-effects scores.")
        return main_effects

    if mode == constants.MODE_INTERACTION_ONLY:
        if interaction is None:
            raise InternalConsistencyError("Interaction-only mode produced no interaction scores.")
        return interaction

    raise ConfigurationError(f"Unknown algorithm mode '{mode}'.")
