"""
Removal of the lowest free energy attributes from the working set.
"""
from evaporative_cooling.scoring.score_set import ScoreSet
from evaporative_cooling.utils.exceptions import InvalidRemovalCountError


def eliminate_worst(free_energy: ScoreSet, num_to_remove: int, dataset) -> ScoreSet:
    """
    Evaporate the ``num_to_remove`` attributes with the lowest free energy.

    Ties are broken by the order of ``free_energy`` (stable ascending sort).
    The free energy set itself is left untouched.

    Returns:
        ScoreSet: The removed (score, name) pairs, lowest first.

    Raises:
        InvalidRemovalCountError: If the count is below 1, exceeds the scored
            attributes, or would leave the dataset without active attributes.
    """
    if num_to_remove < 1:
        raise InvalidRemovalCountError(f"Must remove at least one attribute, got {num_to_remove}.")
    if num_to_remove > len(free_energy):
        raise InvalidRemovalCountError(
            f"Cannot remove {num_to_remove} attributes from {len(free_energy)} scored."
        )
    if dataset.attribute_count() - num_to_remove < 1:
        raise InvalidRemovalCountError(
            f"Removing {num_to_remove} of {dataset.attribute_count()} active attributes leaves none."
        )

    removed = free_energy.sorted_ascending().head(num_to_remove)
    for score in removed:
        dataset.remove_attribute(score.name)
    return removed
