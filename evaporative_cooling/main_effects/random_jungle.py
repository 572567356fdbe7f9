"""
Tree-ensemble learner producing per-attribute variable importances.

Grows a random forest (classification or regression trees, chosen from the
phenotype and attribute types) and writes the importances to a ranked
variable-importance file:

    rank varID varName importance
    1 4 rs1042522 0.0813...
    2 0 rs4680 0.0521...
"""
import logging
from pathlib import Path
from typing import NamedTuple, Sequence

import numpy as np
from sklearn.ensemble import RandomForestClassifier, RandomForestRegressor
from sklearn.inspection import permutation_importance

IMPORTANCE_HEADER = "rank varID varName importance"
PERMUTATION_REPEATS = 5


class TreeMode(NamedTuple):
    code: int
    regression: bool
    description: str


def select_tree_mode(continuous_phenotype: bool, has_genotypes: bool, has_numerics: bool) -> TreeMode:
    """
    Pick the tree type for the attribute mix.

    Codes: 1 classification on numeric/mixed attributes, 2 classification on
    genotypes only, 3 regression on numeric/mixed attributes, 4 regression on
    genotypes only.
    """
    if continuous_phenotype:
        if has_numerics and has_genotypes:
            return TreeMode(3, True, "Regression trees: integrated/continuous")
        if has_genotypes:
            return TreeMode(4, True, "Regression trees: discrete/continuous")
        return TreeMode(3, True, "Regression trees: integrated/continuous")

    if has_numerics and has_genotypes:
        return TreeMode(1, False, "Classification trees: integrated/discrete")
    if has_genotypes:
        return TreeMode(2, False, "Classification trees: discrete/discrete")
    return TreeMode(1, False, "Classification trees: continuous/discrete")


class RandomJungle:
    """
    Random forest wrapper that writes a variable importance file.

    Args:
        num_trees: Number of trees to grow.
        num_threads: Worker processes for growing trees and permutation importance.
        seed: Random state for the forest and permutations.
        importance_measure: 'gini', 'permutation' or 'auto' (gini for
            genotype-only classification, permutation otherwise).
        logger: Logger for progress messages.
    """

    def __init__(self, num_trees: int, num_threads: int, seed: int,
                 importance_measure: str, logger: logging.Logger):
        self.num_trees = num_trees
        self.num_threads = num_threads
        self.seed = seed
        self.importance_measure = importance_measure
        self.logger = logger
        self.model_ = None

    def _measure_for(self, tree_mode: TreeMode) -> str:
        if self.importance_measure != "auto":
            return self.importance_measure
        return "gini" if tree_mode.code == 2 else "permutation"

    def fit_importances(self, X: np.ndarray, y: np.ndarray, tree_mode: TreeMode) -> np.ndarray:
        """Grow the forest and return one importance value per column of X."""
        estimator_cls = RandomForestRegressor if tree_mode.regression else RandomForestClassifier
        self.model_ = estimator_cls(
            n_estimators=self.num_trees,
            n_jobs=self.num_threads,
            random_state=self.seed,
        )
        self.model_.fit(X, y)

        measure = self._measure_for(tree_mode)
        if measure == "gini":
            return np.asarray(self.model_.feature_importances_, dtype=np.float64)

        result = permutation_importance(
            self.model_, X, y,
            n_repeats=PERMUTATION_REPEATS,
            random_state=self.seed,
            n_jobs=self.num_threads,
        )
        return np.asarray(result.importances_mean, dtype=np.float64)

    def run(self, X: np.ndarray, y: np.ndarray, names: Sequence[str],
            tree_mode: TreeMode, importance_path: Path) -> Path:
        """
        Grow the forest on X/y and write the ranked importance file.

        Returns:
            Path: The importance file written.
        """
        self.logger.info(f"Growing {self.num_trees} trees on {X.shape[0]} instances x {X.shape[1]} attributes "
                         f"({tree_mode.description}, {self._measure_for(tree_mode)} importance)")
        importances = self.fit_importances(X, y, tree_mode)
        return write_importance_file(importance_path, names, importances)

    def release(self) -> None:
        self.model_ = None


def write_importance_file(path: Path, names: Sequence[str], importances: Sequence[float]) -> Path:
    """Write importances ranked descending; varID is the column index in ``names``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    order = np.argsort(-np.asarray(importances, dtype=np.float64), kind="stable")
    with open(path, 'w') as f:
        f.write(IMPORTANCE_HEADER + "\n")
        for rank, index in enumerate(order, start=1):
            f.write(f"{rank} {index} {names[index]} {importances[index]:.17g}\n")
    return path
