"""
Nearest-neighbor attribute relevance: ReliefF for discrete phenotypes and
RReliefF for continuous phenotypes.

Attribute differences are allele mismatches for genotype-coded attributes
(|a - b| / 2) and range-scaled absolute differences for numeric attributes.
Instance distance is the Manhattan sum of attribute differences.

References:
    Kononenko, "Estimating attributes: analysis and extensions of RELIEF", ECML 1994.
    Robnik-Sikonja & Kononenko, "An adaptation of Relief for attribute
    estimation in regression", ICML 1997.
"""
import logging
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed
from sklearn.metrics import pairwise_distances

from evaporative_cooling.scoring.score_set import ScoreSet


class ReliefF:
    """
    ReliefF for discrete (case/control or multiclass) phenotypes.

    Args:
        k: Nearest hits and misses per sampled instance.
        num_samples: Instances to sample (0 uses every instance).
        num_threads: Worker threads for distances and per-instance updates.
        seed: Seed for instance sampling.
        logger: Logger for progress messages.
    """

    name = "ReliefF"

    def __init__(self, k: int = 10, num_samples: int = 0, num_threads: int = 1,
                 seed: int = 42, logger: Optional[logging.Logger] = None):
        self.k = k
        self.num_samples = num_samples
        self.num_threads = num_threads
        self.seed = seed
        self.logger = logger or logging.getLogger(__name__)

    def compute_scores(self, dataset, names: Optional[Sequence[str]] = None) -> ScoreSet:
        """Score ``names`` (default: the active attributes) in a single pass."""
        names = list(names) if names is not None else dataset.attribute_names()
        Xs = scaled_attributes(dataset, names)
        distances = pairwise_distances(Xs, metric="manhattan", n_jobs=self.num_threads)
        sample = self._sample_instances(Xs.shape[0])
        weights = self._weights(Xs, dataset.phenotype(), distances, sample)
        return ScoreSet.from_arrays(weights, names)

    def compute_scores_iteratively(self, dataset, remove_n: int = 0,
                                   remove_percent: Optional[float] = None) -> ScoreSet:
        """
        Re-score while dropping the worst attributes until every attribute is recorded.

        Each attribute keeps the score it had when it was dropped; the last
        group keeps its final-pass score. The dataset mask is not modified.
        """
        all_names = dataset.attribute_names()
        remaining = list(all_names)
        recorded: Dict[str, float] = {}
        iteration = 0

        while remaining:
            iteration += 1
            scores = self.compute_scores(dataset, remaining)
            if remove_percent:
                num_to_remove = max(1, int((remove_percent / 100.0) * len(remaining)))
            else:
                num_to_remove = max(1, remove_n)

            if num_to_remove >= len(remaining):
                recorded.update(scores.as_dict())
                break

            for score in scores.sorted_ascending().head(num_to_remove):
                recorded[score.name] = score.value
            remaining = [name for name in remaining if name not in recorded]
            self.logger.debug(f"Iterative {self.name} pass {iteration}: dropped {num_to_remove}, "
                              f"{len(remaining)} remaining")

        return ScoreSet((recorded[name], name) for name in all_names)

    def _sample_instances(self, num_instances: int) -> np.ndarray:
        if self.num_samples <= 0 or self.num_samples >= num_instances:
            return np.arange(num_instances)
        rng = np.random.default_rng(self.seed)
        return np.sort(rng.choice(num_instances, size=self.num_samples, replace=False))

    def _weights(self, Xs: np.ndarray, y: np.ndarray, distances: np.ndarray,
                 sample: np.ndarray) -> np.ndarray:
        classes, counts = np.unique(y, return_counts=True)
        if len(classes) < 2:
            raise ValueError(f"{self.name} needs at least two phenotype classes, found {len(classes)}")
        priors = dict(zip(classes.tolist(), (counts / counts.sum()).tolist()))
        labels = np.asarray(y)

        updates = Parallel(n_jobs=self.num_threads, prefer="threads")(
            delayed(_relieff_update)(i, Xs, labels, distances[i], self.k, priors)
            for i in sample
        )
        return np.sum(updates, axis=0) / len(sample)


class RReliefF(ReliefF):
    """RReliefF for continuous phenotypes, equal weights over the k nearest neighbors."""

    name = "RReliefF"

    def _weights(self, Xs: np.ndarray, y: np.ndarray, distances: np.ndarray,
                 sample: np.ndarray) -> np.ndarray:
        y = np.asarray(y, dtype=np.float64)
        y_range = y.max() - y.min()
        if y_range == 0:
            raise ValueError(f"{self.name} cannot score a constant phenotype")
        y_scaled = (y - y.min()) / y_range

        updates = Parallel(n_jobs=self.num_threads, prefer="threads")(
            delayed(_rrelieff_update)(i, Xs, y_scaled, distances[i], self.k)
            for i in sample
        )
        n_dc = sum(u[0] for u in updates)
        n_da = np.sum([u[1] for u in updates], axis=0)
        n_dcda = np.sum([u[2] for u in updates], axis=0)

        m = len(sample)
        if n_dc == 0 or n_dc == m:
            raise ValueError(f"{self.name} phenotype differences are degenerate (N_dC={n_dc}, m={m})")
        return n_dcda / n_dc - (n_da - n_dcda) / (m - n_dc)


def scaled_attributes(dataset, names: Sequence[str]) -> np.ndarray:
    """Attribute matrix divided per column so absolute differences are Relief diffs in [0, 1]."""
    X = dataset.attribute_matrix(names)
    scale = np.ones(len(names))
    for j, name in enumerate(names):
        if dataset.is_genotype(name):
            scale[j] = 2.0
        else:
            col_range = X[:, j].max() - X[:, j].min()
            if col_range > 0:
                scale[j] = col_range
    return X / scale


def _nearest(candidates: np.ndarray, row_distances: np.ndarray, k: int) -> np.ndarray:
    return candidates[np.argsort(row_distances[candidates], kind="stable")[:k]]


def _relieff_update(i: int, Xs: np.ndarray, labels: np.ndarray, row_distances: np.ndarray,
                    k: int, priors: Dict) -> np.ndarray:
    own_class = labels[i]
    update = np.zeros(Xs.shape[1])

    same = labels == own_class
    same[i] = False
    hits = _nearest(np.flatnonzero(same), row_distances, k)
    if hits.size:
        update -= np.abs(Xs[hits] - Xs[i]).mean(axis=0)

    miss_norm = 1.0 - priors[own_class]
    for cls, prior in priors.items():
        if cls == own_class:
            continue
        misses = _nearest(np.flatnonzero(labels == cls), row_distances, k)
        if misses.size:
            update += (prior / miss_norm) * np.abs(Xs[misses] - Xs[i]).mean(axis=0)
    return update


def _rrelieff_update(i: int, Xs: np.ndarray, y_scaled: np.ndarray, row_distances: np.ndarray,
                     k: int) -> Tuple[float, np.ndarray, np.ndarray]:
    candidates = np.delete(np.arange(Xs.shape[0]), i)
    neighbors = _nearest(candidates, row_distances, k)
    weight = 1.0 / len(neighbors)

    attr_diffs = np.abs(Xs[neighbors] - Xs[i])
    pheno_diffs = np.abs(y_scaled[neighbors] - y_scaled[i])
    n_dc = weight * pheno_diffs.sum()
    n_da = weight * attr_diffs.sum(axis=0)
    n_dcda = weight * (pheno_diffs[:, None] * attr_diffs).sum(axis=0)
    return n_dc, n_da, n_dcda
