import logging
from typing import List, Optional, Sequence, Set

import numpy as np
import pandas as pd

from evaporative_cooling.utils import constants
from evaporative_cooling.utils.exceptions import DataValidationError

logger = logging.getLogger(__name__)


class Dataset:
    """
    Instances x attributes table with a phenotype and an active-attribute mask.

    Attributes are either genotype-coded (integer values in {0, 1, 2}) or numeric.
    Removing an attribute only masks it; the underlying frame is never modified.

    Args:
        data: Attribute columns plus the phenotype column.
        phenotype_column: Name of the dependent variable.
        continuous_phenotype: Force regression (True) or classification (False).
            When None, the phenotype is continuous if any value is non-integer.
        genotype_columns: Explicit genotype attribute names. When None, they are
            detected from the column values.
    """

    def __init__(self,
                 data: pd.DataFrame,
                 phenotype_column: str = constants.DEFAULT_PHENOTYPE_COLUMN,
                 continuous_phenotype: Optional[bool] = None,
                 genotype_columns: Optional[Sequence[str]] = None):
        if phenotype_column not in data.columns:
            raise DataValidationError(f"Phenotype column '{phenotype_column}' not found in data.")

        self.phenotype_column = phenotype_column
        self._attributes = data.drop(columns=[phenotype_column])
        self._phenotype = data[phenotype_column]

        self._validate()

        if continuous_phenotype is None:
            continuous_phenotype = not _is_integer_valued(self._phenotype)
        self._continuous = bool(continuous_phenotype)

        if genotype_columns is None:
            genotype_columns = [c for c in self._attributes.columns if _is_genotype_coded(self._attributes[c])]
        unknown = set(genotype_columns) - set(self._attributes.columns)
        if unknown:
            raise DataValidationError(f"Unknown genotype columns: {sorted(unknown)}")
        self._genotypes = frozenset(genotype_columns)

        self._active: Set[str] = set(self._attributes.columns)
        self._removed: List[str] = []

    def _validate(self) -> None:
        names = [str(c) for c in self._attributes.columns]
        if len(names) == 0:
            raise DataValidationError("Dataset has no attributes.")
        if len(set(names)) != len(names):
            raise DataValidationError("Attribute names must be unique.")
        bad_names = [n for n in names if not n or any(ch.isspace() for ch in n)]
        if bad_names:
            raise DataValidationError(f"Attribute names must be non-empty and contain no whitespace: {bad_names[:5]}")
        self._attributes.columns = names

        non_numeric = [c for c in names if not pd.api.types.is_numeric_dtype(self._attributes[c])]
        if non_numeric:
            raise DataValidationError(f"Non-numeric attribute columns: {non_numeric[:5]}")
        if not pd.api.types.is_numeric_dtype(self._phenotype):
            raise DataValidationError(f"Phenotype column '{self.phenotype_column}' must be numeric.")

        if self._attributes.isna().any().any() or self._phenotype.isna().any():
            raise DataValidationError("Missing values are not supported.")
        if len(self._phenotype) < 2:
            raise DataValidationError("At least two instances are required.")

    # --- Attribute mask ---

    def attribute_count(self) -> int:
        return len(self._active)

    def attribute_names(self) -> List[str]:
        """Active attribute names in original column order."""
        return [name for name in self._attributes.columns if name in self._active]

    def all_attribute_names(self) -> List[str]:
        return list(self._attributes.columns)

    def removed_attribute_names(self) -> List[str]:
        return list(self._removed)

    def remove_attribute(self, name: str) -> None:
        """Mark an active attribute as removed."""
        if name not in self._active:
            raise DataValidationError(f"Cannot remove '{name}': attribute is not active.")
        self._active.remove(name)
        self._removed.append(name)
        logger.debug(f"Removed attribute {name}; {len(self._active)} remain")

    # --- Typing ---

    def has_continuous_phenotype(self) -> bool:
        return self._continuous

    def is_genotype(self, name: str) -> bool:
        return name in self._genotypes

    def has_genotypes(self) -> bool:
        return any(self.is_genotype(n) for n in self._active)

    def has_numerics(self) -> bool:
        return any(not self.is_genotype(n) for n in self._active)

    # --- Values ---

    def num_instances(self) -> int:
        return len(self._phenotype)

    def attribute_frame(self, names: Optional[Sequence[str]] = None) -> pd.DataFrame:
        return self._attributes[list(names) if names is not None else self.attribute_names()]

    def attribute_matrix(self, names: Optional[Sequence[str]] = None) -> np.ndarray:
        return self.attribute_frame(names).to_numpy(dtype=np.float64)

    def phenotype(self) -> np.ndarray:
        if self._continuous:
            return self._phenotype.to_numpy(dtype=np.float64)
        return self._phenotype.to_numpy()

    def __repr__(self) -> str:
        kind = "continuous" if self._continuous else "discrete"
        return (f"Dataset(instances={self.num_instances()}, active={self.attribute_count()}, "
                f"removed={len(self._removed)}, phenotype={kind})")


def _is_integer_valued(series: pd.Series) -> bool:
    values = series.to_numpy(dtype=np.float64)
    return bool(np.all(np.mod(values, 1) == 0))


def _is_genotype_coded(series: pd.Series) -> bool:
    if not _is_integer_valued(series):
        return False
    return set(np.unique(series.to_numpy(dtype=np.float64)).astype(int)) <= constants.GENOTYPE_VALUES
