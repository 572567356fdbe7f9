import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from evaporative_cooling.data_manager.dataset import Dataset
from evaporative_cooling.utils.exceptions import DataValidationError
from evaporative_cooling.utils.error_handling import handle_phase_errors
from evaporative_cooling.utils.file_io import read_dataframe
from evaporative_cooling.utils import constants


class DataManager:
    """
    Loads the raw attribute table and wraps it in a Dataset.

    Supports CSV, whitespace/tab-delimited text, Parquet and Excel files.
    """

    def __init__(self, config: dict, logger: logging.Logger):
        self.config = config
        self.logger = logger
        self.data: Optional[pd.DataFrame] = None

    @handle_phase_errors(constants.PHASE_DATA_LOADING, wrap_as=DataValidationError)
    def execute(self, file_path: Optional[str] = None) -> Dataset:
        """
        Load and validate the dataset.

        Args:
            file_path: Overrides data.file_path from the configuration.

        Returns:
            Dataset: Validated dataset with every attribute active.
        """
        data_cfg = self.config.get('data', {})
        self.load_data(file_path or data_cfg.get('file_path'))

        drop_columns = data_cfg.get('drop_columns', [])
        missing = [c for c in drop_columns if c not in self.data.columns]
        if missing:
            self.logger.warning(f"Configured drop_columns not present in data: {missing}")
        self.data = self.data.drop(columns=[c for c in drop_columns if c in self.data.columns])

        dataset = Dataset(
            self.data,
            phenotype_column=data_cfg.get('phenotype_column', constants.DEFAULT_PHENOTYPE_COLUMN),
            continuous_phenotype=data_cfg.get('continuous_phenotype'),
        )
        self.logger.info(
            f"Dataset ready: {dataset.num_instances()} instances, {dataset.attribute_count()} attributes "
            f"(genotypes: {dataset.has_genotypes()}, numerics: {dataset.has_numerics()}, "
            f"continuous phenotype: {dataset.has_continuous_phenotype()})"
        )
        return dataset

    def load_data(self, file_path_str: Optional[str]) -> pd.DataFrame:
        """Read the raw table from disk."""
        if not file_path_str:
            raise DataValidationError("No data file specified.")

        file_path = Path(file_path_str)
        if not file_path.exists():
            raise DataValidationError(f"Data file not found: {file_path.absolute()}")

        self.logger.info(f"Loading data from {file_path}")
        try:
            self.data = read_dataframe(file_path, delimiter=self.config.get('data', {}).get('delimiter'))
        except ValueError as e:
            raise DataValidationError(str(e)) from e

        if self.data.empty:
            raise DataValidationError("Loaded dataframe is empty.")

        return self.data
