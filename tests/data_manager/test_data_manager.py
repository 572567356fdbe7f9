import pandas as pd
import pytest
from unittest.mock import MagicMock

from evaporative_cooling.data_manager.data_manager import DataManager
from evaporative_cooling.utils.exceptions import DataValidationError


@pytest.fixture
def mock_logger():
    return MagicMock()


def test_loads_whitespace_delimited_text(tmp_path, mock_logger):
    path = tmp_path / "genotypes.txt"
    path.write_text("rs1 rs2 rs3 Class\n0 1 2 0\n1 1 0 1\n2 0 1 1\n")

    dataset = DataManager({'data': {'file_path': str(path)}}, mock_logger).execute()

    assert dataset.attribute_names() == ['rs1', 'rs2', 'rs3']
    assert dataset.num_instances() == 3


def test_drops_columns_and_overrides_path(tmp_path, mock_logger):
    path = tmp_path / "clinical.csv"
    pd.DataFrame({'id': [1, 2, 3], 'bmi': [21.5, 30.1, 25.0], 'Outcome': [0, 1, 0]}).to_csv(path, index=False)
    config = {'data': {'file_path': 'unused.csv', 'phenotype_column': 'Outcome',
                       'drop_columns': ['id', 'batch']}}

    dataset = DataManager(config, mock_logger).execute(str(path))

    assert dataset.attribute_names() == ['bmi']
    mock_logger.warning.assert_called_once()


def test_missing_file(tmp_path, mock_logger):
    manager = DataManager({'data': {'file_path': str(tmp_path / "absent.csv")}}, mock_logger)
    with pytest.raises(DataValidationError, match="not found") as exc_info:
        manager.execute()
    assert exc_info.value.phase == "data-loading"


def test_unsupported_extension(tmp_path, mock_logger):
    path = tmp_path / "data.json"
    path.write_text("{}")
    with pytest.raises(DataValidationError, match="Unsupported"):
        DataManager({'data': {'file_path': str(path)}}, mock_logger).execute()


def test_empty_file(tmp_path, mock_logger):
    path = tmp_path / "empty.csv"
    path.write_text("rs1,Class\n")
    with pytest.raises(DataValidationError, match="empty"):
        DataManager({'data': {'file_path': str(path)}}, mock_logger).execute()
